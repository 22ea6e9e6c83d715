"""Tests for timestamped console output."""

import io
import re

import pytest

from kawabuild import output


@pytest.fixture
def stream(monkeypatch):
    buffer = io.StringIO()
    monkeypatch.setattr(output, "_output_stream", buffer)
    monkeypatch.setattr(output, "_verbose", False)
    return buffer


def test_lines_are_timestamped(stream):
    output.log("Compiling")

    assert re.match(r"^\d{2}:\d{2}\.\d{2} Compiling\n$", stream.getvalue())


def test_verbose_only_is_suppressed(stream):
    output.log("hidden", verbose_only=True)
    output.log_command("kawac", ["kawa", "-C", "Foo.scm"])

    assert stream.getvalue() == ""


def test_log_command_with_classpath(stream, monkeypatch):
    monkeypatch.setattr(output, "_verbose", True)

    output.log_command("kawac", ["kawa", "-C", "Foo.scm"], classpath="a.jar")

    lines = stream.getvalue().splitlines()
    assert lines[0].endswith("kawac: kawa -C Foo.scm")
    assert lines[1].endswith("CLASSPATH=a.jar")


def test_timed_logger_reports_done(stream):
    with output.TimedLogger("kawa", phase=(1, 2)):
        pass

    text = stream.getvalue()
    assert "[1/2] kawa..." in text
    assert "Done (" in text
