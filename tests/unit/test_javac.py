"""Tests for the javac secondary compiler."""

import os
from pathlib import Path

from kawabuild.javac import JavacCompiler
from kawabuild.options import BuildOptions


def _options(**overrides):
    values = dict(diagnostics_strict=False, optimize=False, debug_symbols=False)
    values.update(overrides)
    return BuildOptions(**values)


def test_command_layout():
    javac = JavacCompiler()

    cmd = javac.command([Path("/src/Bar.java")], Path("/out"), ["a.jar", Path("/out")], _options())

    assert cmd == ["javac", "-d", "/out", "-nowarn", "-cp", f"a.jar{os.pathsep}/out", "/src/Bar.java"]


def test_debug_and_strict_flags():
    javac = JavacCompiler(executable="/opt/jdk/bin/javac")

    options = _options(debug_symbols=True, diagnostics_strict=True, javac_args=("-Xlint",))

    cmd = javac.command([], Path("/out"), [], options)

    assert cmd == ["/opt/jdk/bin/javac", "-d", "/out", "-g", "-Xlint"]


def test_compile_reports_exit_status(make_runner):
    runner = make_runner({"javac": [1]})
    javac = JavacCompiler(runner=runner)

    assert javac.compile([Path("/src/Bar.java")], Path("/out"), [], _options()) is False
    assert javac.last_result.returncode == 1
    assert len(runner.calls) == 1


def test_compile_success(make_runner):
    javac = JavacCompiler(runner=make_runner())

    assert javac.compile([Path("/src/Bar.java")], Path("/out"), [], _options()) is True
