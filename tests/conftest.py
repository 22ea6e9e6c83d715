"""Pytest fixtures shared by the kawabuild tests.

External compilers are never run: tests hand the orchestrator a FakeRunner
that records every argv/environment and replays scripted exit statuses.
"""

from pathlib import Path
from typing import Mapping, Optional, Sequence

import pytest

from kawabuild.installation import KawaInstallation
from kawabuild.process import ProcessResult


class FakeRunner:
    """Command runner that records calls and returns scripted exit statuses.

    Args:
        statuses: Exit status per executable name, consumed in order; the
            last status repeats. Unknown executables exit 0.
    """

    def __init__(self, statuses: Optional[dict[str, list[int]]] = None):
        self.statuses = {k: list(v) for k, v in (statuses or {}).items()}
        self.calls: list[tuple[tuple[str, ...], Optional[dict[str, str]]]] = []

    def __call__(self, argv: Sequence[str], env: Optional[Mapping[str, str]] = None) -> ProcessResult:
        argv = tuple(str(a) for a in argv)
        self.calls.append((argv, dict(env) if env is not None else None))
        queue = self.statuses.get(Path(argv[0]).name, [0])
        status = queue.pop(0) if len(queue) > 1 else queue[0]
        return ProcessResult(argv=argv, returncode=status, stderr="boom" if status else "")

    def calls_to(self, executable: str) -> list[tuple[tuple[str, ...], Optional[dict[str, str]]]]:
        return [call for call in self.calls if Path(call[0][0]).name == executable]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def kawa_home(tmp_path):
    """Minimal Kawa installation: just kawa.jar."""
    home = tmp_path / "kawa-3.1"
    home.mkdir()
    (home / "kawa.jar").write_bytes(b"PK\x03\x04")
    return home


@pytest.fixture
def installation(kawa_home):
    return KawaInstallation.from_home(kawa_home)


@pytest.fixture
def write_source(tmp_path):
    """Write a source file relative to tmp_path, creating parent directories."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances with scripted exit statuses."""
    return FakeRunner
