"""Child process execution for the external compilers.

Compilers run synchronously; pass/fail is the exit status. Output is captured
so it can be shown when a step fails, but it is never parsed.
"""

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Exit status and captured output of one compiler run."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Anything that can run an argv with an environment."""

    def __call__(self, argv: Sequence[str], env: Optional[Mapping[str, str]] = None) -> ProcessResult: ...


def get_subprocess_creation_flags() -> int:
    """CREATE_NO_WINDOW on Windows so compilers do not flash a console; 0 elsewhere."""
    if sys.platform == "win32":
        return subprocess.CREATE_NO_WINDOW
    return 0


def compiler_env(classpath: Optional[str] = None, base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Environment for a compiler process.

    Args:
        classpath: CLASSPATH value; left untouched when None
        base: Environment to start from; defaults to os.environ

    Returns:
        A new dict safe to hand to subprocess
    """
    env = dict(os.environ if base is None else base)
    if classpath is not None:
        env["CLASSPATH"] = classpath
    return env


def run_command(argv: Sequence[str], env: Optional[Mapping[str, str]] = None, **kwargs: Any) -> ProcessResult:
    """Run a command to completion and capture its output.

    stdin is redirected to DEVNULL so a compiler cannot read from the
    terminal. A missing executable is reported as exit status 127 rather than
    raised, matching what a shell would do.

    Args:
        argv: Command and arguments
        env: Full child environment; inherits ours when None
        **kwargs: Passed through to subprocess.run

    Returns:
        ProcessResult with exit status and output
    """
    default_flags = get_subprocess_creation_flags()
    if "creationflags" in kwargs:
        kwargs["creationflags"] = kwargs["creationflags"] | default_flags
    elif default_flags:
        kwargs["creationflags"] = default_flags
    kwargs.setdefault("stdin", subprocess.DEVNULL)

    argv = tuple(str(a) for a in argv)
    logger.debug(f"Running: {' '.join(argv)}")
    try:
        completed = subprocess.run(
            list(argv),
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            **kwargs,
        )
    except OSError as e:
        logger.debug(f"Cannot start {argv[0]}: {e}")
        return ProcessResult(argv=argv, returncode=127, stderr=str(e))

    logger.debug(f"Exit status {completed.returncode}: {argv[0]}")
    return ProcessResult(
        argv=argv,
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
