"""
Console output for kawabuild.

Every line is prefixed with the time elapsed since the build started, in
MM:SS.cc format, so a slow compiler invocation is easy to spot:

    00:00.02 Compiling 3 kawa sources -> target/classes
    00:00.02 [1/2] kawa -d /work/target/classes -C /work/src/Foo.scm
    00:01.87       Done (1.85s)
    00:01.87 [2/2] javac (1 sources)

Usage:
    from kawabuild.output import log, log_phase, log_detail

    log("Compiling sources...")
    log_phase(1, 2, "kawa")
    log_detail("classpath: lib/a.jar")
"""

import sys
import time
from types import TracebackType
from typing import Optional, Sequence, TextIO

_start_time: Optional[float] = None
_output_stream: Optional[TextIO] = None
_verbose: bool = False


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Start the elapsed-time clock.

    Called automatically by the first log call if not called explicitly.

    Args:
        output_stream: Optional output stream (defaults to sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """Enable or disable verbose-only messages."""
    global _verbose
    _verbose = verbose


def get_elapsed() -> float:
    """Seconds elapsed since init_timer()."""
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: str) -> None:
    stream = _output_stream if _output_stream is not None else sys.stdout
    stream.write(f"{format_timestamp()} {message}\n")
    stream.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """Log a step of the compile sequence as ``[N/M] message``."""
    if verbose_only and not _verbose:
        return
    _print(f"[{phase}/{total}] {message}")


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """Log an indented detail line."""
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_command(tool: str, argv: Sequence[str], classpath: Optional[str] = None, verbose_only: bool = True) -> None:
    """
    Log an external command line, and its CLASSPATH if one is set.

    Used for tracing and for dry runs, where the command is only reported.

    Args:
        tool: Short tool label (e.g. "kawac", "javac")
        argv: Full argument vector
        classpath: Value of CLASSPATH passed to the child, if any
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{tool}: {' '.join(argv)}")
    if classpath is not None:
        log_detail(f"CLASSPATH={classpath}")


def log_error(message: str) -> None:
    _print(f"ERROR: {message}")


def log_warning(message: str) -> None:
    _print(f"WARNING: {message}")


class TimedLogger:
    """
    Context manager that logs an operation and how long it took.

    Usage:
        with TimedLogger("Compiling kawa sources", phase=(1, 2)):
            ...
    """

    def __init__(self, operation: str, phase: Optional[tuple[int, int]] = None, verbose_only: bool = False):
        self.operation = operation
        self.phase = phase
        self.verbose_only = verbose_only
        self.start_time = 0.0

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        if self.phase:
            log_phase(self.phase[0], self.phase[1], f"{self.operation}...", self.verbose_only)
        else:
            log(f"{self.operation}...", self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        del exc_val, exc_tb  # Unused
        elapsed = time.time() - self.start_time
        if exc_type is None:
            log_detail(f"Done ({elapsed:.2f}s)", verbose_only=self.verbose_only)
        return None
