"""Java compilation for sources that sit next to Kawa sources.

The orchestrator only relies on the SecondaryCompiler protocol; JavacCompiler
is the stock implementation that shells out to ``javac``.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Protocol, Sequence, Union

from .options import BuildOptions
from .output import log_command, log_detail
from .process import CommandRunner, ProcessResult, run_command

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


class SecondaryCompiler(Protocol):
    """Compiler invoked after Kawa for the second language."""

    name: str

    def command(
        self, sources: Sequence[Path], target: Path, dependencies: Sequence[PathLike], options: BuildOptions
    ) -> list[str]: ...

    def compile(
        self, sources: Sequence[Path], target: Path, dependencies: Sequence[PathLike], options: BuildOptions
    ) -> bool: ...


class JavacCompiler:
    """Runs javac over a list of Java sources.

    Args:
        executable: javac binary (name on PATH or full path)
        runner: Command runner, replaceable in tests
    """

    name = "java"

    def __init__(self, executable: str = "javac", runner: Optional[CommandRunner] = None):
        self.executable = executable
        self.runner: CommandRunner = runner or run_command
        self.last_result: Optional[ProcessResult] = None

    def command(
        self, sources: Sequence[Path], target: Path, dependencies: Sequence[PathLike], options: BuildOptions
    ) -> list[str]:
        """Build the javac argument vector."""
        cmd = [self.executable, "-d", str(target)]
        if options.debug_symbols:
            cmd.append("-g")
        if not options.diagnostics_strict:
            cmd.append("-nowarn")
        if dependencies:
            cmd.extend(["-cp", os.pathsep.join(os.fspath(d) for d in dependencies)])
        cmd.extend(options.javac_args)
        cmd.extend(str(s) for s in sources)
        return cmd

    def compile(
        self, sources: Sequence[Path], target: Path, dependencies: Sequence[PathLike], options: BuildOptions
    ) -> bool:
        """Compile Java sources into target.

        Returns:
            True if javac exited with status 0
        """
        cmd = self.command(sources, target, dependencies, options)
        log_command("javac", cmd)
        result = self.runner(cmd, None)
        self.last_result = result
        if not result.success:
            logger.debug(f"javac failed with status {result.returncode}")
            for line in (result.stderr or result.stdout).splitlines():
                log_detail(line)
        return result.success
