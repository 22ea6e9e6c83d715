"""Mixed Kawa/Java compile orchestration.

Runs the two external compilers as one build step:

    IDLE -> PRIMARY_COMPILE -> SECONDARY_COMPILE -> PRIMARY_RETRY -> DONE

- PRIMARY_COMPILE runs ``kawa -d <target> ... -C <sources>`` with CLASSPATH
  set to the composed classpath.
- SECONDARY_COMPILE runs only when there are Java sources. Its classpath is
  the declared dependencies, Kawa's runtime jar and the freshly written
  target directory, so Java code can use classes Kawa just produced.
- PRIMARY_RETRY runs only when the first Kawa run failed and the Java
  compiler ran. Kawa sources that reference Java classes cannot compile until
  javac has produced them; one retry with the same arguments covers that.
  A second failure is final.

Failures are typed outcomes, not exceptions. CompileOutcome.raise_for_failure()
converts a terminal failure into CompileFailure at the build step boundary.
Nothing written to the target directory is removed on failure.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union

from .classpath import ClasspathSpec
from .errors import CompileFailure
from .javac import SecondaryCompiler
from .languages import PRIMARY
from .options import BuildOptions
from .output import TimedLogger, log_command, log_detail, log_error
from .process import CommandRunner, ProcessResult, compiler_env, run_command

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

STRICT_DIAGNOSTIC_FLAGS = (
    "--warn-undefined-variable",
    "--warn-invoke-unknown-method",
    "--warn-as-error",
)


class CompileState(Enum):
    """States of one orchestrated compile."""

    IDLE = "idle"
    PRIMARY_COMPILE = "primary_compile"
    SECONDARY_COMPILE = "secondary_compile"
    PRIMARY_RETRY = "primary_retry"
    DONE = "done"


@dataclass
class CompileOutcome:
    """Result of one orchestrated compile.

    Attributes:
        success: True if no compiler failed terminally
        message: Human-readable summary or failure cause
        failed_languages: Languages whose compiler failed terminally
        primary_attempts: How many times kawa was invoked (0-2)
        secondary_invoked: Whether javac was invoked
        states: States visited, in order
        commands: Every command run (or, in a dry run, that would have run)
        dry_run: True if no process was spawned
    """

    success: bool = False
    message: str = ""
    failed_languages: list[str] = field(default_factory=list)
    primary_attempts: int = 0
    secondary_invoked: bool = False
    states: list[CompileState] = field(default_factory=list)
    commands: list[tuple[str, ...]] = field(default_factory=list)
    dry_run: bool = False

    def raise_for_failure(self) -> None:
        """Raise CompileFailure if this outcome is a failure."""
        if not self.success:
            raise CompileFailure(self.message, self.failed_languages, outcome=self)


class CompilerOrchestrator:
    """Sequences the Kawa compiler and an optional secondary compiler.

    Args:
        kawa_command: Kawa launcher
        support_artifacts: Kawa runtime jars added to the secondary classpath
        secondary: Secondary compiler (e.g. JavacCompiler); None disables it
        runner: Command runner, replaceable in tests
    """

    def __init__(
        self,
        kawa_command: str = "kawa",
        support_artifacts: Sequence[PathLike] = (),
        secondary: Optional[SecondaryCompiler] = None,
        runner: Optional[CommandRunner] = None,
    ):
        self.kawa_command = kawa_command
        self.support_artifacts = tuple(support_artifacts)
        self.secondary = secondary
        self.runner: CommandRunner = runner or run_command

    def primary_command(self, sources: Sequence[Path], target: Path, options: BuildOptions) -> list[str]:
        """Build the kawa argument vector."""
        cmd = [self.kawa_command, "-d", str(target)]
        if options.diagnostics_strict:
            cmd.extend(STRICT_DIAGNOSTIC_FLAGS)
        cmd.extend(options.extra_args)
        cmd.append("-C")
        cmd.extend(str(s) for s in sources)
        return cmd

    def secondary_dependencies(self, dependencies: Sequence[PathLike], target: Path) -> list[str]:
        """Declared dependencies + Kawa runtime + the target directory."""
        deps = [os.fspath(d) for d in dependencies]
        deps.extend(os.fspath(a) for a in self.support_artifacts)
        deps.append(str(target))
        return deps

    def run(
        self,
        primary_sources: Sequence[Path],
        secondary_sources: Sequence[Path],
        target: PathLike,
        classpath: ClasspathSpec,
        options: BuildOptions,
        dependencies: Optional[Sequence[PathLike]] = None,
        dry_run: bool = False,
    ) -> CompileOutcome:
        """Compile one unit.

        Args:
            primary_sources: Kawa source files
            secondary_sources: Java source files
            target: Output directory shared by both compilers
            classpath: Classpath for the Kawa compiler
            options: Resolved build options
            dependencies: Declared dependency artifacts; defaults to the
                classpath entries
            dry_run: Log commands without running anything

        Returns:
            CompileOutcome describing what happened
        """
        target_dir = Path(os.path.abspath(target))
        deps = list(classpath) if dependencies is None else list(dependencies)
        primary_argv = self.primary_command(primary_sources, target_dir, options)
        primary_env = compiler_env(classpath.joined())
        run_secondary = bool(secondary_sources) and self.secondary is not None

        if secondary_sources and self.secondary is None:
            logger.warning(f"Ignoring {len(secondary_sources)} java sources: no secondary compiler configured")

        outcome = CompileOutcome(dry_run=dry_run)
        total_steps = int(bool(primary_sources)) + int(run_secondary)
        primary_ok: Optional[bool] = None
        secondary_ok: Optional[bool] = None

        if not dry_run:
            target_dir.mkdir(parents=True, exist_ok=True)

        state = CompileState.IDLE
        while state is not CompileState.DONE:
            outcome.states.append(state)

            if state is CompileState.IDLE:
                if primary_sources:
                    state = CompileState.PRIMARY_COMPILE
                elif run_secondary:
                    state = CompileState.SECONDARY_COMPILE
                else:
                    state = CompileState.DONE

            elif state is CompileState.PRIMARY_COMPILE:
                with TimedLogger(f"kawa ({len(primary_sources)} sources)", phase=(1, total_steps)):
                    primary_ok = self._invoke_primary(primary_argv, primary_env, classpath, outcome, dry_run)
                state = CompileState.SECONDARY_COMPILE if run_secondary else CompileState.DONE

            elif state is CompileState.SECONDARY_COMPILE:
                assert self.secondary is not None
                secondary_deps = self.secondary_dependencies(deps, target_dir)
                label = f"{self.secondary.name} ({len(secondary_sources)} sources)"
                with TimedLogger(label, phase=(total_steps, total_steps)):
                    secondary_ok = self._invoke_secondary(
                        secondary_sources, target_dir, secondary_deps, options, outcome, dry_run
                    )
                state = CompileState.PRIMARY_RETRY if primary_ok is False else CompileState.DONE

            elif state is CompileState.PRIMARY_RETRY:
                with TimedLogger("Retrying kawa after secondary compile"):
                    primary_ok = self._invoke_primary(primary_argv, primary_env, classpath, outcome, dry_run)
                state = CompileState.DONE

        outcome.states.append(CompileState.DONE)

        if primary_ok is False:
            outcome.failed_languages.append(PRIMARY.name)
        if secondary_ok is False:
            assert self.secondary is not None
            outcome.failed_languages.append(self.secondary.name)

        outcome.success = not outcome.failed_languages
        outcome.message = self._summary(outcome, len(primary_sources), len(secondary_sources) if run_secondary else 0)
        if not outcome.success:
            log_error(outcome.message)
        return outcome

    def _invoke_primary(
        self,
        argv: list[str],
        env: dict[str, str],
        classpath: ClasspathSpec,
        outcome: CompileOutcome,
        dry_run: bool,
    ) -> bool:
        outcome.commands.append(tuple(argv))
        log_command("kawac", argv, classpath.joined(), verbose_only=not dry_run)
        if dry_run:
            return True
        outcome.primary_attempts += 1
        result = self.runner(argv, env)
        if not result.success:
            _report_failure("kawa", result)
        return result.success

    def _invoke_secondary(
        self,
        sources: Sequence[Path],
        target: Path,
        dependencies: list[str],
        options: BuildOptions,
        outcome: CompileOutcome,
        dry_run: bool,
    ) -> bool:
        assert self.secondary is not None
        argv = self.secondary.command(sources, target, dependencies, options)
        outcome.commands.append(tuple(argv))
        if dry_run:
            log_command(self.secondary.name, argv, verbose_only=False)
            return True
        outcome.secondary_invoked = True
        return self.secondary.compile(sources, target, dependencies, options)

    @staticmethod
    def _summary(outcome: CompileOutcome, primary_count: int, secondary_count: int) -> str:
        if outcome.failed_languages:
            failed = " and ".join(outcome.failed_languages)
            retry = " (after retry)" if outcome.primary_attempts > 1 else ""
            return f"{failed} compilation failed{retry}"
        prefix = "Would compile" if outcome.dry_run else "Compiled"
        return f"{prefix} {primary_count} kawa and {secondary_count} java sources"


def _report_failure(language: str, result: ProcessResult) -> None:
    logger.debug(f"{language} exited with status {result.returncode}")
    for line in (result.stderr or result.stdout).splitlines():
        log_detail(line)

