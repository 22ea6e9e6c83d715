"""Kawa compiler integration as seen by a host build.

KawaCompiler ties the pieces together for one project: it answers whether it
applies, predicts artifacts for staleness checks, and runs the mixed
Kawa/Java compile. The host owns the project model; this class only needs
source entries, a target directory and dependency artifacts.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .classifier import SourceEntry, applies_to, classify_sources
from .classpath import PathLike, compose_classpath
from .installation import KawaInstallation
from .javac import JavacCompiler, SecondaryCompiler
from .options import BuildOptions, BuildSettings, OptionScope, resolve_options
from .orchestrator import CompileOutcome, CompilerOrchestrator
from .output import log, log_detail
from .process import CommandRunner
from .target_mapper import ArtifactMapping, map_targets

logger = logging.getLogger(__name__)


class KawaCompiler:
    """Compiler for projects mixing Kawa Scheme and Java sources."""

    name = "kawac"
    language = "kawa"
    source_dirs = ("kawa", "java")
    source_ext = (".scm", ".java")
    target = "classes"
    target_ext = "class"
    packaging = "jar"

    def __init__(
        self,
        installation: KawaInstallation,
        settings: Optional[BuildSettings] = None,
        scope: Optional[OptionScope] = None,
        secondary: Optional[SecondaryCompiler] = None,
        runner: Optional[CommandRunner] = None,
    ):
        """Create a compiler for one project.

        Args:
            installation: Validated Kawa installation
            settings: Build-wide flags
            scope: The project's option scope (with parents)
            secondary: Compiler for Java sources; javac by default
            runner: Command runner, replaceable in tests
        """
        self.installation = installation
        self.settings = settings or BuildSettings()
        self.scope = scope
        self.options: BuildOptions = resolve_options(scope, self.settings)
        self.secondary: SecondaryCompiler = secondary or JavacCompiler(runner=runner)
        self.orchestrator = CompilerOrchestrator(
            kawa_command=installation.kawa_command,
            support_artifacts=installation.support_artifacts,
            secondary=self.secondary,
            runner=runner,
        )

    @classmethod
    def applies_to(cls, candidate_paths: Iterable[SourceEntry]) -> bool:
        """True if any candidate path tree contains a .scm file."""
        return applies_to(candidate_paths)

    def compile_map(self, sources: Iterable[SourceEntry], target: PathLike) -> ArtifactMapping:
        """Predict the artifact of every source for staleness checks."""
        return map_targets(sources, target, self.target_ext)

    def compile(
        self, sources: Sequence[SourceEntry], target: PathLike, dependencies: Sequence[PathLike] = ()
    ) -> CompileOutcome:
        """Compile Kawa sources, then any Java sources alongside them.

        With the incremental option set and nothing stale, no compiler runs.

        Args:
            sources: Source files and directories
            target: Output directory
            dependencies: Dependency artifacts, highest priority first

        Returns:
            Successful CompileOutcome

        Raises:
            CompileFailure: If a compiler failed terminally
        """
        sources = list(sources)
        primary, secondary = classify_sources(sources)

        if self.options.incremental and not self.settings.dry_run:
            stale = self.compile_map(sources, target).stale_sources()
            if not stale:
                log(f"{len(primary) + len(secondary)} sources up to date")
                return CompileOutcome(success=True, message="Up to date")
            logger.debug(f"{len(stale)} stale sources")

        classpath = compose_classpath(dependencies, sources)
        log(f"Compiling {len(primary)} kawa and {len(secondary)} java sources -> {target}")
        log_detail(f"CLASSPATH={classpath.joined()}", verbose_only=True)

        outcome = self.orchestrator.run(
            primary_sources=primary.paths,
            secondary_sources=secondary.paths,
            target=Path(target),
            classpath=classpath,
            options=self.options,
            dependencies=dependencies,
            dry_run=self.settings.dry_run,
        )
        outcome.raise_for_failure()
        return outcome
