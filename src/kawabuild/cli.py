"""
Command-line interface for kawabuild.

This module provides the `kawabuild` tool for compiling mixed Kawa Scheme and
Java projects into JVM class files.
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from . import __version__
from .compiler import KawaCompiler
from .config import ProjectConfig, load_scope
from .errors import CompileFailure, ConfigurationError, KawaBuildError
from .installation import KAWA_HOME_ENV, KawaInstallation
from .options import BuildSettings
from .output import init_timer, log, log_error, set_verbose
from .target_mapper import map_targets


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    root: Optional[Path] = None
    verbose: bool = False
    debug: bool = False
    dry_run: bool = False

    @property
    def settings(self) -> BuildSettings:
        return BuildSettings(verbose=self.verbose, debug=self.debug, dry_run=self.dry_run)


@dataclass
class MapArgs:
    """Arguments for the map command."""

    project_dir: Path
    stale: bool = False


def build_command(args: BuildArgs) -> int:
    """Compile a project.

    Examples:
        kawabuild build                  # Build the current directory
        kawabuild build modules/core     # Build a specific project
        kawabuild --dry-run build        # Show the compiler commands only
    """
    console = Console()
    try:
        installation = KawaInstallation.from_environment()
        config = ProjectConfig.load(args.project_dir)
        scope = load_scope(config.project_dir, args.root)

        if not KawaCompiler.applies_to(config.sources):
            log(f"No .scm sources under {config.project_dir}, nothing to do")
            return 0

        compiler = KawaCompiler(installation, settings=args.settings, scope=scope)
        start_time = time.time()
        outcome = compiler.compile(config.sources, config.target, config.dependencies)
        build_time = time.time() - start_time

        console.print(f"[bold green]✓ {outcome.message}[/bold green]")
        console.print(f"Build time: {build_time:.2f}s")
        return 0

    except CompileFailure as e:
        console.print(f"[bold red]✗ Build failed:[/bold red] {e}")
        return 1

    except KawaBuildError as e:
        log_error(str(e))
        return 1


def map_command(args: MapArgs) -> int:
    """Print where each source's class file is expected to land."""
    console = Console()
    try:
        config = ProjectConfig.load(args.project_dir)
    except KawaBuildError as e:
        log_error(str(e))
        return 1

    mapping = map_targets(config.sources, config.target, KawaCompiler.target_ext)
    stale = set(mapping.stale_sources()) if args.stale else set()

    table = Table(title=f"Artifacts under {mapping.target_root}")
    table.add_column("Source")
    table.add_column("Artifact")
    if args.stale:
        table.add_column("Stale")

    for source, target in mapping.targets.items():
        source_label = _relative(source, config.project_dir)
        if source in mapping.errors:
            artifact = f"[red]unreadable: {mapping.errors[source]}[/red]"
        elif mapping.is_nested(source):
            artifact = _relative(target, mapping.target_root)
        else:
            artifact = "[dim](anywhere)[/dim]"
        row = [source_label, artifact]
        if args.stale:
            row.append("yes" if source in stale else "")
        table.add_row(*row)

    console.print(table)
    return 0


def check_command() -> int:
    """Report whether KAWA_HOME points at a usable installation."""
    console = Console()
    try:
        installation = KawaInstallation.from_environment()
    except ConfigurationError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        return 1
    console.print(f"[bold green]✓[/bold green] {KAWA_HOME_ENV}={installation.home}")
    console.print(f"  compiler: {installation.kawa_command}")
    return 0


def _relative(path: Path, base: Path) -> str:
    try:
        return str(path.relative_to(base))
    except ValueError:
        return str(path)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kawabuild",
        description="Compile mixed Kawa Scheme and Java projects",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output; enables strict kawa warnings")
    parser.add_argument("--debug", action="store_true", help="Debug build (emit debug symbols)")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Print compiler commands without running them")
    parser.add_argument("--trace", action="store_true", help="Log internal debug messages")

    subparsers = parser.add_subparsers(dest="command")

    build_parser = subparsers.add_parser("build", help="Compile a project")
    build_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    build_parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Top-level build directory whose kawabuild.ini files are inherited",
    )

    map_parser = subparsers.add_parser("map", help="Show predicted class file locations")
    map_parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    map_parser.add_argument("--stale", action="store_true", help="Mark sources that need recompiling")

    subparsers.add_parser("check", help="Check the Kawa installation")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = create_parser()
    parsed_args = parser.parse_args(argv)

    if not parsed_args.command:
        parser.print_help()
        return 0

    init_timer()
    set_verbose(parsed_args.verbose or parsed_args.dry_run)
    logging.basicConfig(
        level=logging.DEBUG if parsed_args.trace else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    project_dir = getattr(parsed_args, "project_dir", None)
    if project_dir is not None and not project_dir.is_dir():
        log_error(f"Not a directory: {project_dir}")
        return 2

    if parsed_args.command == "build":
        return build_command(
            BuildArgs(
                project_dir=project_dir,
                root=parsed_args.root,
                verbose=parsed_args.verbose,
                debug=parsed_args.debug,
                dry_run=parsed_args.dry_run,
            )
        )
    if parsed_args.command == "map":
        return map_command(MapArgs(project_dir=project_dir, stale=parsed_args.stale))
    return check_command()


if __name__ == "__main__":
    sys.exit(main())
