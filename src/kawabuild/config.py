"""Project configuration from kawabuild.ini.

Example:

    [project]
    sources =
        src/main/kawa
        src/main/java
    dependencies = lib/commons.jar
    target = target/classes

    [kawac]
    warnings = yes
    args = --full-tailcalls

    [javac]
    args = -source 8 -target 8

Every directory between the build root and a project may hold its own
kawabuild.ini; their [kawac]/[javac] sections form the option scope chain,
root first.
"""

import configparser
import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigurationError
from .options import OptionScope

logger = logging.getLogger(__name__)

CONFIG_FILE = "kawabuild.ini"
DEFAULT_TARGET = "target/classes"
DEFAULT_SOURCES = ("src/main/kawa", "src/main/java")

_BOOLEAN_OPTIONS = {
    "warnings": "diagnostics_strict",
    "optimise": "optimize",
    "debug": "debug_symbols",
    "incremental": "incremental",
}


@dataclass(frozen=True)
class ProjectConfig:
    """Settings of one project directory.

    Attributes:
        project_dir: Directory holding kawabuild.ini
        sources: Source files and directories, absolute
        dependencies: Dependency artifacts, absolute, in declared order
        target: Output directory, absolute
        scope: Options declared by this project alone (no parent)
    """

    project_dir: Path
    sources: tuple[Path, ...] = ()
    dependencies: tuple[Path, ...] = ()
    target: Path = Path(DEFAULT_TARGET)
    scope: OptionScope = field(default_factory=OptionScope)

    @classmethod
    def load(cls, project_dir: Path) -> "ProjectConfig":
        """Read kawabuild.ini from a project directory.

        A missing file yields the default layout (src/main/kawa, src/main/java,
        target/classes).

        Raises:
            ConfigurationError: If the file is malformed
        """
        project_dir = Path(project_dir).absolute()
        ini_path = project_dir / CONFIG_FILE
        parser = configparser.ConfigParser(interpolation=None)
        if ini_path.exists():
            try:
                parser.read(ini_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(f"Cannot parse {ini_path}: {e}") from e
            logger.debug(f"Loaded {ini_path}")

        sources = _path_list(parser.get("project", "sources", fallback=""), project_dir)
        if not sources:
            sources = tuple(project_dir / s for s in DEFAULT_SOURCES)

        return cls(
            project_dir=project_dir,
            sources=sources,
            dependencies=_path_list(parser.get("project", "dependencies", fallback=""), project_dir),
            target=project_dir / parser.get("project", "target", fallback=DEFAULT_TARGET),
            scope=_scope_from(parser, ini_path, name=project_dir.name),
        )


def _path_list(value: str, base: Path) -> tuple[Path, ...]:
    return tuple(base / item for item in value.split())


def _split_args(value: str, ini_path: Path, section: str) -> tuple[str, ...]:
    try:
        return tuple(shlex.split(value))
    except ValueError as e:
        raise ConfigurationError(f"{ini_path}: [{section}] args: {e}") from e


def _scope_from(parser: configparser.ConfigParser, ini_path: Path, name: str) -> OptionScope:
    values: dict[str, object] = {}
    if parser.has_section("kawac"):
        section = parser["kawac"]
        for key, option in _BOOLEAN_OPTIONS.items():
            if key in section:
                try:
                    values[option] = section.getboolean(key)
                except ValueError as e:
                    raise ConfigurationError(f"{ini_path}: [kawac] {key}: {e}") from e
        if "args" in section:
            values["extra_args"] = _split_args(section["args"], ini_path, "kawac")
    if parser.has_section("javac") and "args" in parser["javac"]:
        values["javac_args"] = _split_args(parser["javac"]["args"], ini_path, "javac")
    return OptionScope(name=name, **values)  # type: ignore[arg-type]


def load_scope(project_dir: Path, root: Optional[Path] = None) -> OptionScope:
    """Build the option scope chain for a project.

    Walks from root down to project_dir; every directory with kawabuild.ini
    contributes one scope whose parent is the scope above it.

    Args:
        project_dir: Project being built
        root: Top of the build; defaults to project_dir itself

    Returns:
        Innermost scope (for project_dir)
    """
    project_dir = Path(project_dir).absolute()
    root = Path(root).absolute() if root is not None else project_dir
    try:
        relative = project_dir.relative_to(root)
    except ValueError as e:
        raise ConfigurationError(f"{project_dir} is not inside build root {root}") from e

    directories = [root]
    for part in relative.parts:
        directories.append(directories[-1] / part)

    scope: Optional[OptionScope] = None
    for directory in directories:
        if not (directory / CONFIG_FILE).exists() and directory != project_dir:
            continue
        own = ProjectConfig.load(directory).scope
        scope = own.with_values(parent=scope)
    assert scope is not None
    return scope
