"""Build option resolution.

Options live in a tree of immutable scopes (a project and its parent
projects). Each option is looked up independently: the nearest scope that
sets it explicitly wins, and if none does, a build-wide default applies.
Values from different scopes are never merged into one option.

Design:
    BuildSettings carries the build-wide flags (verbose, debug, dry run) and
    is passed in explicitly. OptionScope nodes hold what a project sets
    itself, with None meaning "not set here". resolve_options() walks the
    chain and produces a frozen BuildOptions consumed by the orchestrator.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Sequence


@dataclass(frozen=True)
class BuildSettings:
    """Build-wide flags.

    Attributes:
        verbose: Verbose output; also the default for strict diagnostics
        debug: Debug build; default for debug symbols
        dry_run: Report commands instead of running them
    """

    verbose: bool = False
    debug: bool = False
    dry_run: bool = False


@dataclass(frozen=True)
class OptionScope:
    """Options set explicitly by one project; None means unset.

    Attributes:
        diagnostics_strict: Treat undefined variables and unknown methods as errors
        optimize: Ask the compiler to optimise
        debug_symbols: Emit debug information
        extra_args: Extra arguments for the kawa compiler
        javac_args: Extra arguments for javac
        incremental: Compile only stale sources
        parent: Enclosing scope, if any
        name: Label used in messages
    """

    diagnostics_strict: Optional[bool] = None
    optimize: Optional[bool] = None
    debug_symbols: Optional[bool] = None
    extra_args: Optional[tuple[str, ...]] = None
    javac_args: Optional[tuple[str, ...]] = None
    incremental: Optional[bool] = None
    parent: Optional["OptionScope"] = field(default=None, repr=False)
    name: str = ""

    def child(self, name: str = "", **overrides: Any) -> "OptionScope":
        """Create a scope whose parent is this one."""
        return OptionScope(parent=self, name=name, **overrides)

    def with_values(self, **overrides: Any) -> "OptionScope":
        return replace(self, **overrides)

    def lookup(self, option: str) -> Any:
        """Nearest explicit value of an option along the chain, or None."""
        scope: Optional[OptionScope] = self
        while scope is not None:
            value = getattr(scope, option)
            if value is not None:
                return value
            scope = scope.parent
        return None


@dataclass(frozen=True)
class BuildOptions:
    """Fully resolved options for one compilation."""

    diagnostics_strict: bool
    optimize: bool
    debug_symbols: bool
    extra_args: tuple[str, ...] = ()
    javac_args: tuple[str, ...] = ()
    incremental: bool = False


_DEFAULTS: dict[str, Callable[[BuildSettings], Any]] = {
    "diagnostics_strict": lambda settings: settings.verbose,
    "optimize": lambda settings: False,
    "debug_symbols": lambda settings: settings.debug,
    "extra_args": lambda settings: (),
    "javac_args": lambda settings: (),
    "incremental": lambda settings: False,
}


def resolve_option(option: str, scope: Optional[OptionScope], settings: BuildSettings) -> Any:
    """Resolve a single option through the scope chain."""
    value = scope.lookup(option) if scope is not None else None
    if value is None:
        return _DEFAULTS[option](settings)
    return value


def resolve_options(scope: Optional[OptionScope], settings: Optional[BuildSettings] = None) -> BuildOptions:
    """Resolve every option for a compilation.

    Args:
        scope: Innermost scope (the project being built), or None
        settings: Build-wide flags; defaults to BuildSettings()

    Returns:
        Frozen BuildOptions
    """
    settings = settings or BuildSettings()
    values = {option: resolve_option(option, scope, settings) for option in _DEFAULTS}
    values["extra_args"] = _as_args(values["extra_args"])
    values["javac_args"] = _as_args(values["javac_args"])
    return BuildOptions(**values)


def _as_args(value: Sequence[str]) -> tuple[str, ...]:
    return tuple(str(v) for v in value)
