"""Compilation classpath composition.

Declared dependency artifacts come first, in the caller's order, followed by
any source directories so that a compiler can resolve references between
files compiled in the same round. Built artifacts therefore win over source
directories during symbol lookup.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Union

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class ClasspathSpec:
    """Immutable, ordered classpath."""

    entries: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> str:
        return self.entries[index]

    def joined(self, separator: str = os.pathsep) -> str:
        """Render as a CLASSPATH string."""
        return separator.join(self.entries)

    def extended(self, *extra: PathLike) -> "ClasspathSpec":
        """A new classpath with the given entries appended."""
        return ClasspathSpec(self.entries + tuple(os.fspath(e) for e in extra))


def compose_classpath(dependencies: Iterable[PathLike], source_entries: Iterable[PathLike]) -> ClasspathSpec:
    """Compose the classpath for one compilation step.

    Args:
        dependencies: Dependency artifacts, highest priority first
        source_entries: Source files and directories; only directories are used

    Returns:
        ClasspathSpec of dependencies followed by source directories
    """
    entries = [os.fspath(dep) for dep in dependencies]
    entries.extend(os.fspath(src) for src in source_entries if Path(src).is_dir())
    return ClasspathSpec(tuple(entries))
