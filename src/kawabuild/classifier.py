"""Source classification.

Splits a mix of source files and source directories into one ordered,
deduplicated list of absolute file paths per language. Directories are
expanded recursively against the language's extension; anything that does
not match is dropped without complaint.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Union

from .languages import LANGUAGES, PRIMARY, SECONDARY, Language

logger = logging.getLogger(__name__)

SourceEntry = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class SourceSet:
    """Ordered, duplicate-free absolute source files of a single language."""

    language: Language
    paths: tuple[Path, ...] = ()

    def __iter__(self) -> Iterator[Path]:
        return iter(self.paths)

    def __len__(self) -> int:
        return len(self.paths)

    def __bool__(self) -> bool:
        return bool(self.paths)

    def __contains__(self, item: object) -> bool:
        return item in self.paths

    def as_strings(self) -> list[str]:
        return [str(p) for p in self.paths]


def normalize_path(entry: SourceEntry) -> Path:
    """Absolute, normalized form of a path without resolving symlinks."""
    return Path(os.path.normpath(Path(entry).absolute()))


def expand_entry(entry: SourceEntry, language: Language) -> list[Path]:
    """Expand one source entry into the files of the given language.

    Args:
        entry: A file or directory
        language: Language whose extension filters the result

    Returns:
        Matching files, sorted when expanded from a directory
    """
    path = normalize_path(entry)
    if path.is_dir():
        return sorted(
            p for p in path.glob(f"**/*{language.extension}") if not p.is_dir() and language.matches(p)
        )
    if language.matches(path) and not path.is_dir():
        return [path]
    return []


def collect(entries: Iterable[SourceEntry], language: Language) -> SourceSet:
    """Build the SourceSet of one language from mixed entries."""
    seen: dict[Path, None] = {}
    for entry in entries:
        for path in expand_entry(entry, language):
            seen.setdefault(path, None)
    return SourceSet(language=language, paths=tuple(seen))


def classify(
    entries: Iterable[SourceEntry], languages: tuple[Language, ...] = LANGUAGES
) -> dict[Language, SourceSet]:
    """Partition source entries into per-language source sets.

    Args:
        entries: Files and/or directories
        languages: Languages to classify into

    Returns:
        Mapping of language to its SourceSet (possibly empty)
    """
    entries = list(entries)
    result = {language: collect(entries, language) for language in languages}
    counts = ", ".join(f"{lang.name}={len(sources)}" for lang, sources in result.items())
    logger.debug(f"Classified {len(entries)} entries: {counts}")
    return result


def classify_sources(entries: Iterable[SourceEntry]) -> tuple[SourceSet, SourceSet]:
    """Return the (primary, secondary) source sets for the given entries."""
    classified = classify(entries, (PRIMARY, SECONDARY))
    return classified[PRIMARY], classified[SECONDARY]


def applies_to(candidate_paths: Iterable[SourceEntry]) -> bool:
    """True if any candidate path tree holds at least one primary-language file."""
    for candidate in candidate_paths:
        if any(path.is_file() for path in expand_entry(candidate, PRIMARY)):
            return True
    return False
