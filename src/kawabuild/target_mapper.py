"""Source to artifact mapping.

Predicts where each source file's class file lands so the host build can
decide what is stale. The compiler gives no per-file manifest, so the
prediction is conservative: a file gets a precise artifact path only when it
declares exactly one qualifier AND defines a type named after itself.
Everything else maps to the target directory as a whole.

A precise path that turns out to be wrong would let the incremental build skip
real work, so when in doubt the mapping stays flat.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .classifier import SourceEntry, classify, normalize_path
from .errors import InspectionError
from .inspector import base_name, inspect_source
from .languages import LANGUAGES, Language
from .output import log_warning

logger = logging.getLogger(__name__)

DEFAULT_TARGET_EXT = "class"


@dataclass
class ArtifactMapping:
    """Mapping of absolute source path to predicted output path.

    Attributes:
        target_root: Directory all artifacts live under
        targets: Source -> artifact path (a file, or target_root when flat)
        errors: Sources that could not be inspected, with the reason
    """

    target_root: Path
    targets: dict[Path, Path] = field(default_factory=dict)
    errors: dict[Path, str] = field(default_factory=dict)

    def __getitem__(self, source: Path) -> Path:
        return self.targets[source]

    def __iter__(self) -> Iterator[Path]:
        return iter(self.targets)

    def __len__(self) -> int:
        return len(self.targets)

    def __contains__(self, source: object) -> bool:
        return source in self.targets

    def is_nested(self, source: Path) -> bool:
        """True if the source maps to a specific artifact file."""
        return self.targets[source] != self.target_root

    def nested(self) -> dict[Path, Path]:
        return {s: t for s, t in self.targets.items() if t != self.target_root}

    def flat(self) -> list[Path]:
        return [s for s, t in self.targets.items() if t == self.target_root]

    def to_dict(self) -> dict[str, str]:
        return {str(s): str(t) for s, t in self.targets.items()}

    def stale_sources(self) -> list[Path]:
        """Sources whose predicted artifact is missing or older than the source.

        Flat sources are compared against the newest file under the target
        directory; an empty or missing target directory makes them stale.
        Sources that failed inspection are always stale.
        """
        newest_output = _newest_mtime(self.target_root)
        stale = []
        for source, target in self.targets.items():
            if source in self.errors or not source.exists():
                stale.append(source)
                continue
            source_mtime = source.stat().st_mtime
            if target == self.target_root:
                if newest_output is None or source_mtime > newest_output:
                    stale.append(source)
            elif not target.is_file() or source_mtime > target.stat().st_mtime:
                stale.append(source)
        return stale


def _newest_mtime(directory: Path) -> Optional[float]:
    if not directory.is_dir():
        return None
    mtimes = [p.stat().st_mtime for p in directory.rglob("*") if p.is_file()]
    return max(mtimes) if mtimes else None


def predict_target(
    source: Path, language: Language, target_root: Path, target_ext: str = DEFAULT_TARGET_EXT
) -> Path:
    """Predict the artifact for one source file.

    Raises:
        InspectionError: If the source cannot be read
    """
    result = inspect_source(source, language)
    if not result.nestable:
        return target_root
    assert result.declaration is not None
    package_dir = Path(*result.declaration.qualifier.split("."))
    return target_root / package_dir / f"{base_name(source)}.{target_ext}"


def map_targets(
    entries: Iterable[SourceEntry],
    target_root: SourceEntry,
    target_ext: str = DEFAULT_TARGET_EXT,
    languages: tuple[Language, ...] = LANGUAGES,
) -> ArtifactMapping:
    """Map every source file under the entries to its predicted artifact.

    Args:
        entries: Source files and/or directories
        target_root: Output directory of the compilers
        target_ext: Artifact extension without the dot
        languages: Languages to map

    Returns:
        ArtifactMapping covering every classified source
    """
    root = normalize_path(target_root)
    mapping = ArtifactMapping(target_root=root)

    for language, sources in classify(entries, languages).items():
        for source in sources:
            try:
                mapping.targets[source] = predict_target(source, language, root, target_ext)
            except InspectionError as e:
                # Compile will hit the same file and report it properly
                log_warning(str(e))
                mapping.errors[source] = e.reason
                mapping.targets[source] = root

    logger.debug(f"Mapped {len(mapping)} sources ({len(mapping.nested())} nested) under {root}")
    return mapping
