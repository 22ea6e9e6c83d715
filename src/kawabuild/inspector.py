"""Lightweight module inspection.

Scans a source file line by line for two things: qualifier declarations
(``package`` / ``module-name``) and a type definition named after the file.
This is a pattern match, not a parse. A file with zero or several qualifier
declarations is reported as such and left to the caller to treat as
ambiguous.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import InspectionError
from .languages import Language

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModuleDeclaration:
    """Qualifier found in a source file.

    Attributes:
        qualifier: Dotted name from the first matching line (e.g. "com.example")
        count: Number of lines in the file that declare a qualifier
    """

    qualifier: str
    count: int

    @property
    def unambiguous(self) -> bool:
        return self.count == 1


@dataclass(frozen=True)
class InspectionResult:
    """What the inspector found in one file."""

    declaration: Optional[ModuleDeclaration]
    has_primary_type: bool

    @property
    def nestable(self) -> bool:
        """True when the output can safely be placed under the qualifier path."""
        return self.declaration is not None and self.declaration.unambiguous and self.has_primary_type


def base_name(path: Path) -> str:
    """File name up to the first dot (``Foo.test.scm`` -> ``Foo``)."""
    return path.name.split(".")[0]


def inspect_source(path: Path, language: Language) -> InspectionResult:
    """Inspect a single source file.

    Args:
        path: Source file to scan
        language: Language whose patterns apply

    Returns:
        InspectionResult with the declaration (if any) and type evidence

    Raises:
        InspectionError: If the file cannot be read
    """
    type_pattern = language.type_pattern(base_name(path))
    qualifier: Optional[str] = None
    count = 0
    has_type = False

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                match = language.qualifier_pattern.match(line)
                if match:
                    count += 1
                    if qualifier is None:
                        qualifier = match.group(1)
                if not has_type and type_pattern.search(line):
                    has_type = True
    except OSError as e:
        raise InspectionError(path, e.strerror or str(e)) from e

    declaration = ModuleDeclaration(qualifier=qualifier, count=count) if qualifier is not None else None
    logger.debug(f"Inspected {path.name}: declaration={declaration}, type={has_type}")
    return InspectionResult(declaration=declaration, has_primary_type=has_type)
