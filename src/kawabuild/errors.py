"""Error taxonomy for kawabuild.

Every failure that stops a build step derives from KawaBuildError so the CLI
can report it uniformly. Ambiguous module declarations are not errors: the
target mapper degrades them to a flat mapping instead.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .orchestrator import CompileOutcome


class KawaBuildError(Exception):
    """Base class for all kawabuild errors."""

    pass


class ConfigurationError(KawaBuildError):
    """Raised when KAWA_HOME or a project configuration file is unusable."""

    pass


class InspectionError(KawaBuildError):
    """Raised when a source file cannot be read for module inspection."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot inspect {path}: {reason}")


class CompileFailure(KawaBuildError):
    """Raised when an external compiler fails terminally.

    Attributes:
        languages: Languages whose compiler failed (e.g. ["kawa"], ["java"])
        outcome: The orchestrator outcome that carried the failure
    """

    def __init__(self, message: str, languages: Sequence[str], outcome: "CompileOutcome | None" = None):
        self.languages = list(languages)
        self.outcome = outcome
        super().__init__(message)
