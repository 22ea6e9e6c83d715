"""Source language descriptors.

A language is described by its file extension and two line patterns: one
matching a module/package qualifier declaration and one matching a type
definition whose name equals the file's base name. The patterns are
deliberately approximate; nothing here parses the languages.
"""

import re
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Language:
    """A source language known to the classifier and inspector.

    Attributes:
        name: Language identifier used in messages (e.g. "kawa", "java")
        extension: File suffix including the dot (e.g. ".scm")
        qualifier_pattern: Regex whose first group captures the dotted qualifier
        type_pattern_template: Regex template with a ``{name}`` placeholder for
            the escaped base name of the file
    """

    name: str
    extension: str
    qualifier_pattern: re.Pattern[str]
    type_pattern_template: str

    def type_pattern(self, base_name: str) -> re.Pattern[str]:
        """Compile the type-definition pattern for a given base name."""
        return re.compile(self.type_pattern_template.format(name=re.escape(base_name)))

    def matches(self, path: Path) -> bool:
        """True if the path's suffix is exactly this language's extension."""
        return path.suffix == self.extension

    def __str__(self) -> str:
        return self.name


KAWA = Language(
    name="kawa",
    extension=".scm",
    # (module-name com.example.) -> "com.example"
    qualifier_pattern=re.compile(r"^\s*\(module-name\s+([^\s;]+)\."),
    type_pattern_template=r"^\s*\((?:define-simple-class|activity)\s+{name}(?=[\s()]|$)",
)

JAVA = Language(
    name="java",
    extension=".java",
    qualifier_pattern=re.compile(r"^\s*package\s+([^\s;]+)\s*;?\s*"),
    type_pattern_template=r"(?:trait|class|object)\s+{name}(?![\w$])",
)

PRIMARY = KAWA
SECONDARY = JAVA

# Order matters: primary first
LANGUAGES: tuple[Language, ...] = (PRIMARY, SECONDARY)


def language_for(path: Path) -> Language | None:
    """Return the registered language for a file, or None."""
    for language in LANGUAGES:
        if language.matches(path):
            return language
    return None
