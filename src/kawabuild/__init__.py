"""
kawabuild - compile mixed Kawa Scheme and Java sources to JVM class files.

Main components:
- classifier: split source entries into Kawa and Java source sets
- target_mapper: predict class file locations for staleness checks
- orchestrator: run kawa, then javac, then retry kawa once if needed
- compiler: the integration a host build talks to
"""

__version__ = "0.1.0"

from .classifier import SourceSet, applies_to, classify, classify_sources
from .classpath import ClasspathSpec, compose_classpath
from .compiler import KawaCompiler
from .errors import CompileFailure, ConfigurationError, InspectionError, KawaBuildError
from .inspector import InspectionResult, ModuleDeclaration, inspect_source
from .installation import KawaInstallation, is_installed
from .options import BuildOptions, BuildSettings, OptionScope, resolve_options
from .orchestrator import CompileOutcome, CompilerOrchestrator, CompileState
from .target_mapper import ArtifactMapping, map_targets

__all__ = [
    "__version__",
    "ArtifactMapping",
    "BuildOptions",
    "BuildSettings",
    "ClasspathSpec",
    "CompileFailure",
    "CompileOutcome",
    "CompileState",
    "CompilerOrchestrator",
    "ConfigurationError",
    "InspectionError",
    "InspectionResult",
    "KawaBuildError",
    "KawaCompiler",
    "KawaInstallation",
    "ModuleDeclaration",
    "OptionScope",
    "SourceSet",
    "applies_to",
    "classify",
    "classify_sources",
    "compose_classpath",
    "inspect_source",
    "is_installed",
    "map_targets",
    "resolve_options",
]
