"""Kawa installation discovery.

The compiler integration is usable only when KAWA_HOME names a directory
holding kawa.jar. That jar is also a runtime support artifact: Java sources
compiled after Kawa sources need it on their classpath.
"""

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

KAWA_HOME_ENV = "KAWA_HOME"
KAWA_JAR = "kawa.jar"


@dataclass(frozen=True)
class KawaInstallation:
    """A validated Kawa installation.

    Attributes:
        home: Installation root (the value of KAWA_HOME)
    """

    home: Path

    @classmethod
    def from_environment(cls, environ: Optional[Mapping[str, str]] = None) -> "KawaInstallation":
        """Locate Kawa through KAWA_HOME.

        Args:
            environ: Environment to read; defaults to os.environ

        Raises:
            ConfigurationError: If KAWA_HOME is unset or lacks kawa.jar
        """
        environ = os.environ if environ is None else environ
        value = environ.get(KAWA_HOME_ENV, "").strip()
        if not value:
            raise ConfigurationError(f"{KAWA_HOME_ENV} is not set; point it at a Kawa installation")
        return cls.from_home(Path(value))

    @classmethod
    def from_home(cls, home: Path) -> "KawaInstallation":
        """Validate an explicit installation root.

        Raises:
            ConfigurationError: If home/kawa.jar does not exist
        """
        home = Path(home).expanduser()
        if not (home / KAWA_JAR).is_file():
            raise ConfigurationError(f"{KAWA_JAR} not found in {KAWA_HOME_ENV}={home}")
        logger.debug(f"Using Kawa installation at {home}")
        return cls(home=home.absolute())

    @property
    def kawa_jar(self) -> Path:
        return self.home / KAWA_JAR

    @property
    def support_artifacts(self) -> tuple[Path, ...]:
        """Runtime artifacts that code compiled by Kawa depends on."""
        return (self.kawa_jar,)

    @property
    def kawa_command(self) -> str:
        """Launcher for the compiler: bin/kawa under home, else kawa on PATH."""
        launcher = self.home / "bin" / "kawa"
        if launcher.is_file():
            return str(launcher)
        return shutil.which("kawa") or "kawa"


def is_installed(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True if KAWA_HOME points at a usable installation."""
    try:
        KawaInstallation.from_environment(environ)
    except ConfigurationError:
        return False
    return True
