"""Control channel to supervisord via supervisorctl."""

import logging
import shutil
import subprocess
from typing import List, Optional

from config import settings
from contracts import DependencyMissingError, SupervisorControlError

logger = logging.getLogger(__name__)


class SupervisorControl:
    """Checks for and drives the supervisorctl executable."""

    def __init__(
        self,
        supervisorctl_bin: Optional[str] = None,
        required_executables: Optional[List[str]] = None,
    ):
        self.supervisorctl_bin = supervisorctl_bin or settings.supervisorctl_bin
        self.required_executables = (
            required_executables
            if required_executables is not None
            else list(settings.required_executables)
        )

    def check_available(self) -> None:
        """Fail before any mutation if a required executable is missing."""
        missing = [exe for exe in self.required_executables if shutil.which(exe) is None]
        if missing:
            raise DependencyMissingError(
                f"Required executables not found on PATH: {', '.join(missing)}"
            )

    def _run(self, action: str) -> None:
        cmd = [self.supervisorctl_bin, action]
        logger.info("Running %s", " ".join(cmd))
        try:
            subprocess.run(cmd, check=True, capture_output=True, text=True)
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or exc.stdout or "").strip()
            raise SupervisorControlError(
                f"'{' '.join(cmd)}' exited with {exc.returncode}: {detail}"
            ) from exc
        except OSError as exc:
            raise SupervisorControlError(f"Could not run {cmd[0]}: {exc}") from exc

    def reload(self) -> None:
        """Reread the program descriptors, then apply them."""
        self._run("reread")
        self._run("update")
