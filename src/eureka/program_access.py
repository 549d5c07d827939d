"""
Launch the user's editor and pager.
"""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "vi"
DEFAULT_PAGER = "less"


class ProgramError(Exception):
    """An external program could not be started or exited non-zero."""


class ProgramAccess:
    """Runs $EDITOR / $PAGER on a file, blocking until they exit."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.editor_config = (config or {}).get("editor", {})

    def _resolve(self, key: str, env_var: str, default: str) -> list[str]:
        command = self.editor_config.get(key) or os.environ.get(env_var) or default
        return shlex.split(command)

    def _run(self, command: list[str], path: Path) -> None:
        logger.debug("Running %s on %s", command, path)
        try:
            subprocess.run([*command, str(path)], check=True)
        except FileNotFoundError as e:
            raise ProgramError(f"Couldn't start {command[0]}: {e}") from e
        except subprocess.CalledProcessError as e:
            raise ProgramError(f"{command[0]} exited with status {e.returncode}") from e

    def open_editor(self, path: Path) -> None:
        self._run(self._resolve("editor", "EDITOR", DEFAULT_EDITOR), path)

    def open_pager(self, path: Path) -> None:
        self._run(self._resolve("pager", "PAGER", DEFAULT_PAGER), path)
