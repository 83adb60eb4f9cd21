"""Directory tree rendering through the external ``tree`` tool."""

import logging
import shutil
import subprocess
from typing import Iterable

from ..errors import ToolNotFoundError, TreeRenderError

logger = logging.getLogger(__name__)


def exclude_pattern(names: Iterable[str]) -> str:
    """Join directory names into a ``tree -I`` pattern."""
    return "|".join(names)


class TreeRenderer:
    """Renders a directory listing with ``tree``."""

    def __init__(self, executable: str = "tree"):
        self.executable = executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def ensure_available(self) -> None:
        """Raise ToolNotFoundError if the tree tool is not installed."""
        if not self.is_available():
            raise ToolNotFoundError(
                self.executable,
                f"'{self.executable}' command not found. "
                "Please install it to generate directory structures.",
            )

    def build_command(
        self,
        directory: str,
        recursive: bool = True,
        exclude_dirs: Iterable[str] = (),
    ) -> list[str]:
        cmd = [self.executable, directory]
        if not recursive:
            cmd += ["-L", "1"]
        pattern = exclude_pattern(exclude_dirs)
        if pattern:
            cmd += ["-I", pattern]
        return cmd

    def render(
        self,
        directory: str,
        recursive: bool = True,
        exclude_dirs: Iterable[str] = (),
    ) -> str:
        """
        Render the tree of a directory.

        Returns:
            The tool's standard output without trailing newlines

        Raises:
            TreeRenderError: if the tool cannot be run or exits non-zero
        """
        cmd = self.build_command(directory, recursive, exclude_dirs)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise TreeRenderError(f"Failed to run {self.executable}: {e}") from e

        if result.returncode != 0:
            raise TreeRenderError(
                f"{self.executable} exited with status {result.returncode}: "
                f"{result.stderr.strip()}"
            )

        return result.stdout.rstrip("\n")
