"""External build step whose output is appended to the result."""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from typing import Sequence

from ..errors import ToolNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Combined stdout/stderr of a build run, as raw bytes."""
    output: bytes
    returncode: int

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0


class BuildRunner:
    """Runs the configured build command."""

    def __init__(self, command: Sequence[str] = ("cargo", "build")):
        self.command = list(command)

    @property
    def executable(self) -> str:
        return self.command[0]

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    def run(self) -> BuildResult:
        """
        Run the build to completion.

        Returns:
            BuildResult with stderr interleaved into stdout

        Raises:
            ToolNotFoundError: if the build executable is not installed
        """
        if not self.is_available():
            raise ToolNotFoundError(self.executable)

        logger.info(f"Running '{' '.join(self.command)}' and appending output...")

        try:
            result = subprocess.run(
                self.command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(self.executable) from e

        return BuildResult(output=result.stdout, returncode=result.returncode)
