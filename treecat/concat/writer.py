"""Output file writer."""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 40
FILE_HEADER_PREFIX = "/" * 29 + " "
SECTION_PREFIX = "////// "


class OutputWriter:
    """
    Append-only writer for the concatenated output.

    Opening the writer truncates (or creates) the output file; every write
    after that is appended in call order.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._fh: Optional[BinaryIO] = None
        self.files_written = 0

    def open(self) -> "OutputWriter":
        if self.path.parent != Path("."):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.path, "wb")
        return self

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "OutputWriter":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def write_bytes(self, data: bytes) -> None:
        if self._fh is None:
            raise RuntimeError("OutputWriter is not open")
        self._fh.write(data)

    def write_raw(self, text: str) -> None:
        self.write_bytes(text.encode("utf-8"))

    def write_line(self, text: str = "") -> None:
        self.write_raw(text + "\n")

    def write_banner(self, title: str) -> None:
        """Title line, separator and a blank line."""
        self.write_line(title)
        self.write_line(SEPARATOR)
        self.write_line()

    def write_section(self, label: str) -> None:
        """Banner for a labelled section such as ``EXPLICIT FILES``."""
        self.write_banner(f"{SECTION_PREFIX}{label}")

    def write_tree(self, text: str) -> None:
        self.write_line(text)
        self.write_line()

    def write_file(self, header_path: str, content: bytes) -> None:
        """Path header, the unmodified file bytes and two trailing newlines."""
        self.write_line(f"{FILE_HEADER_PREFIX}{header_path}")
        self.write_bytes(content)
        self.write_raw("\n\n")
        self.files_written += 1
