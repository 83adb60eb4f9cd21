"""Aggregator that concatenates configured sources into one output file."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from ..config import Config
from ..errors import ToolNotFoundError, TreeRenderError
from .build import BuildRunner
from .selection import ExtensionFilter, display_path, select_files
from .tree import TreeRenderer
from .writer import OutputWriter

logger = logging.getLogger(__name__)

EXPLICIT_FILES_LABEL = "EXPLICIT FILES"


@dataclass
class AggregationSummary:
    """What a run wrote and what it skipped."""
    output_path: str
    files_written: int = 0
    skipped_directories: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    tree_failures: list[str] = field(default_factory=list)
    build_ran: bool = False
    build_returncode: Optional[int] = None


def read_source(path: str) -> bytes:
    """Read a source file unchanged."""
    with open(path, "rb") as f:
        return f.read()


class Aggregator:
    """Concatenates directories and explicit files into a single output."""

    def __init__(
        self,
        config: Config,
        renderer: Optional[TreeRenderer] = None,
        builder: Optional[BuildRunner] = None,
    ):
        self.config = config
        self.renderer = renderer or TreeRenderer()
        self.builder = builder or BuildRunner(config.build.command)
        self.file_filter = ExtensionFilter(
            whitelist=config.filters.whitelist,
            blacklist=config.filters.blacklist,
        )

    @property
    def recursive(self) -> bool:
        return self.config.output.recursive

    def run(self) -> AggregationSummary:
        """
        Produce the output file.

        Raises:
            ConfigError: if directories and titles differ in number
            ToolNotFoundError: if the tree tool is not installed

        Both are raised before the output file is touched.
        """
        self.config.validate()
        self.renderer.ensure_available()

        summary = AggregationSummary(output_path=self.config.output.path)

        with OutputWriter(self.config.output.path) as writer:
            for directory, title in zip(
                self.config.sources.directories, self.config.sources.titles
            ):
                self.process_directory(writer, directory, title, summary)

            if self.config.sources.files:
                self.process_explicit_files(writer, summary)

            if self.config.build.enabled:
                self.process_build(writer, summary)

            summary.files_written = writer.files_written

        logger.info(
            f"All specified directories have been concatenated into "
            f"'{self.config.output.path}' ({summary.files_written} files)."
        )
        return summary

    def process_directory(
        self,
        writer: OutputWriter,
        directory: str,
        title: str,
        summary: AggregationSummary,
    ) -> None:
        """Write the banner, tree and selected files of one directory."""
        if not os.path.isdir(directory):
            logger.warning(
                f"Source directory '{directory}' does not exist or is not a "
                "directory. Skipping."
            )
            summary.skipped_directories.append(directory)
            return

        try:
            os.listdir(directory)
        except OSError as e:
            logger.warning(f"Source directory '{directory}' cannot be read: {e}. Skipping.")
            summary.skipped_directories.append(directory)
            return

        writer.write_banner(title)

        exclude_dirs = self.config.filters.exclude_dirs
        try:
            tree = self.renderer.render(directory, self.recursive, exclude_dirs)
        except TreeRenderError as e:
            logger.error(f"Tree rendering failed for '{directory}': {e}")
            summary.tree_failures.append(directory)
            tree = f"Error: Failed to generate tree for directory '{directory}'."
        writer.write_tree(tree)

        for candidate in select_files(
            directory, self.file_filter, self.recursive, exclude_dirs
        ):
            self._write_source(writer, candidate.path, candidate.header_path, summary)

        writer.write_line()

    def _write_source(
        self,
        writer: OutputWriter,
        path: str,
        header_path: str,
        summary: AggregationSummary,
    ) -> None:
        """Append one file; unreadable files are skipped with a warning."""
        try:
            content = read_source(path)
        except OSError as e:
            logger.warning(f"Cannot read '{path}': {e}. Skipping.")
            summary.skipped_files.append(path)
            return
        writer.write_file(header_path, content)

    def process_explicit_files(
        self,
        writer: OutputWriter,
        summary: AggregationSummary,
    ) -> None:
        """Write the explicit files section."""
        writer.write_section(EXPLICIT_FILES_LABEL)

        for path in self.config.sources.files:
            if not os.path.isfile(path):
                logger.warning(f"Explicit file '{path}' does not exist. Skipping.")
                summary.skipped_files.append(path)
                continue

            reason = self.file_filter.reason(path)
            if reason is not None:
                logger.debug(f"Skipping '{path}' {reason}.")
                continue

            self._write_source(writer, path, display_path(path), summary)

    def process_build(
        self,
        writer: OutputWriter,
        summary: AggregationSummary,
    ) -> None:
        """Run the build step and append its combined output."""
        writer.write_line()
        writer.write_section(f"{self.config.build.label} OUTPUT")

        try:
            result = self.builder.run()
        except ToolNotFoundError as e:
            logger.error(f"Error: {e}. Cannot run '{' '.join(self.builder.command)}'.")
            writer.write_line(f"Error: {e}.")
            return

        writer.write_bytes(result.output)
        summary.build_ran = True
        summary.build_returncode = result.returncode

        if result.succeeded:
            logger.info(
                f"'{' '.join(self.builder.command)}' completed successfully. "
                f"Output appended to '{self.config.output.path}'."
            )
        else:
            logger.warning(
                f"'{' '.join(self.builder.command)}' encountered errors. "
                f"Check '{self.config.output.path}' for details."
            )
