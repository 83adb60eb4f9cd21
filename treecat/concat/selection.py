"""File selection: extension filtering and directory traversal."""

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

logger = logging.getLogger(__name__)


def extension_of(name: str) -> str:
    """
    Get the extension of a file name.

    The extension is everything after the last dot. A name without a dot
    is its own extension, so ``Makefile`` has the extension ``Makefile``.
    """
    return os.path.basename(name).rsplit(".", 1)[-1]


def display_path(path: str) -> str:
    """Path as written in file headers, without a leading ``./``."""
    while path.startswith("./"):
        path = path[2:]
    return path


@dataclass(frozen=True)
class Candidate:
    """A regular file found under a source directory."""
    path: str
    extension: str

    @property
    def header_path(self) -> str:
        return display_path(self.path)


class ExtensionFilter:
    """Blacklist-then-whitelist extension test."""

    def __init__(self, whitelist: Iterable[str] = (), blacklist: Iterable[str] = ()):
        self.whitelist = frozenset(whitelist)
        self.blacklist = frozenset(blacklist)

    def reason(self, path: str) -> Optional[str]:
        """Why a file is rejected, or None if it is accepted."""
        ext = extension_of(path)
        if ext in self.blacklist:
            return "due to blacklist"
        if self.whitelist and ext not in self.whitelist:
            return "as it is not in the whitelist"
        return None

    def accepts(self, path: str) -> bool:
        return self.reason(path) is None


def _is_regular_file(path: str) -> bool:
    return os.path.isfile(path) and not os.path.islink(path)


def iter_candidates(
    directory: str,
    recursive: bool = True,
    exclude_dirs: Iterable[str] = (),
) -> Iterator[Candidate]:
    """
    Yield the regular files under a directory.

    Args:
        directory: Root directory to enumerate
        recursive: Walk subdirectories depth-first; otherwise only direct
            children of ``directory`` are considered
        exclude_dirs: Directory names whose whole subtree is skipped when
            walking recursively, including ``directory`` itself

    Yields:
        Candidate files, lexically ordered within each directory, files of a
        directory before the contents of its subdirectories
    """
    excluded = frozenset(exclude_dirs)

    if not recursive:
        try:
            names = sorted(os.listdir(directory))
        except OSError as e:
            logger.warning(f"Cannot list '{directory}': {e}")
            return
        for name in names:
            path = os.path.join(directory, name)
            if _is_regular_file(path):
                yield Candidate(path=path, extension=extension_of(name))
        return

    if os.path.basename(os.path.normpath(directory)) in excluded:
        logger.debug(f"Skipping excluded directory '{directory}'.")
        return

    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if d not in excluded)

        for name in sorted(files):
            path = os.path.join(root, name)
            if _is_regular_file(path):
                yield Candidate(path=path, extension=extension_of(name))


def select_files(
    directory: str,
    file_filter: ExtensionFilter,
    recursive: bool = True,
    exclude_dirs: Iterable[str] = (),
) -> Iterator[Candidate]:
    """Yield the candidates under ``directory`` that pass ``file_filter``."""
    for candidate in iter_candidates(directory, recursive, exclude_dirs):
        reason = file_filter.reason(candidate.path)
        if reason is not None:
            logger.debug(f"Skipping '{candidate.path}' {reason}.")
            continue
        yield candidate
