"""Pytest configuration and shared fixtures."""

import logging
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from treecat.concat.build import BuildResult
from treecat.config import (
    BuildConfig,
    Config,
    FilterConfig,
    OutputConfig,
    SourcesConfig,
)


# ==================== Logging Fixtures ====================

@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by Config.setup_logging during a test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# ==================== Path Fixtures ====================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir):
    """Create a temporary config file."""
    config_path = temp_dir / "treecat.yaml"
    config_content = """
sources:
  directories: ["{src}"]
  titles: ["////// TEST"]
  files: []

filters:
  whitelist: [rs, txt]
  blacklist: [o]
  exclude_dirs: [target]

output:
  path: "{output}"
  recursive: true

logging:
  level: "DEBUG"
  file: null
""".format(src=str(temp_dir / "src"), output=str(temp_dir / "concat.txt"))

    config_path.write_text(config_content)
    return config_path


# ==================== Source Tree Fixtures ====================

@pytest.fixture
def source_tree(temp_dir):
    """
    Create a small source tree::

        src/
          a.rs
          b.txt
          c.o
          Makefile
          nested/
            e.rs
          target/
            d.rs
    """
    src = temp_dir / "src"
    (src / "nested").mkdir(parents=True)
    (src / "target").mkdir()
    (src / "a.rs").write_text("fn a() {}\n")
    (src / "b.txt").write_text("bee\n")
    (src / "c.o").write_bytes(b"\x7fELF")
    (src / "Makefile").write_text("all:\n")
    (src / "nested" / "e.rs").write_text("fn e() {}\n")
    (src / "target" / "d.rs").write_text("fn d() {}\n")
    return src


@pytest.fixture
def make_config(temp_dir):
    """Build a Config rooted in temp_dir."""
    def _make(
        directories=None,
        titles=None,
        files=(),
        whitelist=("rs", "txt"),
        blacklist=(),
        exclude_dirs=("target",),
        recursive=True,
        build=False,
        output=None,
    ):
        if directories is None:
            directories = (str(temp_dir / "src"),)
        if titles is None:
            titles = tuple(f"////// {Path(d).name.upper()}" for d in directories)
        return Config(
            sources=SourcesConfig(directories=directories, titles=titles, files=files),
            filters=FilterConfig(
                whitelist=whitelist,
                blacklist=blacklist,
                exclude_dirs=exclude_dirs,
            ),
            output=OutputConfig(
                path=output or str(temp_dir / "concat.txt"),
                recursive=recursive,
            ),
            build=BuildConfig(enabled=build),
        )

    return _make


# ==================== Tool Fixtures ====================

@pytest.fixture
def mock_renderer():
    """Tree renderer that never shells out."""
    renderer = MagicMock()
    renderer.render.return_value = "TREE"
    return renderer


@pytest.fixture
def mock_builder():
    """Build runner returning canned output."""
    builder = MagicMock()
    builder.command = ["cargo", "build"]
    builder.run.return_value = BuildResult(
        output=b"   Compiling demo v0.1.0\n    Finished dev\n",
        returncode=0,
    )
    return builder
