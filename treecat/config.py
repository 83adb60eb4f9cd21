"""Configuration management for treecat."""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/treecat.yaml"
CONFIG_ENV_VAR = "TREECAT_CONFIG"


def _freeze(obj, *names: str) -> None:
    """Store list-valued fields of a frozen dataclass as tuples."""
    for name in names:
        value = getattr(obj, name)
        if isinstance(value, str):
            value = (value,)
        object.__setattr__(obj, name, tuple(value or ()))


@dataclass(frozen=True)
class SourcesConfig:
    """Directories, their titles and explicitly listed files."""
    directories: tuple[str, ...] = ("./src",)
    titles: tuple[str, ...] = ("////// SRC",)
    files: tuple[str, ...] = ("Cargo.toml",)

    def __post_init__(self):
        _freeze(self, "directories", "titles", "files")


@dataclass(frozen=True)
class FilterConfig:
    """Extension whitelist/blacklist and pruned directory names."""
    whitelist: tuple[str, ...] = (
        "py", "txt", "md", "MD", "rs", "toml", "sql", "sh", "example",
    )
    blacklist: tuple[str, ...] = ()
    exclude_dirs: tuple[str, ...] = (
        "venv", "node_modules", "__pycache__", "target", ".git",
    )

    def __post_init__(self):
        _freeze(self, "whitelist", "blacklist", "exclude_dirs")


@dataclass(frozen=True)
class OutputConfig:
    """Output file configuration."""
    path: str = "./concat.txt"
    recursive: bool = True


@dataclass(frozen=True)
class BuildConfig:
    """Optional build step appended to the output."""
    enabled: bool = False
    command: tuple[str, ...] = ("cargo", "build")
    label: str = "CARGO BUILD"

    def __post_init__(self):
        if isinstance(self.command, str):
            object.__setattr__(self, "command", tuple(self.command.split()))
        else:
            _freeze(self, "command")


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(levelname)s: %(message)s"


def _section(section_cls, data: Optional[dict], name: str):
    """Build one config section, rejecting unknown keys."""
    try:
        return section_cls(**(data or {}))
    except TypeError as e:
        raise ConfigError(f"Invalid '{name}' section: {e}") from e


@dataclass(frozen=True)
class Config:
    """Main configuration container."""
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    filters: FilterConfig = field(default_factory=FilterConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            logger.warning(f"Config file not found: {path}, using defaults")
            return cls()

        with open(path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Malformed config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        return cls(
            sources=_section(SourcesConfig, data.get("sources"), "sources"),
            filters=_section(FilterConfig, data.get("filters"), "filters"),
            output=_section(OutputConfig, data.get("output"), "output"),
            build=_section(BuildConfig, data.get("build"), "build"),
            logging=_section(LoggingConfig, data.get("logging"), "logging"),
        )

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "sources": {
                "directories": list(self.sources.directories),
                "titles": list(self.sources.titles),
                "files": list(self.sources.files),
            },
            "filters": {
                "whitelist": list(self.filters.whitelist),
                "blacklist": list(self.filters.blacklist),
                "exclude_dirs": list(self.filters.exclude_dirs),
            },
            "output": {
                "path": self.output.path,
                "recursive": self.output.recursive,
            },
            "build": {
                "enabled": self.build.enabled,
                "command": list(self.build.command),
                "label": self.build.label,
            },
            "logging": {
                "level": self.logging.level,
                "file": self.logging.file,
                "format": self.logging.format,
            },
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    def validate(self) -> None:
        """Check invariants that must hold before any output is produced."""
        directories = self.sources.directories
        titles = self.sources.titles
        if len(directories) != len(titles):
            raise ConfigError(
                "The number of source directories and titles do not match "
                f"({len(directories)} directories, {len(titles)} titles)."
            )
        if self.build.enabled and not self.build.command:
            raise ConfigError("Build step enabled but no build command configured.")

    def with_overrides(
        self,
        recursive: Optional[bool] = None,
        build: Optional[bool] = None,
        output: Optional[str] = None,
    ) -> "Config":
        """Return a copy with command-line overrides applied."""
        config = self
        if recursive is not None:
            config = replace(config, output=replace(config.output, recursive=recursive))
        if output is not None:
            config = replace(config, output=replace(config.output, path=output))
        if build is not None:
            config = replace(config, build=replace(config.build, enabled=build))
        return config

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        log_level = getattr(logging, self.logging.level.upper(), logging.INFO)

        handlers = [logging.StreamHandler()]

        if self.logging.file:
            log_path = Path(self.logging.file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path))

        logging.basicConfig(
            level=log_level,
            format=self.logging.format,
            handlers=handlers,
            force=True,
        )


def load_config(path: Optional[str] = None) -> Config:
    """Load configuration from file or environment."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    return Config.from_yaml(path)
