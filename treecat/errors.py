"""Exceptions raised by treecat."""


class TreecatError(Exception):
    """Base class for all treecat errors."""


class ConfigError(TreecatError):
    """Invalid configuration."""


class ToolNotFoundError(TreecatError):
    """A required external tool is not installed."""

    def __init__(self, tool: str, message: str = ""):
        self.tool = tool
        super().__init__(message or f"'{tool}' command not found")


class TreeRenderError(TreecatError):
    """The tree tool failed for one directory."""
