"""treecat - concatenate source directories into a single annotated file."""

__version__ = "0.1.0"
