"""Command-line entry point for treecat."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from .concat.aggregator import Aggregator
from .config import DEFAULT_CONFIG_PATH, Config, load_config
from .errors import TreecatError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="treecat",
        description="Concatenate source directories into a single file, "
        "each preceded by a title and a directory tree.",
    )
    parser.add_argument(
        "-n", "--no-recursive",
        action="store_true",
        help="Disable recursive processing of subdirectories",
    )
    parser.add_argument(
        "-b", "--build",
        action="store_true",
        help="Run the configured build command and append its output",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help=f"Path to configuration file (default: $TREECAT_CONFIG or {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file (overrides the configured path)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except TreecatError as e:
        Config().setup_logging()
        logger.error(f"Error: {e}")
        return 1

    config = config.with_overrides(
        recursive=False if args.no_recursive else None,
        build=True if args.build else None,
        output=args.output,
    )
    config.setup_logging()

    try:
        Aggregator(config).run()
    except TreecatError as e:
        logger.error(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
