"""CLI entry point for atlasflow."""

import argparse
from pathlib import Path

from . import __version__
from .cli.commands import add_subcommands, run_command
from .config import Settings
from .logging import setup_logging
from .repositories import FilesystemRepository
from .services import BoardService


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="atlasflow",
        description="Task board with columns, cards and tags, stored as YAML",
    )
    parser.add_argument(
        "--board-file",
        type=Path,
        default=None,
        help="Path to the board document (default: board.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase logging verbosity (-v for INFO, -vv for DEBUG)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Path to write logs to file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    add_subcommands(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Build settings from CLI args
    settings_kwargs: dict = {}
    if args.board_file:
        settings_kwargs["board_file"] = args.board_file
    if args.verbose:
        settings_kwargs["verbose"] = args.verbose
    if args.log_file:
        settings_kwargs["log_file"] = args.log_file

    settings = Settings(**settings_kwargs)

    setup_logging(settings.verbose, settings.log_file)

    service = BoardService(FilesystemRepository(settings.board_file))
    service.load()
    return run_command(args, service)


if __name__ == "__main__":
    raise SystemExit(main())
