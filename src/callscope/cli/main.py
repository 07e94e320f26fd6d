"""CLI entry point for callscope."""

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from loguru import logger

from .. import __version__
from ..core.config import load_config
from . import commands


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="callscope",
        description="Search and filter call and SMS transcript sessions",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("-p", "--project", help="Project file (default from config)")
    parser.add_argument("-c", "--config", help="YAML config file")

    subparsers = parser.add_subparsers(dest="command", required=False)

    # Search
    search_parser = subparsers.add_parser("search", help="Search sessions")
    commands.add_search_arguments(search_parser)

    # Identities
    ident_parser = subparsers.add_parser("identities", help="List numbers and speakers")
    kind = ident_parser.add_mutually_exclusive_group()
    kind.add_argument("--numbers", action="store_true", help="Only numbers")
    kind.add_argument("--names", action="store_true", help="Only speaker names")
    ident_parser.add_argument("--raw", action="store_true", help="Show raw identities and their aliases")

    alias_parser = subparsers.add_parser("alias", help="Unify identities under one display name")
    alias_parser.add_argument("display", help="Unified name or number")
    alias_parser.add_argument("raw", nargs="+", help="Raw identities to unify")

    # Tags
    tag_parser = subparsers.add_parser("tag", help="Manage saved tags")
    tag_subparsers = tag_parser.add_subparsers(dest="tag_cmd", required=True)
    tag_subparsers.add_parser("list", help="List saved tags")
    rename_parser = tag_subparsers.add_parser("rename", help="Rename a tag")
    rename_parser.add_argument("tag", help="Tag id or name")
    rename_parser.add_argument("name", help="New name")
    delete_tag_parser = tag_subparsers.add_parser("delete", help="Delete a tag")
    delete_tag_parser.add_argument("tag", help="Tag id or name")

    # Files and sessions
    files_parser = subparsers.add_parser("files", help="Manage loaded source files")
    files_subparsers = files_parser.add_subparsers(dest="files_cmd", required=True)
    files_subparsers.add_parser("list", help="List source files")
    delete_files_parser = files_subparsers.add_parser("delete", help="Delete files and their sessions")
    delete_files_parser.add_argument("names", nargs="+", help="Source file names")

    delete_parser = subparsers.add_parser("delete", help="Delete sessions by id")
    delete_parser.add_argument("session_ids", nargs="+", help="Session ids")

    return parser


def configure_logging(level: str) -> None:
    """Send log records at ``level`` and above to stderr."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def main() -> NoReturn:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    try:
        config = load_config(args.config)
        configure_logging("DEBUG" if args.verbose else config.log_level)
        if args.project:
            config.project_path = Path(args.project)

        if args.command == "search":
            commands.handle_search(args, config)
        elif args.command == "identities":
            commands.handle_identities(args, config)
        elif args.command == "alias":
            commands.handle_alias(args, config)
        elif args.command == "tag":
            commands.handle_tag(args, config)
        elif args.command == "files":
            commands.handle_files(args, config)
        elif args.command == "delete":
            commands.handle_delete(args, config)
        else:
            parser.print_help()

        sys.exit(0)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
