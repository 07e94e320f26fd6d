"""Source file and session deletion commands for the callscope CLI."""

from ...core.config import Config
from .project import open_workspace, save_workspace


def handle_files(args, config: Config) -> None:
    """Handle files subcommands.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    workspace = open_workspace(config)

    if args.files_cmd == "list":
        files = workspace.source_files()
        if not files:
            print("No files loaded.")
            return
        for summary in files:
            print(f"{summary.name}  ({summary.count} sessions)")
    elif args.files_cmd == "delete":
        removed = workspace.delete_source_files(args.names)
        save_workspace(workspace, config)
        print(f"Deleted {removed} sessions from {len(args.names)} files")


def handle_delete(args, config: Config) -> None:
    """Delete sessions by id.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    workspace = open_workspace(config)
    removed = workspace.delete_sessions(args.session_ids)
    save_workspace(workspace, config)
    print(f"Deleted {removed} sessions")
