"""Saved tag commands for the callscope CLI."""

from datetime import datetime

from ...core.config import Config
from ...core.exceptions import TagNotFoundError
from ...services import Workspace
from .project import open_workspace, save_workspace


def resolve_tag_id(workspace: Workspace, ref: str) -> str:
    """Find a tag by id, falling back to a case-insensitive name match.

    Args:
        workspace: Workspace holding the tags.
        ref: Tag id or name.

    Returns:
        Tag id.

    Raises:
        TagNotFoundError: If no tag matches.
    """
    if workspace.tags.get(ref) is not None:
        return ref
    wanted = ref.strip().lower()
    for tag in workspace.tags:
        if tag.name.lower() == wanted:
            return tag.id
    raise TagNotFoundError(ref)


def handle_tag(args, config: Config) -> None:
    """Handle tag subcommands.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    workspace = open_workspace(config)

    if args.tag_cmd == "list":
        _list_tags(workspace)
    elif args.tag_cmd == "rename":
        tag = workspace.rename_tag(resolve_tag_id(workspace, args.tag), args.name)
        save_workspace(workspace, config)
        print(f"Renamed tag {tag.id} to '{tag.name}'")
    elif args.tag_cmd == "delete":
        tag_id = resolve_tag_id(workspace, args.tag)
        workspace.delete_tag(tag_id)
        save_workspace(workspace, config)
        print(f"Deleted tag {tag_id}")


def _list_tags(workspace: Workspace) -> None:
    tags = workspace.tags.all()
    if not tags:
        print("No saved tags.")
        return

    print(f"Saved Tags ({len(tags)})")
    print("=" * 70)
    for tag in tags:
        created = datetime.fromtimestamp(tag.timestamp / 1000).strftime("%Y-%m-%d %H:%M")
        print(f"{tag.name}  [{tag.id}]")
        print(f"   {tag.filter_description} - created {created}")
