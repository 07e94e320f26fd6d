"""Identity commands for the callscope CLI."""

from ...core.config import Config
from ...identity import is_numeric_identity
from .project import open_workspace, save_workspace


def handle_identities(args, config: Config) -> None:
    """List identities available for filtering.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    workspace = open_workspace(config)
    catalog = workspace.identity_catalog()

    if args.raw:
        values = catalog.raw_identities
        if args.numbers:
            values = [v for v in values if is_numeric_identity(v)]
        elif args.names:
            values = [v for v in values if not is_numeric_identity(v)]
        for value in values:
            canonical = workspace.aliases.get_canonical(value)
            print(f"{value} -> {canonical}" if canonical else value)
        return

    if not args.names:
        print(f"Numbers ({len(catalog.numbers)})")
        for number in catalog.numbers:
            print(f"  {number}")
    if not args.numbers:
        print(f"Speakers ({len(catalog.speakers)})")
        for speaker in catalog.speakers:
            print(f"  {speaker}")


def handle_alias(args, config: Config) -> None:
    """Merge raw identities under one display name.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    workspace = open_workspace(config)
    workspace.merge_alias(args.raw, args.display)
    save_workspace(workspace, config)
    print(f"Unified {len(set(args.raw))} identities as '{args.display.strip()}'")
