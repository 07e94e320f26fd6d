"""Search command for the callscope CLI.

`callscope search` runs the full filter pipeline over a project:
a boolean/fuzzy content query plus structural filters, optionally
scoped by saved tags, and can save the result as a new tag.
"""

from ...core.config import Config
from ...core.types import ActiveFilterSet, Session, SortOption
from ...services import Workspace
from .project import open_workspace, save_workspace
from .tags import resolve_tag_id


def add_search_arguments(parser) -> None:
    """Add arguments for the search command.

    Args:
        parser: Argument parser for the command.
    """
    parser.add_argument(
        "query",
        nargs="?",
        default="",
        help='Content query, e.g. \'"porto de lisboa" AND (carro OR mota) -maria\'',
    )
    parser.add_argument("--session", default="", help="Comma-separated session id fragments")
    parser.add_argument("--date-start", help="Earliest date (YYYY-MM-DD or DD.MM.YYYY)")
    parser.add_argument("--date-end", help="Latest date (YYYY-MM-DD or DD.MM.YYYY)")
    parser.add_argument("--time-start", default="", help="Earliest start time (HH:MM)")
    parser.add_argument("--time-end", default="", help="Latest start time (HH:MM); wraps midnight if earlier than --time-start")
    parser.add_argument("--min-duration", type=int, help="Minimum duration in seconds (audio only)")
    parser.add_argument("--max-duration", type=int, help="Maximum duration in seconds (audio only)")
    parser.add_argument("--source-number", action="append", default=[], help="Source number (repeatable)")
    parser.add_argument("--dest-number", action="append", default=[], help="Destination number (repeatable)")
    parser.add_argument("--source-speaker", action="append", default=[], help="Source speaker (repeatable)")
    parser.add_argument("--dest-speaker", action="append", default=[], help="Destination speaker (repeatable)")
    parser.add_argument("--article", action="append", default=[], help="Legal article label (repeatable)")
    parser.add_argument("--fact", action="append", default=[], help="Legal fact label (repeatable)")
    parser.add_argument("--legal-tag", action="append", default=[], help="Legal tag label (repeatable)")
    parser.add_argument("--tag", action="append", default=[], help="Scope to a saved tag, by id or name (repeatable)")
    parser.add_argument("--only", action="append", default=[], help="Restrict to these session ids (repeatable)")
    parser.add_argument(
        "--sort",
        choices=[option.value for option in SortOption],
        help="Result ordering (default from config)",
    )
    parser.add_argument("-l", "--limit", type=int, help="Maximum results to print (default from config)")
    parser.add_argument("--save-tag", metavar="NAME", help="Save the full result as a new tag")


def build_filters(args) -> ActiveFilterSet:
    """Build the filter set from parsed arguments."""
    return ActiveFilterSet(
        session=args.session,
        content=args.query,
        date_start=args.date_start,
        date_end=args.date_end,
        time_start=args.time_start,
        time_end=args.time_end,
        min_duration=args.min_duration,
        max_duration=args.max_duration,
        source_numbers=tuple(args.source_number),
        dest_numbers=tuple(args.dest_number),
        source_speakers=tuple(args.source_speaker),
        dest_speakers=tuple(args.dest_speaker),
        articles=tuple(args.article),
        facts=tuple(args.fact),
        legal_tags=tuple(args.legal_tag),
    )


def handle_search(args, config: Config) -> None:
    """Handle search command.

    Args:
        args: Parsed command arguments.
        config: Application configuration.
    """
    workspace = open_workspace(config)

    if args.only:
        workspace.select(args.only)

    ids = workspace.search(
        filters=build_filters(args),
        active_tag_ids=[resolve_tag_id(workspace, tag) for tag in args.tag],
        view_only_selected=bool(args.only),
        sort=SortOption(args.sort) if args.sort else None,
    )

    limit = args.limit or config.search.default_limit
    sessions = [workspace.sessions.get(session_id) for session_id in ids]
    _print_search_results(workspace, sessions, limit)

    if args.save_tag:
        workspace.clear_selection()
        tag = workspace.create_tag(args.save_tag, ids)
        save_workspace(workspace, config)
        print(f"\nSaved tag '{tag.name}' ({tag.id}): {tag.filter_description}")


def _print_search_results(workspace: Workspace, sessions: list[Session], limit: int) -> None:
    """Print search results in a formatted way.

    Args:
        workspace: Workspace used to resolve identity labels.
        sessions: Ordered matching sessions.
        limit: Maximum number of sessions to print.
    """
    print(f"\nSearch Results ({len(sessions)})")
    print("=" * 70)

    if not sessions:
        print("No results found.")
        return

    for rank, session in enumerate(sessions[:limit], 1):
        timing = " | ".join(
            part
            for part in (
                session.start_time and f"start {session.start_time}",
                session.duration and f"duration {session.duration}",
            )
            if part
        )
        source = workspace.display_label(session.source_number, session.source_name)
        dest = workspace.display_label(session.destination_number, session.destination_name)

        print(f"{rank}. {session.session_id} [{session.kind.value}] {session.date} {timing}".rstrip())
        print(f"   {source} -> {dest}")
        print(f"   File: {session.source_file_name or 'Unknown'}")
        print()

    if len(sessions) > limit:
        print(f"... {len(sessions) - limit} more (use --limit to show more)")
