"""Command implementations for the callscope CLI."""

from .files import handle_delete, handle_files
from .identity import handle_alias, handle_identities
from .search import add_search_arguments, handle_search
from .tags import handle_tag

__all__ = [
    "add_search_arguments",
    "handle_alias",
    "handle_delete",
    "handle_files",
    "handle_identities",
    "handle_search",
    "handle_tag",
]
