"""Ordering of filtered sessions."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date
from typing import TYPE_CHECKING, Any

from loguru import logger

from ..core.types import Session, SortOption
from .filters import duration_to_seconds, parse_session_date
from .text import normalize_text

if TYPE_CHECKING:
    from ..identity.aliases import AliasMap


def _date_key(session: Session) -> tuple[date, str]:
    return (parse_session_date(session.date) or date.min, session.start_time or "")


def _text_key(*values: str | None) -> str:
    """First non-empty value, normalized for case/diacritic-insensitive ordering."""
    for value in values:
        if value:
            return normalize_text(value)
    return ""


def sort_key(option: SortOption, aliases: "AliasMap") -> tuple[Callable[[Session], Any], bool]:
    """Key function and reverse flag for a sort option.

    Args:
        option: Selected ordering.
        aliases: Alias map; number and name keys compare resolved identities.

    Returns:
        Tuple of (key function, reverse).
    """
    resolve = aliases.resolve
    if option is SortOption.DATE_DESC:
        return _date_key, True
    if option is SortOption.DATE_ASC:
        return _date_key, False
    if option is SortOption.DURATION_DESC:
        return (lambda s: duration_to_seconds(s.duration)), True
    if option is SortOption.SOURCE_NUMBER:
        return (lambda s: _text_key(resolve(s.source_number))), False
    if option is SortOption.DEST_NUMBER:
        return (lambda s: _text_key(resolve(s.destination_number))), False
    if option is SortOption.SOURCE_NAME:
        return (lambda s: _text_key(resolve(s.source_name), resolve(s.source_number))), False
    if option is SortOption.DEST_NAME:
        return (lambda s: _text_key(resolve(s.destination_name), resolve(s.destination_number))), False
    raise ValueError(f"Unknown sort option: {option!r}")


def sort_sessions(
    sessions: Iterable[Session],
    option: SortOption,
    aliases: "AliasMap",
) -> list[Session]:
    """Sort sessions by one key.

    The sort is stable, including for descending keys, so sessions with
    equal keys keep their filter-pipeline order.

    Args:
        sessions: Filtered sessions.
        option: Selected ordering.
        aliases: Alias map for identity keys.

    Returns:
        New sorted list.
    """
    key, reverse = sort_key(option, aliases)
    ordered = sorted(sessions, key=key, reverse=reverse)
    logger.debug(f"Sorted {len(ordered)} sessions by {option.value}")
    return ordered
