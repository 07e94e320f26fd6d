"""Session filter pipeline.

Composes the boolean content query with structural predicates, saved-tag
scope and manual-selection scope into one deterministic result:

1. Tag scope: union of the active tags' session ids (no restriction if
   no tag is active).
2. Selection scope: the manual selection, when "view only selected" is on.
3. Per-session predicates, in a fixed order; the first failing predicate
   rejects the session:
   duration -> source numbers -> destination numbers -> source speakers ->
   destination speakers -> legal references -> session id -> content ->
   date range -> time-of-day range.

Identity predicates compare resolved identities (see `AliasMap.resolve`),
so merged numbers and names behave as one. The pipeline has no hidden
state and never raises for malformed filter values; bad values are
ignored or reject the session, and the worst outcome is an empty result.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable
from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from loguru import logger

from ..core.types import ActiveFilterSet, LegalCategory, Session
from .query import compile_query
from .speakers import SpeakerExtractor, first_line_speaker

if TYPE_CHECKING:
    from ..identity.aliases import AliasMap
    from ..store.legal import LegalReferenceRegistry
    from ..store.tags import TagStore

Predicate = Callable[[Session], bool]


def duration_to_seconds(duration: Optional[str]) -> int:
    """Convert ``HH:MM:SS`` or ``MM:SS`` to seconds; anything else is 0."""
    if not duration:
        return 0
    try:
        parts = [int(part) for part in duration.strip().split(":")]
    except ValueError:
        return 0
    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    if len(parts) == 2:
        return parts[0] * 60 + parts[1]
    return 0


def parse_session_date(value: Optional[str]) -> Optional[date]:
    """Parse a ``D.M.YYYY`` session date; None if it is not a valid date."""
    if not value:
        return None
    parts = value.strip().split(".")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        return None


def parse_bound_date(value: str | date | None) -> Optional[date]:
    """Parse a date filter bound given as a date, ISO string or ``D.M.YYYY``."""
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return parse_session_date(text)


def is_time_in_range(time_value: Optional[str], start: str, end: str) -> bool:
    """Check a ``HH:MM[:SS]`` time against an ``HH:MM`` range.

    Comparison is lexicographic on the ``HH:MM`` prefix. When ``start`` is
    later than ``end`` the range wraps past midnight (22:00-02:00).
    """
    if not time_value:
        return False
    t = time_value[:5]
    start, end = start[:5], end[:5]
    if start and end:
        if start <= end:
            return start <= t <= end
        return t >= start or t <= end
    if start:
        return t >= start
    if end:
        return t <= end
    return True


def _session_fragments(session_filter: str) -> tuple[str, ...]:
    fragments = (part.strip().lower() for part in session_filter.split(","))
    return tuple(fragment for fragment in fragments if fragment)


class SessionFilter:
    """Per-session conjunction of the active structural predicates.

    Built once per search pass: the content query is compiled and the
    filter lists are frozen into sets up front, so `accepts` does no
    parsing beyond the session's own fields.

    Example:
        >>> session_filter = SessionFilter(ActiveFilterSet(min_duration=60), aliases)
        >>> [s.session_id for s in sessions if session_filter.accepts(s)]
    """

    def __init__(
        self,
        filters: ActiveFilterSet,
        aliases: "AliasMap",
        legal_refs: "LegalReferenceRegistry | None" = None,
        speaker_extractor: SpeakerExtractor = first_line_speaker,
    ):
        """Initialize the filter.

        Args:
            filters: Committed filter inputs.
            aliases: Alias map used to resolve identities before comparison.
            legal_refs: Registry used to resolve legal reference labels.
            speaker_extractor: Fallback speaker discovery from content.
        """
        self.filters = filters
        self._aliases = aliases
        self._legal_refs = legal_refs
        self._speaker_extractor = speaker_extractor
        self._query = compile_query(filters.content)
        self._fragments = _session_fragments(filters.session)
        self._date_start = parse_bound_date(filters.date_start)
        self._date_end = parse_bound_date(filters.date_end)
        self._checks = self._build_checks()

    def accepts(self, session: Session) -> bool:
        """True if the session passes every active predicate."""
        return all(check(session) for check in self._checks)

    def _build_checks(self) -> list[Predicate]:
        f = self.filters
        checks: list[Predicate] = []

        if f.min_duration is not None or f.max_duration is not None:
            checks.append(self._check_duration)
        if f.source_numbers:
            checks.append(self._membership(frozenset(f.source_numbers), lambda s: (s.source_number,)))
        if f.dest_numbers:
            checks.append(self._membership(frozenset(f.dest_numbers), lambda s: (s.destination_number,)))
        if f.source_speakers:
            checks.append(
                self._membership(
                    frozenset(f.source_speakers),
                    lambda s: (s.source_name, s.source_number, self._speaker_extractor(s.content)),
                )
            )
        if f.dest_speakers:
            checks.append(
                self._membership(
                    frozenset(f.dest_speakers),
                    lambda s: (s.destination_name, s.destination_number),
                )
            )
        for category, wanted in (
            (LegalCategory.ARTICLE, f.articles),
            (LegalCategory.FACT, f.facts),
            (LegalCategory.TAG, f.legal_tags),
        ):
            if wanted:
                checks.append(self._legal_membership(category, frozenset(wanted)))
        if self._fragments:
            checks.append(self._check_session_id)
        if not self._query.is_match_all:
            checks.append(lambda s: self._query.evaluate(s.content))
        if self._date_start or self._date_end:
            checks.append(self._check_date)
        if f.time_start or f.time_end:
            checks.append(self._check_time)
        return checks

    def _check_duration(self, session: Session) -> bool:
        if not session.is_audio:
            return False
        seconds = duration_to_seconds(session.duration)
        if self.filters.min_duration is not None and seconds < self.filters.min_duration:
            return False
        if self.filters.max_duration is not None and seconds > self.filters.max_duration:
            return False
        return True

    def _membership(
        self,
        wanted: frozenset[str],
        candidates: Callable[[Session], Iterable[Optional[str]]],
    ) -> Predicate:
        """Accept when any resolved candidate identity is in ``wanted``.

        Missing fields resolve to None and never match.
        """

        def check(session: Session) -> bool:
            for raw in candidates(session):
                resolved = self._aliases.resolve(raw)
                if resolved is not None and resolved in wanted:
                    return True
            return False

        return check

    def _legal_membership(self, category: LegalCategory, wanted: frozenset[str]) -> Predicate:
        def check(session: Session) -> bool:
            if self._legal_refs is None or not session.legal_reference_ids:
                return False
            labels = self._legal_refs.labels_for(session.legal_reference_ids, category)
            return not labels.isdisjoint(wanted)

        return check

    def _check_session_id(self, session: Session) -> bool:
        session_id = session.session_id.lower()
        return any(fragment in session_id for fragment in self._fragments)

    def _check_date(self, session: Session) -> bool:
        session_date = parse_session_date(session.date)
        if session_date is None:
            return True
        if self._date_start and session_date < self._date_start:
            return False
        if self._date_end and session_date > self._date_end:
            return False
        return True

    def _check_time(self, session: Session) -> bool:
        if not session.start_time:
            return True
        return is_time_in_range(session.start_time, self.filters.time_start, self.filters.time_end)


def filter_sessions(
    sessions: Iterable[Session],
    filters: ActiveFilterSet,
    active_tag_ids: Collection[str],
    tag_store: "TagStore",
    manual_selection: Collection[str],
    view_only_selected: bool,
    aliases: "AliasMap",
    legal_refs: "LegalReferenceRegistry | None" = None,
    speaker_extractor: SpeakerExtractor = first_line_speaker,
) -> list[str]:
    """Run the full filter pipeline.

    Args:
        sessions: Sessions in ingestion order.
        filters: Committed filter inputs.
        active_tag_ids: Saved tags whose union scopes the search.
        tag_store: Store the tag ids are looked up in.
        manual_selection: Manually selected session ids.
        view_only_selected: Restrict to ``manual_selection``.
        aliases: Alias map for identity predicates.
        legal_refs: Registry for legal reference predicates.
        speaker_extractor: Fallback speaker discovery from content.

    Returns:
        Ids of the accepted sessions, in input order.
    """
    candidates = list(sessions)

    if active_tag_ids:
        allowed = tag_store.scope(active_tag_ids)
        candidates = [s for s in candidates if s.session_id in allowed]
        logger.debug(f"Tag scope: {len(active_tag_ids)} tags -> {len(candidates)} sessions")

    if view_only_selected:
        selected = set(manual_selection)
        candidates = [s for s in candidates if s.session_id in selected]
        logger.debug(f"Selection scope: {len(candidates)} sessions")

    session_filter = SessionFilter(filters, aliases, legal_refs, speaker_extractor)
    result = [s.session_id for s in candidates if session_filter.accepts(s)]
    logger.debug(f"Filter pipeline: {len(candidates)} candidates -> {len(result)} results")
    return result
