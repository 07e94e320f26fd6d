"""Session collection storage."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import replace

from loguru import logger

from ..core.exceptions import SessionNotFoundError
from ..core.types import Session, SourceFileSummary

UNKNOWN_SOURCE_FILE = "Unknown"


class SessionRepository:
    """Ordered in-memory session collection with a single writer.

    Order is ingestion order and is what the filter pipeline preserves
    for equal sort keys. Mutations rebuild the list and swap it in whole.
    """

    def __init__(self, sessions: Iterable[Session] = ()) -> None:
        self._sessions: list[Session] = []
        self.add_many(sessions)

    def add_many(self, sessions: Iterable[Session]) -> int:
        """Append sessions, replacing in place any with an existing id.

        Args:
            sessions: Sessions to add.

        Returns:
            Number of new sessions (replacements are not counted).
        """
        updated = list(self._sessions)
        positions = {session.session_id: i for i, session in enumerate(updated)}
        added = 0
        for session in sessions:
            position = positions.get(session.session_id)
            if position is None:
                positions[session.session_id] = len(updated)
                updated.append(session)
                added += 1
            else:
                updated[position] = session
        self._sessions = updated
        if added:
            logger.debug(f"Added {added} sessions ({len(updated)} total)")
        return added

    def get(self, session_id: str) -> Session | None:
        for session in self._sessions:
            if session.session_id == session_id:
                return session
        return None

    def all(self) -> list[Session]:
        """Snapshot of the collection in ingestion order."""
        return list(self._sessions)

    def delete(self, session_ids: Iterable[str]) -> int:
        """Delete sessions by id.

        Returns:
            Number of sessions removed.
        """
        doomed = set(session_ids)
        if not doomed:
            return 0
        return self._remove(lambda s: s.session_id in doomed, f"{len(doomed)} ids")

    def delete_source_files(self, file_names: Iterable[str]) -> int:
        """Delete every session that came from one of the given source files.

        Returns:
            Number of sessions removed.
        """
        doomed = set(file_names)
        if not doomed:
            return 0
        return self._remove(
            lambda s: (s.source_file_name or UNKNOWN_SOURCE_FILE) in doomed,
            f"{len(doomed)} source files",
        )

    def _remove(self, predicate, label: str) -> int:
        kept = [session for session in self._sessions if not predicate(session)]
        removed = len(self._sessions) - len(kept)
        self._sessions = kept
        logger.info(f"Deleted {removed} sessions matching {label}")
        return removed

    def source_files(self) -> list[SourceFileSummary]:
        """Loaded source files with their session counts, in first-seen order."""
        counts: dict[str, int] = {}
        for session in self._sessions:
            name = session.source_file_name or UNKNOWN_SOURCE_FILE
            counts[name] = counts.get(name, 0) + 1
        return [SourceFileSummary(name=name, count=count) for name, count in counts.items()]

    def link_legal_reference(self, session_id: str, ref_id: str) -> Session:
        """Attach a legal reference to a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        session = self._require(session_id)
        return self._swap(session, replace(session, legal_reference_ids=session.legal_reference_ids | {ref_id}))

    def unlink_legal_reference(self, session_id: str, ref_id: str) -> Session:
        """Detach a legal reference from a session.

        Raises:
            SessionNotFoundError: If the session does not exist.
        """
        session = self._require(session_id)
        return self._swap(session, replace(session, legal_reference_ids=session.legal_reference_ids - {ref_id}))

    def unlink_everywhere(self, ref_id: str) -> int:
        """Detach a legal reference from every session that has it.

        Returns:
            Number of sessions changed.
        """
        changed = 0
        updated = []
        for session in self._sessions:
            if ref_id in session.legal_reference_ids:
                session = replace(session, legal_reference_ids=session.legal_reference_ids - {ref_id})
                changed += 1
            updated.append(session)
        self._sessions = updated
        return changed

    def _require(self, session_id: str) -> Session:
        session = self.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _swap(self, old: Session, new: Session) -> Session:
        self._sessions = [new if session is old else session for session in self._sessions]
        return new

    def __iter__(self) -> Iterator[Session]:
        return iter(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
