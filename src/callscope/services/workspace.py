"""Workspace: the session-management context that owns all mutable state."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from loguru import logger

from ..core.exceptions import LegalReferenceNotFoundError
from ..core.types import (
    ActiveFilterSet,
    IdentityCatalog,
    LegalReference,
    SavedTag,
    Session,
    SortOption,
    SourceFileSummary,
)
from ..identity.aliases import AliasMap
from ..search.filters import filter_sessions
from ..search.sorting import sort_sessions
from ..search.speakers import SpeakerExtractor, first_line_speaker, iter_content_speakers
from ..store.legal import LegalReferenceRegistry
from ..store.project import ProjectData, load_project, save_project
from ..store.sessions import UNKNOWN_SOURCE_FILE, SessionRepository
from ..store.tags import TagStore

MISSING_IDENTITY_LABEL = "N/D"


class Workspace:
    """Owns the session collection, alias map, tags and search state.

    The workspace is the single writer for every registry. Search takes
    its inputs from the workspace at call time, so a search always sees
    one consistent snapshot, and the most recently committed filter set
    wins.

    Example:

        workspace = Workspace.from_project("case/project.json")
        ids = workspace.search(ActiveFilterSet(content="joão -maria", min_duration=60))
        workspace.merge_alias(["912345678", "+351912345678"], "Rui")
        tag = workspace.create_tag("Rui, long calls")
        workspace.save("case/project.json")

    Attributes:
        sessions: Session collection.
        aliases: Identity alias map.
        tags: Saved tag store.
        legal_refs: Legal reference registry.
        filters: Committed filter set.
        active_tag_ids: Tags currently scoping search.
        manual_selection: Manually selected session ids.
        view_only_selected: Restrict search to the manual selection.
        sort: Ordering applied to search results.
    """

    def __init__(
        self,
        sessions: Iterable[Session] = (),
        aliases: AliasMap | None = None,
        tags: TagStore | None = None,
        legal_refs: LegalReferenceRegistry | None = None,
        sort: SortOption = SortOption.DATE_DESC,
        speaker_extractor: SpeakerExtractor = first_line_speaker,
    ):
        self.sessions = SessionRepository(sessions)
        self.aliases = aliases or AliasMap()
        self.tags = tags or TagStore()
        self.legal_refs = legal_refs or LegalReferenceRegistry()
        self.speaker_extractor = speaker_extractor

        self.filters = ActiveFilterSet()
        self.active_tag_ids: tuple[str, ...] = ()
        self.manual_selection: frozenset[str] = frozenset()
        self.view_only_selected = False
        self.sort = sort

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        filters: ActiveFilterSet | None = None,
        active_tag_ids: Iterable[str] | None = None,
        view_only_selected: bool | None = None,
        sort: SortOption | None = None,
    ) -> list[str]:
        """Commit any given search inputs, then filter and sort.

        Arguments left as None keep their committed values.

        Args:
            filters: New filter set to commit.
            active_tag_ids: Tags to scope by.
            view_only_selected: Restrict to the manual selection.
            sort: Ordering to apply.

        Returns:
            Ordered ids of the matching sessions.
        """
        if filters is not None:
            self.filters = filters
        if active_tag_ids is not None:
            self.set_active_tags(active_tag_ids)
        if view_only_selected is not None:
            self.view_only_selected = view_only_selected
        if sort is not None:
            self.sort = sort

        return [session.session_id for session in self.search_sessions()]

    def search_sessions(self) -> list[Session]:
        """Run the committed search and return the ordered sessions."""
        snapshot = self.sessions.all()
        matched = set(
            filter_sessions(
                snapshot,
                self.filters,
                self.active_tag_ids,
                self.tags,
                self.manual_selection,
                self.view_only_selected,
                self.aliases,
                self.legal_refs,
                self.speaker_extractor,
            )
        )
        filtered = [session for session in snapshot if session.session_id in matched]
        results = sort_sessions(filtered, self.sort, self.aliases)
        logger.debug(f"Search returned {len(results)} of {len(snapshot)} sessions")
        return results

    def clear_filters(self) -> None:
        """Reset filters, selection, view-only mode and active tags."""
        self.filters = ActiveFilterSet()
        self.manual_selection = frozenset()
        self.view_only_selected = False
        self.active_tag_ids = ()

    # ------------------------------------------------------------------
    # Identities
    # ------------------------------------------------------------------

    def resolve(self, raw: str | None) -> str | None:
        """Canonical identity for a raw identifier (None if empty)."""
        return self.aliases.resolve(raw)

    def merge_alias(self, raw_ids: Iterable[str], display_name: str) -> dict[str, str]:
        """Unify raw identifiers under one display name.

        Returns:
            Updated alias mapping, for persistence.

        Raises:
            AliasError: If the display name is blank or no raw id is given.
        """
        return self.aliases.merge(raw_ids, display_name)

    def display_label(self, number: str | None, name: str | None) -> str:
        """Label for one end of a session: name, else number, else a placeholder."""
        return self.resolve(name) or self.resolve(number) or MISSING_IDENTITY_LABEL

    def identity_catalog(self) -> IdentityCatalog:
        """Resolved numbers and speakers available for filtering.

        Speakers include names discovered at the start of any content line.
        Raw identities are the un-aliased values behind both lists.
        """
        numbers: set[str] = set()
        speakers: set[str] = set()
        raw: set[str] = set()

        def add(value: str | None, bucket: set[str]) -> None:
            resolved = self.resolve(value)
            if value and resolved:
                raw.add(value)
                bucket.add(resolved)

        for session in self.sessions:
            for number in (session.target, session.source_number, session.destination_number):
                add(number, numbers)
            for name in (session.source_name, session.destination_name):
                add(name, speakers)
            for name in iter_content_speakers(session.content):
                add(name, speakers)

        return IdentityCatalog(
            numbers=sorted(numbers),
            speakers=sorted(speakers),
            raw_identities=sorted(raw),
        )

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------

    def create_tag(self, name: str, session_ids: Iterable[str] | None = None) -> SavedTag:
        """Save a tag.

        Without explicit ids, the tag captures the manual selection if there
        is one, otherwise the current search result.

        Raises:
            TagError: If the name is blank.
        """
        if session_ids is not None:
            return self.tags.create(name, session_ids)
        if self.manual_selection:
            ordered = [s.session_id for s in self.sessions if s.session_id in self.manual_selection]
            return self.tags.create(name, ordered, from_selection=True)
        return self.tags.create(name, self.search())

    def rename_tag(self, tag_id: str, name: str) -> SavedTag:
        """Rename a tag.

        Raises:
            TagError: If the name is blank.
            TagNotFoundError: If the tag does not exist.
        """
        return self.tags.rename(tag_id, name)

    def delete_tag(self, tag_id: str) -> bool:
        """Delete a tag and drop it from the active tags."""
        self.active_tag_ids = tuple(t for t in self.active_tag_ids if t != tag_id)
        return self.tags.delete(tag_id)

    def set_active_tags(self, tag_ids: Iterable[str]) -> None:
        self.active_tag_ids = tuple(dict.fromkeys(tag_ids))

    def toggle_tag(self, tag_id: str) -> bool:
        """Activate or deactivate a tag. Returns True if it is now active."""
        if tag_id in self.active_tag_ids:
            self.active_tag_ids = tuple(t for t in self.active_tag_ids if t != tag_id)
            return False
        self.active_tag_ids = (*self.active_tag_ids, tag_id)
        return True

    # ------------------------------------------------------------------
    # Manual selection
    # ------------------------------------------------------------------

    def select(self, session_ids: Iterable[str]) -> None:
        self.manual_selection = self.manual_selection | set(session_ids)

    def deselect(self, session_ids: Iterable[str]) -> None:
        self.manual_selection = self.manual_selection - set(session_ids)

    def toggle_selection(self, session_id: str) -> bool:
        """Flip one session's selection. Returns True if it is now selected."""
        if session_id in self.manual_selection:
            self.deselect([session_id])
            return False
        self.select([session_id])
        return True

    def select_all(self, session_ids: Iterable[str] | None = None) -> None:
        """Select the given ids, or every session in the current result."""
        self.manual_selection = frozenset(self.search() if session_ids is None else session_ids)

    def clear_selection(self) -> None:
        self.manual_selection = frozenset()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def delete_sessions(self, session_ids: Iterable[str]) -> int:
        """Delete sessions by id and drop them from the selection."""
        ids = set(session_ids)
        removed = self.sessions.delete(ids)
        self.deselect(ids)
        return removed

    def delete_source_files(self, file_names: Iterable[str]) -> int:
        """Delete every session from the given source files."""
        names = set(file_names)
        doomed = {
            s.session_id for s in self.sessions
            if (s.source_file_name or UNKNOWN_SOURCE_FILE) in names
        }
        removed = self.sessions.delete_source_files(names)
        self.deselect(doomed)
        return removed

    def source_files(self) -> list[SourceFileSummary]:
        return self.sessions.source_files()

    def link_legal_reference(self, session_id: str, ref_id: str) -> Session:
        """Link a session to a registered legal reference.

        Raises:
            LegalReferenceNotFoundError: If the reference is not registered.
            SessionNotFoundError: If the session does not exist.
        """
        if self.legal_refs.get(ref_id) is None:
            raise LegalReferenceNotFoundError(ref_id)
        return self.sessions.link_legal_reference(session_id, ref_id)

    def unlink_legal_reference(self, session_id: str, ref_id: str) -> Session:
        return self.sessions.unlink_legal_reference(session_id, ref_id)

    def remove_legal_reference(self, ref_id: str) -> int:
        """Remove a legal reference and detach it from every session.

        Returns:
            Number of sessions that were linked to it.

        Raises:
            LegalReferenceNotFoundError: If the reference is not registered.
        """
        if not self.legal_refs.remove(ref_id):
            raise LegalReferenceNotFoundError(ref_id)
        unlinked = self.sessions.unlink_everywhere(ref_id)
        logger.info(f"Removed legal reference {ref_id} from {unlinked} sessions")
        return unlinked

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def restore(self, project: ProjectData) -> None:
        """Merge a loaded project into the workspace.

        Sessions and tags are appended (same-id sessions are replaced),
        aliases are overlaid with incoming entries winning, and legal
        references are added.
        """
        added = self.sessions.add_many(project.sessions)
        tags_added = self.tags.extend(project.saved_tags)
        self.aliases.update(project.alias_map)
        self.legal_refs.extend(project.legal_references)
        logger.info(
            f"Restored project: {added} new sessions, {tags_added} tags, "
            f"{len(self.aliases)} aliases"
        )

    def snapshot(self) -> ProjectData:
        """Current state as persistable project data."""
        references: list[LegalReference] = self.legal_refs.all()
        return ProjectData(
            sessions=self.sessions.all(),
            saved_tags=list(self.tags.all()),
            alias_map=self.aliases.as_dict(),
            legal_references=references,
        )

    @classmethod
    def from_project(cls, path: Path | str, **kwargs) -> "Workspace":
        """Create a workspace from a project file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ProjectFormatError: If the file is malformed.
        """
        workspace = cls(**kwargs)
        workspace.restore(load_project(path))
        return workspace

    def save(self, path: Path | str) -> None:
        save_project(path, self.snapshot())
