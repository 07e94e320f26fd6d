"""Saved tag (context) storage."""

from __future__ import annotations

import time
import uuid
from collections.abc import Iterable, Iterator
from dataclasses import replace

from loguru import logger

from ..core.exceptions import TagError, TagNotFoundError
from ..core.types import SavedTag


def describe_tag_source(count: int, from_selection: bool) -> str:
    """Human description of how a tag's session set was produced."""
    origin = "selection" if from_selection else "filter"
    return f"{count} items ({origin})"


class TagStore:
    """In-memory store of saved tags, newest first.

    Every mutation swaps in a new tuple, so a search pass that holds the
    previous `all()` result keeps seeing one consistent snapshot.
    """

    def __init__(self, tags: Iterable[SavedTag] = ()) -> None:
        self._tags: tuple[SavedTag, ...] = tuple(tags)

    def create(
        self,
        name: str,
        session_ids: Iterable[str],
        description: str | None = None,
        *,
        from_selection: bool = False,
    ) -> SavedTag:
        """Create a tag and put it at the front of the store.

        Args:
            name: Display name; must not be blank.
            session_ids: Sessions the tag scopes to. Duplicates are dropped.
            description: How the set was produced. Defaults to an
                item count plus "selection" or "filter".
            from_selection: Whether ids came from a manual selection.

        Returns:
            The new SavedTag.

        Raises:
            TagError: If the name is blank.
        """
        if not name or not name.strip():
            raise TagError("Tag name must not be empty")

        ids = tuple(dict.fromkeys(session_ids))
        tag = SavedTag(
            id=uuid.uuid4().hex,
            name=name.strip(),
            timestamp=int(time.time() * 1000),
            session_ids=ids,
            filter_description=description or describe_tag_source(len(ids), from_selection),
        )
        self._tags = (tag, *self._tags)
        logger.info(f"Created tag {tag.name!r} with {len(ids)} sessions")
        return tag

    def rename(self, tag_id: str, name: str) -> SavedTag:
        """Rename a tag.

        Raises:
            TagError: If the new name is blank.
            TagNotFoundError: If no tag has this id.
        """
        if not name or not name.strip():
            raise TagError("Tag name must not be empty")

        current = self.get(tag_id)
        if current is None:
            raise TagNotFoundError(tag_id)

        renamed = replace(current, name=name.strip())
        self._tags = tuple(renamed if tag.id == tag_id else tag for tag in self._tags)
        logger.info(f"Renamed tag {current.name!r} to {renamed.name!r}")
        return renamed

    def delete(self, tag_id: str) -> bool:
        """Delete a tag. Returns False if it did not exist."""
        remaining = tuple(tag for tag in self._tags if tag.id != tag_id)
        if len(remaining) == len(self._tags):
            return False
        self._tags = remaining
        logger.info(f"Deleted tag {tag_id}")
        return True

    def extend(self, tags: Iterable[SavedTag]) -> int:
        """Append restored tags, skipping ids already present.

        Returns:
            Number of tags added.
        """
        known = {tag.id for tag in self._tags}
        added = []
        for tag in tags:
            if tag.id not in known:
                known.add(tag.id)
                added.append(tag)
        self._tags = (*self._tags, *added)
        return len(added)

    def get(self, tag_id: str) -> SavedTag | None:
        for tag in self._tags:
            if tag.id == tag_id:
                return tag
        return None

    def scope(self, tag_ids: Iterable[str]) -> set[str]:
        """Union of the session ids of the given tags. Unknown ids add nothing."""
        wanted = set(tag_ids)
        allowed: set[str] = set()
        for tag in self._tags:
            if tag.id in wanted:
                allowed.update(tag.session_ids)
        return allowed

    def all(self) -> tuple[SavedTag, ...]:
        return self._tags

    def __iter__(self) -> Iterator[SavedTag]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)
