"""Legal reference registry."""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import replace

from loguru import logger

from ..core.exceptions import LegalReferenceError, LegalReferenceNotFoundError
from ..core.types import LegalCategory, LegalReference, LegalStatus


class LegalReferenceRegistry:
    """Articles, facts and free-form tags that sessions can be linked to.

    Archived references keep resolving for filtering; archiving only
    hides them from pickers (`all(include_archived=False)`).
    """

    def __init__(self, references: Iterable[LegalReference] = ()) -> None:
        self._refs: dict[str, LegalReference] = {ref.id: ref for ref in references}

    def add(
        self,
        category: LegalCategory,
        label: str,
        description: str | None = None,
    ) -> LegalReference:
        """Register a new reference.

        Raises:
            LegalReferenceError: If the label is blank.
        """
        if not label or not label.strip():
            raise LegalReferenceError("Legal reference label must not be empty")
        ref = LegalReference(
            id=uuid.uuid4().hex,
            category=category,
            label=label.strip(),
            description=description,
        )
        self._refs = {**self._refs, ref.id: ref}
        logger.info(f"Added {category.value} reference {ref.label!r}")
        return ref

    def extend(self, references: Iterable[LegalReference]) -> None:
        """Add restored references; incoming records win on id clashes."""
        self._refs = {**self._refs, **{ref.id: ref for ref in references}}

    def get(self, ref_id: str) -> LegalReference | None:
        return self._refs.get(ref_id)

    def all(self, include_archived: bool = True) -> list[LegalReference]:
        return [ref for ref in self._refs.values() if include_archived or ref.is_active]

    def archive(self, ref_id: str) -> LegalReference:
        return self._set_status(ref_id, LegalStatus.ARCHIVED)

    def restore(self, ref_id: str) -> LegalReference:
        return self._set_status(ref_id, LegalStatus.ACTIVE)

    def remove(self, ref_id: str) -> bool:
        """Remove a reference. Sessions keep the dangling id, which is ignored."""
        if ref_id not in self._refs:
            return False
        self._refs = {key: ref for key, ref in self._refs.items() if key != ref_id}
        return True

    def labels_for(self, ref_ids: Iterable[str], category: LegalCategory) -> set[str]:
        """Labels of the given references within one category.

        Unknown ids are ignored.
        """
        labels = set()
        for ref_id in ref_ids:
            ref = self._refs.get(ref_id)
            if ref is not None and ref.category is category:
                labels.add(ref.label)
        return labels

    def _set_status(self, ref_id: str, status: LegalStatus) -> LegalReference:
        ref = self._refs.get(ref_id)
        if ref is None:
            raise LegalReferenceNotFoundError(ref_id)
        updated = replace(ref, status=status)
        self._refs = {**self._refs, ref_id: updated}
        return updated

    def __len__(self) -> int:
        return len(self._refs)
