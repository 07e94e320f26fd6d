"""Tests for saved tag storage."""

import pytest

from callscope.core.exceptions import TagError, TagNotFoundError
from callscope.core.types import SavedTag
from callscope.store.tags import TagStore, describe_tag_source


class TestDescribeTagSource:
    """Tests for describe_tag_source function."""

    def test_filter(self):
        assert describe_tag_source(3, from_selection=False) == "3 items (filter)"

    def test_selection(self):
        assert describe_tag_source(1, from_selection=True) == "1 items (selection)"


class TestTagStoreCreate:
    """Tests for TagStore.create."""

    def test_create(self, tag_store):
        """New tag should carry its name, ids and a generated description."""
        tag = tag_store.create("Chamadas longas", ["S1", "S3"])

        assert tag.name == "Chamadas longas"
        assert tag.session_ids == ("S1", "S3")
        assert tag.filter_description == "2 items (filter)"
        assert tag.timestamp > 0
        assert tag.id
        assert tag_store.get(tag.id) == tag

    def test_from_selection_description(self, tag_store):
        """Tags saved from a selection should say so."""
        tag = tag_store.create("Escolhidas", ["S2"], from_selection=True)

        assert tag.filter_description == "1 items (selection)"

    def test_explicit_description(self, tag_store):
        """A given description should be kept verbatim."""
        tag = tag_store.create("Noite", ["S2"], "22:00-02:00")

        assert tag.filter_description == "22:00-02:00"

    def test_duplicate_ids_dropped(self, tag_store):
        """Repeated session ids should be stored once, in first-seen order."""
        tag = tag_store.create("Dup", ["S2", "S1", "S2"])

        assert tag.session_ids == ("S2", "S1")

    def test_name_stripped(self, tag_store):
        """Surrounding whitespace should be removed from the name."""
        assert tag_store.create("  Rui  ", []).name == "Rui"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_name(self, tag_store, name):
        """Blank names should be rejected."""
        with pytest.raises(TagError):
            tag_store.create(name, ["S1"])

    def test_newest_first(self, tag_store):
        """The most recent tag should be listed first."""
        first = tag_store.create("primeiro", [])
        second = tag_store.create("segundo", [])

        assert [tag.id for tag in tag_store.all()] == [second.id, first.id]
        assert len(tag_store) == 2

    def test_unique_ids(self, tag_store):
        """Each tag should get its own id."""
        ids = {tag_store.create(f"t{i}", []).id for i in range(5)}

        assert len(ids) == 5


class TestTagStoreRename:
    """Tests for TagStore.rename."""

    def test_rename(self, tag_store):
        """Renaming should keep the id and session ids."""
        tag = tag_store.create("velho", ["S1"])

        renamed = tag_store.rename(tag.id, "novo")

        assert renamed.id == tag.id
        assert renamed.session_ids == ("S1",)
        assert tag_store.get(tag.id).name == "novo"

    def test_rename_missing(self, tag_store):
        """Renaming an unknown tag should raise TagNotFoundError."""
        with pytest.raises(TagNotFoundError):
            tag_store.rename("missing", "novo")

    def test_rename_blank(self, tag_store):
        """Renaming to a blank name should raise TagError."""
        tag = tag_store.create("velho", [])

        with pytest.raises(TagError):
            tag_store.rename(tag.id, " ")


class TestTagStoreDelete:
    """Tests for TagStore.delete."""

    def test_delete(self, tag_store):
        """Deleting should remove the tag."""
        tag = tag_store.create("t", [])

        assert tag_store.delete(tag.id) is True
        assert tag_store.get(tag.id) is None
        assert len(tag_store) == 0

    def test_delete_missing(self, tag_store):
        """Deleting an unknown tag should return False."""
        assert tag_store.delete("missing") is False


class TestTagStoreScope:
    """Tests for TagStore.scope and extend."""

    def test_scope_union(self, tag_store):
        """Scope should be the union of the tags' session ids."""
        first = tag_store.create("a", ["S1", "S2"])
        second = tag_store.create("b", ["S2", "S3"])

        assert tag_store.scope([first.id, second.id]) == {"S1", "S2", "S3"}

    def test_scope_ignores_unknown(self, tag_store):
        """Unknown tag ids should add nothing."""
        tag = tag_store.create("a", ["S1"])

        assert tag_store.scope([tag.id, "missing"]) == {"S1"}

    def test_extend_skips_existing(self, tag_store):
        """Restored tags with known ids should be skipped."""
        existing = tag_store.create("a", ["S1"])
        restored = SavedTag(id="t2", name="b", timestamp=1, session_ids=("S2",))

        added = tag_store.extend([existing, restored, restored])

        assert added == 1
        assert [tag.id for tag in tag_store] == [existing.id, "t2"]

    def test_snapshot_unaffected_by_mutation(self, tag_store):
        """A previously taken snapshot should not change."""
        tag_store.create("a", [])
        snapshot = tag_store.all()

        tag_store.create("b", [])

        assert len(snapshot) == 1
