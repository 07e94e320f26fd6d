"""Tests for project file persistence."""

import json

import pytest

from callscope.core.exceptions import ProjectFormatError
from callscope.core.types import LegalCategory, LegalReference, SavedTag, SessionKind
from callscope.store.project import PROJECT_VERSION, ProjectData, load_project, save_project
from tests.fakes import make_session


def _write(path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def project(sessions) -> ProjectData:
    return ProjectData(
        sessions=sessions,
        saved_tags=[SavedTag(id="t1", name="Longas", timestamp=1700000000000, session_ids=("S1", "S3"))],
        alias_map={"912345678": "Rui"},
        legal_references=[LegalReference(id="r1", category=LegalCategory.ARTICLE, label="Art. 21")],
    )


class TestSaveProject:
    """Tests for save_project function."""

    def test_creates_parent_directories(self, project_path, project):
        save_project(project_path, project)

        assert project_path.exists()

    def test_camel_case_layout(self, project_path, project):
        """The file should use the documented top-level keys."""
        save_project(project_path, project)
        data = json.loads(project_path.read_text(encoding="utf-8"))

        assert set(data) == {"version", "sessions", "savedTags", "aliasMap", "legalReferences"}
        assert data["version"] == PROJECT_VERSION
        assert data["sessions"][0]["sessionId"] == "S1"
        assert data["savedTags"][0]["sessionIds"] == ["S1", "S3"]

    def test_non_ascii_written_verbatim(self, project_path, project):
        save_project(project_path, project)

        assert "João" in project_path.read_text(encoding="utf-8")

    def test_reload_restores_state(self, project_path, project):
        """Saving and loading should give back equal records."""
        save_project(project_path, project)

        loaded = load_project(project_path)

        assert loaded.sessions == project.sessions
        assert loaded.saved_tags == project.saved_tags
        assert loaded.alias_map == project.alias_map
        assert loaded.legal_references == project.legal_references


class TestLoadProject:
    """Tests for load_project function."""

    def test_legacy_manifest(self, project_path):
        """A bare list should load as sessions only."""
        _write(project_path, [{"sessionId": "A", "type": "SMS", "content": "olá"}])

        loaded = load_project(project_path)

        assert [s.session_id for s in loaded.sessions] == ["A"]
        assert loaded.sessions[0].kind is SessionKind.SMS
        assert loaded.saved_tags == []
        assert loaded.alias_map == {}

    def test_missing_sections_default_empty(self, project_path):
        _write(project_path, {"version": "1.0"})

        loaded = load_project(project_path)

        assert loaded.version == "1.0"
        assert loaded.sessions == []
        assert loaded.legal_references == []

    def test_bad_entries_skipped(self, project_path):
        """Entries that cannot be parsed should be skipped, not fatal."""
        _write(
            project_path,
            {
                "sessions": [{"sessionId": "A"}, {"content": "sem id"}, 5],
                "legalReferences": [
                    {"id": "r1", "category": "ARTICLE", "label": "Art. 1"},
                    {"id": "r2", "category": "unknown", "label": "?"},
                ],
            },
        )

        loaded = load_project(project_path)

        assert [s.session_id for s in loaded.sessions] == ["A"]
        assert [r.id for r in loaded.legal_references] == ["r1"]

    def test_invalid_json(self, project_path):
        project_path.parent.mkdir(parents=True)
        project_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(ProjectFormatError):
            load_project(project_path)

    def test_not_utf8(self, project_path):
        """Bytes that are not UTF-8 should be reported as a format error."""
        project_path.parent.mkdir(parents=True)
        project_path.write_bytes(b'{"x": "\xff\xfe"}')

        with pytest.raises(ProjectFormatError):
            load_project(project_path)

    @pytest.mark.parametrize(
        "data",
        [
            42,
            "text",
            {"sessions": {"sessionId": "A"}},
            {"aliasMap": ["912"]},
        ],
    )
    def test_unexpected_shape(self, project_path, data):
        _write(project_path, data)

        with pytest.raises(ProjectFormatError):
            load_project(project_path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_project(tmp_path / "missing.json")

    def test_same_session_object_equality(self, project_path):
        """Reloaded sessions should compare equal to freshly built ones."""
        session = make_session("A", source_number="912", legal_reference_ids=frozenset({"r2", "r1"}))
        save_project(project_path, ProjectData(sessions=[session]))

        assert load_project(project_path).sessions == [session]
