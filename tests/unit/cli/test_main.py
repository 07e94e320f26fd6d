"""Tests for the callscope command line interface."""

import sys

import pytest
from loguru import logger

from callscope.cli.main import create_parser, main
from callscope.services import Workspace


@pytest.fixture(autouse=True)
def isolated(monkeypatch):
    """Keep host configuration out, and restore logging afterwards."""
    for name in ["CALLSCOPE_PROJECT", "CALLSCOPE_LOG_LEVEL", "CALLSCOPE_SORT", "CALLSCOPE_LIMIT"]:
        monkeypatch.delenv(name, raising=False)
    yield
    logger.remove()
    logger.add(sys.__stderr__, level="WARNING")


@pytest.fixture
def saved_project(workspace, project_path):
    """Project file holding the sample sessions."""
    workspace.save(project_path)
    return project_path


def run_cli(monkeypatch, *argv) -> int:
    """Run main() with the given arguments and return the exit code."""
    monkeypatch.setattr(sys, "argv", ["callscope", *argv])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


class TestParser:
    """Tests for create_parser."""

    def test_search_defaults(self):
        args = create_parser().parse_args(["search"])

        assert args.command == "search"
        assert args.query == ""
        assert args.source_number == []
        assert args.sort is None

    def test_repeatable_filters(self):
        args = create_parser().parse_args(
            ["search", "joão", "--dest-number", "9100", "--dest-number", "9200", "--sort", "duration_desc"]
        )

        assert args.query == "joão"
        assert args.dest_number == ["9100", "9200"]
        assert args.sort == "duration_desc"

    def test_identity_kind_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["identities", "--numbers", "--names"])


class TestMain:
    """Tests for main() dispatch and exit codes."""

    def test_no_command_prints_help(self, monkeypatch, capsys):
        assert run_cli(monkeypatch) == 0
        assert "usage: callscope" in capsys.readouterr().out

    def test_missing_project(self, monkeypatch, capsys, tmp_path):
        code = run_cli(monkeypatch, "-p", str(tmp_path / "missing.json"), "search")

        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_invalid_config(self, monkeypatch, capsys, tmp_path, saved_project):
        config = tmp_path / "bad.yaml"
        config.write_text("search: fast\n", encoding="utf-8")

        code = run_cli(monkeypatch, "-c", str(config), "-p", str(saved_project), "search")

        assert code == 1
        assert "Error:" in capsys.readouterr().err


class TestSearchCommand:
    """Tests for the search command."""

    def test_lists_results(self, monkeypatch, capsys, saved_project):
        assert run_cli(monkeypatch, "-p", str(saved_project), "search") == 0

        out = capsys.readouterr().out
        assert "Search Results (3)" in out
        assert "1. S2 [SMS] 04.02.2024 start 23:40:00" in out
        assert "   Rui -> Maria" in out
        assert "   File: outro.pdf" in out

    def test_filters(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "search", "--min-duration", "60", "--dest-number", "9100")

        out = capsys.readouterr().out
        assert "Search Results (1)" in out
        assert "1. S1 [AUDIO]" in out

    def test_content_query(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "search", "joão -maria")

        out = capsys.readouterr().out
        assert "Search Results (1)" in out
        assert "1. S3 " in out

    def test_no_results(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "search", "--session", "nope")

        assert "No results found." in capsys.readouterr().out

    def test_limit(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "search", "--limit", "1")

        assert "... 2 more" in capsys.readouterr().out

    def test_sort(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "search", "--sort", "duration_desc")

        assert "1. S3 [AUDIO]" in capsys.readouterr().out

    def test_only(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "search", "--only", "S2")

        out = capsys.readouterr().out
        assert "Search Results (1)" in out
        assert "1. S2 [SMS]" in out

    def test_save_tag(self, monkeypatch, capsys, saved_project):
        code = run_cli(monkeypatch, "-p", str(saved_project), "search", "--min-duration", "60", "--save-tag", "Longas")

        assert code == 0
        assert "Saved tag 'Longas'" in capsys.readouterr().out
        tags = Workspace.from_project(saved_project).tags.all()
        assert [(tag.name, tag.session_ids) for tag in tags] == [("Longas", ("S1", "S3"))]

    def test_scope_by_tag_name(self, monkeypatch, capsys, workspace, project_path):
        workspace.create_tag("Noite", ["S2"])
        workspace.save(project_path)

        run_cli(monkeypatch, "-p", str(project_path), "search", "--tag", "noite")

        assert "Search Results (1)" in capsys.readouterr().out

    def test_unknown_tag(self, monkeypatch, capsys, saved_project):
        code = run_cli(monkeypatch, "-p", str(saved_project), "search", "--tag", "missing")

        assert code == 1
        assert "Tag not found: missing" in capsys.readouterr().err


class TestIdentityCommands:
    """Tests for identities and alias commands."""

    def test_identities(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "identities")

        out = capsys.readouterr().out
        assert "Numbers (5)" in out
        assert "Speakers (4)" in out

    def test_names_only(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "identities", "--names")

        out = capsys.readouterr().out
        assert "Numbers" not in out
        assert "  Pedro" in out

    def test_alias_persists(self, monkeypatch, capsys, saved_project):
        code = run_cli(monkeypatch, "-p", str(saved_project), "alias", "Rui", "912345678", "+351 912 345 678")

        assert code == 0
        assert "Unified 2 identities as 'Rui'" in capsys.readouterr().out
        assert Workspace.from_project(saved_project).resolve("+351 912 345 678") == "Rui"

    def test_raw_identities(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "alias", "Rui", "912345678")
        capsys.readouterr()

        run_cli(monkeypatch, "-p", str(saved_project), "identities", "--raw", "--numbers")

        out = capsys.readouterr().out
        assert "912345678 -> Rui" in out
        assert "Pedro" not in out


class TestTagCommands:
    """Tests for tag subcommands."""

    def test_list_empty(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "tag", "list")

        assert "No saved tags." in capsys.readouterr().out

    def test_rename_and_delete(self, monkeypatch, capsys, workspace, project_path):
        tag = workspace.create_tag("Noite", ["S2"])
        workspace.save(project_path)

        run_cli(monkeypatch, "-p", str(project_path), "tag", "rename", "noite", "Madrugada")
        run_cli(monkeypatch, "-p", str(project_path), "tag", "list")

        out = capsys.readouterr().out
        assert "Saved Tags (1)" in out
        assert f"Madrugada  [{tag.id}]" in out

        run_cli(monkeypatch, "-p", str(project_path), "tag", "delete", tag.id)

        assert len(Workspace.from_project(project_path).tags) == 0


class TestFileCommands:
    """Tests for files and delete commands."""

    def test_list_files(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "files", "list")

        out = capsys.readouterr().out
        assert "escutas.pdf  (2 sessions)" in out
        assert "outro.pdf  (1 sessions)" in out

    def test_delete_file(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "files", "delete", "outro.pdf")

        assert "Deleted 1 sessions from 1 files" in capsys.readouterr().out
        assert len(Workspace.from_project(saved_project).sessions) == 2

    def test_delete_sessions(self, monkeypatch, capsys, saved_project):
        run_cli(monkeypatch, "-p", str(saved_project), "delete", "S1", "S2")

        assert "Deleted 2 sessions" in capsys.readouterr().out
        assert [s.session_id for s in Workspace.from_project(saved_project).sessions] == ["S3"]
