"""Project file persistence.

A project file bundles everything needed to restore a workspace:

    {
        "version": "1.1",
        "sessions": [{"sessionId": "...", "date": "01.02.2024", ...}],
        "savedTags": [{"id": "...", "name": "...", "sessionIds": [...]}],
        "aliasMap": {"912345678": "Rui"},
        "legalReferences": [{"id": "...", "category": "article", ...}]
    }

A bare JSON list is read as a legacy manifest holding sessions only.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, TypeVar

from loguru import logger

from ..core.exceptions import ProjectFormatError
from ..core.types import LegalReference, SavedTag, Session

PROJECT_VERSION = "1.1"

T = TypeVar("T")


@dataclass
class ProjectData:
    """Complete persisted workspace state."""

    version: str = PROJECT_VERSION
    sessions: list[Session] = field(default_factory=list)
    saved_tags: list[SavedTag] = field(default_factory=list)
    alias_map: dict[str, str] = field(default_factory=dict)
    legal_references: list[LegalReference] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "sessions": [session.to_dict() for session in self.sessions],
            "savedTags": [tag.to_dict() for tag in self.saved_tags],
            "aliasMap": dict(self.alias_map),
            "legalReferences": [ref.to_dict() for ref in self.legal_references],
        }


def _parse_entries(
    items: Any, parser: Callable[[dict[str, Any]], T], kind: str, path: Path
) -> list[T]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ProjectFormatError(str(path), f"'{kind}' must be a list")

    parsed = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            logger.warning(f"Skipping {kind}[{index}] in {path}: not an object")
            continue
        try:
            parsed.append(parser(item))
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping {kind}[{index}] in {path}: {e}")
    return parsed


def load_project(path: Path | str) -> ProjectData:
    """Load a project (or legacy manifest) file.

    Entries that cannot be parsed are logged and skipped.

    Args:
        path: Path to project.json or manifest.json.

    Returns:
        ProjectData.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ProjectFormatError: If the file is not JSON or has an unexpected shape.
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except UnicodeDecodeError as e:
            raise ProjectFormatError(str(path), f"not UTF-8 text ({e})") from e
        except json.JSONDecodeError as e:
            raise ProjectFormatError(str(path), f"invalid JSON ({e})") from e

    if isinstance(data, list):
        sessions = _parse_entries(data, Session.from_dict, "sessions", path)
        logger.info(f"Loaded manifest {path}: {len(sessions)} sessions")
        return ProjectData(sessions=sessions)

    if not isinstance(data, dict):
        raise ProjectFormatError(str(path), "expected an object or a list of sessions")

    alias_map = data.get("aliasMap") or {}
    if not isinstance(alias_map, dict):
        raise ProjectFormatError(str(path), "'aliasMap' must be an object")

    project = ProjectData(
        version=str(data.get("version") or PROJECT_VERSION),
        sessions=_parse_entries(data.get("sessions"), Session.from_dict, "sessions", path),
        saved_tags=_parse_entries(data.get("savedTags"), SavedTag.from_dict, "savedTags", path),
        alias_map={str(k): str(v) for k, v in alias_map.items()},
        legal_references=_parse_entries(
            data.get("legalReferences"), LegalReference.from_dict, "legalReferences", path
        ),
    )
    logger.info(
        f"Loaded project {path}: {len(project.sessions)} sessions, "
        f"{len(project.saved_tags)} tags, {len(project.alias_map)} aliases"
    )
    return project


def save_project(path: Path | str, project: ProjectData) -> None:
    """Write a project file, creating parent directories as needed.

    Args:
        path: Destination path.
        project: State to persist.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(project.to_dict(), f, ensure_ascii=False, indent=2)
    logger.info(f"Saved project {path}: {len(project.sessions)} sessions")
