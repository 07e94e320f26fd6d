"""In-memory registries and project persistence for callscope."""

from .legal import LegalReferenceRegistry
from .project import PROJECT_VERSION, ProjectData, load_project, save_project
from .sessions import UNKNOWN_SOURCE_FILE, SessionRepository
from .tags import TagStore, describe_tag_source

__all__ = [
    "LegalReferenceRegistry",
    "PROJECT_VERSION",
    "ProjectData",
    "load_project",
    "save_project",
    "SessionRepository",
    "UNKNOWN_SOURCE_FILE",
    "TagStore",
    "describe_tag_source",
]
