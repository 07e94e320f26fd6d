"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path

from callscope.identity import AliasMap
from callscope.services import Workspace
from callscope.store import LegalReferenceRegistry, TagStore
from tests.fakes import sample_sessions


@pytest.fixture
def sessions():
    """Provide the shared sample session collection."""
    return sample_sessions()


@pytest.fixture
def aliases() -> AliasMap:
    """Provide an empty alias map."""
    return AliasMap()


@pytest.fixture
def tag_store() -> TagStore:
    """Provide an empty tag store."""
    return TagStore()


@pytest.fixture
def legal_refs() -> LegalReferenceRegistry:
    """Provide an empty legal reference registry."""
    return LegalReferenceRegistry()


@pytest.fixture
def workspace(sessions) -> Workspace:
    """Provide a workspace holding the sample sessions."""
    return Workspace(sessions)


@pytest.fixture
def project_path(tmp_path: Path) -> Path:
    """Provide a temporary project file path."""
    return tmp_path / "case" / "project.json"
