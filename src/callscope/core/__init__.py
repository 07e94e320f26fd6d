"""Core types, configuration and errors for callscope."""

from .config import Config, SearchConfig, load_config
from .exceptions import (
    AliasError,
    CallscopeError,
    ConfigError,
    LegalReferenceError,
    LegalReferenceNotFoundError,
    ProjectError,
    ProjectFormatError,
    SessionError,
    SessionNotFoundError,
    TagError,
    TagNotFoundError,
)
from .types import (
    ActiveFilterSet,
    IdentityCatalog,
    LegalCategory,
    LegalReference,
    LegalStatus,
    SavedTag,
    Session,
    SessionKind,
    SortOption,
    SourceFileSummary,
)

__all__ = [
    "Config",
    "SearchConfig",
    "load_config",
    "CallscopeError",
    "ConfigError",
    "ProjectError",
    "ProjectFormatError",
    "SessionError",
    "SessionNotFoundError",
    "TagError",
    "TagNotFoundError",
    "AliasError",
    "LegalReferenceError",
    "LegalReferenceNotFoundError",
    "ActiveFilterSet",
    "IdentityCatalog",
    "LegalCategory",
    "LegalReference",
    "LegalStatus",
    "SavedTag",
    "Session",
    "SessionKind",
    "SortOption",
    "SourceFileSummary",
]
