"""Service layer for callscope."""

from .workspace import MISSING_IDENTITY_LABEL, Workspace

__all__ = ["MISSING_IDENTITY_LABEL", "Workspace"]
