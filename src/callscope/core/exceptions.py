"""Custom exceptions for callscope."""


class CallscopeError(Exception):
    """Base exception for all callscope errors."""

    pass


class ConfigError(CallscopeError):
    """Configuration could not be loaded."""

    pass


class ProjectError(CallscopeError):
    """Project persistence operation failed."""

    pass


class ProjectFormatError(ProjectError):
    """Project file is not valid JSON or has an unexpected shape."""

    def __init__(self, path: str, reason: str):
        """Initialize exception with path and reason.

        Args:
            path: Path of the offending project file.
            reason: Human-readable description of the problem.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid project file {path}: {reason}")


class SessionError(CallscopeError):
    """Session operation failed."""

    pass


class SessionNotFoundError(SessionError):
    """Session does not exist."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class TagError(CallscopeError):
    """Saved tag operation failed."""

    pass


class TagNotFoundError(TagError):
    """Saved tag does not exist."""

    def __init__(self, tag_id: str):
        self.tag_id = tag_id
        super().__init__(f"Tag not found: {tag_id}")


class AliasError(CallscopeError):
    """Identity merge was rejected."""

    pass


class LegalReferenceError(CallscopeError):
    """Legal reference operation failed."""

    pass


class LegalReferenceNotFoundError(LegalReferenceError):
    """Legal reference does not exist."""

    def __init__(self, ref_id: str):
        self.ref_id = ref_id
        super().__init__(f"Legal reference not found: {ref_id}")
