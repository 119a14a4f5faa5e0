"""Custom exceptions for groupsplit."""


class GroupSplitError(Exception):
    """Base exception for all groupsplit errors."""

    pass


class ConfigurationError(GroupSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class SnapshotLoadError(GroupSplitError):
    """Raised when a group snapshot file cannot be read or parsed."""

    def __init__(self, path: str, message: str | None = None):
        self.path = path
        super().__init__(message or f"Could not load group snapshot from {path}")


class UnknownMemberError(GroupSplitError):
    """Raised when a user ID is not part of the group's member roster."""

    def __init__(self, user_id: str, message: str | None = None):
        self.user_id = user_id
        super().__init__(message or f"User {user_id!r} is not a member of this group")


class SplitValidationError(GroupSplitError):
    """Raised when an expense split does not add up to the expense amount."""

    pass
