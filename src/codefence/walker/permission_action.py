"""Permission action enum for handling unreadable directories during traversal."""

from enum import Enum


class PermissionAction(str, Enum):
    """Action to take when a directory cannot be read during traversal.

    Values:
        IGNORE: Skip the unreadable directory silently
        WARN: Skip the unreadable directory and report a warning (default behavior)
        RAISE: Raise a PermissionError immediately when access is denied
    """

    IGNORE = "ignore"
    WARN = "warn"
    RAISE = "raise"
