"""Read error action enum for handling files that cannot be rendered."""

from enum import Enum


class ReadErrorAction(str, Enum):
    """Action to take when a selected file cannot be read as text.

    Values:
        WARN: Skip the file and report a warning (default behavior)
        FAIL: Abort the run by raising ReadError
    """

    WARN = "warn"
    FAIL = "fail"
