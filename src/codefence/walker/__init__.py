"""Directory traversal producing FileEntry values.

This package provides the lazy directory walker together with the helpers it
uses for symlink cycle detection and for handling unreadable directories.
"""

from .directory_walker import DirectoryWalker
from .permission_action import PermissionAction

__all__ = ["DirectoryWalker", "PermissionAction"]
