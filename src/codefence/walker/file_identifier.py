"""File identifier for uniquely identifying directories by device and inode."""

import os
from typing import Any

from codefence.types import PathType


class FileIdentifier:
    """Class for uniquely identifying files and directories by their device and inode.

    The walker keeps the identifiers of the directories on the current descent
    path; meeting one of them again through a symbolic link means the link points
    back up the tree and following it would never terminate.

    Attributes:
        device_id (int): The device ID from stat information.
        inode_number (int): The inode number from stat information.

    Note:
        On Windows, inode numbers might be handled differently than on Unix systems,
        but Python's os.stat implementation provides values that can be used
        for uniquely identifying files.
    """

    def __init__(self, device_id: int, inode_number: int):
        self.device_id = device_id
        self.inode_number = inode_number

    @classmethod
    def from_path(cls, path: PathType) -> "FileIdentifier":
        """Build the identifier of the file a path resolves to.

        Symbolic links are followed, so a link and its target share an identifier.

        Args:
            path: Path to stat.

        Returns:
            The identifier of the resolved file.

        Raises:
            OSError: If the path cannot be stat'ed.
        """
        stat_info = os.stat(path)
        return cls(stat_info.st_dev, stat_info.st_ino)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FileIdentifier):
            return False
        return self.device_id == other.device_id and self.inode_number == other.inode_number

    def __hash__(self) -> int:
        return hash((self.device_id, self.inode_number))

    def __repr__(self) -> str:
        return f"FileIdentifier(device_id={self.device_id}, inode_number={self.inode_number})"
