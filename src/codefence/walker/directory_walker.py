"""Lazy, deterministic directory traversal.

This module provides the DirectoryWalker class, which enumerates every file and
directory below a root as FileEntry values without materializing the whole tree.
"""

import os
from pathlib import Path
from typing import Callable, FrozenSet, Iterator, List, Optional

from codefence.exceptions import DirectoryNotFoundError
from codefence.types import FileEntry, PathType
from codefence.walker.file_identifier import FileIdentifier
from codefence.walker.permission_action import PermissionAction


class DirectoryWalker:
    """Depth-first walker producing FileEntry values relative to a root directory.

    Traversal is lazy: walk() returns a generator, and a directory is only listed
    when the consumer advances into it. Entries within a directory are sorted by
    name, and each directory is yielded immediately before its contents, so the
    sequence is identical across runs on an unchanged tree.

    Symbolic Link Behavior:
        By default symbolic links are followed, so a link to a directory is walked
        like a directory and a link to a file is yielded as a file. A link that
        leads back to a directory on the current descent path (a cycle) is skipped,
        as are broken links. With follow_symlinks=False every symbolic link is
        skipped.

    Permission Handling:
        A directory that cannot be listed is handled according to permission_action:
        - IGNORE: Skip it silently
        - WARN (default): Skip it and report a warning through on_warning
        - RAISE: Raise PermissionError

    Attributes:
        root_path (Path): The directory being walked.
        permission_action (PermissionAction): How to handle unreadable directories.
        follow_symlinks (bool): Whether to follow symbolic links.
        prune (Optional[Callable[[str], bool]]): Predicate over a directory's relative
            path; directories for which it returns True are neither yielded nor entered.
        warnings (List[str]): Every warning reported so far.

    Example:
        >>> walker = DirectoryWalker("project")  # doctest: +SKIP
        >>> for entry in walker.walk():  # doctest: +SKIP
        ...     print(entry.relative_path, entry.is_dir)
        examples True
        examples/example.rs False
        src True
        src/main.rs False
    """

    def __init__(
        self,
        root_path: PathType,
        permission_action: PermissionAction = PermissionAction.WARN,
        follow_symlinks: bool = True,
        prune: Optional[Callable[[str], bool]] = None,
        on_warning: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.root_path = Path(root_path)
        self.permission_action = permission_action
        self.follow_symlinks = follow_symlinks
        self.prune = prune
        self.on_warning = on_warning
        self.warnings: List[str] = []

    def walk(self) -> Iterator[FileEntry]:
        """Enumerate every file and directory below the root.

        Each call performs a fresh scan of the filesystem.

        Yields:
            FileEntry values in depth-first, name-sorted order. The root itself is
            not yielded.

        Raises:
            DirectoryNotFoundError: If the root does not exist or is not a directory.
            PermissionError: If a directory cannot be read and permission_action is RAISE.
        """
        if not self.root_path.is_dir():
            raise DirectoryNotFoundError(str(self.root_path))

        try:
            root_id = FileIdentifier.from_path(self.root_path)
        except OSError as e:
            raise DirectoryNotFoundError(str(self.root_path)) from e

        yield from self._walk_directory(self.root_path, "", frozenset({root_id}))

    def _walk_directory(
        self, path: Path, relative_path: str, ancestors: FrozenSet[FileIdentifier]
    ) -> Iterator[FileEntry]:
        """Recursively yield the contents of one directory."""
        try:
            with os.scandir(path) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as e:
            self._handle_unreadable(path, relative_path, e)
            return

        for entry in entries:
            child_relative_path = f"{relative_path}/{entry.name}" if relative_path else entry.name

            try:
                if entry.is_symlink() and not self.follow_symlinks:
                    continue
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError:
                # Vanished between listing and stat
                continue

            if is_file:
                yield FileEntry(child_relative_path, is_dir=False)
                continue

            if not is_dir:
                # Broken symlinks, sockets, device nodes
                continue

            if self.prune is not None and self.prune(child_relative_path):
                continue

            try:
                file_id = FileIdentifier.from_path(entry.path)
            except OSError as e:
                self._handle_unreadable(Path(entry.path), child_relative_path, e)
                continue

            if file_id in ancestors:
                continue

            yield FileEntry(child_relative_path, is_dir=True)
            yield from self._walk_directory(Path(entry.path), child_relative_path, ancestors | {file_id})

    def _handle_unreadable(self, path: Path, relative_path: str, error: OSError) -> None:
        if self.permission_action == PermissionAction.RAISE:
            raise PermissionError(f"Access denied to {path}: {error}")
        if self.permission_action == PermissionAction.WARN:
            reason = error.strerror or str(error)
            self._warn(f"Cannot read directory '{relative_path or '.'}': {reason}")

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.on_warning is not None:
            self.on_warning(message)
