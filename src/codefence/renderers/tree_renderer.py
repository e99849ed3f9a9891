"""Tree diagram rendering of selected files.

This module renders a set of FileEntry values the way the Unix 'tree' command
does, showing each selected file below the directories that lead to it.
"""

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple

from anytree import Node

from codefence.types import FileEntry

BRANCH = "├── "
LAST_BRANCH = "└── "
CONTINUATION = "│   "
EMPTY_CONTINUATION = "    "


class FileSystemNode(Node):  # type: ignore
    """Node representing a selected file or one of its ancestor directories.

    Extends anytree.Node with a flag telling directories from files.

    Attributes:
        name (str): The file or directory name (just the basename).
        parent (Optional[FileSystemNode]): The parent node, None for the root.
        is_dir (bool): True if this node represents a directory.
        children (tuple[FileSystemNode]): The child nodes (inherited from anytree.Node).

    Example:
        >>> root = FileSystemNode(".", is_dir=True)
        >>> child = FileSystemNode("main.rs", parent=root)
        >>> child.is_dir, child.parent is root
        (False, True)
    """

    def __init__(
        self, name: str, parent: Optional["FileSystemNode"] = None, is_dir: bool = False, **kwargs: Any
    ) -> None:
        super().__init__(name, parent, **kwargs)
        self.is_dir = is_dir


def _sort_key(node: FileSystemNode) -> Tuple[bool, str, str]:
    return (not node.is_dir, node.name.lower(), node.name)


class TreeRenderer:
    """Render selected files as a tree diagram.

    Only the given files and their ancestor directories appear; directory entries
    in the input are ignored, so an excluded or empty directory is never shown.
    Within a directory, subdirectories come first and files second, each sorted
    alphabetically. The diagram is followed by a blank line and a summary of the
    number of directories and files shown. The root itself is not counted.

    Attributes:
        root (FileSystemNode): The scan root, named ".", with the selected files
            and their ancestor directories below it.
        directory_count (int): Number of directories in the diagram, excluding the root.
        file_count (int): Number of files in the diagram.

    Example:
        >>> renderer = TreeRenderer([FileEntry("src/main.rs"), FileEntry("Cargo.toml")])
        >>> print(renderer.render(), end="")
        .
        ├── src
        │   └── main.rs
        └── Cargo.toml
        <BLANKLINE>
        1 directory, 2 files
    """

    def __init__(self, entries: Iterable[FileEntry]) -> None:
        self.root = FileSystemNode(".", is_dir=True)
        self._directories: Dict[Tuple[str, ...], FileSystemNode] = {(): self.root}
        self.directory_count = 0
        self.file_count = 0

        seen = set()
        for entry in entries:
            if entry.is_dir or entry.relative_path in seen:
                continue
            seen.add(entry.relative_path)
            self._add_file(entry.parts)

    def _add_file(self, parts: Tuple[str, ...]) -> None:
        node = self.root
        for depth in range(1, len(parts)):
            key = parts[:depth]
            if key not in self._directories:
                self._directories[key] = FileSystemNode(parts[depth - 1], parent=node, is_dir=True)
                self.directory_count += 1
            node = self._directories[key]
        FileSystemNode(parts[-1], parent=node)
        self.file_count += 1

    def stream_lines(self) -> Iterator[str]:
        """Generate the diagram one line at a time, without trailing newlines.

        Yields:
            The root line ".", then one line per directory and file.
        """
        yield self.root.name
        yield from self._stream_children(self.root, "")

    def _stream_children(self, node: FileSystemNode, prefix: str) -> Iterator[str]:
        children = sorted(node.children, key=_sort_key)
        for index, child in enumerate(children):
            is_last = index == len(children) - 1
            yield f"{prefix}{LAST_BRANCH if is_last else BRANCH}{child.name}"
            if child.is_dir:
                yield from self._stream_children(child, prefix + (EMPTY_CONTINUATION if is_last else CONTINUATION))

    def summary(self) -> str:
        """Get the summary line, e.g. "3 directories, 1 file"."""
        directories = "directory" if self.directory_count == 1 else "directories"
        files = "file" if self.file_count == 1 else "files"
        return f"{self.directory_count} {directories}, {self.file_count} {files}"

    def stream(self) -> Iterator[str]:
        """Generate the complete output: diagram lines, a blank line and the summary.

        Yields:
            Output lines, each ending with a newline.
        """
        for line in self.stream_lines():
            yield line + "\n"
        yield "\n"
        yield self.summary() + "\n"

    def render(self) -> str:
        """Get the complete output as a single string."""
        return "".join(self.stream())
