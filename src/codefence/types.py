from dataclasses import dataclass
from enum import Enum
from os import PathLike
from typing import Sequence, Tuple, Union

from codefence.exceptions import InvalidArgumentsError

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


@dataclass(frozen=True)
class FileEntry:
    """A single filesystem node produced by the directory walker.

    Attributes:
        relative_path: Path relative to the scan root, using forward slashes and
            without a leading "./".
        is_dir: True if the entry is a directory, False for regular files.

    Example:
        >>> entry = FileEntry("src/main.rs", is_dir=False)
        >>> entry.name
        'main.rs'
        >>> entry.parts
        ('src', 'main.rs')
    """

    relative_path: str
    is_dir: bool = False

    @property
    def name(self) -> str:
        """The final path segment."""
        return self.relative_path.rsplit("/", 1)[-1]

    @property
    def parts(self) -> Tuple[str, ...]:
        """The path segments of the relative path."""
        return tuple(self.relative_path.split("/"))


class RenderMode(str, Enum):
    """Output mode for a run.

    Values:
        CONCAT: Emit each matched file as a fenced code block (default)
        TREE: Emit a tree diagram of the matched files with a summary line
    """

    CONCAT = "concat"
    TREE = "tree"


@dataclass(frozen=True)
class RenderOptions:
    """Immutable configuration for a single invocation.

    Attributes:
        patterns: Glob patterns relative to the scan root. A file is selected
            when it matches any of them. At least one is required unless
            files_from_stdin is set. A single string is accepted as one pattern.
        ignore_tests: Exclude test-like files and strip Rust test modules.
        mode: Whether to render a tree diagram or concatenated code blocks.
        files_from_stdin: Take the file list from an explicit list instead of
            walking the directory.
        include_hidden: Keep dot files, dot directories and lock files.
        use_gitignore: Honor the .gitignore files in the scan root and its subdirectories.

    Raises:
        InvalidArgumentsError: If no pattern is given outside files mode.

    Example:
        >>> RenderOptions(patterns="**/*.rs").mode
        <RenderMode.CONCAT: 'concat'>
        >>> RenderOptions(patterns=["*.rs", "*.toml"]).patterns
        ('*.rs', '*.toml')
        >>> RenderOptions()
        Traceback (most recent call last):
        ...
        codefence.exceptions.InvalidArgumentsError: A pattern is required unless the file list is read from stdin
    """

    patterns: Union[str, Sequence[str]] = ()
    ignore_tests: bool = False
    mode: RenderMode = RenderMode.CONCAT
    files_from_stdin: bool = False
    include_hidden: bool = False
    use_gitignore: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.patterns, str):
            object.__setattr__(self, "patterns", (self.patterns,))
        else:
            object.__setattr__(self, "patterns", tuple(self.patterns))
        if not self.patterns and not self.files_from_stdin:
            raise InvalidArgumentsError("A pattern is required unless the file list is read from stdin")
        if isinstance(self.mode, str) and not isinstance(self.mode, RenderMode):
            try:
                object.__setattr__(self, "mode", RenderMode(self.mode.lower()))
            except ValueError:
                raise InvalidArgumentsError(f"Unsupported render mode: {self.mode}. Must be one of: concat, tree")
