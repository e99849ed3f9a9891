"""Selection of the files to render.

The FilterPipeline combines a file source (the directory walker, or an explicit
list of paths) with the glob patterns and the exclusion rules. Only regular files
that match a pattern and are not excluded leave the pipeline.
"""

import os
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Sequence, TextIO, Union

from codefence.exclusion_rules.base_rules import BaseExclusionRules
from codefence.glob_pattern import GlobPattern, normalize_relative_path
from codefence.types import FileEntry, PathType
from codefence.walker.directory_walker import DirectoryWalker


def read_file_list(stream: TextIO) -> List[str]:
    """Read a newline-separated list of paths.

    Surrounding whitespace is stripped and blank lines are skipped.

    Args:
        stream: Text stream to read, typically sys.stdin.

    Returns:
        The paths in the order they were listed.

    Example:
        >>> import io
        >>> read_file_list(io.StringIO("src/main.rs\\n\\n  src/lib.rs  \\n"))
        ['src/main.rs', 'src/lib.rs']
    """
    return [line.strip() for line in stream if line.strip()]


class FilterPipeline:
    """Filter file candidates by patterns and exclusion rules.

    Attributes:
        patterns (List[GlobPattern]): A selected file must match at least one of
            them. When empty, every file passes the pattern check.
        exclusion_rules (Optional[BaseExclusionRules]): Rules removing files, and
            pruning whole directories during a walk.
        excluded_paths (Set[str]): Relative file paths that are never selected,
            such as the output file when it is written inside the scan root.

    Example:
        >>> pipeline = FilterPipeline([GlobPattern("**/*.rs"), GlobPattern("*.toml")])
        >>> pipeline.accepts("src/main.rs")
        True
        >>> pipeline.accepts("Cargo.toml")
        True
        >>> pipeline.accepts("README.md")
        False
    """

    def __init__(
        self,
        patterns: Union[GlobPattern, Sequence[GlobPattern], None] = None,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        excluded_paths: Optional[Iterable[str]] = None,
    ) -> None:
        if patterns is None:
            patterns = []
        elif isinstance(patterns, GlobPattern):
            patterns = [patterns]
        self.patterns = list(patterns)
        self.exclusion_rules = exclusion_rules
        self.excluded_paths = {normalize_relative_path(path) for path in excluded_paths or ()}

    def accepts(self, relative_path: str) -> bool:
        """Check whether a file path passes the patterns and the exclusion rules.

        Args:
            relative_path: File path relative to the scan root.

        Returns:
            True if the file should be rendered.
        """
        if self.patterns and not any(pattern.matches(relative_path) for pattern in self.patterns):
            return False
        if normalize_relative_path(relative_path) in self.excluded_paths:
            return False
        if self.exclusion_rules is not None and self.exclusion_rules.exclude(relative_path):
            return False
        return True

    def prunes(self, relative_path: str) -> bool:
        """Check whether a directory is excluded, so the walk can skip it entirely.

        Args:
            relative_path: Directory path relative to the scan root, without a
                trailing slash.

        Returns:
            True if nothing below the directory can be selected.
        """
        if self.exclusion_rules is None:
            return False
        return self.exclusion_rules.exclude(relative_path.rstrip("/") + "/")

    def filter_entries(self, entries: Iterable[FileEntry]) -> Iterator[FileEntry]:
        """Keep the file entries that pass the filter, preserving their order.

        Args:
            entries: Candidate entries, typically from a DirectoryWalker.

        Yields:
            The accepted file entries. Directory entries are always dropped.
        """
        for entry in entries:
            if entry.is_dir:
                continue
            if self.accepts(entry.relative_path):
                yield entry

    def filter_walk(self, walker: DirectoryWalker) -> Iterator[FileEntry]:
        """Walk a directory and yield the accepted files.

        Excluded directories are pruned from the walk rather than filtered
        afterwards, so e.g. a ".git" directory is never listed.

        Args:
            walker: The walker to consume. Its prune predicate is replaced.

        Yields:
            Accepted file entries in walk order.
        """
        walker.prune = self.prunes
        yield from self.filter_entries(walker.walk())

    def filter_paths(
        self,
        root_path: PathType,
        paths: Iterable[PathType],
        on_warning: Optional[Callable[[str], None]] = None,
    ) -> List[FileEntry]:
        """Select files from an explicit list instead of walking the directory.

        Relative paths are resolved against root_path. Entries that do not exist,
        are not regular files, or lie outside root_path are skipped with a
        warning. Duplicates are dropped and the result is sorted by relative path
        so the output order does not depend on the order of the list.

        Args:
            root_path: The scan root.
            paths: Paths to consider, absolute or relative to root_path.
            on_warning: Called with a message for every skipped entry.

        Returns:
            The accepted file entries.
        """
        root = Path(root_path).resolve()
        selected = {}

        def warn(message: str) -> None:
            if on_warning is not None:
                on_warning(message)

        for raw_path in paths:
            candidate = Path(raw_path)
            full_path = candidate if candidate.is_absolute() else Path(root_path) / candidate

            if not full_path.is_file():
                warn(f"'{os.fspath(raw_path)}' is not a valid file")
                continue

            try:
                relative = full_path.resolve().relative_to(root)
            except ValueError:
                # Symlinked entries keep their location inside the root
                try:
                    relative = Path(os.path.abspath(full_path)).relative_to(os.path.abspath(root_path))
                except ValueError:
                    warn(f"'{os.fspath(raw_path)}' is outside of '{root_path}'")
                    continue

            relative_path = normalize_relative_path(relative.as_posix())
            if relative_path in selected:
                continue
            if self.accepts(relative_path):
                selected[relative_path] = FileEntry(relative_path, is_dir=False)

        return [selected[key] for key in sorted(selected)]
