"""Glob pattern matching against paths relative to the scan root.

Patterns are compiled with the pathspec library's gitignore pattern compiler,
which already implements shell glob segments (``*``, ``?``, ``[...]``) and the
``**`` segment wildcard. Two gitignore behaviors are switched off so the result
behaves like a plain glob:

- Patterns are always anchored at the root, so ``*.rs`` only matches top-level
  files while ``**/*.rs`` matches at any depth.
- A path under a matching directory does not match by inheritance; the glob has
  to match the path itself.
"""

import os
import re
from typing import Optional

from pathspec.patterns.gitignore import GitIgnorePatternError
from pathspec.patterns.gitignore.spec import GitIgnoreSpecPattern

from codefence.exceptions import InvalidPatternError
from codefence.types import PathType

# Name of the capture group pathspec uses for "matched a parent directory".
_DIRECTORY_MARK_GROUP = "ps_d"


def normalize_relative_path(path: PathType) -> str:
    """Normalize a relative path for matching.

    Converts backslashes to forward slashes and strips any leading "./" segments.

    Args:
        path: The path to normalize. Can be any path-like object.

    Returns:
        The normalized path string.

    Example:
        >>> normalize_relative_path("./src/main.rs")
        'src/main.rs'
        >>> normalize_relative_path("src\\\\lib.rs")
        'src/lib.rs'
    """
    normalized = os.fspath(path).replace("\\", "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


class GlobPattern:
    """A compiled glob pattern.

    The pattern is compiled once during construction and is stateless afterwards.
    Matching uses standard glob semantics where ``*`` and ``?`` never cross a path
    separator and a ``**`` segment matches any number of path segments.

    Attributes:
        pattern (str): The pattern exactly as supplied.

    Raises:
        InvalidPatternError: If the pattern is empty or cannot be compiled.

    Example:
        >>> rust = GlobPattern("**/*.rs")
        >>> rust.matches("examples/example.rs")
        True
        >>> rust.matches("main.rs")
        True
        >>> GlobPattern("*.rs").matches("src/main.rs")
        False
        >>> GlobPattern("src/*.rs").matches("src/bin/tool.rs")
        False
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern

        if not pattern or not pattern.strip():
            raise InvalidPatternError(pattern, "pattern is empty")
        if pattern.endswith("/"):
            raise InvalidPatternError(pattern, "pattern can only match directories, not files")

        try:
            compiled = GitIgnoreSpecPattern(self._anchor(pattern))
        except (GitIgnorePatternError, ValueError) as e:
            raise InvalidPatternError(pattern, str(e)) from e

        # pathspec turns patterns it discards (e.g. an unterminated "[") into no-ops
        if compiled.regex is None or not compiled.include:
            raise InvalidPatternError(pattern, "pattern does not compile to a usable glob")

        self._regex: "re.Pattern[str]" = compiled.regex

    @staticmethod
    def _anchor(pattern: str) -> str:
        """Translate a glob into an equivalent root-anchored gitignore pattern."""
        glob = pattern
        while glob.startswith("./"):
            glob = glob[2:]
        glob = glob.lstrip("/")
        # Leading "!" and "#" have special meaning in gitignore syntax only.
        if glob.startswith(("!", "#")):
            glob = "\\" + glob
        # gitignore strips unescaped trailing whitespace; a bracket keeps it literal.
        if glob[-1:].isspace() and not glob.endswith("\\ "):
            glob = f"{glob[:-1]}[{glob[-1]}]"
        return "/" + glob

    def matches(self, relative_path: PathType) -> bool:
        """Check whether a path relative to the scan root matches the pattern.

        Args:
            relative_path: Path relative to the scan root. Backslashes and a leading
                "./" are normalized away.

        Returns:
            True if the path matches the glob itself, False otherwise.

        Example:
            >>> GlobPattern("src/**").matches("src/deep/nested/file.txt")
            True
            >>> GlobPattern("src").matches("src/main.rs")
            False
        """
        path = normalize_relative_path(relative_path)
        if not path:
            return False
        match: Optional["re.Match[str]"] = self._regex.search(path)
        if match is None:
            return False
        return match.groupdict().get(_DIRECTORY_MARK_GROUP) is None

    def __repr__(self) -> str:
        return f"GlobPattern({self.pattern!r})"
