"""Implementation of exclusion rules using .gitignore pattern syntax."""

from os import PathLike
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from pathspec import GitIgnoreSpec

from codefence.types import PathType

from .base_rules import BaseExclusionRules


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Implementation of exclusion rules using .gitignore pattern syntax.

    This class implements the BaseExclusionRules interface using standard .gitignore pattern
    matching rules. It uses the pathspec library to match file paths against patterns in
    the same way that Git does.

    The rules support all standard .gitignore syntax including:
    - Basic globs (*, ?, [abc], [0-9], etc.)
    - Directory-specific patterns (ending in /)
    - Negation patterns (starting with !)
    - Double-asterisk matching (**)
    - Comment lines (starting with #)

    Rules from files (load_rules) and individual rules (add_rule) are kept in the
    order they were added, with later rules overriding earlier ones for negation.

    Attributes:
        spec (GitIgnoreSpec): Compiled pattern matcher from the pathspec library.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("target/")
        >>> rules.exclude("target/debug/app")
        True
        >>> rules.add_rule("*.log")
        >>> rules.add_rule("!keep.log")
        >>> rules.exclude("build.log"), rules.exclude("keep.log")
        (True, False)

    Note:
        The paths provided to exclude() should use forward slashes (/) as path separators,
        even on Windows systems, to match Git's behavior.
    """

    def __init__(self, rules_files: Optional[Union[PathType, Sequence[PathType]]] = None):
        """Initialize GitIgnoreExclusionRules with patterns from specified files.

        Args:
            rules_files: Path(s) to the file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        self._lines: List[str] = []
        self.spec = GitIgnoreSpec.from_lines(self._lines)

        if rules_files is not None:
            self.load_rules(rules_files)

    def _recompile(self) -> None:
        # pathspec compiles its matching backend once, so GitIgnoreSpec is rebuilt on change
        self.spec = GitIgnoreSpec.from_lines(self._lines)

    def exclude(self, path: str) -> bool:
        """Check if a path should be excluded based on the loaded .gitignore patterns.

        Args:
            path: The relative path to check. Directories should end with "/" so
                that directory-only patterns apply.

        Returns:
            bool: True if the last pattern matching the path is a non-negated one.
        """
        return self.spec.match_file(path)

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """Load and combine .gitignore patterns from one or more files.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.

        Raises:
            FileNotFoundError: If any rules file does not exist.
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                self._lines.extend(f.read().splitlines())

        self._recompile()

    def add_rule(self, rule: str) -> None:
        """Add a single .gitignore pattern directly.

        Args:
            rule: A single .gitignore pattern to add (e.g., "*.pyc", "node_modules/",
                 "!important.txt").
        """
        self._lines.append(rule)
        self._recompile()

    def has_rules(self) -> bool:
        """Check whether any non-blank, non-comment pattern has been added.

        Returns:
            bool: True if at least one effective pattern is loaded.
        """
        return any(line.strip() and not line.lstrip().startswith("#") for line in self._lines)

    def check(self, path: str) -> Optional[bool]:
        """Check a path against the loaded patterns without deciding for unmatched paths.

        Args:
            path: The relative path to check, with a trailing "/" for directories.

        Returns:
            True if the last matching pattern excludes the path, False if it is a
            negation, or None if no pattern matches.
        """
        return self.spec.check_file(path).include


class NestedGitIgnoreExclusionRules(BaseExclusionRules):
    """Exclusion rules from every .gitignore file inside a directory tree.

    Each .gitignore file applies to the directory holding it, with paths matched
    relative to that directory, the way Git reads them. A deeper file takes
    precedence over the files above it, so a nested "!name" can re-include what
    a parent excludes. Files are read lazily, the first time a path below their
    directory is checked, and are cached afterwards.

    Attributes:
        root_path (Path): The directory the checked paths are relative to.
        file_name (str): Name of the ignore files to look for.

    Example:
        >>> rules = NestedGitIgnoreExclusionRules("project")  # doctest: +SKIP
        >>> rules.exclude("target/")  # doctest: +SKIP
        True
        >>> rules.exclude("web/dist/app.js")  # doctest: +SKIP
        True
    """

    def __init__(self, root_path: PathType, file_name: str = ".gitignore"):
        self.root_path = Path(root_path)
        self.file_name = file_name
        self._rules: Dict[str, Optional[GitIgnoreExclusionRules]] = {}

    def _rules_for(self, directory: str) -> Optional[GitIgnoreExclusionRules]:
        if directory not in self._rules:
            rules_file = self.root_path / directory / self.file_name
            self._rules[directory] = GitIgnoreExclusionRules(rules_file) if rules_file.is_file() else None
        return self._rules[directory]

    def exclude(self, path: str) -> bool:
        """Check a path against the .gitignore files of all its parent directories.

        Args:
            path: The path relative to root_path. Directories should end with "/".

        Returns:
            bool: True if the deepest .gitignore with a matching pattern excludes the path.
        """
        parts = path.rstrip("/").split("/")
        for depth in range(len(parts) - 1, -1, -1):
            directory = "/".join(parts[:depth])
            rules = self._rules_for(directory)
            if rules is None:
                continue
            result = rules.check(path[len(directory) + 1 :] if directory else path)
            if result is not None:
                return result
        return False
