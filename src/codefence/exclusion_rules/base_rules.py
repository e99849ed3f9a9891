from abc import ABC, abstractmethod
from typing import Sequence, Union

from codefence.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for file/directory exclusion rules.

    This class serves as a contract for the various kinds of exclusion rules
    (e.g., .gitignore-style rules, hidden-path rules, the test-file heuristic) that
    decide which files and directories are dropped before rendering. All
    implementations must provide logic for checking if a given path should be
    excluded. File loading and individual rule addition are optional capabilities
    that depend on the rule type.

    Paths handed to exclude() are relative to the scan root, use forward slashes,
    and carry a trailing slash when they name a directory.

    Example:
        >>> from codefence.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> git_rules = GitIgnoreExclusionRules()
        >>> git_rules.add_rule('*.pyc')
        >>> git_rules.exclude('test.pyc')
        True
        >>> git_rules.exclude('test.py')
        False
        >>>
        >>> from codefence.exclusion_rules.hidden_rules import HiddenPathExclusionRules
        >>> HiddenPathExclusionRules().exclude('.git/')
        True
        >>> # HiddenPathExclusionRules().add_rule('x')  # Would raise NotImplementedError
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded.

        Args:
            path (str): The file or directory path to check, relative to the root of
                the directory being processed. Directory paths end with "/".

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load and parse exclusion rules from one or more files.

        Rule types that don't support file operations use this default
        implementation, which raises NotImplementedError.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
            FileNotFoundError: If any rules file does not exist (for file-supporting rule types).
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> None:
        """
        Add a single exclusion rule directly.

        Rule types that don't support individual rule addition use this default
        implementation, which raises NotImplementedError.

        Args:
            rule (str): The exclusion rule to add, e.g. a gitignore pattern like "*.pyc".

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")

    def has_rules(self) -> bool:
        """
        Check whether this rule set can exclude anything at all.

        Returns:
            bool: True unless the implementation knows it is empty.
        """
        return True
