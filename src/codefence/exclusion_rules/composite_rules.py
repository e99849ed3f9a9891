"""Composite exclusion rules for combining multiple rule types."""

from typing import List, Sequence

from .base_rules import BaseExclusionRules


class CompositeExclusionRules(BaseExclusionRules):
    """Composite exclusion rules that combine multiple rule types.

    A path is excluded if ANY of the constituent rules determines it should be
    excluded. This is how the hidden-path rules, the .gitignore rules and the
    test-file heuristic are combined for a single run.

    Attributes:
        rules (List[BaseExclusionRules]): List of constituent exclusion rules.

    Example:
        >>> from codefence.exclusion_rules.hidden_rules import HiddenPathExclusionRules
        >>> from codefence.exclusion_rules.unit_test_rules import UnitTestExclusionRules
        >>> composite = CompositeExclusionRules([HiddenPathExclusionRules(), UnitTestExclusionRules()])
        >>> composite.exclude(".cargo/config.toml")
        True
        >>> composite.exclude("src/lib_test.rs")
        True
        >>> composite.exclude("src/lib.rs")
        False
    """

    def __init__(self, rules: Sequence[BaseExclusionRules] = ()):
        """Initialize composite exclusion rules.

        Args:
            rules: Sequence of exclusion rules to combine. May be empty, in which
                case nothing is excluded until rules are added.

        Raises:
            TypeError: If any rule doesn't implement BaseExclusionRules.
        """
        for i, rule in enumerate(rules):
            if not isinstance(rule, BaseExclusionRules):
                raise TypeError(f"Rule at index {i} must implement BaseExclusionRules, " f"got {type(rule)}")

        self.rules: List[BaseExclusionRules] = list(rules)

    def exclude(self, path: str) -> bool:
        """Check if a path should be excluded by any constituent rule.

        Args:
            path: File or directory path to check.

        Returns:
            True if ANY of the constituent rules excludes the path.
        """
        return any(rule.exclude(path) for rule in self.rules)

    def has_rules(self) -> bool:
        """Check if any constituent rule has rules configured.

        Returns:
            True if ANY of the constituent rules has rules configured.
        """
        return any(rule.has_rules() for rule in self.rules)

    def add_rule_object(self, rule: BaseExclusionRules) -> None:
        """Add another exclusion rule object to this composite.

        Args:
            rule: An exclusion rule object to add to the composite.

        Raises:
            TypeError: If rule doesn't implement BaseExclusionRules.
        """
        if not isinstance(rule, BaseExclusionRules):
            raise TypeError(f"Rule must implement BaseExclusionRules, got {type(rule)}")
        self.rules.append(rule)

    def get_rules(self) -> List[BaseExclusionRules]:
        """Get a copy of the constituent rules list."""
        return list(self.rules)
