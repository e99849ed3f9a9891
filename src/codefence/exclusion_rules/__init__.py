"""Exclusion rules for filtering files and directories."""

from .base_rules import BaseExclusionRules
from .composite_rules import CompositeExclusionRules
from .git_rules import GitIgnoreExclusionRules, NestedGitIgnoreExclusionRules
from .hidden_rules import HiddenPathExclusionRules
from .unit_test_rules import UnitTestExclusionRules

__all__ = [
    "BaseExclusionRules",
    "CompositeExclusionRules",
    "GitIgnoreExclusionRules",
    "HiddenPathExclusionRules",
    "NestedGitIgnoreExclusionRules",
    "UnitTestExclusionRules",
]
