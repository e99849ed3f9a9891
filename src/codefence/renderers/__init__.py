"""Output renderers for selected files.

This package provides the two output modes: a tree diagram of the selected files,
and the concatenation of their contents as fenced code blocks.
"""

from .concat_renderer import ConcatRenderer, fence_for, parse_fenced_blocks
from .read_error_action import ReadErrorAction
from .tree_renderer import TreeRenderer

__all__ = ["ConcatRenderer", "ReadErrorAction", "TreeRenderer", "fence_for", "parse_fenced_blocks"]
