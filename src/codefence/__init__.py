"""Directory to fenced code block conversion utilities.

This package provides tools for selecting files from a directory tree with a
glob patterns and emitting them as labeled Markdown code blocks, suitable for
pasting source code into Large Language Model (LLM) prompts.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("codefence")
except PackageNotFoundError:
    __version__ = "unknown"
