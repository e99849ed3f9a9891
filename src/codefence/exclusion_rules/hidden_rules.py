"""Exclusion of hidden paths and dependency lock files."""

from .base_rules import BaseExclusionRules

LOCK_FILE_NAMES = frozenset(
    {
        "Cargo.lock",
        "package-lock.json",
        "yarn.lock",
        "Pipfile.lock",
        "poetry.lock",
        "pnpm-lock.yaml",
    }
)


class HiddenPathExclusionRules(BaseExclusionRules):
    """Exclude dot files, dot directories, and lock files.

    A path is excluded when any of its segments starts with "." (so everything
    under ".git/" or ".venv/" is skipped), or when its file name is a known
    dependency lock file or ends in ".lock". Lock files are machine generated and
    tend to dwarf the source they describe in a prompt.

    Attributes:
        exclude_lock_files (bool): Whether lock files are excluded as well.

    Example:
        >>> rules = HiddenPathExclusionRules()
        >>> rules.exclude(".github/workflows/ci.yml")
        True
        >>> rules.exclude("src/.env")
        True
        >>> rules.exclude("Cargo.lock")
        True
        >>> rules.exclude("src/lock.rs")
        False
    """

    def __init__(self, exclude_lock_files: bool = True) -> None:
        self.exclude_lock_files = exclude_lock_files

    def exclude(self, path: str) -> bool:
        segments = [segment for segment in path.split("/") if segment and segment != "."]
        if any(segment.startswith(".") for segment in segments):
            return True

        if self.exclude_lock_files and segments and not path.endswith("/"):
            name = segments[-1]
            return name in LOCK_FILE_NAMES or name.endswith(".lock")

        return False
