"""Heuristic exclusion of test sources."""

from .base_rules import BaseExclusionRules

# A file anywhere below one of these directories is treated as test code,
# e.g. Rust integration tests in "tests/" or Jest suites in "__tests__/".
TEST_DIRECTORY_NAMES = frozenset({"test", "tests", "__tests__", "testing", "spec"})

# Whole file names that only ever hold tests or test fixtures.
TEST_FILE_NAMES = frozenset({"tests.rs", "conftest.py"})

# Stem prefixes and suffixes (file name without its final extension) covering
# the common conventions: test_foo.py, foo_test.go, foo_test.rs, foo_spec.rb,
# foo.test.ts and foo.spec.js.
TEST_STEM_PREFIXES = ("test_",)
TEST_STEM_SUFFIXES = ("_test", "_tests", "_spec", ".test", ".spec")


class UnitTestExclusionRules(BaseExclusionRules):
    """Exclude files that look like tests.

    The heuristic is purely path based; file contents are never inspected. A file
    is considered test code when:

    - any of its directory segments is one of TEST_DIRECTORY_NAMES, or
    - its file name is one of TEST_FILE_NAMES, or
    - its stem starts with one of TEST_STEM_PREFIXES or ends with one of
      TEST_STEM_SUFFIXES.

    Directory names are compared case-insensitively; stems are compared as-is so
    that e.g. "latest_version.py" is not mistaken for a test. Directories are never
    excluded by this rule so that walking still reaches non-test files; their
    contents are excluded one by one.

    Example:
        >>> rules = UnitTestExclusionRules()
        >>> rules.exclude("src/foo_test.rs")
        True
        >>> rules.exclude("tests/integration.rs")
        True
        >>> rules.exclude("web/app.spec.ts")
        True
        >>> rules.exclude("src/contest.rs")
        False
    """

    def exclude(self, path: str) -> bool:
        if path.endswith("/"):
            return False

        segments = [segment for segment in path.split("/") if segment and segment != "."]
        if not segments:
            return False

        *directories, name = segments
        if any(directory.lower() in TEST_DIRECTORY_NAMES for directory in directories):
            return True

        if name in TEST_FILE_NAMES:
            return True

        stem = name.rsplit(".", 1)[0] if "." in name[1:] else name
        return stem.startswith(TEST_STEM_PREFIXES) or stem.endswith(TEST_STEM_SUFFIXES)
