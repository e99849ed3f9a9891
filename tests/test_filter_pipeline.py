import io
import os

import pytest

from codefence.exclusion_rules.composite_rules import CompositeExclusionRules
from codefence.exclusion_rules.git_rules import GitIgnoreExclusionRules
from codefence.exclusion_rules.hidden_rules import HiddenPathExclusionRules
from codefence.exclusion_rules.unit_test_rules import UnitTestExclusionRules
from codefence.filter_pipeline import FilterPipeline, read_file_list
from codefence.glob_pattern import GlobPattern
from codefence.types import FileEntry
from codefence.walker.directory_walker import DirectoryWalker


def relative_paths(entries):
    return [entry.relative_path for entry in entries]


def test_read_file_list():
    stream = io.StringIO("src/main.rs\n\n   \n  src/lib.rs  \r\nREADME.md")
    assert read_file_list(stream) == ["src/main.rs", "src/lib.rs", "README.md"]


def test_read_file_list_empty():
    assert read_file_list(io.StringIO("")) == []


class TestAccepts:
    def test_without_pattern_or_rules(self):
        pipeline = FilterPipeline()
        assert pipeline.accepts("anything/at/all.bin")

    def test_pattern(self):
        pipeline = FilterPipeline(GlobPattern("**/*.rs"))
        assert pipeline.accepts("src/main.rs")
        assert not pipeline.accepts("README.md")

    def test_any_pattern_selects(self):
        pipeline = FilterPipeline([GlobPattern("**/*.rs"), GlobPattern("*.toml")])
        assert pipeline.accepts("src/main.rs")
        assert pipeline.accepts("Cargo.toml")
        assert not pipeline.accepts("docs/Cargo.toml")
        assert not pipeline.accepts("README.md")

    def test_empty_pattern_list_accepts_everything(self):
        assert FilterPipeline([]).accepts("README.md")

    def test_excluded_paths(self):
        pipeline = FilterPipeline(GlobPattern("**/*.md"), excluded_paths=["./out/context.md"])
        assert not pipeline.accepts("out/context.md")
        assert pipeline.accepts("out/notes.md")

    def test_pattern_and_rules(self):
        pipeline = FilterPipeline(GlobPattern("**/*.rs"), UnitTestExclusionRules())
        assert pipeline.accepts("src/main.rs")
        assert not pipeline.accepts("src/foo_test.rs")

    def test_prunes(self):
        pipeline = FilterPipeline(GlobPattern("**/*"), HiddenPathExclusionRules())
        assert pipeline.prunes(".git")
        assert pipeline.prunes("src/.cache/")
        assert not pipeline.prunes("src")
        assert not FilterPipeline().prunes(".git")


def test_filter_entries_drops_directories():
    entries = [FileEntry("src", is_dir=True), FileEntry("src/main.rs"), FileEntry("src/notes.md")]
    pipeline = FilterPipeline(GlobPattern("**"))
    assert relative_paths(pipeline.filter_entries(entries)) == ["src/main.rs", "src/notes.md"]


def test_filter_walk(sample_project):
    gitignore = GitIgnoreExclusionRules(sample_project / ".gitignore")
    rules = CompositeExclusionRules([HiddenPathExclusionRules(), gitignore])
    pipeline = FilterPipeline(GlobPattern("**/*.rs"), rules)

    result = relative_paths(pipeline.filter_walk(DirectoryWalker(sample_project)))

    assert result == [
        "examples/example.rs",
        "src/foo_test.rs",
        "src/lib.rs",
        "src/main.rs",
        "tests/integration.rs",
    ]


def test_filter_walk_prunes_excluded_directories(sample_project):
    gitignore = GitIgnoreExclusionRules(sample_project / ".gitignore")
    rules = CompositeExclusionRules([HiddenPathExclusionRules(), gitignore])
    pipeline = FilterPipeline(GlobPattern("**"), rules)
    visited = []

    walker = DirectoryWalker(sample_project)
    list(pipeline.filter_walk(walker))
    original_prune = walker.prune

    def recording_prune(relative_path):
        visited.append(relative_path)
        return original_prune(relative_path)

    walker.prune = recording_prune
    entries = [entry.relative_path for entry in walker.walk()]

    assert ".git" in visited and "target" in visited
    for directory in (".git", "target"):
        assert not any(path == directory or path.startswith(directory + "/") for path in entries)


def test_filter_walk_without_pattern_yields_all_files(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "a" / "one.txt").write_text("1")
    (tmp_path / "two.txt").write_text("2")

    result = relative_paths(FilterPipeline().filter_walk(DirectoryWalker(tmp_path)))

    assert result == ["a/one.txt", "two.txt"]


class TestFilterPaths:
    def test_relative_and_absolute_paths(self, sample_project):
        pipeline = FilterPipeline()
        paths = ["src/main.rs", str(sample_project / "README.md"), "./Cargo.toml"]

        result = pipeline.filter_paths(sample_project, paths)

        assert relative_paths(result) == ["Cargo.toml", "README.md", "src/main.rs"]

    def test_blank_and_duplicate_entries(self, sample_project):
        result = FilterPipeline().filter_paths(sample_project, ["src/main.rs", "src/main.rs", "./src/main.rs"])
        assert relative_paths(result) == ["src/main.rs"]

    def test_invalid_entries_warn(self, sample_project, tmp_path_factory):
        outside = tmp_path_factory.mktemp("outside") / "other.rs"
        outside.write_text("fn other() {}\n")
        messages = []

        result = FilterPipeline().filter_paths(
            sample_project, ["missing.rs", "src", str(outside), "src/main.rs"], on_warning=messages.append
        )

        assert relative_paths(result) == ["src/main.rs"]
        assert messages == [
            "'missing.rs' is not a valid file",
            "'src' is not a valid file",
            f"'{outside}' is outside of '{sample_project}'",
        ]

    def test_pattern_and_rules_apply(self, sample_project):
        pipeline = FilterPipeline(GlobPattern("**/*.rs"), UnitTestExclusionRules())

        result = pipeline.filter_paths(sample_project, ["src/main.rs", "src/foo_test.rs", "README.md"])

        assert relative_paths(result) == ["src/main.rs"]

    def test_symlink_inside_root_keeps_its_location(self, tmp_path_factory):
        root = tmp_path_factory.mktemp("root")
        elsewhere = tmp_path_factory.mktemp("elsewhere") / "real.rs"
        elsewhere.write_text("fn real() {}\n")
        try:
            os.symlink(elsewhere, root / "link.rs")
        except (OSError, NotImplementedError):
            pytest.skip("Symlink creation not supported on this platform/environment")

        result = FilterPipeline().filter_paths(root, ["link.rs"])

        assert relative_paths(result) == ["link.rs"]
