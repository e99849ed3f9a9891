"""Directory to fenced code block conversion with streaming support.

This module ties the pieces together: it selects files with the walker (or an
explicit file list), the glob patterns and the exclusion rules, renders them in
the requested mode, and counts what it emits. It includes both a streaming and
an eager implementation.
"""

from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from codefence.exceptions import DirectoryNotFoundError, InvalidArgumentsError, TokenizationError
from codefence.exclusion_rules.base_rules import BaseExclusionRules
from codefence.exclusion_rules.composite_rules import CompositeExclusionRules
from codefence.exclusion_rules.git_rules import NestedGitIgnoreExclusionRules
from codefence.exclusion_rules.hidden_rules import HiddenPathExclusionRules
from codefence.exclusion_rules.unit_test_rules import UnitTestExclusionRules
from codefence.filter_pipeline import FilterPipeline
from codefence.glob_pattern import GlobPattern
from codefence.renderers.concat_renderer import ConcatRenderer
from codefence.renderers.read_error_action import ReadErrorAction
from codefence.renderers.tree_renderer import TreeRenderer
from codefence.token_counter import TokenCounter
from codefence.types import FileEntry, PathType, RenderMode, RenderOptions
from codefence.walker.directory_walker import DirectoryWalker
from codefence.walker.permission_action import PermissionAction

GITIGNORE_FILE_NAME = ".gitignore"


def build_exclusion_rules(
    directory: PathType,
    options: RenderOptions,
    extra_rules: Optional[BaseExclusionRules] = None,
) -> CompositeExclusionRules:
    """Assemble the exclusion rules that apply to a run.

    The rules are, in order: hidden paths and lock files (unless include_hidden),
    the .gitignore files of the scan root and its subdirectories (if
    use_gitignore), the caller's extra rules, and the test-file heuristic (if
    ignore_tests).

    Args:
        directory: The scan root.
        options: The run's options.
        extra_rules: Additional rules, typically from -e/--exclude and -i/--ignore.

    Returns:
        A composite excluding every path that any of the rules excludes.
    """
    rules = CompositeExclusionRules()

    if not options.include_hidden:
        rules.add_rule_object(HiddenPathExclusionRules())

    if options.use_gitignore:
        rules.add_rule_object(NestedGitIgnoreExclusionRules(directory, GITIGNORE_FILE_NAME))

    if extra_rules is not None:
        rules.add_rule_object(extra_rules)

    if options.ignore_tests:
        rules.add_rule_object(UnitTestExclusionRules())

    return rules


class StreamingCodeFence:
    """Streaming converter from a directory to fenced code blocks or a tree diagram.

    The directory and the pattern are validated at construction, so errors in
    either are reported before any output is produced. Files are then selected
    and rendered lazily by stream().

    Streaming properties:
    - stream() can only be called once
    - Counts are updated incrementally as output is produced
    - Counts are final once streaming_complete is True

    Attributes:
        directory (Path): The scan root.
        options (RenderOptions): The run's options.
        streaming_complete (bool): Whether stream() has been fully consumed.

    Example:
        >>> options = RenderOptions(patterns="**/*.rs")
        >>> converter = StreamingCodeFence("project", options=options)  # doctest: +SKIP
        >>> for chunk in converter.stream():  # doctest: +SKIP
        ...     print(chunk, end="")
        ```rust no-eol
        // ./examples/example.rs
        fn main() { println!("Hello world!"); }
        ```
        <BLANKLINE>
        >>> converter.file_count  # doctest: +SKIP
        1

    Raises:
        DirectoryNotFoundError: If directory does not exist or is not a directory.
        InvalidPatternError: If one of the options' patterns cannot be compiled.
        InvalidArgumentsError: If files_from_stdin is set but no file_list is given.
        TokenizerNotAvailableError: If tokenizer_model is given but tiktoken is not installed.
    """

    def __init__(
        self,
        directory: PathType,
        *,
        options: RenderOptions,
        exclusion_rules: Optional[BaseExclusionRules] = None,
        file_list: Optional[Iterable[PathType]] = None,
        tokenizer_model: Optional[str] = None,
        permission_action: Union[str, PermissionAction] = PermissionAction.WARN,
        read_error_action: Union[str, ReadErrorAction] = ReadErrorAction.WARN,
        on_warning: Optional[Callable[[str], None]] = None,
        output_path: Optional[PathType] = None,
    ):
        """Initialize a streaming conversion.

        Args:
            directory: Directory to process. Can be any path-like object.
            options: What to select and how to render it.
            exclusion_rules: Additional exclusion rules, applied on top of the
                hidden-path, .gitignore and test rules implied by options.
            file_list: Paths to use instead of walking the directory. Required when
                options.files_from_stdin is set, ignored otherwise.
            tokenizer_model: Model whose tokenizer counts tokens, or None to disable
                token counting.
            permission_action: How to handle directories that cannot be read.
            read_error_action: How to handle files that cannot be read as text.
            on_warning: Called with a message for every skipped directory, file or
                file list entry.
            output_path: File the output is written to. It is never selected, so
                a previous run's output inside the directory is not rendered again.
        """
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise DirectoryNotFoundError(str(directory))

        if options.files_from_stdin and file_list is None:
            raise InvalidArgumentsError("A file list is required when files are read from stdin")

        self.options = options
        self.on_warning = on_warning
        self._file_list = list(file_list) if file_list is not None else None
        self._permission_action = PermissionAction(permission_action)

        patterns = [GlobPattern(pattern) for pattern in options.patterns]
        self._exclusion_rules = build_exclusion_rules(self.directory, options, exclusion_rules)
        excluded_paths: List[str] = []
        if output_path is not None:
            relative_output = self._relative_to_directory(output_path)
            if relative_output is not None:
                excluded_paths.append(relative_output)
        self._pipeline = FilterPipeline(patterns, self._exclusion_rules, excluded_paths)

        self._counter = TokenCounter(model=tokenizer_model)
        self._concat_renderer = ConcatRenderer(
            self.directory,
            read_error_action=ReadErrorAction(read_error_action),
            strip_rust_tests=options.ignore_tests,
            on_warning=self._warn,
        )

        self._directory_count = 0
        self._file_count = 0
        self._streamed = False
        self.streaming_complete = False
        self.warnings: List[str] = []

    @property
    def file_count(self) -> int:
        """Number of files rendered so far."""
        if self.options.mode == RenderMode.CONCAT:
            return self._concat_renderer.file_count
        return self._file_count

    @property
    def directory_count(self) -> int:
        """Number of directories shown in the tree diagram, excluding the root. Always 0 in concat mode."""
        return self._directory_count

    @property
    def skipped_count(self) -> int:
        """Number of selected files skipped because they could not be read."""
        return self._concat_renderer.skipped_count

    @property
    def token_count(self) -> Optional[int]:
        """Number of tokens emitted so far, or None if token counting is disabled."""
        return self._counter.get_total_tokens()

    @property
    def line_count(self) -> int:
        """Number of lines emitted so far."""
        return self._counter.get_total_lines()

    @property
    def character_count(self) -> int:
        """Number of characters emitted so far."""
        return self._counter.get_total_characters()

    def _relative_to_directory(self, path: PathType) -> Optional[str]:
        try:
            relative = Path(path).resolve().relative_to(self.directory.resolve())
        except ValueError:
            return None
        return relative.as_posix()

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.on_warning is not None:
            self.on_warning(message)

    def _count_and_yield(self, text: str) -> str:
        try:
            self._counter.count(text)
        except TokenizationError as e:
            self._warn(str(e))
        return text

    def select_files(self) -> Iterator[FileEntry]:
        """Generate the files to render, in output order.

        Yields:
            FileEntry values accepted by the pattern and the exclusion rules.

        Raises:
            DirectoryNotFoundError: If the directory disappeared since construction.
            PermissionError: If a directory cannot be read and permission_action is RAISE.
        """
        if self._file_list is not None and self.options.files_from_stdin:
            yield from self._pipeline.filter_paths(self.directory, self._file_list, on_warning=self._warn)
            return

        walker = DirectoryWalker(self.directory, permission_action=self._permission_action, on_warning=self._warn)
        yield from self._pipeline.filter_walk(walker)

    def stream(self) -> Iterator[str]:
        """Stream the output for the configured mode.

        Returns:
            Iterator yielding output text. In concat mode each chunk is one complete
            code block with its separator; in tree mode each chunk is one line.

        Raises:
            RuntimeError: If the output has already been streamed.
            ReadError: If a file cannot be read and read_error_action is FAIL.
            PermissionError: If a directory cannot be read and permission_action is RAISE.
        """
        if self._streamed:
            raise RuntimeError("Output has already been streamed")
        self._streamed = True

        if self.options.mode == RenderMode.TREE:
            tree = TreeRenderer(self.select_files())
            self._directory_count = tree.directory_count
            self._file_count = tree.file_count
            for line in tree.stream():
                yield self._count_and_yield(line)
        else:
            for block in self._concat_renderer.stream(self.select_files()):
                yield self._count_and_yield(block)

        self.streaming_complete = True


class CodeFence(StreamingCodeFence):
    """Eager converter that renders everything during initialization.

    This class extends StreamingCodeFence but consumes stream() immediately and
    keeps the complete output in memory, which is convenient when the result is
    used as a string anyway.

    Attributes:
        text (str): The complete output.

    Example:
        >>> result = CodeFence("project", options=RenderOptions(patterns="src/**", mode="tree"))  # doctest: +SKIP
        >>> print(result.text, end="")  # doctest: +SKIP
        .
        └── src
            └── main.rs
        <BLANKLINE>
        1 directory, 1 file
    """

    def __init__(self, directory: PathType, **kwargs: Any) -> None:
        """Initialize and immediately render the whole output.

        Args:
            directory: Directory to process. Can be any path-like object.
            **kwargs: Keyword arguments accepted by StreamingCodeFence.
        """
        super().__init__(directory, **kwargs)
        self.text = "".join(self.stream())
