"""Concatenation of selected files as fenced code blocks.

Each file becomes one Markdown code block: an opening fence tagged with the
file's language, a comment line naming the file, the file's contents, and a
closing fence. Blocks are separated by a blank line:

    ```rust no-eol
    // ./examples/example.rs
    fn main() { println!("Hello world!"); }
    ```

The fence is lengthened when a file contains backtick runs of its own, so the
contents can never close the block early, and parse_fenced_blocks() can recover
every file byte for byte.
"""

import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from codefence.exceptions import ReadError
from codefence.languages import comment_syntax, determine_language, format_path_comment
from codefence.renderers.read_error_action import ReadErrorAction
from codefence.source_filters import strip_rust_test_modules
from codefence.types import FileEntry, PathType

MIN_FENCE_LENGTH = 3
NO_EOL_FLAG = "no-eol"

_LEADING_BACKTICKS = re.compile(r"^ {0,3}(`+)", re.MULTILINE)
_OPENING_FENCE = re.compile(r"^(`{3,})([^`\s]*)(?: ?(" + NO_EOL_FLAG + r"))?$")


def fence_for(content: str) -> str:
    """Get a backtick fence that no line of content can close.

    Args:
        content: The text to be fenced.

    Returns:
        Three backticks, or one more than the longest backtick run that starts
        a line of content.

    Example:
        >>> fence_for("print('hi')")
        '```'
        >>> fence_for("Example:\\n```python\\nx = 1\\n```\\n")
        '````'
    """
    longest = max((len(match.group(1)) for match in _LEADING_BACKTICKS.finditer(content)), default=0)
    return "`" * max(MIN_FENCE_LENGTH, longest + 1)


def format_block(relative_path: str, content: str) -> str:
    """Format one file as a fenced code block ending with a newline.

    The closing fence needs a line of its own. When the contents do not end
    with a newline, one is added and the info string is marked with
    NO_EOL_FLAG so parse_fenced_blocks() removes it again.

    Args:
        relative_path: Path of the file relative to the scan root.
        content: The file's contents.

    Returns:
        The complete block, from the opening fence to the closing fence's newline.

    Example:
        >>> print(format_block("src/main.py", "print('hi')\\n"), end="")
        ```python
        # ./src/main.py
        print('hi')
        ```
        >>> print(format_block("src/main.py", "print('hi')"), end="")
        ```python no-eol
        # ./src/main.py
        print('hi')
        ```
    """
    language = determine_language(relative_path)
    fence = fence_for(content)
    info = language
    if content and not content.endswith("\n"):
        info = f"{language} {NO_EOL_FLAG}" if language else NO_EOL_FLAG
        content += "\n"
    return f"{fence}{info}\n{format_path_comment(relative_path, language)}\n{content}{fence}\n"


def parse_fenced_blocks(text: str) -> List[Tuple[str, str]]:
    """Recover the files from concatenated output.

    Text outside of code blocks is ignored, so the output may be embedded in a
    larger document.

    Args:
        text: Output produced by ConcatRenderer.

    Returns:
        List of (relative_path, content) tuples in output order.

    Raises:
        ValueError: If a block has no path comment or is never closed.

    Example:
        >>> output = "```rust\\n// ./src/lib.rs\\npub fn f() {}\\n```\\n\\n"
        >>> parse_fenced_blocks(output)
        [('src/lib.rs', 'pub fn f() {}\\n')]
    """
    lines = text.split("\n")
    blocks = []
    index = 0

    while index < len(lines):
        opening = _OPENING_FENCE.match(lines[index])
        index += 1
        if opening is None:
            continue

        fence, language, no_eol = opening.groups()
        if no_eol is None and language == NO_EOL_FLAG:
            language, no_eol = "", NO_EOL_FLAG
        if index >= len(lines):
            raise ValueError(f"Code block opened with {fence}{language} has no path comment")
        relative_path = _parse_path_comment(lines[index], language)
        index += 1

        body = []
        while index < len(lines) and lines[index] != fence:
            body.append(lines[index])
            index += 1
        if index >= len(lines):
            raise ValueError(f"Code block for '{relative_path}' is never closed")
        index += 1

        content = "\n".join(body)
        if body and no_eol is None:
            content += "\n"
        blocks.append((relative_path, content))

    return blocks


def _parse_path_comment(line: str, language: str) -> str:
    start, end = comment_syntax(language)
    prefix = f"{start} ./"
    suffix = f" {end}" if end is not None else ""
    if not line.startswith(prefix) or not line.endswith(suffix) or len(line) < len(prefix) + len(suffix):
        raise ValueError(f"Expected a path comment, found: {line!r}")
    return line[len(prefix) : len(line) - len(suffix)]


class ConcatRenderer:
    """Render selected files as a sequence of fenced code blocks.

    Every file is read completely and validated before any part of its block is
    emitted. A file that cannot be opened, contains NUL bytes, or is not valid
    UTF-8 raises ReadError internally, which is handled according to
    read_error_action:
    - WARN (default): Skip the file and report a warning through on_warning
    - FAIL: Propagate the ReadError, ending the output after the previous block

    Attributes:
        root_path (Path): Directory the entries are relative to.
        read_error_action (ReadErrorAction): How to handle unreadable files.
        strip_rust_tests (bool): Remove "#[cfg(test)] mod tests" blocks from Rust files.
        file_count (int): Number of files rendered so far.
        skipped_count (int): Number of files skipped so far.

    Example:
        >>> renderer = ConcatRenderer("project")  # doctest: +SKIP
        >>> for chunk in renderer.stream([FileEntry("examples/example.rs")]):  # doctest: +SKIP
        ...     print(chunk, end="")
        ```rust no-eol
        // ./examples/example.rs
        fn main() { println!("Hello world!"); }
        ```
        <BLANKLINE>
    """

    def __init__(
        self,
        root_path: PathType,
        read_error_action: ReadErrorAction = ReadErrorAction.WARN,
        strip_rust_tests: bool = False,
        on_warning: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.root_path = Path(root_path)
        self.read_error_action = ReadErrorAction(read_error_action)
        self.strip_rust_tests = strip_rust_tests
        self.on_warning = on_warning
        self.file_count = 0
        self.skipped_count = 0

    def read_file(self, relative_path: str) -> str:
        """Read a file completely as UTF-8 text.

        Args:
            relative_path: Path of the file relative to root_path.

        Returns:
            The file's contents, with Rust test modules removed if strip_rust_tests is set.

        Raises:
            ReadError: If the file cannot be opened, is binary, or is not valid UTF-8.
        """
        try:
            data = (self.root_path / relative_path).read_bytes()
        except OSError as e:
            raise ReadError(relative_path, e.strerror or str(e)) from e

        if b"\x00" in data:
            raise ReadError(relative_path, "binary file (contains NUL bytes)")

        try:
            content = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ReadError(relative_path, f"not valid UTF-8 (byte offset {e.start})") from e

        if self.strip_rust_tests and determine_language(relative_path) == "rust":
            content = strip_rust_test_modules(content)
        return content

    def stream(self, entries: Iterable[FileEntry]) -> Iterator[str]:
        """Generate one chunk per rendered file.

        Args:
            entries: The selected files, in output order. Directory entries are ignored.

        Yields:
            A complete code block followed by the separating blank line.

        Raises:
            ReadError: If a file cannot be read and read_error_action is FAIL.
        """
        for entry in entries:
            if entry.is_dir:
                continue
            try:
                content = self.read_file(entry.relative_path)
            except ReadError as e:
                if self.read_error_action == ReadErrorAction.FAIL:
                    raise
                self.skipped_count += 1
                if self.on_warning is not None:
                    self.on_warning(f"Skipping '{e.path}': {e.reason}")
                continue

            self.file_count += 1
            yield format_block(entry.relative_path, content) + "\n"

    def render(self, entries: Iterable[FileEntry]) -> str:
        """Get the blocks for all entries as a single string."""
        return "".join(self.stream(entries))
