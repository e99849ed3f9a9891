"""Command-line interface for codefence.

This module provides the codefence command, which prints the files of a
directory that match a glob pattern as fenced code blocks, or as a tree
diagram. It handles argument parsing, output writing, and signal management
for graceful interruption handling.

Exit Codes:
    0: Successful completion, including when no file matched
    1: Runtime error (missing directory, unreadable file with --read-errors=fail, ...)
    2: Invalid arguments or invalid glob pattern
    126: Permission denied with -P fail
    130: Interrupted by SIGINT (Ctrl+C)
    141: Broken pipe (SIGPIPE) on Unix-like systems

Example:
    # Rust sources as code blocks
    $ codefence -p "**/*.rs"

    # Tree diagram of a subdirectory, test files excluded
    $ codefence -d project -p "src/**" --tree --ignore-tests
"""

import argparse
import sys
from collections.abc import Mapping
from typing import Optional

from codefence.cli.argparser import create_parser, validate_args
from codefence.cli.safe_writer import SafeWriter
from codefence.cli.signal_handler import setup_signal_handling, signal_handler
from codefence.codefence import StreamingCodeFence
from codefence.exceptions import (
    CodeFenceError,
    InvalidArgumentsError,
    InvalidPatternError,
)
from codefence.exclusion_rules.git_rules import GitIgnoreExclusionRules
from codefence.filter_pipeline import read_file_list
from codefence.renderers.read_error_action import ReadErrorAction
from codefence.types import RenderMode, RenderOptions
from codefence.walker.permission_action import PermissionAction

EXIT_RUNTIME_ERROR = 1
EXIT_USAGE_ERROR = 2
EXIT_PERMISSION_DENIED = 126
EXIT_SIGINT = 130
EXIT_SIGPIPE = 141

PERMISSION_ACTIONS = {
    "ignore": PermissionAction.IGNORE,
    "warn": PermissionAction.WARN,
    "fail": PermissionAction.RAISE,
}


def format_counts(counts: Mapping[str, Optional[int]]) -> str:
    """Format the counts into a human-readable string.

    Args:
        counts: Mapping containing the count metrics.

    Returns:
        One "Label: value" line per count. Tokens are only listed when counted.

    Example:
        >>> counts = {"directories": 0, "files": 2, "skipped": 0, "lines": 9, "tokens": None, "characters": 120}
        >>> print(format_counts(counts))
        Directories: 0
        Files: 2
        Skipped: 0
        Lines: 9
        Characters: 120
    """
    result = [
        f"Directories: {counts['directories']}",
        f"Files: {counts['files']}",
        f"Skipped: {counts['skipped']}",
        f"Lines: {counts['lines']}",
        f"Characters: {counts['characters']}",
    ]

    if counts["tokens"] is not None:
        result.insert(4, f"Tokens: {counts['tokens']}")

    return "\n".join(result)


def print_warning(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def build_options(args: argparse.Namespace) -> RenderOptions:
    """Turn parsed arguments into RenderOptions.

    Raises:
        InvalidArgumentsError: If the combination of arguments is invalid.
    """
    return RenderOptions(
        patterns=args.patterns or (),
        ignore_tests=args.ignore_tests,
        mode=RenderMode.TREE if args.tree else RenderMode.CONCAT,
        files_from_stdin=args.files,
        include_hidden=args.hidden,
        use_gitignore=not args.no_gitignore,
    )


def run(args: argparse.Namespace, exclusion_rules: GitIgnoreExclusionRules) -> int:
    """Execute one invocation with parsed arguments.

    Args:
        args: Parsed command-line arguments.
        exclusion_rules: Rules collected from -e/--exclude and -i/--ignore.

    Returns:
        The process exit code.
    """
    try:
        validate_args(args)
        options = build_options(args)
        file_list = read_file_list(sys.stdin) if args.files else None
        converter = StreamingCodeFence(
            args.dir,
            options=options,
            exclusion_rules=exclusion_rules if exclusion_rules.has_rules() else None,
            file_list=file_list,
            tokenizer_model=args.tokenizer,
            permission_action=PERMISSION_ACTIONS[args.permission_action],
            read_error_action=ReadErrorAction(args.read_errors),
            on_warning=print_warning,
            output_path=args.output,
        )
    except (InvalidArgumentsError, InvalidPatternError) as e:
        print_error(str(e))
        return EXIT_USAGE_ERROR
    except (CodeFenceError, ValueError) as e:
        # Missing directory, missing tiktoken, unknown tokenizer model
        print_error(str(e))
        return EXIT_RUNTIME_ERROR

    output_file = args.output if args.output else sys.stdout.fileno()

    try:
        with SafeWriter(output_file) as safe_writer:
            try:
                for chunk in converter.stream():
                    safe_writer.write(chunk)

                if args.summary:
                    counts = {
                        "directories": converter.directory_count,
                        "files": converter.file_count,
                        "skipped": converter.skipped_count,
                        "lines": converter.line_count,
                        "tokens": converter.token_count,
                        "characters": converter.character_count,
                    }
                    count_output_str = format_counts(counts)

                    if args.summary == "stderr":
                        print(count_output_str, file=sys.stderr)
                    elif args.output:
                        print(count_output_str)
                    else:
                        safe_writer.write("\n" + count_output_str + "\n")

            except BrokenPipeError:
                pass  # SafeWriter is closed by the context manager
    except PermissionError as e:
        print_error(str(e))
        return EXIT_PERMISSION_DENIED
    except Exception as e:
        print_error(str(e))
        return EXIT_RUNTIME_ERROR

    if signal_handler.sigpipe_received.is_set():
        return EXIT_SIGPIPE
    if signal_handler.sigint_received.is_set():
        return EXIT_SIGINT
    return 0


def main() -> None:
    """Main entry point for the codefence command-line interface.

    Exit codes:
        0: Successful completion
        1: Runtime error during execution
        2: Invalid arguments or glob pattern
        126: Permission denied
        130: Interrupted by SIGINT (Ctrl+C)
        141: Broken pipe (SIGPIPE) on Unix-like systems
    """
    setup_signal_handling()

    # Populated while the command line is parsed, in option order
    exclusion_rules = GitIgnoreExclusionRules()
    parser = create_parser(exclusion_rules)
    args = parser.parse_args()

    exit_code = run(args, exclusion_rules)
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()
