"""Command-line argument parsing for codefence.

This module defines the command-line interface for codefence, handling
argument parsing and validation.
"""

import argparse
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Type, Union

from codefence import __version__
from codefence.exceptions import InvalidArgumentsError
from codefence.exclusion_rules.base_rules import BaseExclusionRules


def create_exclusion_action(exclusion_rules: BaseExclusionRules) -> Type[argparse.Action]:
    """Create an action class that feeds -e/--exclude and -i/--ignore into exclusion rules.

    Rules are added while the command line is parsed, so files and single
    patterns keep the order in which they were given. This matters for
    negated patterns such as "!keep.log".

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        A custom action class for use with argparse.
    """

    class ExclusionRulesAction(argparse.Action):
        def __init__(self, option_strings: List[str], dest: str, **kwargs: Any) -> None:
            super().__init__(option_strings, dest, **kwargs)

        def __call__(
            self,
            parser: argparse.ArgumentParser,
            namespace: argparse.Namespace,
            values: Union[str, Sequence[Any], None],
            option_string: Optional[str] = None,
        ) -> None:
            if values is None:
                return

            if option_string in ("-e", "--exclude"):
                try:
                    exclusion_rules.load_rules(values if isinstance(values, (str, os.PathLike)) else str(values))
                except FileNotFoundError as e:
                    parser.error(str(e))
            else:
                exclusion_rules.add_rule(str(values))

            items = getattr(namespace, self.dest, None) or []
            items.append(values)
            setattr(namespace, self.dest, items)

    return ExclusionRulesAction


def create_parser(exclusion_rules: BaseExclusionRules) -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Args:
        exclusion_rules: The exclusion rules object to update during parsing.

    Returns:
        An ArgumentParser instance configured with codefence's options.
    """
    description = """
    codefence: Concatenate source files into fenced code blocks for LLM prompts.

    Walks a directory, selects the files matching any glob pattern, and prints each
    one as a Markdown code block tagged with its language and labeled with its
    path. Alternatively, prints a tree diagram of the selected files.

    Patterns are matched against paths relative to the directory:
      *.rs        Rust files at the top level only
      **/*.rs     Rust files at any depth
      src/**      everything below src/

    Hidden files and directories, lock files, and paths ignored by the
    .gitignore files in the directory and its subdirectories are skipped unless
    --hidden or --no-gitignore is given.
    """

    epilog = """
    Examples:
      # All Rust sources below the current directory
      codefence -p "**/*.rs"

      # Python sources of another project, without tests
      codefence -d ~/src/project -p "**/*.py" --ignore-tests

      # Rust sources and manifests together
      codefence -p "**/*.rs" -p "**/Cargo.toml"

      # Tree diagram of what would be included
      codefence -p "src/**" --tree

      # Explicit file list from another tool
      git diff --name-only | codefence --files

      # Additional exclusions, from a file or one pattern at a time
      codefence -p "**/*" -e .dockerignore -i "*.min.js" -i "vendor/"

      # Write to a file and report token counts on stderr
      codefence -p "**/*.go" -o context.md -t gpt-4o -s stderr
    """

    parser = argparse.ArgumentParser(
        prog="codefence",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-V", "--version", action="version", version=f"codefence {__version__}", help="Show the version and exit"
    )

    ExclusionAction = create_exclusion_action(exclusion_rules)

    parser.add_argument(
        "-d",
        "--dir",
        type=Path,
        default=Path("."),
        metavar="DIR",
        help="Directory to scan. Paths in the output are relative to it (default: current directory).",
    )

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "-p",
        "--pattern",
        dest="patterns",
        action="extend",
        nargs="+",
        metavar="GLOB",
        help=(
            "Glob pattern selecting files, relative to the directory (e.g. '**/*.rs'). Takes several patterns "
            "and can be specified multiple times; a file matching any of them is selected."
        ),
    )
    selection.add_argument(
        "--files",
        action="store_true",
        help="Read the files to include from stdin, one path per line, instead of scanning the directory.",
    )

    parser.add_argument(
        "--ignore-tests",
        action="store_true",
        help="Skip test files and directories, and strip '#[cfg(test)] mod tests' blocks from Rust files.",
    )
    parser.add_argument(
        "--tree",
        action="store_true",
        help="Print a tree diagram of the selected files instead of their contents.",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        type=Path,
        metavar="FILE",
        action=ExclusionAction,
        help="File of gitignore-style exclusion patterns (can be specified multiple times).",
    )
    parser.add_argument(
        "-i",
        "--ignore",
        type=str,
        metavar="PATTERN",
        action=ExclusionAction,
        help=(
            "Single gitignore-style exclusion pattern such as '*.log', 'build/' or '!keep.log'. Can be "
            "specified multiple times and is applied in order with -e/--exclude."
        ),
    )
    parser.add_argument(
        "--hidden",
        action="store_true",
        help="Include hidden files and directories and lock files.",
    )
    parser.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Do not apply the .gitignore files found in the directory.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file path. If not specified, output is written to stdout. The file itself is never included.",
    )
    parser.add_argument(
        "-t",
        "--tokenizer",
        metavar="MODEL",
        help="Tokenizer model or encoding for counting tokens (e.g. gpt-4o, cl100k_base). Enables token counting.",
    )
    parser.add_argument(
        "-s",
        "--summary",
        metavar="DEST",
        choices=["stderr", "stdout"],
        help="Print a summary of files, lines, characters and tokens. Valid destinations: stderr, stdout.",
    )
    parser.add_argument(
        "--read-errors",
        choices=["warn", "fail"],
        default="warn",
        help="How to handle files that are binary, not UTF-8, or unreadable (default: warn).",
    )
    parser.add_argument(
        "-P",
        "--permission-action",
        choices=["ignore", "warn", "fail"],
        default="warn",
        help="How to handle directories that cannot be read (default: warn).",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command-line arguments.

    Performs validation that argparse cannot express directly.

    Args:
        args: Parsed command-line arguments.

    Raises:
        InvalidArgumentsError: If any arguments fail validation.
    """
    if not args.patterns and not args.files:
        raise InvalidArgumentsError("one of the arguments -p/--pattern --files is required")