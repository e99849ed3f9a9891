"""Language inference for fenced code block tags.

Languages are inferred from the file name first (for well-known build and
configuration files) and from the extension otherwise. Unknown files get an
empty tag, which renders as a bare fence.
"""

from pathlib import PurePosixPath
from typing import Dict, Optional, Tuple

FILENAME_TO_LANGUAGE: Dict[str, str] = {
    "Makefile": "make",
    "CMakeLists.txt": "cmake",
    "Dockerfile": "docker",
    ".gitignore": "git",
    "build.gradle": "gradle",
    "Cargo.toml": "rust",
    "package.json": "node",
}

EXTENSION_TO_LANGUAGE: Dict[str, str] = {
    "rs": "rust",
    "zig": "zig",
    "zon": "zig",
    "go": "go",
    "py": "python",
    "cpp": "cpp",
    "cc": "cpp",
    "cxx": "cpp",
    "hpp": "cpp",
    "hh": "cpp",
    "hxx": "cpp",
    "c": "c",
    "h": "c",
    "cu": "cuda",
    "cuh": "cuda",
    "js": "javascript",
    "ts": "typescript",
    "java": "java",
    "kt": "kotlin",
    "swift": "swift",
    "lua": "lua",
    "toml": "toml",
    "yaml": "yaml",
    "yml": "yaml",
    "json": "json",
    "txt": "txt",
    "sh": "bash",
    "md": "markdown",
    "proto": "protobuf",
    "cmake": "cmake",
    "html": "html",
    "xml": "xml",
    "css": "css",
    "scss": "scss",
}

# (opening, closing) comment delimiters used for the path line of each block.
LINE_COMMENT_SLASHES = ("//", None)
LINE_COMMENT_HASH = ("#", None)

COMMENT_SYNTAX: Dict[str, Tuple[str, Optional[str]]] = {
    "rust": LINE_COMMENT_SLASHES,
    "cpp": LINE_COMMENT_SLASHES,
    "c": LINE_COMMENT_SLASHES,
    "cuda": LINE_COMMENT_SLASHES,
    "go": LINE_COMMENT_SLASHES,
    "zig": LINE_COMMENT_SLASHES,
    "javascript": LINE_COMMENT_SLASHES,
    "typescript": LINE_COMMENT_SLASHES,
    "java": LINE_COMMENT_SLASHES,
    "swift": LINE_COMMENT_SLASHES,
    "kotlin": LINE_COMMENT_SLASHES,
    "gradle": LINE_COMMENT_SLASHES,
    "json": LINE_COMMENT_SLASHES,
    "node": LINE_COMMENT_SLASHES,
    "protobuf": LINE_COMMENT_SLASHES,
    "python": LINE_COMMENT_HASH,
    "bash": LINE_COMMENT_HASH,
    "yaml": LINE_COMMENT_HASH,
    "toml": LINE_COMMENT_HASH,
    "make": LINE_COMMENT_HASH,
    "cmake": LINE_COMMENT_HASH,
    "docker": LINE_COMMENT_HASH,
    "git": LINE_COMMENT_HASH,
    "txt": LINE_COMMENT_HASH,
    "lua": ("--", None),
    "html": ("<!--", "-->"),
    "xml": ("<!--", "-->"),
    "markdown": ("<!--", "-->"),
    "css": ("/*", "*/"),
    "scss": ("/*", "*/"),
}


def determine_language(file_path: str) -> str:
    """Infer the fence language tag for a file.

    Args:
        file_path: Path of the file; only the final segment is inspected.

    Returns:
        The language tag, or an empty string if the file type is unknown.

    Example:
        >>> determine_language("examples/example.rs")
        'rust'
        >>> determine_language("build/Makefile")
        'make'
        >>> determine_language("LICENSE")
        ''
    """
    name = PurePosixPath(file_path.replace("\\", "/")).name

    if name in FILENAME_TO_LANGUAGE:
        return FILENAME_TO_LANGUAGE[name]

    if "." in name[1:]:
        extension = name.rsplit(".", 1)[1]
        return EXTENSION_TO_LANGUAGE.get(extension, "")

    return ""


def comment_syntax(language: str) -> Tuple[str, Optional[str]]:
    """Get the comment delimiters for a language.

    Args:
        language: A tag returned by determine_language().

    Returns:
        Tuple of (opening, closing) delimiters; closing is None for line comments.
        Unknown languages use "//".
    """
    return COMMENT_SYNTAX.get(language, LINE_COMMENT_SLASHES)


def format_path_comment(relative_path: str, language: str) -> str:
    """Format the comment line naming a file inside its code block.

    Args:
        relative_path: Path relative to the scan root.
        language: The block's language tag.

    Returns:
        The comment text without a trailing newline.

    Example:
        >>> format_path_comment("src/main.py", "python")
        '# ./src/main.py'
        >>> format_path_comment("README.md", "markdown")
        '<!-- ./README.md -->'
    """
    start, end = comment_syntax(language)
    display_path = f"./{relative_path}"
    if end is not None:
        return f"{start} {display_path} {end}"
    return f"{start} {display_path}"
