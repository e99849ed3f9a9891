class CodeFenceError(Exception):
    """
    Base class for all errors raised by codefence.

    Catching this class handles every failure the library reports on purpose, while
    the more specific subclasses also derive from the matching built-in exception
    so callers that only know about ValueError or OSError keep working.
    """

    pass


class InvalidArgumentsError(CodeFenceError, ValueError):
    """
    Exception raised when a combination of options cannot be honored.

    Example:
        >>> error = InvalidArgumentsError("--pattern is required unless --files is given")
        >>> str(error)
        '--pattern is required unless --files is given'
        >>> isinstance(error, ValueError)
        True
    """

    pass


class InvalidPatternError(CodeFenceError, ValueError):
    """
    Exception raised when a glob pattern cannot be compiled.

    Attributes:
        pattern (str): The pattern as supplied by the caller.
        reason (str): Why compilation failed.

    Example:
        >>> error = InvalidPatternError("src/[a-", "unterminated bracket expression")
        >>> str(error)
        "Invalid pattern 'src/[a-': unterminated bracket expression"
    """

    def __init__(self, pattern: str, reason: str) -> None:
        """
        Initialize the exception with the offending pattern.

        Args:
            pattern (str): The pattern that failed to compile.
            reason (str): A short description of the failure.
        """
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern '{pattern}': {reason}")


class DirectoryNotFoundError(CodeFenceError, FileNotFoundError):
    """
    Exception raised when the scan root does not exist or is not a directory.

    Attributes:
        path (str): The path that was requested as the scan root.

    Example:
        >>> error = DirectoryNotFoundError("/no/such/dir")
        >>> str(error)
        "'/no/such/dir' is not a valid directory"
    """

    def __init__(self, path: str) -> None:
        """
        Initialize the exception with the requested root.

        Args:
            path (str): The requested scan root.
        """
        self.path = path
        super().__init__(f"'{path}' is not a valid directory")

    def __str__(self) -> str:
        return f"'{self.path}' is not a valid directory"


class ReadError(CodeFenceError, OSError):
    """
    Exception raised when a matched file cannot be read as UTF-8 text.

    This covers files that cannot be opened, binary files (NUL bytes), and files
    that are not valid UTF-8. Whether the error aborts the run or only skips the
    file is decided by the caller's ReadErrorAction.

    Attributes:
        path (str): Relative path of the file.
        reason (str): Why the file could not be read.

    Example:
        >>> error = ReadError("assets/logo.png", "binary file")
        >>> str(error)
        "Cannot read 'assets/logo.png': binary file"
    """

    def __init__(self, path: str, reason: str) -> None:
        """
        Initialize the exception with the file and the failure reason.

        Args:
            path (str): Relative path of the unreadable file.
            reason (str): A short description of the failure.
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read '{path}': {reason}")

    def __str__(self) -> str:
        return f"Cannot read '{self.path}': {self.reason}"


class TokenizerNotAvailableError(CodeFenceError):
    """
    Exception raised when attempting to use token counting functionality without the required tokenizer package.

    This exception is raised when the `tiktoken` package is not installed but token counting
    functionality is requested. The tiktoken package is an optional dependency that must be
    explicitly installed using the 'token_counting' extra.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        """
        Initialize the exception with an informative error message.

        Args:
            message (str, optional): Base error message. Defaults to "Tokenizer (tiktoken) is not installed."
                Installation instructions will be appended to this message.
        """
        self.message = (
            f"{message} To enable token counting, install codefence with the 'token_counting' "
            "extra: 'pip install codefence[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(CodeFenceError):
    """
    Exception raised when token counting fails during execution.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass
