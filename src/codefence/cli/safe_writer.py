"""Signal-aware output writing for the codefence command line."""

import errno
import os
import types
from pathlib import Path
from typing import Optional, Type, Union

from codefence.cli.signal_handler import signal_handler


class SafeWriter:
    """Writes output to a file descriptor or file, stopping on SIGPIPE or SIGINT.

    Text is written as UTF-8 with os.write, bypassing Python's buffered stdout,
    so nothing is left in a buffer when the reader goes away.

    Attributes:
        file: The file descriptor or path the writer was created for.
        fd: The file descriptor being written to.

    Example:
        >>> with SafeWriter(Path("out.md")) as writer:  # doctest: +SKIP
        ...     writer.write("```rust\\n")
    """

    def __init__(self, file: Union[int, str, os.PathLike]):
        """Initialize the writer.

        Args:
            file: A file descriptor (e.g. sys.stdout.fileno()), or a path to create
                or truncate.

        Raises:
            TypeError: If file is neither an int nor a path.
            OSError: If the path cannot be opened for writing.
        """
        self.file = file
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write text completely.

        Args:
            data: Text to write.

        Raises:
            BrokenPipeError: If a signal was received or the reader closed the pipe.
                A closed pipe also sets the SIGPIPE flag.
            OSError: For any other I/O error.
            ValueError: If the writer is closed.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.interrupted:
            raise BrokenPipeError()

        view = memoryview(data.encode("utf-8"))
        try:
            while view:
                written = os.write(self.fd, view)
                view = view[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                signal_handler.sigpipe_received.set()
                raise BrokenPipeError()
            raise

    def close(self) -> None:
        """Close the file if this writer opened it. Broken pipe errors while closing are ignored."""
        if self._closed:
            return

        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # An exception from the with block takes precedence
            if exc_type is None:
                raise
