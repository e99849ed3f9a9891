"""Unit tests for the SafeWriter class in codefence CLI."""

import errno
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from codefence.cli.safe_writer import SafeWriter
from codefence.cli.signal_handler import signal_handler


@pytest.fixture
def output_file(tmp_path):
    return tmp_path / "out.md"


def test_safe_writer_init_with_fd():
    writer = SafeWriter(3)

    assert writer.file == 3
    assert writer.fd == 3
    assert writer._file_obj is None
    assert not writer._closed


def test_safe_writer_init_with_path_object():
    with patch("pathlib.Path.open") as mock_open_func:
        mock_file = MagicMock()
        mock_file.fileno.return_value = 5
        mock_open_func.return_value = mock_file

        path = Path("/path/to/out.md")
        writer = SafeWriter(path)

        mock_open_func.assert_called_once_with("wb")
        assert writer.file == path
        assert writer.fd == 5
        assert writer._file_obj is mock_file


def test_safe_writer_init_with_invalid_type():
    with pytest.raises(TypeError, match="Expected int, str, or PathLike"):
        SafeWriter(42.0)


def test_safe_writer_write():
    with patch("os.write", return_value=9) as mock_write:
        SafeWriter(3).write("test data")

    mock_write.assert_called_once()
    fd, data = mock_write.call_args[0]
    assert fd == 3
    assert bytes(data) == b"test data"


def test_safe_writer_write_completes_partial_writes():
    written = []

    def partial_write(fd, data):
        chunk = bytes(data[:4])
        written.append(chunk)
        return len(chunk)

    with patch("os.write", side_effect=partial_write):
        SafeWriter(3).write("fn main() {}")

    assert b"".join(written) == b"fn main() {}"
    assert len(written) == 3


def test_safe_writer_write_after_close():
    writer = SafeWriter(3)
    writer.close()

    with pytest.raises(ValueError, match="Cannot write to closed SafeWriter"):
        writer.write("test data")


@pytest.mark.parametrize("flag", ["sigpipe_received", "sigint_received"])
def test_safe_writer_stops_after_signal(flag):
    getattr(signal_handler, flag).set()

    with patch("os.write") as mock_write, pytest.raises(BrokenPipeError):
        SafeWriter(3).write("test data")

    mock_write.assert_not_called()


def test_safe_writer_write_with_os_error():
    with patch("os.write", side_effect=OSError(errno.EIO, "Input/output error")):
        with pytest.raises(OSError) as excinfo:
            SafeWriter(3).write("test data")

    assert excinfo.value.errno == errno.EIO
    assert not signal_handler.sigpipe_received.is_set()


def test_safe_writer_write_with_epipe():
    with patch("os.write", side_effect=OSError(errno.EPIPE, "Broken pipe")):
        with pytest.raises(BrokenPipeError):
            SafeWriter(3).write("test data")

    assert signal_handler.sigpipe_received.is_set()


def test_safe_writer_close_with_file():
    mock_file = MagicMock()
    writer = SafeWriter(3)
    writer._file_obj = mock_file

    writer.close()
    writer.close()  # Second close is a no-op

    mock_file.close.assert_called_once()
    assert writer._closed


def test_safe_writer_close_with_error():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EIO, "I/O error")
    writer = SafeWriter(3)
    writer._file_obj = mock_file

    with pytest.raises(OSError) as excinfo:
        writer.close()

    assert excinfo.value.errno == errno.EIO


def test_safe_writer_close_with_broken_pipe():
    mock_file = MagicMock()
    mock_file.close.side_effect = OSError(errno.EPIPE, "Broken pipe")
    writer = SafeWriter(3)
    writer._file_obj = mock_file

    writer.close()

    assert writer._closed


def test_safe_writer_writes_utf8_file(output_file):
    text = "```rust\n// ./src/世界.rs\nfn main() {} // 🌍\n```\n"

    with SafeWriter(output_file) as writer:
        writer.write(text)

    assert output_file.read_bytes() == text.encode("utf-8")


def test_safe_writer_truncates_existing_file(output_file):
    output_file.write_text("old contents that are longer\n")

    with SafeWriter(str(output_file)) as writer:
        writer.write("new\n")

    assert output_file.read_text() == "new\n"


def test_safe_writer_context_manager_with_exception():
    with pytest.raises(ValueError):
        with SafeWriter(3) as writer:
            raise ValueError("Test exception")

    assert writer._closed
