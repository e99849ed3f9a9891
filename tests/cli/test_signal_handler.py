"""Unit tests for the signal handler module in codefence CLI."""

import os
import signal
import sys
from unittest.mock import MagicMock, patch

import pytest

from codefence.cli.signal_handler import SIGPIPE, SignalHandler, cleanup, setup_signal_handling, signal_handler

requires_sigpipe = pytest.mark.skipif(SIGPIPE is None, reason="SIGPIPE is not available on this platform")


@pytest.fixture
def mock_signal():
    with patch("signal.signal", autospec=True) as mock:
        yield mock


@pytest.fixture
def mock_os():
    with patch("codefence.cli.signal_handler.os", autospec=True) as mock:
        mock.open.return_value = 123
        mock.devnull = os.devnull
        mock.O_WRONLY = os.O_WRONLY
        yield mock


@pytest.fixture
def fresh_signal_handler():
    """Create a SignalHandler separate from the module's singleton."""
    return SignalHandler()


def test_signal_handler_initialization(fresh_signal_handler):
    assert not fresh_signal_handler.sigpipe_received.is_set()
    assert not fresh_signal_handler.sigint_received.is_set()
    assert not fresh_signal_handler.interrupted
    assert fresh_signal_handler.original_sigint_handler is signal.getsignal(signal.SIGINT)


@requires_sigpipe
def test_handle_sigpipe(fresh_signal_handler, mock_signal):
    fresh_signal_handler.handle_sigpipe(SIGPIPE, MagicMock())

    assert fresh_signal_handler.sigpipe_received.is_set()
    assert fresh_signal_handler.interrupted
    mock_signal.assert_called_once_with(SIGPIPE, fresh_signal_handler.original_sigpipe_handler)


def test_handle_sigint(fresh_signal_handler, mock_signal):
    fresh_signal_handler.handle_sigint(signal.SIGINT, MagicMock())

    assert fresh_signal_handler.sigint_received.is_set()
    assert fresh_signal_handler.interrupted
    mock_signal.assert_called_once_with(signal.SIGINT, fresh_signal_handler.original_sigint_handler)


@requires_sigpipe
def test_setup_signal_handling(mock_signal):
    setup_signal_handling()

    assert mock_signal.call_count == 2
    mock_signal.assert_any_call(SIGPIPE, signal_handler.handle_sigpipe)
    mock_signal.assert_any_call(signal.SIGINT, signal_handler.handle_sigint)


def test_cleanup_with_no_signals(mock_os):
    cleanup()

    mock_os.open.assert_not_called()
    mock_os.dup2.assert_not_called()


@pytest.mark.parametrize("flag", ["sigpipe_received", "sigint_received"])
def test_cleanup_after_signal(mock_os, flag):
    getattr(signal_handler, flag).set()

    with patch.object(sys, "stdout") as mock_stdout:
        mock_stdout.fileno.return_value = 1
        cleanup()

    mock_os.open.assert_called_once_with(os.devnull, os.O_WRONLY)
    mock_os.dup2.assert_called_once_with(123, 1)


def test_singleton_instance():
    assert isinstance(signal_handler, SignalHandler)
