"""Tests for port selection."""

import socket

import pytest

from playlist_player.web_launcher import find_available_port, is_port_available


@pytest.fixture
def busy_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        s.listen(1)
        yield s.getsockname()[1]


def test_busy_port_is_unavailable(busy_port):
    assert is_port_available(busy_port, "127.0.0.1") is False


def test_skips_busy_port(busy_port):
    port = find_available_port(busy_port, max_attempts=20, host="127.0.0.1")
    assert busy_port < port < busy_port + 20


def test_raises_when_range_exhausted(busy_port):
    with pytest.raises(RuntimeError, match="No available port"):
        find_available_port(busy_port, max_attempts=1, host="127.0.0.1")
