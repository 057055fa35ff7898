"""
Tests for the SBS feed client.
"""

import io
import socket
import threading
import time

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from dumpstats.collector.feed import FeedClient
from dumpstats.exceptions import FeedError

FEED_DATA = (
    "MSG,1,1,1,4CA2D6,1,,,,,RYR123,,,,,,,,,,,\r\n"
    "MSG,3,1,1,4CA2D6,1,,,,,,38000,,,50.10,16.10,,,,,,\r\n"
    "MSG,4,1,1,4CA2D6,1,,,,,,,450,90,,,0,,,,,\n"
)


@pytest.fixture
def mock_socket():
    """Socket whose file view returns FEED_DATA."""
    sock = MagicMock()
    sock.makefile.return_value = io.StringIO(FEED_DATA)
    return sock


class TestFeedClient:
    """Tests for FeedClient class."""

    def test_init(self):
        """Test client defaults."""
        client = FeedClient()
        assert client.host == "127.0.0.1"
        assert client.port == 30003
        assert client.sock is None
        assert client.lines_read == 0

    @patch("dumpstats.collector.feed.socket.create_connection")
    def test_connect(self, mock_connect, mock_socket):
        """Test connection parameters."""
        mock_connect.return_value = mock_socket

        client = FeedClient("192.168.1.20", 30003, timeout=5)
        client.connect()

        mock_connect.assert_called_once_with(("192.168.1.20", 30003), timeout=5)
        assert client.sock is mock_socket
        mock_socket.settimeout.assert_called_once_with(None)

    @patch("dumpstats.collector.feed.socket.create_connection")
    def test_connect_failure(self, mock_connect):
        """Unreachable feeders raise FeedError."""
        mock_connect.side_effect = ConnectionRefusedError("refused")

        client = FeedClient("127.0.0.1", 30003)
        with pytest.raises(FeedError, match="127.0.0.1:30003"):
            client.connect()
        assert client.sock is None

    @patch("dumpstats.collector.feed.socket.create_connection")
    def test_lines(self, mock_connect, mock_socket):
        """Lines arrive in order without terminators."""
        mock_connect.return_value = mock_socket

        with FeedClient("127.0.0.1", 30003) as feed:
            lines = list(feed.lines())

        assert lines == [
            "MSG,1,1,1,4CA2D6,1,,,,,RYR123,,,,,,,,,,,",
            "MSG,3,1,1,4CA2D6,1,,,,,,38000,,,50.10,16.10,,,,,,",
            "MSG,4,1,1,4CA2D6,1,,,,,,,450,90,,,0,,,,,",
        ]
        assert feed.lines_read == 3
        mock_socket.close.assert_called_once()

    @patch("dumpstats.collector.feed.socket.create_connection")
    def test_lines_connects_lazily(self, mock_connect, mock_socket):
        """Iterating an unconnected client opens the connection."""
        mock_connect.return_value = mock_socket

        client = FeedClient("127.0.0.1", 30003)
        assert next(client.lines()).startswith("MSG,1")
        mock_connect.assert_called_once()

    @patch("dumpstats.collector.feed.socket.create_connection")
    def test_broken_stream(self, mock_connect, mock_socket):
        """Socket errors while reading raise FeedError."""
        mock_socket.makefile.side_effect = TimeoutError("timed out")
        mock_connect.return_value = mock_socket

        with FeedClient("127.0.0.1", 30003) as feed:
            with pytest.raises(FeedError):
                list(feed.lines())

    @patch("dumpstats.collector.feed.socket.create_connection")
    def test_close_idempotent(self, mock_connect, mock_socket):
        """Closing twice closes the socket once."""
        mock_connect.return_value = mock_socket

        client = FeedClient("127.0.0.1", 30003)
        client.connect()
        client.close()
        client.close()

        mock_socket.close.assert_called_once()
        assert client.sock is None

    def test_idle_feed_keeps_waiting(self):
        """A silence longer than the connect timeout does not end the stream."""
        server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        server.bind(("127.0.0.1", 0))
        server.listen(1)
        port = server.getsockname()[1]

        def serve():
            conn, _ = server.accept()
            with conn:
                conn.sendall(b"MSG,3,1,1,4CA2D6,1,,,,,,38000,,,50.10,16.10,,,,,,\r\n")
                time.sleep(0.6)
                conn.sendall(b"MSG,1,1,1,4CA2D6,1,,,,,RYR123,,,,,,,,,,,\r\n")

        thread = threading.Thread(target=serve, daemon=True)
        thread.start()
        try:
            with FeedClient("127.0.0.1", port, timeout=0.2) as feed:
                lines = list(feed.lines())
        finally:
            thread.join(timeout=5)
            server.close()

        assert len(lines) == 2
        assert lines[1].startswith("MSG,1")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
