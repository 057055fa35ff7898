"""
SBS Feed Client
Reads BaseStation lines from a dump1090 TCP output port (30003 by default).
"""

import logging
import socket
from typing import Iterator, Optional

from ..config import Settings
from ..exceptions import FeedError

logger = logging.getLogger(__name__)


class FeedClient:
    """
    TCP client for an SBS feed.

    Yields complete lines in arrival order. A connection closed by the
    feeder ends the stream cleanly.

    Example:
        >>> with FeedClient('127.0.0.1', 30003) as feed:
        ...     for line in feed.lines():
        ...         print(line)
    """

    def __init__(
        self,
        host: str = Settings.DEFAULT_FEED_HOST,
        port: int = Settings.DEFAULT_FEED_PORT,
        timeout: Optional[float] = Settings.DEFAULT_FEED_TIMEOUT,
    ):
        """
        Initialize feed client.

        Args:
            host: Feeder host name or address
            port: Feeder SBS port
            timeout: Connect timeout in seconds, None to block forever.
                     Reads block until data arrives.
        """
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sock: Optional[socket.socket] = None
        self.lines_read = 0

    def connect(self) -> None:
        """
        Open the TCP connection.

        Raises:
            FeedError: If the feeder cannot be reached
        """
        logger.info("Connecting to SBS feed at %s:%d ...", self.host, self.port)
        try:
            self.sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise FeedError(f"Unable to connect to {self.host}:{self.port}: {e}") from e
        self.sock.settimeout(None)
        logger.info("Connected to SBS feed at %s:%d", self.host, self.port)

    def lines(self) -> Iterator[str]:
        """
        Iterate over incoming lines, without line terminators.

        Raises:
            FeedError: If the connection breaks or times out
        """
        if self.sock is None:
            self.connect()

        try:
            with self.sock.makefile("r", encoding="ascii", errors="replace", newline="\n") as f:
                for line in f:
                    self.lines_read += 1
                    yield line.rstrip("\r\n")
        except OSError as e:
            raise FeedError(f"SBS feed {self.host}:{self.port} failed: {e}") from e

        logger.info("SBS feed %s:%d closed after %d lines", self.host, self.port, self.lines_read)

    def close(self) -> None:
        """Close the connection."""
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None

    def __enter__(self) -> "FeedClient":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
