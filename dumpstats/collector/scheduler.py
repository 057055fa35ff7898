"""
Flush Scheduler
Decides when the collector writes a snapshot and evicts stale flights.
"""

from typing import Optional

from ..config import Settings


class FlushScheduler:
    """
    Once-a-minute trigger driven by incoming messages.

    A flush is due when a message arrives on a whole period since start
    (``(now - uptime) % period == 0``) and no flush happened yet in the
    current wall clock minute. The minute guard keeps several messages
    arriving within the same second from flushing more than once.
    """

    def __init__(self, uptime: int, period: int = Settings.FLUSH_PERIOD_SECONDS):
        """
        Args:
            uptime: Collector start time in seconds since epoch
            period: Seconds between flushes
        """
        self.uptime = int(uptime)
        self.period = period
        self.last_flush_minute: Optional[int] = None  # no flush yet

    def is_due(self, now: int) -> bool:
        """Check whether a flush is due at the given time."""
        now = int(now)
        return (now - self.uptime) % self.period == 0 and now // 60 != self.last_flush_minute

    def mark_flushed(self, now: int) -> None:
        """Record a flush in the minute containing now."""
        self.last_flush_minute = int(now) // 60

    def tick(self, now: int) -> bool:
        """
        Check and claim a flush slot.

        Returns:
            True if the caller should flush now
        """
        if not self.is_due(now):
            return False
        self.mark_flushed(now)
        return True
