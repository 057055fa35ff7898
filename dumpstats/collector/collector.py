"""
DumpStats Collector
Feeds SBS lines into the statistics and writes snapshots once a minute.
"""

import logging
from typing import Iterable, Optional

from ..config import Settings
from ..utils import format_duration
from .scheduler import FlushScheduler
from .stats import MessageType, ReceiverStats

logger = logging.getLogger(__name__)


class StatsCollector:
    """Drives a ReceiverStats instance from a stream of SBS lines."""

    def __init__(
        self,
        stats: ReceiverStats,
        snapshot_path: str,
        scheduler: Optional[FlushScheduler] = None,
        display: bool = False,
        final_flush: bool = True,
    ):
        """
        Initialize collector.

        Args:
            stats: Statistics to update
            snapshot_path: Snapshot file written on every flush
            scheduler: Flush trigger (default: once a minute since stats uptime)
            display: Echo every incoming line to stdout
            final_flush: Write a last snapshot when the stream ends
        """
        self.stats = stats
        self.snapshot_path = snapshot_path
        self.scheduler = scheduler or FlushScheduler(stats.uptime)
        self.display = display
        self.final_flush = final_flush

        self.message_count = 0
        self.id_count = 0
        self.position_count = 0
        self.discarded_count = 0
        self.flush_count = 0
        self.failed_flush_count = 0

    def process_line(self, line: str, now: Optional[int] = None) -> MessageType:
        """
        Process one line and flush if due.

        Args:
            line: Raw SBS line
            now: Current time in seconds since epoch (default: stats clock)

        Returns:
            MessageType of the processed line
        """
        if now is None:
            now = self.stats.now()

        if self.display:
            print(line)

        result = self.stats.process(line, now=now)
        self.message_count += 1

        if result == MessageType.ID:
            self.id_count += 1
        elif result == MessageType.AIRBORNE_POSITION:
            self.position_count += 1
        else:
            self.discarded_count += 1

        if result == MessageType.DISCARDED:
            logger.debug("Discarded message.")
        else:
            logger.debug("Logged type %d message.", int(result))

        if self.scheduler.tick(now):
            self.flush(now)

        return result

    def flush(self, now: Optional[int] = None) -> bool:
        """
        Write the snapshot and evict stale flight buffer entries.

        A failed write is logged and retried on the next flush.

        Returns:
            True if the snapshot was written
        """
        if now is None:
            now = self.stats.now()

        written = self.stats.export(self.snapshot_path, now=now)
        if written:
            self.flush_count += 1
            logger.info("Snapshot written to %s", self.snapshot_path)
        else:
            self.failed_flush_count += 1

        removed = self.stats.flight_buffer.evict(now, Settings.FLIGHT_BUFFER_TTL_SECONDS)
        logger.debug("Flight buffer flushed (%d entries deleted).", removed)

        return written

    def run(self, lines: Iterable[str]) -> None:
        """
        Process lines until the stream ends or the user interrupts.

        Args:
            lines: Line source, e.g. FeedClient.lines() or an open file
        """
        self.print_header()

        try:
            for line in lines:
                self.process_line(line)
            logger.info("Stream ended.")
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping collection.")
        finally:
            self._handle_shutdown()

    def print_header(self):
        """Print collector header information."""
        ref = self.stats.ref
        print("\n" + "=" * 70)
        print("📡 DumpStats - dump1090 feed statistics")
        print("=" * 70)
        print(f"Receiver:   {ref.lat}, {ref.lon}")
        print(f"Snapshot:   {self.snapshot_path}")
        print(f"Airlines:   {len(self.stats.airlines):,} known")
        print(f"Heatmap:    {len(self.stats.heatmap):,} cells")
        print("=" * 70)

    def print_statistics(self):
        """Print message counters of this run."""
        uptime = self.stats.now() - self.stats.uptime
        print(f"\n📊 Collector Statistics:")
        print(f"   Uptime: {format_duration(uptime)}")
        print(f"   Messages processed: {self.message_count:,}")
        print(f"   ID messages: {self.id_count:,}")
        print(f"   Airborne positions: {self.position_count:,}")
        print(f"   Discarded: {self.discarded_count:,}")
        print(f"   Snapshots written: {self.flush_count:,}")
        if self.failed_flush_count:
            print(f"   ⚠️  Failed snapshot writes: {self.failed_flush_count:,}")

    def _handle_shutdown(self):
        """Write a final snapshot and print the summary."""
        if self.final_flush:
            self.flush()
        self.print_statistics()
        print(f"\n💾 Data saved to: {self.snapshot_path}")
