"""
DumpStats Collector Component

Turns a stream of SBS/BaseStation messages into receiver statistics and
keeps them on disk.

Main Classes:
    - ReceiverStats: Statistics state and message aggregation
    - FlightBuffer: ICAO24/callsign deduplication for airline counts
    - FlushScheduler: Once-a-minute snapshot trigger
    - StatsCollector: Processing loop
    - FeedClient: dump1090 SBS TCP client

Example:
    >>> from dumpstats.collector import FeedClient, ReceiverStats, StatsCollector
    >>> stats = ReceiverStats(50.0, 16.0)
    >>> collector = StatsCollector(stats, 'stats.out')
    >>> with FeedClient('127.0.0.1', 30003) as feed:
    ...     collector.run(feed.lines())
"""

# Core collector components
from .stats import MessageType, ReceiverStats
from .flight_buffer import FlightBuffer, FlightStamp
from .parser import SBSMessage, parse_message
from .snapshot import export_snapshot, load_snapshot
from .scheduler import FlushScheduler
from .collector import StatsCollector
from .feed import FeedClient

# Modules
from . import constants

__all__ = [
    # Main classes
    "ReceiverStats",
    "MessageType",
    "FlightBuffer",
    "FlightStamp",
    "FlushScheduler",
    "StatsCollector",
    "FeedClient",
    # Parsing and persistence
    "SBSMessage",
    "parse_message",
    "export_snapshot",
    "load_snapshot",
    # Modules
    "constants",
]
