"""
DumpStats - dump1090 feed statistics collector

Continuously ingests decoded Mode-S/ADS-B messages (SBS/BaseStation format)
from a dump1090-style feeder and keeps long-horizon statistics about what
the receiver sees: polar range, position heatmap, airline counts and
altitude distribution.

Components:
    - collector: Message parsing, aggregation, snapshot persistence
    - visualization: Chart and map generation from collected statistics

Example:
    >>> from dumpstats.collector import ReceiverStats, StatsCollector
    >>> stats = ReceiverStats(50.0, 16.0)
    >>> stats.process("MSG,3,1,1,ABCDEF,1,,,,,,38000,,,50.10,16.10,,,,,,")
    <MessageType.AIRBORNE_POSITION: 3>
"""

from . import collector
from . import visualization
from . import utils
from . import config

DUMPSTATS_VERSION = "v1.0.0"

__version__ = DUMPSTATS_VERSION
__license__ = "GPL-3.0-or-later"

__all__ = [
    "collector",
    "visualization",
    "utils",
    "config",
]
