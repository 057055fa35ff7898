#!/usr/bin/env python3
"""
DumpStats Collector Script

Usage:
    python scripts/collect.py [--config CONFIG_FILE] [-p LAT -m LON] [-f FILE] [-d] [-l LOGFILE] [HOST] [PORT]

Starts from scratch when a receiver position is given, otherwise continues
from the snapshot file.
"""

import sys
import argparse
import logging
import os
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dumpstats.config import Config, setup_logging
from dumpstats.collector import FeedClient, ReceiverStats, StatsCollector
from dumpstats.exceptions import FeedError, SnapshotFormatError

logger = logging.getLogger("dumpstats.collect")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="DumpStats - collect statistics from a dump1090 SBS feed"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "-p", "--lat", type=float, help="Receiver latitude for a scratch start"
    )
    parser.add_argument(
        "-m", "--lon", type=float, help="Receiver longitude for a scratch start"
    )
    parser.add_argument(
        "-f",
        "--file",
        type=str,
        help="Snapshot file to load from and write to (default: from config)",
    )
    parser.add_argument(
        "-d", "--display", action="store_true", help="Print incoming messages"
    )
    parser.add_argument(
        "-l",
        "--log-file",
        type=str,
        help="Write debug log, one record per message (grows large)",
    )
    parser.add_argument("host", nargs="?", help="Feeder host (default: from config)")
    parser.add_argument(
        "port", nargs="?", type=int, help="Feeder SBS port (default: from config)"
    )
    return parser


def create_stats(args, config: Config, snapshot_path: str) -> ReceiverStats:
    """
    Create statistics for this run.

    Raises:
        SnapshotFormatError: If the snapshot exists but is invalid
    """
    if args.lat is not None:
        logger.info("Scratch start at %s, %s", args.lat, args.lon)
        return ReceiverStats(args.lat, args.lon)

    if os.path.exists(snapshot_path):
        logger.info("Loading start from %s", snapshot_path)
        return ReceiverStats.load(snapshot_path)

    logger.warning(
        "No snapshot at %s, scratch start at configured receiver %s",
        snapshot_path,
        config.receiver_name,
    )
    return ReceiverStats(config.receiver_latitude, config.receiver_longitude)


def main(argv=None):
    """Main entry point for the collector."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        parser.error("both -p LAT and -m LON are required for a scratch start")

    config = Config(args.config)

    if args.log_file:
        setup_logging("DEBUG", config.log_format, args.log_file)
    else:
        setup_logging(config.log_level, config.log_format, config.log_file)

    snapshot_path = args.file or config.snapshot_path
    host = args.host or config.feed_host
    port = args.port or config.feed_port

    try:
        stats = create_stats(args, config, snapshot_path)
    except SnapshotFormatError as e:
        logger.critical("%s", e)
        print(f"❌ ERROR: Invalid format of init file: {snapshot_path}")
        sys.exit(1)

    collector = StatsCollector(stats, snapshot_path, display=args.display)

    try:
        with FeedClient(host, port, timeout=config.feed_timeout) as feed:
            collector.run(feed.lines())
    except FeedError as e:
        logger.error("%s", e)
        print(f"❌ Feed error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
