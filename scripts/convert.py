#!/usr/bin/env python3
"""
DumpStats Chart Converter Script

Usage:
    python scripts/convert.py [--config CONFIG_FILE] [-o OUT_DIR] [-t THRESHOLD] [-a AIRLINE_DB] FILE

Renders a snapshot file into maps and chart data.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dumpstats.config import Config, setup_logging
from dumpstats.collector import ReceiverStats
from dumpstats.exceptions import AirlineDatabaseError, SnapshotFormatError
from dumpstats.visualization import AirlineLookup, ChartEmitter

logger = logging.getLogger("dumpstats.convert")


def main(argv=None):
    """Main entry point for chart conversion."""
    parser = argparse.ArgumentParser(
        description="DumpStats - convert a snapshot file into maps and charts"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "-o", "--out-dir", type=str, help="Output directory (default: from config)"
    )
    parser.add_argument(
        "-t",
        "--threshold",
        type=int,
        help="Leave out airlines counted this many times or fewer",
    )
    parser.add_argument(
        "-a", "--airline-db", type=str, help="Airline reference file (default: from config)"
    )
    parser.add_argument("file", type=str, help="Snapshot file")

    args = parser.parse_args(argv)

    config = Config(args.config)
    setup_logging(config.log_level, config.log_format, config.log_file)

    threshold = args.threshold if args.threshold is not None else config.company_threshold
    if threshold < 0:
        parser.error("threshold must not be negative")

    output_dir = args.out_dir or config.chart_dir
    airline_db = args.airline_db or config.airline_db_path

    try:
        stats = ReceiverStats.load(args.file)
    except SnapshotFormatError as e:
        logger.critical("%s", e)
        print(f"❌ ERROR: Invalid format of init file: {args.file}")
        sys.exit(1)

    try:
        airlines = AirlineLookup.load(airline_db)
    except AirlineDatabaseError as e:
        logger.critical("%s", e)
        print(f"❌ ERROR: Error while loading airline database: {airline_db}")
        sys.exit(1)

    emitter = ChartEmitter(stats, airlines, company_threshold=threshold)
    paths = emitter.generate_all(output_dir)

    print("✅ Converting successful:")
    for path in paths:
        print(f"   {path}")


if __name__ == "__main__":
    main()
