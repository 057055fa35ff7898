"""
Snapshot File Format

The snapshot is the only durable copy of the statistics. It is plain text
with LF line endings and sections in a fixed order:

    timestamp                       seconds since epoch of the write
    reference latitude
    reference longitude
    360 x "lat|lon"                 polar range, bearings 0..359, %.4f
    (blank)
    501 x count                     altitude histogram, FL000..FL500
    (blank)
    "key|count" ...                 heatmap cells
    (blank)
    "PFX|count" ...                 airline designators
    (blank)
    $                               end marker, no trailing newline

A file that deviates from this layout in any way is rejected as a whole:
the aggregates only make sense together, so there is no partial load.
"""

import logging
import os
import time
from typing import Callable, Dict, List, Optional

from ..config import Settings
from ..exceptions import SnapshotFormatError
from ..utils import Coordinate, validate_coordinates
from .constants import (
    SNAPSHOT_AIRLINE_PREFIX_LENGTH,
    SNAPSHOT_FIELD_DELIMITER,
    SNAPSHOT_SECTION_DELIMITER,
    SNAPSHOT_SENTINEL,
)
from .stats import ReceiverStats

logger = logging.getLogger(__name__)


def format_snapshot(stats: ReceiverStats, timestamp: int) -> str:
    """
    Render statistics in snapshot format.

    Args:
        stats: Statistics to render
        timestamp: Value of the timestamp line

    Returns:
        Complete file content
    """
    lines = [str(int(timestamp)), repr(stats.ref.lat), repr(stats.ref.lon)]

    for position in stats.polar_range:
        lines.append(f"{position.lat:.4f}{SNAPSHOT_FIELD_DELIMITER}{position.lon:.4f}")
    lines.append(SNAPSHOT_SECTION_DELIMITER)

    lines.extend(str(count) for count in stats.altitudes)
    lines.append(SNAPSHOT_SECTION_DELIMITER)

    heatmap = stats.heatmap
    for key in sorted(heatmap):
        lines.append(f"{key}{SNAPSHOT_FIELD_DELIMITER}{heatmap[key]}")
    lines.append(SNAPSHOT_SECTION_DELIMITER)

    airlines = stats.airlines
    for prefix in sorted(airlines):
        lines.append(f"{prefix}{SNAPSHOT_FIELD_DELIMITER}{airlines[prefix]}")
    lines.append(SNAPSHOT_SECTION_DELIMITER)

    lines.append(SNAPSHOT_SENTINEL)
    return "\n".join(lines)


def export_snapshot(stats: ReceiverStats, path: str, now: Optional[int] = None) -> bool:
    """
    Write statistics to a snapshot file.

    The content goes to a temporary file next to the target which then
    replaces it, so a crash mid-write leaves the previous snapshot intact.
    On success the timestamp of the statistics is updated.

    Args:
        stats: Statistics to save
        path: Snapshot file path
        now: Timestamp to record (default: stats clock)

    Returns:
        True on success, False if the file could not be written
    """
    if now is None:
        now = stats.now()

    content = format_snapshot(stats, now)
    tmp_path = f"{path}.tmp"

    try:
        with open(tmp_path, "w", encoding="ascii", newline="\n") as f:
            f.write(content)
        os.replace(tmp_path, path)
    except OSError as e:
        logger.error("Unable to write snapshot file %s: %s", path, e)
        try:
            os.remove(tmp_path)
        except OSError:
            pass
        return False

    stats.timestamp = int(now)
    logger.debug("Snapshot written to %s", path)
    return True


class _LineReader:
    """Sequential line access that turns every problem into SnapshotFormatError."""

    def __init__(self, path: str, lines: List[str]):
        self.path = path
        self._lines = lines
        self._index = 0

    def next(self, what: str) -> str:
        if self._index >= len(self._lines):
            raise SnapshotFormatError(self.path, f"unexpected end of file, expected {what}")
        line = self._lines[self._index]
        self._index += 1
        return line

    def fail(self, what: str) -> SnapshotFormatError:
        return SnapshotFormatError(self.path, f"line {self._index}: invalid {what}")

    def integer(self, what: str) -> int:
        line = self.next(what)
        try:
            return int(line)
        except ValueError:
            raise self.fail(what) from None

    def real(self, what: str) -> float:
        line = self.next(what)
        try:
            return float(line)
        except ValueError:
            raise self.fail(what) from None

    def delimiter(self) -> None:
        if self.next("section delimiter") != SNAPSHOT_SECTION_DELIMITER:
            raise self.fail("section delimiter")


def _read_position(reader: _LineReader) -> Coordinate:
    parts = reader.next("polar range entry").split(SNAPSHOT_FIELD_DELIMITER)
    if len(parts) != 2:
        raise reader.fail("polar range entry")
    try:
        position = Coordinate(float(parts[0]), float(parts[1]))
    except ValueError:
        raise reader.fail("polar range entry") from None
    # Four decimals can round a longitude just above -180 down to -180
    on_antimeridian = position.lon == -180.0 and -90 <= position.lat <= 90
    if not (on_antimeridian or validate_coordinates(position.lat, position.lon)):
        raise reader.fail("polar range position")
    return position


def _read_heatmap(reader: _LineReader) -> Dict[int, int]:
    heatmap: Dict[int, int] = {}
    while True:
        line = reader.next("heatmap entry")
        if line == SNAPSHOT_SECTION_DELIMITER:
            return heatmap

        parts = line.split(SNAPSHOT_FIELD_DELIMITER)
        if len(parts) != 2:
            raise reader.fail("heatmap entry")
        try:
            key, count = int(parts[0]), int(parts[1])
        except ValueError:
            raise reader.fail("heatmap entry") from None
        if count < 1:
            raise reader.fail("heatmap count")
        heatmap[key] = count


def _read_airlines(reader: _LineReader) -> Dict[str, int]:
    airlines: Dict[str, int] = {}
    while True:
        line = reader.next("airline entry")
        if line == SNAPSHOT_SECTION_DELIMITER:
            return airlines

        # Designator, one separator character, count
        prefix = line[:SNAPSHOT_AIRLINE_PREFIX_LENGTH]
        if len(prefix) != SNAPSHOT_AIRLINE_PREFIX_LENGTH or not (prefix.isascii() and prefix.isalpha()):
            raise reader.fail("airline designator")
        try:
            count = int(line[SNAPSHOT_AIRLINE_PREFIX_LENGTH + 1:])
        except ValueError:
            raise reader.fail("airline count") from None
        if count < 1:
            raise reader.fail("airline count")

        prefix = prefix.upper()
        airlines[prefix] = airlines.get(prefix, 0) + count


def load_snapshot(path: str, clock: Callable[[], float] = time.time) -> ReceiverStats:
    """
    Restore statistics from a snapshot file.

    Uptime is taken from the clock, not from the file, and the flight
    buffer starts empty.

    Args:
        path: Snapshot file path
        clock: Wall clock for the restored statistics

    Returns:
        Restored statistics

    Raises:
        SnapshotFormatError: If the file cannot be read or is invalid
    """
    try:
        with open(path, "r", encoding="ascii") as f:
            lines = f.read().split("\n")
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotFormatError(path, f"unable to read file: {e}") from e

    reader = _LineReader(path, lines)

    timestamp = reader.integer("timestamp")
    ref = Coordinate(reader.real("reference latitude"), reader.real("reference longitude"))
    if not validate_coordinates(ref.lat, ref.lon):
        raise SnapshotFormatError(path, f"reference position {ref.lat}, {ref.lon} out of range")

    polar = [_read_position(reader) for _ in range(Settings.POLAR_RANGE_SLOTS)]
    reader.delimiter()

    altitudes = [reader.integer("altitude count") for _ in range(Settings.MAX_FLIGHT_LEVEL + 1)]
    reader.delimiter()

    heatmap = _read_heatmap(reader)
    airlines = _read_airlines(reader)

    if reader.next("end marker") != SNAPSHOT_SENTINEL:
        raise reader.fail("end marker")

    try:
        stats = ReceiverStats.from_aggregates(
            ref, polar, altitudes, heatmap, airlines, timestamp=timestamp, clock=clock
        )
    except ValueError as e:
        raise SnapshotFormatError(path, str(e)) from e

    logger.info(
        "Loaded snapshot %s: %d heatmap cells, %d airlines",
        path,
        len(heatmap),
        len(airlines),
    )
    return stats
