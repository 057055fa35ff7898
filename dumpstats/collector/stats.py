"""
DumpStats Aggregation Engine
Keeps the receiver statistics and updates them from SBS messages.
"""

import logging
import re
import time
from enum import IntEnum
from math import isfinite
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Tuple

from ..config import Constants, Settings
from ..utils import Coordinate, haversine_distance, rhumb_bearing, round_half_away
from .constants import TAG_TRANSMISSION, TRANSMISSION_AIRBORNE_POSITION, TRANSMISSION_ID
from .flight_buffer import FlightBuffer
from .parser import SBSMessage, parse_message

logger = logging.getLogger(__name__)

# Three letter ICAO airline designator followed by a flight number
_AIRLINE_CALLSIGN = re.compile(r"^([A-Za-z]{3})[0-9]")

# Leading integer, as C's stoi reads it
_LEADING_INT = re.compile(r"^[+-]?[0-9]+")


class MessageType(IntEnum):
    """Result of processing one message, values match the SBS transmission type."""

    DISCARDED = 0
    ID = TRANSMISSION_ID
    AIRBORNE_POSITION = TRANSMISSION_AIRBORNE_POSITION


def airline_prefix(callsign: str) -> Optional[str]:
    """
    Extract the ICAO airline designator from a callsign.

    Example:
        >>> airline_prefix("RYR123"), airline_prefix("N12345")
        ('RYR', None)
    """
    match = _AIRLINE_CALLSIGN.match(callsign)
    if match is None:
        return None
    return match.group(1).upper()


def heatmap_key(position: Coordinate) -> int:
    """
    Quantize a position to a 0.01 degree heatmap cell.

    The two rounded hundredths are written one after the other and read back
    as a single integer, which keeps the keys of existing snapshot files
    valid. For negative longitudes reading stops at the minus sign, so
    such cells collapse onto their latitude.

    Example:
        >>> heatmap_key(Coordinate(50.10, 16.10))
        50101610
    """
    lat100 = round_half_away(position.lat * Settings.HEATMAP_RESOLUTION)
    lon100 = round_half_away(position.lon * Settings.HEATMAP_RESOLUTION)
    return int(_LEADING_INT.match(f"{lat100}{lon100}").group(0))


def flight_level(altitude_ft: int) -> int:
    """Altitude in feet to flight level, truncating toward zero."""
    level = abs(altitude_ft) // Constants.FEET_PER_FLIGHT_LEVEL
    return level if altitude_ft >= 0 else -level


class ReceiverStats:
    """
    Statistics of one receiver.

    Owns four aggregates, all relative to a fixed reference position:

    - polar range: farthest position seen for each whole degree of bearing
    - heatmap: airborne position reports per 0.01 degree cell
    - airlines: flights seen per ICAO airline designator
    - altitudes: airborne position reports per flight level FL000-FL500

    plus the flight buffer that keeps one flight from being counted twice.
    """

    def __init__(
        self,
        ref_lat: float,
        ref_lon: float,
        clock: Callable[[], float] = time.time,
    ):
        """
        Start collecting from scratch.

        Args:
            ref_lat: Receiver latitude in degrees
            ref_lon: Receiver longitude in degrees
            clock: Wall clock returning seconds since epoch
        """
        self._clock = clock
        self._ref = Coordinate(float(ref_lat), float(ref_lon))

        self.uptime = int(clock())
        self.timestamp = 0

        self._polar = [self._ref] * Settings.POLAR_RANGE_SLOTS
        self._heatmap: Dict[int, int] = {}
        self._airlines: Dict[str, int] = {}
        self._altitudes = [0] * (Settings.MAX_FLIGHT_LEVEL + 1)

        self.flight_buffer = FlightBuffer()

    @classmethod
    def from_aggregates(
        cls,
        ref: Coordinate,
        polar: Iterable[Coordinate],
        altitudes: Iterable[int],
        heatmap: Mapping[int, int],
        airlines: Mapping[str, int],
        timestamp: int = 0,
        clock: Callable[[], float] = time.time,
    ) -> "ReceiverStats":
        """
        Rebuild statistics from previously saved aggregates.

        Uptime restarts at the current time and the flight buffer starts
        empty.

        Raises:
            ValueError: If the aggregates have the wrong shape
        """
        stats = cls(ref.lat, ref.lon, clock=clock)

        polar = [Coordinate(float(p[0]), float(p[1])) for p in polar]
        if len(polar) != Settings.POLAR_RANGE_SLOTS:
            raise ValueError(f"polar range needs {Settings.POLAR_RANGE_SLOTS} slots, got {len(polar)}")

        altitudes = [int(count) for count in altitudes]
        if len(altitudes) != Settings.MAX_FLIGHT_LEVEL + 1:
            raise ValueError(
                f"altitude histogram needs {Settings.MAX_FLIGHT_LEVEL + 1} buckets, got {len(altitudes)}"
            )
        if any(count < 0 for count in altitudes):
            raise ValueError("altitude counts must not be negative")

        if any(count < 1 for count in heatmap.values()):
            raise ValueError("heatmap counts must be positive")
        if any(count < 1 for count in airlines.values()):
            raise ValueError("airline counts must be positive")

        stats._polar = polar
        stats._altitudes = altitudes
        stats._heatmap = {int(key): int(count) for key, count in heatmap.items()}
        stats._airlines = {str(key): int(count) for key, count in airlines.items()}
        stats.timestamp = int(timestamp)
        return stats

    @classmethod
    def load(cls, path: str, clock: Callable[[], float] = time.time) -> "ReceiverStats":
        """
        Restore statistics from a snapshot file.

        Raises:
            SnapshotFormatError: If the file cannot be read or is invalid
        """
        from .snapshot import load_snapshot

        return load_snapshot(path, clock=clock)

    def export(self, path: str, now: Optional[int] = None) -> bool:
        """
        Write a snapshot file, replacing any previous one.

        Returns:
            True on success, False if the file could not be written
        """
        from .snapshot import export_snapshot

        return export_snapshot(self, path, now=now)

    # --- Read-only views for chart generation ---

    @property
    def ref(self) -> Coordinate:
        """Receiver reference position."""
        return self._ref

    @property
    def polar_range(self) -> Tuple[Coordinate, ...]:
        """Farthest position for bearings 0..359."""
        return tuple(self._polar)

    @property
    def heatmap(self) -> Mapping[int, int]:
        """Report count per heatmap cell key."""
        return MappingProxyType(self._heatmap)

    @property
    def airlines(self) -> Mapping[str, int]:
        """Flight count per ICAO airline designator."""
        return MappingProxyType(self._airlines)

    @property
    def altitudes(self) -> Tuple[int, ...]:
        """Report count per flight level 0..500."""
        return tuple(self._altitudes)

    def now(self) -> int:
        """Current wall clock time in whole seconds."""
        return int(self._clock())

    # --- Message processing ---

    def process(self, line: str, now: Optional[int] = None) -> MessageType:
        """
        Update the statistics from one SBS line.

        Malformed lines and transmission types other than ID (1) and
        airborne position (3) leave the statistics untouched.

        Args:
            line: Raw SBS line
            now: Current time in seconds since epoch (default: wall clock)

        Returns:
            MessageType describing what the line was used for
        """
        message = parse_message(line)
        if message is None or message.tag != TAG_TRANSMISSION:
            return MessageType.DISCARDED

        if now is None:
            now = self.now()

        if message.transmission_type == TRANSMISSION_ID:
            self._apply_identification(message, now)
            return MessageType.ID

        if message.transmission_type == TRANSMISSION_AIRBORNE_POSITION:
            self._apply_airborne_position(message)
            return MessageType.AIRBORNE_POSITION

        return MessageType.DISCARDED

    def _apply_identification(self, message: SBSMessage, now: int) -> None:
        if not message.icao24 or not message.callsign:
            return

        if self.flight_buffer.contains(message.icao24, message.callsign):
            return

        prefix = airline_prefix(message.callsign)
        if prefix is not None:
            self._airlines[prefix] = self._airlines.get(prefix, 0) + 1
            if self._airlines[prefix] == 1:
                logger.debug("First flight of airline %s (%s)", prefix, message.callsign)

        self.flight_buffer.insert(message.icao24, message.callsign, now)

    def _apply_airborne_position(self, message: SBSMessage) -> None:
        if message.has_position:
            self._record_position(Coordinate(message.latitude, message.longitude))

        if message.altitude is not None:
            level = flight_level(message.altitude)
            if 0 <= level <= Settings.MAX_FLIGHT_LEVEL:
                self._altitudes[level] += 1

    def _record_position(self, position: Coordinate) -> None:
        bearing = rhumb_bearing(self._ref, position)
        if isfinite(bearing):
            slot = round_half_away(bearing) % Settings.POLAR_RANGE_SLOTS
            distance = haversine_distance(self._ref, position)
            if distance > haversine_distance(self._ref, self._polar[slot]):
                self._polar[slot] = position

        key = heatmap_key(position)
        self._heatmap[key] = self._heatmap.get(key, 0) + 1
