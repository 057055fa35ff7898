"""
SBS/BaseStation Message Parser

A BaseStation record is a single comma-separated line. The first field is
the record type:

    AIR  new aircraft           SEL  selection change
    ID   callsign received      MSG  transmission (decoded ADS-B message)

dump1090 only emits MSG records. Their second field is the transmission type
which decides the populated fields:

    1  ID message               (Callsign)
    2  Surface position         (Altitude, GroundSpeed, Track, Lat, Lon)
    3  Airborne position        (Altitude, Lat, Lon, Alert, Emergency, SPI)
    4  Airborne velocity        (GroundSpeed, Track, VerticalRate)
    5  Surveillance altitude    (Altitude, Alert, SPI)
    6  Surveillance ID          (Altitude, Squawk, Alert, Emergency, SPI)
    7  Air-to-air               (Altitude)
    8  All-call reply           (none)

Field layout of a MSG record (1-indexed):

    1 MSG           7 date generated     13 ground speed   19 alert
    2 type          8 time generated     14 track          20 emergency
    3 session id    9 date logged        15 latitude       21 SPI
    4 aircraft id  10 time logged        16 longitude      22 on ground
    5 ICAO24 hex   11 callsign           17 vertical rate
    6 flight id    12 altitude (ft)      18 squawk
"""

from dataclasses import dataclass
from typing import List, Optional

from ..utils import validate_coordinates
from .constants import (
    FIELD_ALTITUDE,
    FIELD_CALLSIGN,
    FIELD_ICAO24,
    FIELD_LATITUDE,
    FIELD_LONGITUDE,
    FIELD_TAG,
    FIELD_TRANSMISSION_TYPE,
    TRANSMISSION_ID,
)


@dataclass(frozen=True)
class SBSMessage:
    """Typed view of the SBS fields the collector uses. Empty fields are None."""

    tag: str
    transmission_type: int
    icao24: Optional[str] = None
    callsign: Optional[str] = None
    altitude: Optional[int] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def split_fields(line: str) -> List[str]:
    """Split a raw SBS line into stripped fields."""
    return [field.strip() for field in line.strip().split(",")]


def _field(fields: List[str], index: int) -> Optional[str]:
    """Return a field or None if it is missing or empty."""
    if index < len(fields) and fields[index] != "":
        return fields[index]
    return None


def _parse_altitude(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    return int(float(value))


def _parse_degrees(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    return float(value)


def parse_message(line: str) -> Optional[SBSMessage]:
    """
    Parse a single SBS line.

    Args:
        line: Raw line, with or without trailing newline

    Returns:
        SBSMessage, or None if the line is malformed: no numeric
        transmission type, a non-numeric altitude, or an unusable position.

    Example:
        >>> msg = parse_message("MSG,3,1,1,ABCDEF,1,,,,,,38000,,,50.10,16.10,,,,,,")
        >>> msg.altitude, msg.latitude, msg.longitude
        (38000, 50.1, 16.1)
    """
    fields = split_fields(line)
    if len(fields) <= FIELD_TRANSMISSION_TYPE:
        return None

    try:
        transmission_type = int(fields[FIELD_TRANSMISSION_TYPE])
    except ValueError:
        return None

    callsign = _field(fields, FIELD_CALLSIGN)
    if transmission_type == TRANSMISSION_ID:
        # ID transmissions never carry an altitude; a value one column
        # further right is a callsign from a record short of one field.
        if callsign is None:
            callsign = _field(fields, FIELD_ALTITUDE)
        return SBSMessage(
            tag=fields[FIELD_TAG],
            transmission_type=transmission_type,
            icao24=_field(fields, FIELD_ICAO24),
            callsign=callsign,
        )

    try:
        altitude = _parse_altitude(_field(fields, FIELD_ALTITUDE))
        latitude = _parse_degrees(_field(fields, FIELD_LATITUDE))
        longitude = _parse_degrees(_field(fields, FIELD_LONGITUDE))
    except (ValueError, OverflowError):
        return None

    if latitude is not None and longitude is not None:
        if not validate_coordinates(latitude, longitude):
            return None

    return SBSMessage(
        tag=fields[FIELD_TAG],
        transmission_type=transmission_type,
        icao24=_field(fields, FIELD_ICAO24),
        callsign=callsign,
        altitude=altitude,
        latitude=latitude,
        longitude=longitude,
    )
