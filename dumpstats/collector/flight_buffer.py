"""
Flight Buffer
Remembers recently seen ICAO24/callsign pairs so that one flight is counted
once in the airline statistics, no matter how many ID messages it sends.
"""

from typing import Dict, Iterator, NamedTuple, Tuple

from ..config import Settings


class FlightStamp(NamedTuple):
    """Last appearance of an ICAO24/callsign pair."""

    icao24: str
    callsign: str
    timestamp: int


class FlightBuffer:
    """
    Set of ICAO24/callsign pairs with the time they were first buffered.

    Membership ignores the timestamp: a stale pair keeps suppressing airline
    counting until the next evict() call removes it.
    """

    def __init__(self) -> None:
        self._stamps: Dict[Tuple[str, str], int] = {}

    def __len__(self) -> int:
        return len(self._stamps)

    def __iter__(self) -> Iterator[FlightStamp]:
        for (icao24, callsign), timestamp in self._stamps.items():
            yield FlightStamp(icao24, callsign, timestamp)

    def contains(self, icao24: str, callsign: str) -> bool:
        """Check whether the pair is currently buffered."""
        return (icao24, callsign) in self._stamps

    def insert(self, icao24: str, callsign: str, now: int) -> None:
        """
        Buffer a pair. Callers check contains() first; inserting a pair that
        is already present restamps it.
        """
        self._stamps[(icao24, callsign)] = int(now)

    def evict(self, now: int, ttl: int = Settings.FLIGHT_BUFFER_TTL_SECONDS) -> int:
        """
        Remove every pair buffered more than ttl seconds ago.

        Args:
            now: Current time in seconds since epoch
            ttl: Maximum age in seconds

        Returns:
            Number of removed pairs
        """
        stale = [key for key, timestamp in self._stamps.items() if now - timestamp > ttl]
        for key in stale:
            del self._stamps[key]
        return len(stale)
