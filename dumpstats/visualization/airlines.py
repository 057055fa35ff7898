"""
Airline Lookup Table
ICAO airline designators to airline names, read from a tab-separated
reference file (the iata-icao database).

Each line holds at least five tab-separated fields:

    [0] IATA code (unused)
    [1] ICAO designator
    [2] Airline name
    [3] Callsign (unused)
    [4] Country
"""

import logging
from typing import Dict, Iterator, NamedTuple, Optional

from ..exceptions import AirlineDatabaseError

logger = logging.getLogger(__name__)

FIELD_ICAO = 1
FIELD_NAME = 2
FIELD_COUNTRY = 4


class AirlineInfo(NamedTuple):
    name: str
    country: str


class AirlineLookup:
    """Read-only map from ICAO designator to airline name and country."""

    def __init__(self, airlines: Optional[Dict[str, AirlineInfo]] = None):
        self._airlines: Dict[str, AirlineInfo] = dict(airlines or {})

    @classmethod
    def load(cls, path: str) -> "AirlineLookup":
        """
        Load the reference file.

        Args:
            path: Path to the tab-separated airline file

        Returns:
            Populated lookup table

        Raises:
            AirlineDatabaseError: If the file is missing or a line has
                                  fewer than five fields
        """
        airlines: Dict[str, AirlineInfo] = {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                for number, line in enumerate(f, start=1):
                    line = line.rstrip("\r\n")
                    if not line.strip():
                        continue
                    fields = line.split("\t")
                    if len(fields) <= FIELD_COUNTRY:
                        raise AirlineDatabaseError(
                            f"{path}:{number}: expected at least {FIELD_COUNTRY + 1} fields, got {len(fields)}"
                        )
                    airlines[fields[FIELD_ICAO]] = AirlineInfo(fields[FIELD_NAME], fields[FIELD_COUNTRY])
        except OSError as e:
            raise AirlineDatabaseError(f"Unable to load airline database {path}: {e}") from e

        logger.info("Loaded %d airlines from %s", len(airlines), path)
        return cls(airlines)

    def __contains__(self, icao: str) -> bool:
        return icao in self._airlines

    def __len__(self) -> int:
        return len(self._airlines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._airlines)

    def get(self, icao: str) -> Optional[AirlineInfo]:
        return self._airlines.get(icao)

    def name(self, icao: str) -> Optional[str]:
        info = self._airlines.get(icao)
        return info.name if info else None
