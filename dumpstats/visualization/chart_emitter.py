"""
Chart Emitter
Renders collected statistics into maps and chart data files.

Outputs, all written into one directory:

    polar_plot.html   receiver range polygon on a map
    heatmap.html      position report density
    airline.csv       airline share of counted flights (Airline,Share)
    altitude.csv      share of position reports per flight level (Altitude,Share)
"""

import csv
import logging
import os
from math import inf
from typing import List, Optional, Tuple

from dumpstats.collector.stats import ReceiverStats, heatmap_key
from dumpstats.config import Settings
from dumpstats.utils import Coordinate, haversine_distance, round_half_away, validate_coordinates

from .airlines import AirlineLookup
from .map_generator import MapGenerator

logger = logging.getLogger(__name__)

POLAR_PLOT_FILE = "polar_plot.html"
HEATMAP_FILE = "heatmap.html"
AIRLINE_CSV_FILE = "airline.csv"
ALTITUDE_CSV_FILE = "altitude.csv"


def decode_heatmap_key(
    key: int, ref: Coordinate, max_distance_km: Optional[float] = None
) -> Optional[Coordinate]:
    """
    Recover the cell position from a heatmap key.

    A key is the latitude and longitude hundredths written one after the
    other, so the digits can split in more than one place. Every split
    that encodes back to the same key is a candidate, and the one nearest
    to the receiver wins. Keys with no candidate within max_distance_km
    (cells with negative longitudes, whose digits were cut at the minus
    sign) yield None.

    Args:
        key: Heatmap cell key
        ref: Receiver position
        max_distance_km: Farthest plausible cell, None for no limit

    Example:
        >>> decode_heatmap_key(50101610, Coordinate(50.0, 16.0))
        Coordinate(lat=50.1, lon=16.1)
    """
    digits = str(key)
    best = None
    best_distance = inf

    for split in range(1, len(digits)):
        try:
            lat100 = int(digits[:split])
            lon100 = int(digits[split:])
        except ValueError:
            continue

        position = Coordinate(lat100 / 100.0, lon100 / 100.0)
        if not validate_coordinates(position.lat, position.lon):
            continue
        if heatmap_key(position) != key:
            continue

        distance = haversine_distance(ref, position)
        if max_distance_km is not None and distance > max_distance_km:
            continue
        if distance < best_distance:
            best, best_distance = position, distance

    return best


def share_percent(count: int, total: int) -> float:
    """Percentage of total, rounded to two decimals. Zero when total is zero."""
    if total <= 0:
        return 0.0
    return round_half_away(count / total * 10000.0) / 100.0


class ChartEmitter:
    """
    Generates maps and CSV chart data from receiver statistics.
    """

    def __init__(
        self,
        stats: ReceiverStats,
        airlines: AirlineLookup,
        company_threshold: int = 0,
        style: str = Settings.DEFAULT_MAP_STYLE,
    ):
        """
        Initialize chart emitter.

        Args:
            stats: Statistics to render
            airlines: Airline names for the airline chart
            company_threshold: Airlines counted this many times or fewer
                               are left out of the airline chart
            style: Map tile style

        Raises:
            ValueError: If company_threshold is negative
        """
        if company_threshold < 0:
            raise ValueError("company threshold must not be negative")

        self.stats = stats
        self.airlines = airlines
        self.company_threshold = company_threshold
        self.style = style

    # --- Data preparation ---

    def heatmap_points(self) -> List[List[float]]:
        """
        Heatmap cells as [lat, lon, weight] triples.

        Every report in the heatmap also went through the polar range, so
        cells beyond its farthest point (plus cell rounding) are undecodable
        and skipped.
        """
        ref = self.stats.ref
        reach = max(haversine_distance(ref, p) for p in self.stats.polar_range)
        max_distance = reach + Settings.HEATMAP_CELL_SLACK_KM

        points = []
        skipped = 0
        for key, weight in sorted(self.stats.heatmap.items()):
            position = decode_heatmap_key(key, ref, max_distance)
            if position is None:
                skipped += 1
                continue
            points.append([position.lat, position.lon, weight])

        if skipped:
            logger.debug("Skipped %d heatmap cells with undecodable keys", skipped)
        return points

    def airline_shares(self) -> List[Tuple[str, float]]:
        """
        Airline names with their share of all counted flights.

        Only airlines present in the lookup table and counted more often
        than the company threshold are listed; the total still includes
        every airline.
        """
        counts = self.stats.airlines
        total = sum(counts.values())

        shares = []
        for prefix in sorted(counts):
            name = self.airlines.name(prefix)
            if name is None or counts[prefix] <= self.company_threshold:
                continue
            shares.append((name, share_percent(counts[prefix], total)))
        return shares

    def altitude_shares(self) -> List[Tuple[int, float]]:
        """Altitude in feet with its share of all recorded position reports."""
        counts = self.stats.altitudes
        total = sum(counts)
        return [
            (level * 100, share_percent(count, total))
            for level, count in enumerate(counts)
        ]

    # --- Output ---

    def generate_polar_plot(self, output_file: str = POLAR_PLOT_FILE):
        """
        Generate the polar range map.

        Args:
            output_file: Output HTML filename
        """
        ref = self.stats.ref
        map_gen = MapGenerator(
            ref.lat,
            ref.lon,
            zoom=Settings.POLAR_MAP_ZOOM,
            style=self.style,
            title="DumpStats Polar Range",
        )
        map_gen.add_polar_range(self.stats.polar_range)
        map_gen.save(output_file)

    def generate_heatmap(self, output_file: str = HEATMAP_FILE):
        """
        Generate the position density heatmap.

        Args:
            output_file: Output HTML filename
        """
        ref = self.stats.ref
        points = self.heatmap_points()
        logger.info("Plotting %d heatmap cells", len(points))

        map_gen = MapGenerator(
            ref.lat,
            ref.lon,
            zoom=Settings.HEATMAP_ZOOM,
            style=self.style,
            title="DumpStats Heatmap",
        )
        map_gen.add_heatmap(points)
        map_gen.save(output_file)

    def write_airline_csv(self, output_file: str = AIRLINE_CSV_FILE):
        """Write airline shares for the airline chart."""
        self._write_csv(output_file, ("Airline", "Share"), self.airline_shares())

    def write_altitude_csv(self, output_file: str = ALTITUDE_CSV_FILE):
        """Write flight level shares for the altitude chart."""
        self._write_csv(output_file, ("Altitude", "Share"), self.altitude_shares())

    def _write_csv(self, output_file: str, header: Tuple[str, str], rows: List[Tuple]):
        with open(output_file, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(header)
            for label, share in rows:
                writer.writerow([label, f"{share:g}"])
        logger.info("Chart data saved to %s", output_file)

    def generate_all(self, output_dir: str = ".") -> List[str]:
        """
        Generate every chart into a directory.

        Args:
            output_dir: Target directory, created if missing

        Returns:
            Paths of the written files
        """
        os.makedirs(output_dir, exist_ok=True)

        paths = [
            os.path.join(output_dir, POLAR_PLOT_FILE),
            os.path.join(output_dir, HEATMAP_FILE),
            os.path.join(output_dir, AIRLINE_CSV_FILE),
            os.path.join(output_dir, ALTITUDE_CSV_FILE),
        ]
        self.generate_polar_plot(paths[0])
        self.generate_heatmap(paths[1])
        self.write_airline_csv(paths[2])
        self.write_altitude_csv(paths[3])
        return paths
