"""
Tests for chart emitter.
"""

import os

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from dumpstats.collector.stats import ReceiverStats, heatmap_key
from dumpstats.utils import Coordinate
from dumpstats.visualization.airlines import AirlineInfo, AirlineLookup
from dumpstats.visualization.chart_emitter import (
    ChartEmitter,
    decode_heatmap_key,
    share_percent,
)

REF = Coordinate(50.0, 16.0)


@pytest.fixture
def lookup():
    return AirlineLookup(
        {
            "DLH": AirlineInfo("Lufthansa", "Germany"),
            "RYR": AirlineInfo("Ryanair", "Ireland"),
        }
    )


@pytest.fixture
def stats():
    """Statistics with two counted airlines and two altitude reports."""
    altitudes = [0] * 501
    altitudes[120] = 1
    altitudes[380] = 3
    polar = [REF] * 360
    polar[0] = Coordinate(51.25, 16.0)
    return ReceiverStats.from_aggregates(
        REF,
        polar,
        altitudes,
        {50101610: 4, 49501575: 1, 5010: 2},
        {"RYR": 3, "DLH": 1},
        clock=lambda: 1_700_000_000,
    )


class TestHelpers:
    """Tests for key decoding and percentages."""

    def test_decode_heatmap_key(self):
        """Eight digit keys split into latitude and longitude."""
        assert decode_heatmap_key(50101610, REF) == Coordinate(50.1, 16.1)
        assert decode_heatmap_key(49501575, REF) == Coordinate(49.5, 15.75)

    def test_decode_three_digit_longitude(self):
        """Longitudes of 100 degrees and more keep all their digits."""
        key = heatmap_key(Coordinate(35.50, 139.75))
        assert decode_heatmap_key(key, Coordinate(35.6, 139.7)) == Coordinate(35.5, 139.75)

    def test_decode_negative_latitude(self):
        """Southern cells decode with their sign."""
        key = heatmap_key(Coordinate(-33.90, 151.20))
        assert key == -339015120
        assert decode_heatmap_key(key, Coordinate(-33.87, 151.21)) == Coordinate(-33.9, 151.2)

    def test_decode_single_digit_latitude(self):
        """Ambiguous splits resolve to the cell nearest the receiver."""
        key = heatmap_key(Coordinate(5.50, 16.10))
        assert key == 5501610
        assert decode_heatmap_key(key, Coordinate(5.6, 16.0)) == Coordinate(5.5, 16.1)
        assert decode_heatmap_key(key, Coordinate(55.0, 6.0)) == Coordinate(55.01, 6.1)

    def test_decode_negative_longitude(self):
        """Keys cut at a minus sign have no candidate within reach."""
        assert decode_heatmap_key(5010, Coordinate(50.0, -16.0), max_distance_km=500.0) is None
        assert decode_heatmap_key(5010, REF, max_distance_km=500.0) is None

    def test_share_percent(self):
        """Shares are rounded to two decimals."""
        assert share_percent(1, 4) == 25.0
        assert share_percent(1, 3) == 33.33
        assert share_percent(2, 3) == 66.67
        assert share_percent(0, 3) == 0.0
        assert share_percent(0, 0) == 0.0


class TestChartEmitter:
    """Tests for ChartEmitter class."""

    def test_negative_threshold(self, stats, lookup):
        with pytest.raises(ValueError):
            ChartEmitter(stats, lookup, company_threshold=-1)

    def test_airline_shares(self, stats, lookup):
        """Shares of counted flights, sorted by designator."""
        emitter = ChartEmitter(stats, lookup)
        assert emitter.airline_shares() == [("Lufthansa", 25.0), ("Ryanair", 75.0)]

    def test_airline_threshold(self, stats, lookup):
        """Airlines at or below the threshold are left out, not the total."""
        emitter = ChartEmitter(stats, lookup, company_threshold=1)
        assert emitter.airline_shares() == [("Ryanair", 75.0)]

        emitter = ChartEmitter(stats, lookup, company_threshold=3)
        assert emitter.airline_shares() == []

    def test_unknown_airline(self, stats):
        """Designators missing from the lookup table are not listed."""
        lookup = AirlineLookup({"RYR": AirlineInfo("Ryanair", "Ireland")})
        emitter = ChartEmitter(stats, lookup)
        assert emitter.airline_shares() == [("Ryanair", 75.0)]

    def test_altitude_shares(self, stats, lookup):
        """Every flight level is listed in feet."""
        shares = ChartEmitter(stats, lookup).altitude_shares()
        assert len(shares) == 501
        assert shares[0] == (0, 0.0)
        assert shares[120] == (12000, 25.0)
        assert shares[380] == (38000, 75.0)
        assert shares[500] == (50000, 0.0)

    def test_altitude_shares_empty(self, lookup):
        """No reports means zero shares."""
        stats = ReceiverStats(REF.lat, REF.lon)
        shares = ChartEmitter(stats, lookup).altitude_shares()
        assert all(share == 0.0 for _, share in shares)

    def test_heatmap_points(self, stats, lookup):
        """Undecodable cells are skipped."""
        points = ChartEmitter(stats, lookup).heatmap_points()
        assert points == [[49.5, 15.75, 1], [50.1, 16.1, 4]]

    def test_heatmap_points_far_east(self, lookup):
        """Cells of a receiver east of 100 degrees plot where they were seen."""
        ref = Coordinate(35.6, 139.7)
        polar = [ref] * 360
        polar[0] = Coordinate(36.5, 139.7)
        stats = ReceiverStats.from_aggregates(
            ref,
            polar,
            [0] * 501,
            {heatmap_key(Coordinate(35.50, 139.75)): 3},
            {},
        )
        points = ChartEmitter(stats, lookup).heatmap_points()
        assert points == [[35.5, 139.75, 3]]

    def test_write_airline_csv(self, stats, lookup, tmp_path):
        """Airline CSV has a header and one row per airline."""
        path = tmp_path / "airline.csv"
        ChartEmitter(stats, lookup).write_airline_csv(str(path))

        assert path.read_text(encoding="utf-8") == (
            "Airline,Share\n"
            "Lufthansa,25\n"
            "Ryanair,75\n"
        )

    def test_write_altitude_csv(self, stats, lookup, tmp_path):
        """Altitude CSV lists all 501 flight levels."""
        path = tmp_path / "altitude.csv"
        ChartEmitter(stats, lookup).write_altitude_csv(str(path))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "Altitude,Share"
        assert len(lines) == 502
        assert lines[1] == "0,0"
        assert lines[121] == "12000,25"
        assert lines[381] == "38000,75"

    def test_generate_all(self, stats, lookup, tmp_path):
        """All four outputs are written into the directory."""
        output_dir = tmp_path / "charts"
        paths = ChartEmitter(stats, lookup).generate_all(str(output_dir))

        assert [os.path.basename(p) for p in paths] == [
            "polar_plot.html",
            "heatmap.html",
            "airline.csv",
            "altitude.csv",
        ]
        for path in paths:
            assert os.path.exists(path)

        html = (output_dir / "polar_plot.html").read_text(encoding="utf-8")
        assert "<title>DumpStats Polar Range</title>" in html


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
