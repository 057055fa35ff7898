"""
Map Generator
Creates interactive Folium maps centered on the receiver.
"""

import logging
from typing import List, Sequence

import folium
from folium import plugins

from dumpstats.config import Colors, Settings
from dumpstats.utils import Coordinate

logger = logging.getLogger(__name__)

MAP_TILE_URLS = {
    "CartoDB.DarkMatter": "https://{s}.basemaps.cartocdn.com/dark_all/{z}/{x}/{y}{r}.png",
    "CartoDB.Positron": "https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png",
    "OpenStreetMap": "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
}


class MapGenerator:
    """
    Generates interactive maps using Folium.

    Supports visualization of:
    - Receiver polar range (maximum reach per bearing)
    - Position report density heatmaps
    """

    def __init__(
        self,
        center_lat: float,
        center_lon: float,
        zoom: int = Settings.POLAR_MAP_ZOOM,
        style: str = Settings.DEFAULT_MAP_STYLE,
        title: str = "DumpStats Map",
    ):
        """
        Initialize map generator.

        Args:
            center_lat: Center latitude (receiver location)
            center_lon: Center longitude (receiver location)
            zoom: Initial zoom level
            style: Map style/theme
            title: HTML page title
        """
        self.center_lat = center_lat
        self.center_lon = center_lon
        self.zoom = zoom
        self.style = style
        self.title = title

        self.map = self._create_base_map()

    def _create_base_map(self) -> folium.Map:
        """Create base Folium map with the receiver marker."""

        if self.style in MAP_TILE_URLS:
            tiles = MAP_TILE_URLS[self.style]
        else:
            tiles = self.style

        m = folium.Map(
            location=[self.center_lat, self.center_lon],
            zoom_start=self.zoom,
            tiles=tiles,
            attr="DumpStats Receiver Statistics",
        )

        folium.Marker(
            [self.center_lat, self.center_lon],
            popup="Receiver",
            tooltip="Receiver Location",
            icon=folium.Icon(color="red", icon="signal", prefix="fa"),
        ).add_to(m)

        return m

    def add_polar_range(self, polar: Sequence[Coordinate]):
        """
        Add the polar range polygon.

        Args:
            polar: Farthest position per bearing, in bearing order
        """
        if not polar:
            return

        folium.Polygon(
            locations=[[p.lat, p.lon] for p in polar],
            color=Colors.POLAR_RANGE_COLOR,
            weight=Settings.POLAR_STROKE_WEIGHT,
            opacity=Settings.POLAR_STROKE_OPACITY,
            fill=True,
            fill_color=Colors.POLAR_RANGE_COLOR,
            fill_opacity=Settings.POLAR_FILL_OPACITY,
            tooltip="Polar range",
        ).add_to(self.map)

    def add_heatmap(self, points: List[List[float]]):
        """
        Add a heatmap layer.

        Args:
            points: [lat, lon, weight] triples
        """
        if not points:
            return

        plugins.HeatMap(
            points,
            min_opacity=0.3,
            max_zoom=18,
            radius=10,
            blur=15,
            gradient=Colors.HEATMAP_GRADIENT,
        ).add_to(self.map)

    def save(self, filename: str):
        """
        Save map to HTML file.

        Args:
            filename: Output filename (should end in .html)
        """
        self.map.save(filename)

        # Give the page a title
        with open(filename, "r", encoding="utf-8") as f:
            html_content = f.read()
        insert = "<head>\n    <title>" + self.title + "</title>"
        html_content = html_content.replace("<head>", insert, 1)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(html_content)

        logger.info("Map saved to %s", filename)
