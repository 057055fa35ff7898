"""
DumpStats Visualization Component

Maps and chart data generated from collected receiver statistics.

Main Classes:
    - MapGenerator: Base interactive map creation with Folium
    - ChartEmitter: Polar range map, heatmap, airline and altitude charts
    - AirlineLookup: ICAO designator to airline name table

Example:
    >>> from dumpstats.collector import ReceiverStats
    >>> from dumpstats.visualization import AirlineLookup, ChartEmitter
    >>> stats = ReceiverStats.load('stats.out')
    >>> airlines = AirlineLookup.load('data/iata-icao.db')
    >>> ChartEmitter(stats, airlines, company_threshold=5).generate_all('charts')
"""

# Main visualization components
from .map_generator import MapGenerator
from .airlines import AirlineInfo, AirlineLookup
from .chart_emitter import ChartEmitter, decode_heatmap_key

__all__ = [
    "MapGenerator",
    "ChartEmitter",
    "AirlineLookup",
    "AirlineInfo",
    "decode_heatmap_key",
]
