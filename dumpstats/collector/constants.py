"""
DumpStats Collector Constants
SBS/BaseStation field layout and snapshot file markers.
"""

# SBS record tag (field 1) of transmissions
TAG_TRANSMISSION = "MSG"

# Transmission types (field 2 of MSG records) handled by the collector
TRANSMISSION_ID = 1  # Callsign
TRANSMISSION_AIRBORNE_POSITION = 3  # Altitude, Lat, Lon

# Zero-based field indices in a MSG record
FIELD_TAG = 0
FIELD_TRANSMISSION_TYPE = 1
FIELD_ICAO24 = 4
FIELD_CALLSIGN = 10
FIELD_ALTITUDE = 11
FIELD_LATITUDE = 14
FIELD_LONGITUDE = 15

# Snapshot file markers
SNAPSHOT_SECTION_DELIMITER = ""
SNAPSHOT_FIELD_DELIMITER = "|"
SNAPSHOT_SENTINEL = "$"
SNAPSHOT_AIRLINE_PREFIX_LENGTH = 3
