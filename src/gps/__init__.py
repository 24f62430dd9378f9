"""
GPS tag mapping.

Converts raw GPS IFD tag values into GeoCoordinate instances, positions
and display strings.
"""

from src.gps.tag_mapping import (
    COORDINATE_TAGS,
    DEFAULT_GPS_TAG_CONFIG,
    GPS_ALTITUDE,
    GPS_DEST_LATITUDE,
    GPS_DEST_LATITUDE_REF,
    GPS_DEST_LONGITUDE,
    GPS_DEST_LONGITUDE_REF,
    GPS_LATITUDE,
    GPS_LATITUDE_REF,
    GPS_LONGITUDE,
    GPS_LONGITUDE_REF,
    GPS_TIMESTAMP,
    GpsPosition,
    GpsTagConfig,
    coordinate_from_tag_values,
    format_coordinate_tag,
    format_gps_timestamp,
    position_from_json,
    position_from_tags,
    rational_from_json,
)

__all__ = [
    # Tag names
    "COORDINATE_TAGS",
    "GPS_ALTITUDE",
    "GPS_DEST_LATITUDE",
    "GPS_DEST_LATITUDE_REF",
    "GPS_DEST_LONGITUDE",
    "GPS_DEST_LONGITUDE_REF",
    "GPS_LATITUDE",
    "GPS_LATITUDE_REF",
    "GPS_LONGITUDE",
    "GPS_LONGITUDE_REF",
    "GPS_TIMESTAMP",
    # Config / result
    "DEFAULT_GPS_TAG_CONFIG",
    "GpsPosition",
    "GpsTagConfig",
    # Functions
    "coordinate_from_tag_values",
    "format_coordinate_tag",
    "format_gps_timestamp",
    "position_from_json",
    "position_from_tags",
    "rational_from_json",
]
