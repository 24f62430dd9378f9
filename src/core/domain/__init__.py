"""
Domain models and value objects.

Contains the geographic coordinate model and its DMS text scanner.
"""

from src.core.domain.dms_scanner import (
    DEGREE_SEPARATORS,
    DIRECTION_LETTERS,
    MINUTE_SEPARATORS,
    SECOND_SEPARATORS,
    DmsScanResult,
    ScanState,
    scan_dms,
)
from src.core.domain.geo_coordinate import (
    DEGREE_MARK,
    MINUTE_MARK,
    MINUTES_PER_DEGREE,
    SECOND_MARK,
    SECONDS_PER_MINUTE,
    CoordinateDirection,
    CoordinateFormat,
    GeoCoordinate,
)

__all__ = [
    # DMS scanner
    "DEGREE_SEPARATORS",
    "DIRECTION_LETTERS",
    "MINUTE_SEPARATORS",
    "SECOND_SEPARATORS",
    "DmsScanResult",
    "ScanState",
    "scan_dms",
    # Geo coordinate
    "DEGREE_MARK",
    "MINUTE_MARK",
    "MINUTES_PER_DEGREE",
    "SECOND_MARK",
    "SECONDS_PER_MINUTE",
    "CoordinateDirection",
    "CoordinateFormat",
    "GeoCoordinate",
]
