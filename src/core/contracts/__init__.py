"""
Contract Validation Module

Валидация JSON-представления GPS тегов.
"""

from .validators import (
    ContractValidator,
    GpsTagsValidator,
    SchemaLoader,
    validate_gps_tags,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "GpsTagsValidator",
    # Functions
    "validate_gps_tags",
]
