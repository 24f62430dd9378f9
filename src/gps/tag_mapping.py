"""
GPS Tag Mapping — значения GPS IFD тегов → GeoCoordinate

EXIF 2.3, раздел 4.6.6 (GPS Attribute Information):
- GPSLatitude / GPSLongitude: RATIONAL × 3 (градусы, минуты, секунды)
- GPSLatitudeRef / GPSLongitudeRef: "N"/"S", "E"/"W"
- GPSDestLatitude / GPSDestLongitude (+Ref): координаты назначения
- GPSAltitude: RATIONAL (метры)
- GPSTimeStamp: RATIONAL × 3 (часы, минуты, секунды UTC)

Граница, на которой сырые значения тегов (массивы rational/чисел и
Ref-буквы) превращаются в GeoCoordinate и строки для отображения.
Извлечение тегов из файла изображения здесь не выполняется: на вход
подаётся уже прочитанный словарь {имя тега: значение}.

Поведение:
- Элемент-URational присваивается компоненте напрямую (точность сохраняется),
  остальные rational / числа проходят через URational.approximate
- Массив длины ≠ 3 → координата отсутствует (None)
- Невалидная Ref-буква логируется и отбрасывается (strict_direction → raise)
- Если GPSLatitude / GPSLongitude не массив → fallback на GPSDest* теги
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Final, Mapping, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from src.core.contracts.validators import validate_gps_tags
from src.core.domain.geo_coordinate import GeoCoordinate
from src.core.math.numerical_safeguards import format_plain, to_decimal
from src.core.math.rational import RATIONAL_DELIMITER, RationalValue, URational

logger = logging.getLogger(__name__)

# =============================================================================
# TAG NAMES
# =============================================================================

GPS_LATITUDE: Final[str] = "GPSLatitude"
GPS_LATITUDE_REF: Final[str] = "GPSLatitudeRef"
GPS_LONGITUDE: Final[str] = "GPSLongitude"
GPS_LONGITUDE_REF: Final[str] = "GPSLongitudeRef"
GPS_DEST_LATITUDE: Final[str] = "GPSDestLatitude"
GPS_DEST_LATITUDE_REF: Final[str] = "GPSDestLatitudeRef"
GPS_DEST_LONGITUDE: Final[str] = "GPSDestLongitude"
GPS_DEST_LONGITUDE_REF: Final[str] = "GPSDestLongitudeRef"
GPS_ALTITUDE: Final[str] = "GPSAltitude"
GPS_TIMESTAMP: Final[str] = "GPSTimeStamp"

COORDINATE_TAGS: Final[tuple[str, ...]] = (
    GPS_LATITUDE,
    GPS_LONGITUDE,
    GPS_DEST_LATITUDE,
    GPS_DEST_LONGITUDE,
)

# Количество компонент координаты (градусы, минуты, секунды)
COORDINATE_COMPONENTS: Final[int] = 3

TIMESTAMP_SEPARATOR: Final[str] = ":"


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class GpsTagConfig:
    """Конфигурация разбора GPS тегов."""

    # GPSDest* используются, если основной тег координаты не массив
    use_destination_fallback: bool = True

    # Невалидная Ref-буква: False → warning и координата без направления,
    # True → pydantic.ValidationError
    strict_direction: bool = False


DEFAULT_GPS_TAG_CONFIG: Final[GpsTagConfig] = GpsTagConfig()


# =============================================================================
# RESULT
# =============================================================================


class GpsPosition(BaseModel):
    """
    Позиция из GPS тегов.

    Любое поле может отсутствовать (None), если соответствующий тег
    не задан или имеет неподходящую форму.
    """

    latitude: Optional[GeoCoordinate] = Field(None, description="Широта")
    longitude: Optional[GeoCoordinate] = Field(None, description="Долгота")
    altitude: Optional[Decimal] = Field(None, description="Высота, метры")

    model_config = {"frozen": True}

    @property
    def latitude_value(self) -> Optional[Decimal]:
        """Знаковая широта в десятичных градусах"""
        return self.latitude.value if self.latitude is not None else None

    @property
    def longitude_value(self) -> Optional[Decimal]:
        """Знаковая долгота в десятичных градусах"""
        return self.longitude.value if self.longitude is not None else None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None


# =============================================================================
# HELPERS
# =============================================================================


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _component_decimal(value: Any) -> Decimal:
    """Decimal значение rational или числа"""
    if isinstance(value, RationalValue):
        return value.to_decimal()
    return to_decimal(value)


def _direction_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


# =============================================================================
# COORDINATES
# =============================================================================


def coordinate_from_tag_values(
    values: Any,
    direction: Optional[str] = None,
    config: GpsTagConfig = DEFAULT_GPS_TAG_CONFIG,
) -> Optional[GeoCoordinate]:
    """
    Координата из трёх значений GPS тега и Ref-буквы.

    Args:
        values: Массив [градусы, минуты, секунды] (URational, rational или числа)
        direction: Значение Ref тега (N/S/E/W)
        config: Конфигурация

    Returns:
        GeoCoordinate или None, если values не массив из трёх элементов

    Raises:
        ValidationError: Если direction невалиден и config.strict_direction
        RationalOverflowError: Если компонента не помещается в uint32

    Examples:
        >>> coordinate_from_tag_values([URational(40, 1), URational(41, 1), URational(21, 1)], "N").to_string()
        '40,41,21N'
    """
    if not _is_array(values) or len(values) != COORDINATE_COMPONENTS:
        return None

    degrees, minutes, seconds = values
    coordinate = GeoCoordinate()

    if isinstance(degrees, URational):
        coordinate.degrees = degrees
    else:
        coordinate.set_degrees(_component_decimal(degrees))

    if isinstance(minutes, URational):
        coordinate.minutes = minutes
    else:
        coordinate.set_minutes(_component_decimal(minutes))

    if isinstance(seconds, URational):
        coordinate.seconds = seconds
    else:
        coordinate.set_seconds(_component_decimal(seconds))

    try:
        coordinate.direction = _direction_text(direction)
    except ValidationError:
        if config.strict_direction:
            raise
        logger.warning("Ignoring invalid GPS direction %r", direction)

    return coordinate


def _resolve_coordinate(
    tags: Mapping[str, Any],
    value_tag: str,
    ref_tag: str,
    dest_value_tag: str,
    dest_ref_tag: str,
    config: GpsTagConfig,
) -> Optional[GeoCoordinate]:
    values = tags.get(value_tag)
    direction = tags.get(ref_tag)

    if not _is_array(values) and config.use_destination_fallback:
        logger.debug("%s is not an array, falling back to %s", value_tag, dest_value_tag)
        values = tags.get(dest_value_tag)
        direction = tags.get(dest_ref_tag)

    if not _is_array(values):
        return None

    return coordinate_from_tag_values(values, direction, config)


def position_from_tags(
    tags: Mapping[str, Any],
    config: GpsTagConfig = DEFAULT_GPS_TAG_CONFIG,
) -> GpsPosition:
    """
    Позиция из словаря GPS тегов.

    Args:
        tags: {имя тега: значение}; отсутствующие теги допустимы
        config: Конфигурация

    Returns:
        GpsPosition (поля None для отсутствующих тегов)
    """
    altitude = None
    raw_altitude = tags.get(GPS_ALTITUDE)
    if isinstance(raw_altitude, (RationalValue, int, float, Decimal)) and not isinstance(
        raw_altitude, bool
    ):
        altitude = _component_decimal(raw_altitude)

    latitude = _resolve_coordinate(
        tags, GPS_LATITUDE, GPS_LATITUDE_REF, GPS_DEST_LATITUDE, GPS_DEST_LATITUDE_REF, config
    )
    longitude = _resolve_coordinate(
        tags, GPS_LONGITUDE, GPS_LONGITUDE_REF, GPS_DEST_LONGITUDE, GPS_DEST_LONGITUDE_REF, config
    )

    return GpsPosition(latitude=latitude, longitude=longitude, altitude=altitude)


# =============================================================================
# JSON PAYLOAD
# =============================================================================


def rational_from_json(value: Any) -> Any:
    """
    JSON rational → URational или число.

    - "n/d" → URational.parse
    - "n"   → URational(n, 1)
    - [n, d] → URational(n, d)
    - число → без изменений (пойдёт через approximate)
    """
    if isinstance(value, str):
        if RATIONAL_DELIMITER in value:
            return URational.parse(value)
        return URational(int(value), 1)

    if _is_array(value):
        numerator, denominator = value
        return URational(numerator, denominator)

    return value


def _tags_from_json(payload: Mapping[str, Any]) -> dict[str, Any]:
    tags: dict[str, Any] = dict(payload)

    for tag in COORDINATE_TAGS:
        if _is_array(tags.get(tag)):
            tags[tag] = [rational_from_json(item) for item in tags[tag]]

    if tags.get(GPS_ALTITUDE) is not None:
        tags[GPS_ALTITUDE] = rational_from_json(tags[GPS_ALTITUDE])

    if _is_array(tags.get(GPS_TIMESTAMP)):
        tags[GPS_TIMESTAMP] = [rational_from_json(item) for item in tags[GPS_TIMESTAMP]]

    return tags


def position_from_json(
    payload: Mapping[str, Any],
    config: GpsTagConfig = DEFAULT_GPS_TAG_CONFIG,
) -> GpsPosition:
    """
    Позиция из JSON-представления GPS тегов.

    Args:
        payload: Данные по контракту gps_tags.json
        config: Конфигурация

    Raises:
        jsonschema.ValidationError: Если payload не соответствует контракту

    Examples:
        >>> position_from_json({"GPSLatitude": ["40/1", "41/1", "21/1"], "GPSLatitudeRef": "N"}).latitude.to_string()
        '40,41,21N'
    """
    validate_gps_tags(dict(payload))
    return position_from_tags(_tags_from_json(payload), config)


# =============================================================================
# DISPLAY
# =============================================================================


def format_coordinate_tag(raw: Any) -> str:
    """
    Строка для отображения значения тега координаты.

    - пустой массив → ""
    - массив из трёх элементов → XMP-представление GeoCoordinate
    - иное → значения через пробел
    """
    if raw is None:
        return ""

    if not _is_array(raw):
        return str(raw)

    if not raw:
        return ""

    if len(raw) == COORDINATE_COMPONENTS:
        return coordinate_from_tag_values(raw).to_string()

    return " ".join(str(item) for item in raw)


def format_gps_timestamp(values: Optional[Sequence[Any]]) -> str:
    """
    Строка GPSTimeStamp: десятичные значения через ':'.

    Examples:
        >>> format_gps_timestamp([URational(14, 1), URational(5, 1), URational(61, 2)])
        '14:5:30.5'
    """
    if not values:
        return ""

    return TIMESTAMP_SEPARATOR.join(format_plain(_component_decimal(item)) for item in values)
