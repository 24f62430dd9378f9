"""
GeoCoordinate — Географическая координата в градусах / минутах / секундах

EXIF 2.3: GPSLatitude / GPSLongitude (RATIONAL × 3) + GPSLatitudeRef / GPSLongitudeRef
XMP: GPSCoordinate ("DDD,MM,SSk" или "DDD,MM.mmk")

Pydantic модель с проверкой направления при каждом присваивании
(validate_assignment). Компоненты — URational; точность исходных rational
сохраняется только при from_rational_triple, текстовый разбор и
from_decimal проходят через URational.approximate.

Форматы вывода (to_string):
- "N": десятичные градусы "0.0######", без направления
- "X" (default): XMP-стиль "40,41,21N" / "40,41.352N"
- "D": градусный стиль 40° 41' 21" N / 40° 41.352' N
"""

import logging
from decimal import Decimal, localcontext
from enum import Enum
from typing import Final, Optional

from pydantic import BaseModel, Field, field_validator

from src.core.domain.dms_scanner import scan_dms
from src.core.errors import ParseError, RationalOverflowError
from src.core.math.numerical_safeguards import (
    WORKING_CONTEXT,
    Number,
    format_fixed,
    remainder,
    to_decimal,
    truncate,
)
from src.core.math.rational import URational

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS
# =============================================================================

SECONDS_PER_MINUTE: Final[Decimal] = Decimal(60)
MINUTES_PER_DEGREE: Final[Decimal] = Decimal(60)

DEGREE_MARK: Final[str] = "°"
MINUTE_MARK: Final[str] = "'"
SECOND_MARK: Final[str] = '"'

_VALID_DIRECTIONS: Final[str] = "NEWSnews"


# =============================================================================
# ENUMS
# =============================================================================


class CoordinateDirection(str, Enum):
    """Полушарие координаты"""

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"


class CoordinateFormat(str, Enum):
    """Селектор формата вывода"""

    NUMERIC = "N"
    XMP = "X"
    DEGREES = "D"

    @classmethod
    def resolve(cls, selector: Optional[str]) -> "CoordinateFormat":
        """
        Регистронезависимый разбор селектора; пустой → XMP.

        Raises:
            ParseError: Если селектор неизвестен
        """
        if not selector:
            return cls.XMP

        try:
            return cls(selector.upper())
        except ValueError:
            raise ParseError(f"Unknown coordinate format {selector!r}; expected N, X or D") from None


_NEGATIVE_DIRECTIONS: Final[frozenset[str]] = frozenset(
    {CoordinateDirection.SOUTH.value, CoordinateDirection.WEST.value}
)


# =============================================================================
# GEO COORDINATE MODEL
# =============================================================================


class GeoCoordinate(BaseModel):
    """
    Координата: градусы, минуты, секунды (URational) и направление.

    Компоненты по умолчанию — URational.EMPTY (отсутствуют).
    Направление нормализуется к верхнему регистру; невалидная буква →
    pydantic.ValidationError.
    """

    degrees: URational = Field(default_factory=lambda: URational.EMPTY, description="Градусы")
    minutes: URational = Field(default_factory=lambda: URational.EMPTY, description="Минуты")
    seconds: URational = Field(default_factory=lambda: URational.EMPTY, description="Секунды")
    direction: Optional[str] = Field(None, description="Полушарие: N, E, S или W")

    model_config = {"arbitrary_types_allowed": True, "validate_assignment": True}

    @field_validator("direction", mode="before")
    @classmethod
    def validate_direction(cls, v: object) -> Optional[str]:
        """Пустое значение очищает направление; иначе первая буква ∈ {N,E,W,S}"""
        if v is None:
            return None

        if isinstance(v, CoordinateDirection):
            return v.value

        if not isinstance(v, str):
            raise ValueError(f"direction must be a string, got {type(v).__name__}")

        if not v:
            return None

        if v[0] not in _VALID_DIRECTIONS:
            raise ValueError("Invalid GPS direction, must be one of 'N', 'E', 'W', 'S'.")

        return v[0].upper()

    # -------------------------------------------------------------------------
    # Component setters
    # -------------------------------------------------------------------------

    def set_degrees(self, value: Number) -> None:
        """Градусы через URational.approximate"""
        self.degrees = URational.approximate(value)

    def set_minutes(self, value: Number) -> None:
        """Минуты через URational.approximate"""
        self.minutes = URational.approximate(value)

    def set_seconds(self, value: Number) -> None:
        """Секунды через URational.approximate"""
        self.seconds = URational.approximate(value)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_decimal(cls, value: Number) -> "GeoCoordinate":
        """
        Разложение десятичных градусов на D/M/S.

        deg = trunc(v); min = rem(v, 1)·60; sec = rem(min, 1)·60; min = trunc(min)
        Направление не назначается.

        Raises:
            RationalOverflowError: Для отрицательных значений (компоненты unsigned)

        Examples:
            >>> GeoCoordinate.from_decimal(40.6892).to_string()
            '40,41.352'
        """
        decimal_value = to_decimal(value)

        with localcontext(WORKING_CONTEXT):
            deg = truncate(decimal_value)
            minutes = remainder(decimal_value, Decimal(1)) * MINUTES_PER_DEGREE
            sec = remainder(minutes, Decimal(1)) * SECONDS_PER_MINUTE
            minutes = truncate(minutes)

        return cls.from_dms(deg, minutes, sec)

    @classmethod
    def from_dms(cls, deg: Number, minutes: Number, sec: Number) -> "GeoCoordinate":
        """Три десятичные компоненты, каждая через approximate"""
        coordinate = cls()
        coordinate.set_degrees(deg)
        coordinate.set_minutes(minutes)
        coordinate.set_seconds(sec)
        return coordinate

    @classmethod
    def from_signed_decimal(
        cls,
        value: Number,
        positive: str = CoordinateDirection.NORTH.value,
        negative: str = CoordinateDirection.SOUTH.value,
    ) -> "GeoCoordinate":
        """
        Координата из знаковых десятичных градусов.

        Модуль раскладывается через from_decimal, знак становится
        направлением (N/S для широты, E/W для долготы).

        Examples:
            >>> GeoCoordinate.from_signed_decimal(-73.9857, "E", "W").direction
            'W'
        """
        decimal_value = to_decimal(value)
        coordinate = cls.from_decimal(abs(decimal_value))
        coordinate.direction = negative if decimal_value < 0 else positive
        return coordinate

    @classmethod
    def from_rational_triple(
        cls,
        deg: URational,
        minutes: URational,
        sec: URational,
    ) -> "GeoCoordinate":
        """Прямое присваивание компонент без decimal round-trip"""
        return cls(degrees=deg, minutes=minutes, seconds=sec)

    def to_rational_triple(self) -> list[URational]:
        """[degrees, minutes, seconds]"""
        return [self.degrees, self.minutes, self.seconds]

    # -------------------------------------------------------------------------
    # Value
    # -------------------------------------------------------------------------

    @property
    def value(self) -> Decimal:
        """
        Знаковые десятичные градусы: deg + (min + sec/60)/60.

        S / W делают значение отрицательным; уже отрицательное значение
        повторно не инвертируется.
        """
        with localcontext(WORKING_CONTEXT):
            total = self.degrees.to_decimal() + (
                self.minutes.to_decimal() + self.seconds.to_decimal() / SECONDS_PER_MINUTE
            ) / MINUTES_PER_DEGREE

        if self.direction in _NEGATIVE_DIRECTIONS and total > 0:
            return -total
        return total

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: Optional[str]) -> "GeoCoordinate":
        """
        Разбор десятичной или DMS координаты.

        Raises:
            ParseError: Если текст не является координатой
            RationalOverflowError: Если компонента отрицательна или слишком велика

        Examples:
            >>> GeoCoordinate.parse('40°41\\'21.2"N').to_string("D")
            "40° 41.3533333' N"
        """
        if not text:
            raise ParseError("Invalid GeoCoordinate: empty text")

        scanned = scan_dms(text)

        coordinate = cls()
        coordinate.set_degrees(scanned.degrees)
        if scanned.minutes is not None:
            coordinate.set_minutes(scanned.minutes)
            coordinate.set_seconds(scanned.seconds if scanned.seconds is not None else Decimal(0))
        coordinate.direction = scanned.direction

        return coordinate

    @classmethod
    def try_parse(cls, text: Optional[str]) -> tuple[bool, Optional["GeoCoordinate"]]:
        """
        Разбор без исключений.

        Returns:
            (True, coordinate) при успехе, (False, None) иначе
        """
        try:
            return True, cls.parse(text)
        except (ParseError, RationalOverflowError) as e:
            logger.debug("GeoCoordinate.try_parse rejected %r: %s", text, e)
            return False, None

    # -------------------------------------------------------------------------
    # Formatting
    # -------------------------------------------------------------------------

    def _needs_decimal_fallback(self) -> bool:
        return (
            self.degrees.is_empty
            or self.minutes.is_empty
            or self.seconds.is_empty
            or self.degrees.denominator != 1
        )

    def _append_direction(self, parts: list[str], fmt: CoordinateFormat) -> None:
        if self.direction:
            if fmt is CoordinateFormat.DEGREES:
                parts.append(" ")
            parts.append(self.direction)

    def to_string(self, format: Optional[str] = None) -> str:
        """
        Текстовое представление координаты.

        Args:
            format: "N" (decimal), "X" (XMP, default) или "D" (degrees),
                регистр не важен

        Raises:
            ParseError: Если селектор формата неизвестен
        """
        fmt = CoordinateFormat.resolve(format)

        if fmt is CoordinateFormat.NUMERIC:
            return format_fixed(self.value)

        parts: list[str] = []

        if self._needs_decimal_fallback():
            # полное десятичное форматирование
            value = self.value
            parts.append(format_fixed(abs(value) if self.direction else value))
            if fmt is CoordinateFormat.DEGREES:
                parts.append(DEGREE_MARK)
            self._append_direction(parts, fmt)
            return "".join(parts)

        parts.append(str(self.degrees.numerator))
        parts.append(f"{DEGREE_MARK} " if fmt is CoordinateFormat.DEGREES else ",")

        # DD,MM.mmk
        if self.minutes.denominator != 1 or self.seconds.denominator != 1:
            with localcontext(WORKING_CONTEXT):
                combined = self.minutes.to_decimal() + self.seconds.to_decimal() / SECONDS_PER_MINUTE
            parts.append(format_fixed(combined))
            if fmt is CoordinateFormat.DEGREES:
                parts.append(MINUTE_MARK)
            self._append_direction(parts, fmt)
            return "".join(parts)

        # DD,MM,SSk
        parts.append(str(self.minutes.numerator))
        parts.append(f"{MINUTE_MARK} " if fmt is CoordinateFormat.DEGREES else ",")
        parts.append(str(self.seconds.numerator))
        if fmt is CoordinateFormat.DEGREES:
            parts.append(SECOND_MARK)
        self._append_direction(parts, fmt)

        return "".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec or None)
