"""
Numeric Representations — trait числового представления T для RationalValue

Каждое представление описывает, как компонента rational (numerator или
denominator) хранится, парсится, форматируется и конвертируется в рабочий
decimal-домен и обратно:
- parse / try_parse — инвариантный ASCII-парсер компоненты
- format — инвариантное текстовое представление компоненты
- to_decimal / from_decimal — конверсия с детекцией overflow
- zero — нулевое значение (denominator == zero → indeterminate)
- max_magnitude — максимальная представимая величина (ленивый кэш)
- hash_component — 32-битный hash компоненты, совместимый с .NET

Parse-способность обнаруживается один раз на представление и кэшируется
(resolve_parser / resolve_try_parser). Гонка при первом обращении безвредна:
результат детерминирован.
"""

import re
import struct
from decimal import ROUND_HALF_EVEN, Decimal
from functools import cached_property
from typing import Any, Callable, Final, Optional

from src.core.errors import ParseError, RationalOverflowError, StructuralRequirementError
from src.core.math.numerical_safeguards import (
    DECIMAL_MAX_VALUE,
    WORKING_CONTEXT,
    format_plain,
    to_decimal,
    wrap_int32,
)

# Целое: необязательный знак и ASCII-цифры (пробелы по краям допустимы)
_INTEGER_PATTERN: Final = re.compile(r"[+-]?[0-9]+")

# Decimal без экспоненты
_DECIMAL_PATTERN: Final = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")

# Число с плавающей точкой с необязательной экспонентой
_FLOAT_PATTERN: Final = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


# =============================================================================
# BASE TRAIT
# =============================================================================


class NumericRepresentation:
    """
    Базовый trait числового представления.

    Наследники обязаны реализовать конверсии, format и hash_component.
    parse / try_parse необязательны: представление без них допустимо для
    арифметики, но RationalValue.parse для него выбросит
    StructuralRequirementError.
    """

    name: str = "abstract"
    zero: Any = 0

    def to_decimal(self, value: Any) -> Decimal:
        raise NotImplementedError

    def from_decimal(self, value: Decimal) -> Any:
        raise NotImplementedError

    def format(self, value: Any) -> str:
        raise NotImplementedError

    def hash_component(self, value: Any) -> int:
        raise NotImplementedError

    @cached_property
    def max_magnitude(self) -> Decimal:
        """Максимальная представимая величина в рабочем домене"""
        return DECIMAL_MAX_VALUE

    def coerce(self, value: Any) -> Any:
        """Приведение компоненты конструктора к типу представления"""
        return value

    def is_zero(self, value: Any) -> bool:
        return self.to_decimal(value).is_zero()

    def __repr__(self) -> str:
        return self.name

    def __reduce_ex__(self, protocol):
        # стандартные экземпляры восстанавливаются как те же объекты
        if _BY_NAME.get(self.name) is self:
            return (representation_by_name, (self.name,))
        return super().__reduce_ex__(protocol)



# =============================================================================
# INTEGER REPRESENTATIONS
# =============================================================================


class IntegerRepresentation(NumericRepresentation):
    """
    Целочисленное представление фиксированной разрядности.

    Конверсия из decimal округляет half-even и проверяет диапазон.
    """

    zero = 0

    def __init__(self, name: str, bits: int, signed: bool):
        self.name = name
        self.bits = bits
        self.signed = signed
        if signed:
            self.min_value = -(1 << (bits - 1))
            self.max_value = (1 << (bits - 1)) - 1
        else:
            self.min_value = 0
            self.max_value = (1 << bits) - 1

    @cached_property
    def max_magnitude(self) -> Decimal:
        return Decimal(self.max_value)

    def to_decimal(self, value: int) -> Decimal:
        return Decimal(value)

    def from_decimal(self, value: Decimal) -> int:
        rounded = value.to_integral_value(rounding=ROUND_HALF_EVEN, context=WORKING_CONTEXT)
        result = int(rounded)
        self._check_range(result, value)
        return result

    def coerce(self, value: Any) -> int:
        """Приведение компоненты конструктора к int с проверкой диапазона"""
        if isinstance(value, int) and not isinstance(value, bool):
            self._check_range(value, value)
            return value
        return self.from_decimal(to_decimal(value))

    def _check_range(self, result: int, source: Any) -> None:
        if result < self.min_value or result > self.max_value:
            raise RationalOverflowError(
                f"Value {source} is outside {self.name} range "
                f"[{self.min_value}, {self.max_value}]"
            )

    def parse(self, text: str) -> int:
        """
        Парсинг ASCII целого.

        Raises:
            ParseError: Если текст не является целым числом
            RationalOverflowError: Если значение вне диапазона
        """
        candidate = text.strip()
        if not _INTEGER_PATTERN.fullmatch(candidate):
            raise ParseError(f"Invalid {self.name} value: {text!r}")

        result = int(candidate)
        self._check_range(result, candidate)
        return result

    def try_parse(self, text: str) -> tuple[bool, int]:
        try:
            return True, self.parse(text)
        except (ParseError, RationalOverflowError):
            return False, self.zero

    def format(self, value: int) -> str:
        return str(value)

    def hash_component(self, value: int) -> int:
        """
        32-битный hash компоненты как в .NET Core.

        Типы до 32 бит: само значение (uint → reinterpret как int).
        64-битные типы: XOR младшего и старшего слова.
        """
        if self.bits <= 32:
            return wrap_int32(value)

        low = wrap_int32(value)
        high = wrap_int32(value >> 32)
        return wrap_int32(low ^ high)


# =============================================================================
# FLOATING / DECIMAL REPRESENTATIONS
# =============================================================================


class Float64Representation(NumericRepresentation):
    """IEEE 754 double"""

    name = "float64"
    zero = 0.0

    def to_decimal(self, value: float) -> Decimal:
        return to_decimal(float(value))

    def from_decimal(self, value: Decimal) -> float:
        result = float(value)
        if result in (float("inf"), float("-inf")):
            raise RationalOverflowError(f"Value {value} is outside {self.name} range")
        return result

    def coerce(self, value: Any) -> float:
        if isinstance(value, float):
            return value
        return self.from_decimal(to_decimal(value))

    def parse(self, text: str) -> float:
        candidate = text.strip()
        if not _FLOAT_PATTERN.fullmatch(candidate):
            raise ParseError(f"Invalid {self.name} value: {text!r}")

        result = float(candidate)
        if result in (float("inf"), float("-inf")):
            raise RationalOverflowError(f"Value {candidate} is outside {self.name} range")
        return result

    def try_parse(self, text: str) -> tuple[bool, float]:
        try:
            return True, self.parse(text)
        except (ParseError, RationalOverflowError):
            return False, self.zero

    def format(self, value: float) -> str:
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text

    def hash_component(self, value: float) -> int:
        """Hash double как в .NET: XOR половин IEEE-битов, ±0 → 0"""
        if value == 0.0:
            return 0

        (bits,) = struct.unpack("<q", struct.pack("<d", value))
        return wrap_int32(wrap_int32(bits) ^ wrap_int32(bits >> 32))


class DecimalRepresentation(NumericRepresentation):
    """
    96-битный decimal.

    hash_component основан на hash() Python и не совместим с .NET
    (decimal hash там зависит от внутреннего масштаба).
    """

    name = "decimal"
    zero = Decimal(0)

    def to_decimal(self, value: Decimal) -> Decimal:
        return to_decimal(value)

    def from_decimal(self, value: Decimal) -> Decimal:
        if abs(value) > DECIMAL_MAX_VALUE:
            raise RationalOverflowError(f"Value {value} is outside {self.name} range")
        return value

    def coerce(self, value: Any) -> Decimal:
        return self.from_decimal(to_decimal(value))

    def parse(self, text: str) -> Decimal:
        candidate = text.strip()
        if not _DECIMAL_PATTERN.fullmatch(candidate):
            raise ParseError(f"Invalid {self.name} value: {text!r}")
        return self.from_decimal(Decimal(candidate))

    def try_parse(self, text: str) -> tuple[bool, Decimal]:
        try:
            return True, self.parse(text)
        except (ParseError, RationalOverflowError):
            return False, self.zero

    def format(self, value: Decimal) -> str:
        if value == value.to_integral_value():
            return format_plain(value)
        return format(value, "f")

    def hash_component(self, value: Decimal) -> int:
        return wrap_int32(hash(value))


# =============================================================================
# CONCRETE INSTANCES
# =============================================================================

BYTE: Final = IntegerRepresentation("uint8", 8, signed=False)
SBYTE: Final = IntegerRepresentation("int8", 8, signed=True)
UINT16: Final = IntegerRepresentation("uint16", 16, signed=False)
INT16: Final = IntegerRepresentation("int16", 16, signed=True)
UINT32: Final = IntegerRepresentation("uint32", 32, signed=False)
INT32: Final = IntegerRepresentation("int32", 32, signed=True)
UINT64: Final = IntegerRepresentation("uint64", 64, signed=False)
INT64: Final = IntegerRepresentation("int64", 64, signed=True)
FLOAT64: Final = Float64Representation()
DECIMAL: Final = DecimalRepresentation()

_BY_NAME: Final[dict[str, NumericRepresentation]] = {
    representation.name: representation
    for representation in (BYTE, SBYTE, UINT16, INT16, UINT32, INT32, UINT64, INT64, FLOAT64, DECIMAL)
}


def representation_by_name(name: str) -> NumericRepresentation:
    """
    Стандартное представление по имени ("uint8", "int32", "float64", ...).

    Raises:
        KeyError: Если представление с таким именем не зарегистрировано
    """
    return _BY_NAME[name]



# =============================================================================
# PARSER RESOLUTION (кэш на представление)
# =============================================================================

_PARSERS: dict[NumericRepresentation, Optional[Callable[[str], Any]]] = {}
_TRY_PARSERS: dict[NumericRepresentation, Optional[Callable[[str], tuple[bool, Any]]]] = {}


def _lookup(cache: dict, representation: NumericRepresentation, attribute: str):
    try:
        return cache[representation]
    except KeyError:
        candidate = getattr(representation, attribute, None)
        resolved = candidate if callable(candidate) else None
        cache[representation] = resolved
        return resolved


def resolve_parser(representation: NumericRepresentation) -> Callable[[str], Any]:
    """
    Parse-функция представления (обнаруживается один раз, кэшируется).

    Raises:
        StructuralRequirementError: Если представление не умеет parse
    """
    parser = _lookup(_PARSERS, representation, "parse")
    if parser is None:
        raise StructuralRequirementError(
            f"Representation {representation!r} must support parse in order to parse a rational"
        )
    return parser


def resolve_try_parser(representation: NumericRepresentation) -> Callable[[str], tuple[bool, Any]]:
    """
    TryParse-функция представления (обнаруживается один раз, кэшируется).

    Raises:
        StructuralRequirementError: Если представление не умеет try_parse
    """
    try_parser = _lookup(_TRY_PARSERS, representation, "try_parse")
    if try_parser is None:
        raise StructuralRequirementError(
            f"Representation {representation!r} must support try_parse in order to try-parse a rational"
        )
    return try_parser
