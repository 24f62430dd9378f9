"""
RationalValue — неизменяемая пара numerator/denominator над представлением T

EXIF 2.3: RATIONAL (два uint32), SRATIONAL (два int32)

Класс rational привязан к одному NumericRepresentation (ClassVar
representation). URational и SRational — EXIF-классы; для любых других
представлений класс строится через RationalValue.of(representation).

Модуль обеспечивает:
- Greedy approximation decimal → rational (детерминированное число итераций)
- Parse / TryParse текста "n/d" с асимметрией флага успеха
- Opt-in reduce (GCD + нормализация знака знаменателя)
- Арифметику в рабочем decimal-домене с обратной конверсией в T
- Сравнение с особыми ветками для нулевого знаменателя
- Стабильный 32-битный hash (seed 0x1fb8d67d, multiplier -1521134295)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. (0, 0) — Empty sentinel (отсутствие значения, не ноль)
2. denominator == zero — indeterminate; конструирование не выбрасывает
3. Reduce никогда не выполняется неявно
4. Overflow при обратной конверсии в T фатален (RationalOverflowError)
5. Сравнение с нулевым знаменателем НЕ является total order (сохраняется)
"""

import logging
from decimal import Decimal, localcontext
from typing import Any, ClassVar, Final, Optional

from src.core.errors import ParseError
from src.core.math.numerical_safeguards import (
    DEFAULT_APPROXIMATION_EPSILON,
    WORKING_CONTEXT,
    Number,
    gcd,
    lcd,
    round_half_even,
    safe_divide,
    to_decimal,
    truncate,
    wrap_int32,
)
from src.core.math.representations import (
    INT32,
    UINT32,
    NumericRepresentation,
    resolve_parser,
    resolve_try_parser,
)

logger = logging.getLogger(__name__)

# Разделитель текстовой формы
RATIONAL_DELIMITER: Final[str] = "/"

# Константы hash (анонимный тип { Numerator, Denominator } в .NET)
HASH_SEED: Final[int] = 0x1FB8D67D
HASH_MULTIPLIER: Final[int] = -1521134295

_NUMBER_TYPES: Final = (int, float, Decimal)

# Реестр классов по представлению: RationalValue.of() идемпотентен
_CLASS_REGISTRY: dict[NumericRepresentation, type["RationalValue"]] = {}


def _compare_decimals(a: Decimal, b: Decimal) -> int:
    return (a > b) - (a < b)


# =============================================================================
# RATIONAL VALUE
# =============================================================================


class RationalValue:
    """
    Rational число над числовым представлением T.

    Базовый класс не привязан к представлению и не инстанцируется напрямую;
    используйте URational / SRational или RationalValue.of(representation).

    Attributes:
        representation: Числовое представление компонент (ClassVar)
        EMPTY: Sentinel (0, 0) этого класса (ClassVar)
    """

    __slots__ = ("_numerator", "_denominator")

    representation: ClassVar[Optional[NumericRepresentation]] = None
    EMPTY: ClassVar["RationalValue"]

    def __init_subclass__(cls, **kwargs):
        """Регистрация класса для его представления и построение EMPTY"""
        super().__init_subclass__(**kwargs)
        representation = cls.__dict__.get("representation")
        if representation is None:
            return

        _CLASS_REGISTRY.setdefault(representation, cls)
        cls.EMPTY = cls(representation.zero, representation.zero)

    def __init__(self, numerator: Any, denominator: Any, reduce: bool = False):
        """
        Args:
            numerator: Числитель (значение представления T)
            denominator: Знаменатель (значение представления T, может быть zero)
            reduce: Сократить по GCD сразу при создании

        Raises:
            RationalOverflowError: Если компонента вне диапазона T
        """
        representation = self._require_representation()
        numerator = representation.coerce(numerator)
        denominator = representation.coerce(denominator)

        if reduce:
            numerator, denominator = self._reduce_components(numerator, denominator)

        self._numerator = numerator
        self._denominator = denominator

    @classmethod
    def _require_representation(cls) -> NumericRepresentation:
        if cls.representation is None:
            raise TypeError(
                f"{cls.__name__} is not bound to a numeric representation; "
                f"use RationalValue.of(representation)"
            )
        return cls.representation

    @classmethod
    def of(cls, representation: NumericRepresentation) -> type["RationalValue"]:
        """
        Класс rational для представления T (создаётся один раз, кэшируется).

        Examples:
            >>> RationalValue.of(UINT32) is URational
            True
        """
        try:
            return _CLASS_REGISTRY[representation]
        except KeyError:
            return type(
                f"Rational[{representation.name}]",
                (RationalValue,),
                {"__slots__": (), "representation": representation},
            )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def numerator(self) -> Any:
        return self._numerator

    @property
    def denominator(self) -> Any:
        return self._denominator

    @property
    def is_empty(self) -> bool:
        """True для sentinel (0, 0)"""
        return self == type(self).EMPTY

    @property
    def is_indeterminate(self) -> bool:
        """True для нулевого знаменателя при ненулевом числителе"""
        representation = self.representation
        return representation.is_zero(self._denominator) and not representation.is_zero(
            self._numerator
        )

    # -------------------------------------------------------------------------
    # Approximation & parsing
    # -------------------------------------------------------------------------

    @classmethod
    def approximate(
        cls,
        value: Number,
        epsilon: Number = DEFAULT_APPROXIMATION_EPSILON,
    ) -> "RationalValue":
        """
        Greedy approximation decimal значения rational-числом.

        Алгоритм (не continued fractions):
            n := trunc(value), d := 1
            пока |n/d - value| > epsilon и d < max и n < max:
                n/d < value → n += 1
                иначе       → d += 1, n := round(value·d); если n > max → d -= 1, стоп

        Args:
            value: Приближаемое значение
            epsilon: Требуемая точность (default: 0.000001)

        Returns:
            Rational-приближение (не сокращённое)

        Raises:
            RationalOverflowError: Если результат не помещается в T

        Examples:
            >>> str(URational.approximate(0.5))
            '1/2'
            >>> str(URational.approximate(21.12))
            '528/25'
        """
        representation = cls._require_representation()
        target = to_decimal(value)
        eps = to_decimal(epsilon)
        max_value = representation.max_magnitude

        with localcontext(WORKING_CONTEXT):
            numerator = truncate(target)
            denominator = Decimal(1)
            fraction = numerator / denominator
            iterations = 0

            while abs(fraction - target) > eps and denominator < max_value and numerator < max_value:
                if fraction < target:
                    numerator += 1
                else:
                    denominator += 1

                    candidate = round_half_even(target * denominator)
                    if candidate > max_value:
                        denominator -= 1
                        break

                    numerator = candidate

                fraction = numerator / denominator
                iterations += 1

        logger.debug(
            "approximate(%s, eps=%s) -> %s/%s after %d iterations",
            target,
            eps,
            numerator,
            denominator,
            iterations,
        )

        return cls(representation.from_decimal(numerator), representation.from_decimal(denominator))

    @staticmethod
    def _split(text: str) -> list[str]:
        """Разбиение по первому '/' на ≤ 2 части без пустых"""
        return [part for part in text.split(RATIONAL_DELIMITER, 1) if part]

    @classmethod
    def parse(cls, text: Optional[str]) -> "RationalValue":
        """
        Парсинг текста "numerator/denominator".

        Пустой текст → EMPTY. Отсутствующий знаменатель → zero
        (indeterminate значение, не ошибка).

        Raises:
            ParseError: Если компонента не распознана
            RationalOverflowError: Если компонента вне диапазона T
            StructuralRequirementError: Если T не умеет parse

        Examples:
            >>> URational.parse("41/1")
            URational(41, 1)
            >>> URational.parse("7")
            URational(7, 0)
        """
        representation = cls._require_representation()
        if not text:
            return cls.EMPTY

        parser = resolve_parser(representation)

        parts = cls._split(text)
        if not parts:
            raise ParseError(f"Invalid rational: {text!r}")

        numerator = parser(parts[0])
        if len(parts) > 1:
            denominator = parser(parts[1])
        else:
            denominator = representation.zero

        return cls(numerator, denominator)

    @classmethod
    def try_parse(cls, text: Optional[str]) -> tuple[bool, "RationalValue"]:
        """
        Парсинг без исключений для некорректного текста.

        Returns:
            (success, value):
                - Пустой текст или ошибка компоненты → (False, EMPTY)
                - Голое число "7" → (False, 7/0): значение заполнено,
                  но успех только при двух частях
                - "7/2" → (True, 7/2)

        Raises:
            StructuralRequirementError: Если T не умеет try_parse
        """
        representation = cls._require_representation()
        if not text:
            return False, cls.EMPTY

        try_parser = resolve_try_parser(representation)

        parts = cls._split(text)
        if not parts:
            return False, cls.EMPTY

        ok, numerator = try_parser(parts[0])
        if not ok:
            return False, cls.EMPTY

        if len(parts) > 1:
            ok, denominator = try_parser(parts[1])
            if not ok:
                return False, cls.EMPTY
        else:
            denominator = representation.zero

        return len(parts) == 2, cls(numerator, denominator)

    # -------------------------------------------------------------------------
    # Reduction
    # -------------------------------------------------------------------------

    @classmethod
    def _reduce_components(cls, numerator: Any, denominator: Any) -> tuple[Any, Any]:
        representation = cls._require_representation()
        n = representation.to_decimal(numerator)
        d = representation.to_decimal(denominator)
        reduced = False

        divisor = gcd(n, d)
        if divisor != 1 and not divisor.is_zero():
            reduced = True
            n = WORKING_CONTEXT.divide(n, divisor)
            d = WORKING_CONTEXT.divide(d, divisor)

        # знаменатель всегда неотрицательный
        if d < 0:
            reduced = True
            n = -n
            d = -d

        if not reduced:
            return numerator, denominator

        return representation.from_decimal(n), representation.from_decimal(d)

    def reduce(self) -> "RationalValue":
        """
        Сокращение по GCD и нормализация знака знаменателя.

        Examples:
            >>> URational(10, 4).reduce()
            URational(5, 2)
            >>> SRational(3, -6).reduce()
            SRational(-1, 2)
        """
        return type(self)(self._numerator, self._denominator, reduce=True)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def _components(self) -> tuple[Decimal, Decimal]:
        representation = self.representation
        return (
            representation.to_decimal(self._numerator),
            representation.to_decimal(self._denominator),
        )

    def to_decimal(self) -> Decimal:
        """n/d в рабочем домене; нулевой знаменатель → 0"""
        numerator, denominator = self._components()
        return safe_divide(numerator, denominator)

    def __float__(self) -> float:
        numerator, denominator = self._components()
        if denominator.is_zero():
            return 0.0
        return float(numerator) / float(denominator)

    def convert(self, target: type["RationalValue"]) -> "RationalValue":
        """
        Конверсия в другой класс rational (другое представление).

        Числитель и знаменатель конвертируются независимо.

        Raises:
            RationalOverflowError: Если компонента не помещается в целевое T
        """
        if type(self) is target:
            return self

        target_representation = target._require_representation()
        numerator, denominator = self._components()
        return target(
            target_representation.from_decimal(numerator),
            target_representation.from_decimal(denominator),
        )

    def _from_working(self, numerator: Decimal, denominator: Decimal) -> "RationalValue":
        representation = self.representation
        return type(self)(
            representation.from_decimal(numerator),
            representation.from_decimal(denominator),
        )

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _same_class(self, other: Any) -> bool:
        return type(other) is type(self)

    def __neg__(self) -> "RationalValue":
        numerator, _ = self._components()
        return type(self)(self.representation.from_decimal(-numerator), self._denominator)

    def __add__(self, other: Any) -> "RationalValue":
        if not self._same_class(other):
            return NotImplemented

        n1, d1 = self._components()
        n2, d2 = other._components()

        with localcontext(WORKING_CONTEXT):
            denominator = lcd(d1, d2)
            if denominator > d1:
                n1 *= denominator / d1
            if denominator > d2:
                n2 *= denominator / d2

            numerator = n1 + n2

        return self._from_working(numerator, denominator)

    def __sub__(self, other: Any) -> "RationalValue":
        if not self._same_class(other):
            return NotImplemented
        return self + (-other)

    def __mul__(self, other: Any) -> "RationalValue":
        if not self._same_class(other):
            return NotImplemented

        n1, d1 = self._components()
        n2, d2 = other._components()

        return self._from_working(
            WORKING_CONTEXT.multiply(n1, n2),
            WORKING_CONTEXT.multiply(d1, d2),
        )

    def __truediv__(self, other: Any) -> "RationalValue":
        if not self._same_class(other):
            return NotImplemented
        return self * type(other)(other._denominator, other._numerator)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare_to(self, other: Any) -> int:
        """
        Сравнение с другим rational или числом.

        Различает настоящий ноль и деление на ноль:
        - этот знаменатель 0:
            - другой знаменатель 0 → сравнение числителей
            - другой числитель 0 → сравнение знаменателей
        - другой знаменатель 0 и этот числитель 0 → сравнение знаменателей
        - иначе → сравнение decimal-значений (n/0 считается 0)

        ВНИМАНИЕ: не total order, транзитивность для смеси sentinel /
        обычных значений не гарантируется.

        Returns:
            -1, 0 или +1

        Raises:
            TypeError: Если other не rational и не число
        """
        if isinstance(other, RationalValue):
            n1, d1 = self._components()
            n2, d2 = other._components()

            if d1.is_zero():
                if d2.is_zero():
                    return _compare_decimals(n1, n2)
                elif n2.is_zero():
                    return _compare_decimals(d1, d2)
            elif d2.is_zero():
                if n1.is_zero():
                    return _compare_decimals(d1, d2)

            return _compare_decimals(self.to_decimal(), other.to_decimal())

        if isinstance(other, _NUMBER_TYPES) and not isinstance(other, bool):
            return _compare_decimals(self.to_decimal(), to_decimal(other))

        raise TypeError(f"Cannot compare {type(self).__name__} with {type(other).__name__}")

    def _comparable(self, other: Any) -> bool:
        return isinstance(other, RationalValue) or (
            isinstance(other, _NUMBER_TYPES) and not isinstance(other, bool)
        )

    def __eq__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare_to(other) == 0

    def __ne__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare_to(other) != 0

    def __lt__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other: Any) -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.compare_to(other) >= 0

    def stable_hash(self) -> int:
        """
        Детерминированный 32-битный hash, совместимый между реализациями.

        acc = 0x1fb8d67d
        acc = M·acc + h(numerator)
        result = M·acc + h(denominator), M = -1521134295 (int32 wrap)

        Согласован с компонентами, а не с числовым равенством:
        1/2 == 2/4, но их hash различаются.
        """
        representation = self.representation
        accumulator = HASH_SEED
        accumulator = wrap_int32(
            HASH_MULTIPLIER * accumulator + representation.hash_component(self._numerator)
        )
        return wrap_int32(
            HASH_MULTIPLIER * accumulator + representation.hash_component(self._denominator)
        )

    def __hash__(self) -> int:
        """
        Hash по компонентам (stable_hash), а не по числовому значению.

        Поэтому членство в set / dict тоже определяется компонентами:
        {URational(1, 2), URational(2, 4)} содержит два элемента, и ключ
        URational(1, 2) не находится по URational(2, 4). Для поиска по
        значению ключи нужно предварительно сократить через reduce().
        """
        return self.stable_hash()

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        representation = self.representation
        return (
            f"{representation.format(self._numerator)}"
            f"{RATIONAL_DELIMITER}"
            f"{representation.format(self._denominator)}"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._numerator!r}, {self._denominator!r})"

    def __reduce__(self):
        # класс восстанавливается через of(), поэтому pickle работает и для
        # классов, созданных динамически (Rational[uint8] и т.п.)
        return (_restore_rational, (self.representation, self._numerator, self._denominator))


# =============================================================================
# EXIF RATIONAL CLASSES
# =============================================================================


class URational(RationalValue):
    """EXIF RATIONAL: два uint32"""

    __slots__ = ()
    representation = UINT32


class SRational(RationalValue):
    """EXIF SRATIONAL: два int32"""

    __slots__ = ()
    representation = INT32


def _restore_rational(representation: NumericRepresentation, numerator: Any, denominator: Any) -> RationalValue:
    """Восстановление значения из pickle"""
    return RationalValue.of(representation)(numerator, denominator)
