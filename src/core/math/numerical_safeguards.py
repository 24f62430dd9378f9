"""
Numerical Safeguards — рабочий decimal-домен

Модуль задаёт единый высокоточный промежуточный домен для всех операций
над rational-значениями:
- Контекст decimal с фиксированной точностью и banker's rounding
- Безопасное деление: нулевой знаменатель → fallback (0), не Inf/NaN
- Truncate / round-half-even / remainder с семантикой знака делимого
- GCD / LCD по алгоритму Евклида
- Форматирование "0.0######" (минимум 1, максимум 7 дробных знаков)
- 32-битное знаковое обёртывание для стабильных hash-значений

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не выбрасывает исключение (возвращается fallback)
2. NaN/Inf не попадают в рабочий домен (ValueError на входе)
3. GCD(0, 0) = 0, LCD(0, 0) = 0
4. Все операции детерминированы и воспроизводимы
"""

import math
from decimal import (
    ROUND_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from fractions import Fraction
from typing import Final, Union

Number = Union[int, float, Decimal, Fraction]

# =============================================================================
# ПАРАМЕТРЫ РАБОЧЕГО ДОМЕНА
# =============================================================================

# Точность промежуточного домена (значащие цифры).
# Произведение двух 64-битных компонент (≤ 40 цифр) представимо точно.
WORKING_PRECISION: Final[int] = 60

# Контекст для всех вычислений над numerator/denominator
WORKING_CONTEXT: Final[Context] = Context(
    prec=WORKING_PRECISION,
    rounding=ROUND_HALF_EVEN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

# Точность approximate() по умолчанию
DEFAULT_APPROXIMATION_EPSILON: Final[Decimal] = Decimal("0.000001")

# Максимум дробных знаков в формате "0.0######"
DISPLAY_FRACTION_DIGITS: Final[int] = 7

# Верхняя граница 96-битного decimal (используется как max magnitude для
# представлений, чей собственный максимум в decimal не помещается)
DECIMAL_MAX_VALUE: Final[Decimal] = Decimal("79228162514264337593543950335")

_INT32_MASK: Final[int] = 0xFFFFFFFF
_INT32_SIGN: Final[int] = 0x80000000


# =============================================================================
# КОНВЕРСИЯ В РАБОЧИЙ ДОМЕН
# =============================================================================


def to_decimal(value: Number) -> Decimal:
    """
    Конверсия числа в рабочий decimal-домен.

    float конвертируется через кратчайшее десятичное представление (repr),
    поэтому 40.6892 становится Decimal("40.6892"), а не двоичным хвостом.

    Args:
        value: int, float, Decimal или Fraction

    Returns:
        Decimal значение

    Raises:
        ValueError: Если значение NaN/Inf
        TypeError: Если тип не числовой

    Examples:
        >>> to_decimal(40.6892)
        Decimal('40.6892')
        >>> to_decimal(3)
        Decimal('3')
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"value must be finite, got {value}")
        return value

    if isinstance(value, bool):
        return Decimal(int(value))

    if isinstance(value, int):
        return Decimal(value)

    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"value must be finite, got {value}")
        return Decimal(repr(value))

    if isinstance(value, Fraction):
        return WORKING_CONTEXT.divide(Decimal(value.numerator), Decimal(value.denominator))

    raise TypeError(f"Cannot convert {type(value).__name__} to Decimal")


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ И ОКРУГЛЕНИЕ
# =============================================================================


def safe_divide(
    numerator: Decimal,
    denominator: Decimal,
    fallback: Decimal = Decimal(0),
) -> Decimal:
    """
    Деление в рабочем контексте с защитой от деления на ноль.

    Нулевой знаменатель — не ошибка: значение определено как fallback.

    Examples:
        >>> safe_divide(Decimal(1), Decimal(4))
        Decimal('0.25')
        >>> safe_divide(Decimal(1), Decimal(0))
        Decimal('0')
    """
    if denominator.is_zero():
        return fallback

    return WORKING_CONTEXT.divide(numerator, denominator)


def truncate(value: Decimal) -> Decimal:
    """Отбрасывание дробной части (к нулю)"""
    return value.to_integral_value(rounding=ROUND_DOWN, context=WORKING_CONTEXT)


def round_half_even(value: Decimal) -> Decimal:
    """Округление до целого, половины — к чётному (banker's rounding)"""
    return value.to_integral_value(rounding=ROUND_HALF_EVEN, context=WORKING_CONTEXT)


def remainder(value: Decimal, divisor: Decimal) -> Decimal:
    """
    Остаток от деления со знаком делимого.

    Examples:
        >>> remainder(Decimal("40.6892"), Decimal(1))
        Decimal('0.6892')
        >>> remainder(Decimal("-40.25"), Decimal(1))
        Decimal('-0.25')
    """
    return WORKING_CONTEXT.remainder(value, divisor)


# =============================================================================
# GCD / LCD
# =============================================================================


def gcd(a: Decimal, b: Decimal) -> Decimal:
    """
    Greatest Common Divisor (алгоритм Евклида по модулям).

    Examples:
        >>> gcd(Decimal(12), Decimal(-18))
        Decimal('6')
        >>> gcd(Decimal(0), Decimal(0))
        Decimal('0')
    """
    a = abs(a)
    b = abs(b)

    while a != b:
        if a.is_zero():
            return b
        if b.is_zero():
            return a

        if a > b:
            a = WORKING_CONTEXT.remainder(a, b)
        else:
            b = WORKING_CONTEXT.remainder(b, a)

    return a


def lcd(a: Decimal, b: Decimal) -> Decimal:
    """
    Lowest Common Denominator: a·b / GCD(a, b).

    Оба нуля → 0 (без деления на ноль).
    """
    if a.is_zero() and b.is_zero():
        return Decimal(0)

    return WORKING_CONTEXT.divide(WORKING_CONTEXT.multiply(a, b), gcd(a, b))


# =============================================================================
# ФОРМАТИРОВАНИЕ
# =============================================================================


def format_fixed(value: Decimal, max_fraction_digits: int = DISPLAY_FRACTION_DIGITS) -> str:
    """
    Форматирование по шаблону "0.0######".

    Минимум один дробный знак, максимум max_fraction_digits, округление
    половины от нуля. Ноль всегда без знака.

    Examples:
        >>> format_fixed(Decimal("40.6892"))
        '40.6892'
        >>> format_fixed(Decimal(12))
        '12.0'
        >>> format_fixed(Decimal("0.123456789"))
        '0.1234568'
    """
    quantum = Decimal(1).scaleb(-max_fraction_digits)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP, context=WORKING_CONTEXT)
    if rounded.is_zero():
        rounded = abs(rounded)

    text = format(rounded, "f")
    whole, _, fraction = text.partition(".")
    fraction = fraction.rstrip("0") or "0"

    return f"{whole}.{fraction}"


def format_plain(value: Decimal) -> str:
    """
    Компактное десятичное представление без экспоненты.

    Examples:
        >>> format_plain(Decimal("14"))
        '14'
        >>> format_plain(Decimal("30.50"))
        '30.5'
    """
    if value.is_zero():
        return "0"

    text = format(value.normalize(context=WORKING_CONTEXT), "f")
    return text


# =============================================================================
# 32-BIT HASH ARITHMETIC
# =============================================================================


def wrap_int32(value: int) -> int:
    """
    Обёртывание целого в знаковый 32-битный диапазон (two's complement).

    Examples:
        >>> wrap_int32(0xFFFFFFFF)
        -1
        >>> wrap_int32(2**31)
        -2147483648
    """
    value &= _INT32_MASK
    if value & _INT32_SIGN:
        return value - (1 << 32)
    return value
