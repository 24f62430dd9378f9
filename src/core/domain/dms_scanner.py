"""DMS Scanner — посимвольный разбор текста координаты.

Форматы:
- Десятичные градусы: "40.6892", "40.6892 N"
- DMS с гибкими разделителями: 40°41'21.2"N, "40,41,21.2N", "40 41 21.2 N"

Разделитель зависит от компоненты, поэтому разбор — явный конечный автомат
по индексу, а не токенизатор или regex:

    SCAN_DEGREES → SKIP_SEP_1 → SCAN_MINUTES → SKIP_SEP_2
                 → SCAN_SECONDS → SKIP_SEP_3 → DONE

После каждого пропуска разделителей остаток, пустой или равный одной букве
направления, завершает разбор.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Final, Optional

from src.core.errors import ParseError


class ScanState(str, Enum):
    """Состояние автомата разбора"""

    SCAN_DEGREES = "SCAN_DEGREES"
    SKIP_SEP_1 = "SKIP_SEP_1"
    SCAN_MINUTES = "SCAN_MINUTES"
    SKIP_SEP_2 = "SKIP_SEP_2"
    SCAN_SECONDS = "SCAN_SECONDS"
    SKIP_SEP_3 = "SKIP_SEP_3"
    DONE = "DONE"


DEGREE_SEPARATORS: Final[frozenset[str]] = frozenset(",° ")
MINUTE_SEPARATORS: Final[frozenset[str]] = frozenset(",' ")
SECOND_SEPARATORS: Final[frozenset[str]] = frozenset('," ')

DIRECTION_LETTERS: Final[frozenset[str]] = frozenset("NEWSnews")

_NUMERIC_CHARS: Final[frozenset[str]] = frozenset("+-.0123456789")

# Переходы автомата
_NEXT_STATE: Final[dict[ScanState, ScanState]] = {
    ScanState.SCAN_DEGREES: ScanState.SKIP_SEP_1,
    ScanState.SKIP_SEP_1: ScanState.SCAN_MINUTES,
    ScanState.SCAN_MINUTES: ScanState.SKIP_SEP_2,
    ScanState.SKIP_SEP_2: ScanState.SCAN_SECONDS,
    ScanState.SCAN_SECONDS: ScanState.SKIP_SEP_3,
    ScanState.SKIP_SEP_3: ScanState.DONE,
}

_SEPARATORS: Final[dict[ScanState, frozenset[str]]] = {
    ScanState.SKIP_SEP_1: DEGREE_SEPARATORS,
    ScanState.SKIP_SEP_2: MINUTE_SEPARATORS,
    ScanState.SKIP_SEP_3: SECOND_SEPARATORS,
}


@dataclass(frozen=True)
class DmsScanResult:
    """Результат разбора: числовые компоненты в порядке появления.

    minutes / seconds равны None, если разбор завершился раньше.
    """

    degrees: Decimal
    minutes: Optional[Decimal]
    seconds: Optional[Decimal]
    direction: Optional[str]


def _scan_number(text: str, start: int) -> int:
    """Граница числового фрагмента: [знак] цифры [. цифры].

    Returns:
        Индекс первого символа после фрагмента

    Raises:
        ParseError: Нет цифр, лишний знак или вторая точка
    """
    length = len(text)
    index = start
    seen_digit = False
    seen_point = False

    if index < length and text[index] in "+-":
        index += 1

    while index < length:
        ch = text[index]
        if "0" <= ch <= "9":
            seen_digit = True
        elif ch == "." and not seen_point:
            seen_point = True
        else:
            break
        index += 1

    if not seen_digit:
        raise ParseError(f"Expected a number at position {start} in {text!r}")

    # фрагмент должен заканчиваться на нечисловом символе
    if index < length and text[index] in _NUMERIC_CHARS:
        raise ParseError(f"Malformed number at position {start} in {text!r}")

    return index


def scan_dms(text: str) -> DmsScanResult:
    """
    Разбор текста координаты в градусы / минуты / секунды и направление.

    Args:
        text: Текст координаты

    Returns:
        DmsScanResult с 1-3 числовыми компонентами

    Raises:
        ParseError: Если текст не является координатой

    Examples:
        >>> scan_dms('40°41\\'21.2"N').seconds
        Decimal('21.2')
        >>> scan_dms("40.6892 N").minutes is None
        True
    """
    if not text:
        raise ParseError("Empty coordinate text")

    length = len(text)
    index = 0
    state = ScanState.SCAN_DEGREES
    runs: list[Optional[Decimal]] = []
    direction: Optional[str] = None

    while state is not ScanState.DONE:
        if state in (ScanState.SCAN_DEGREES, ScanState.SCAN_MINUTES, ScanState.SCAN_SECONDS):
            end = _scan_number(text, index)
            runs.append(Decimal(text[index:end]))
            index = end
            state = _NEXT_STATE[state]
            continue

        separators = _SEPARATORS[state]
        while index < length and text[index] in separators:
            index += 1

        tail = text[index:]
        if not tail or tail in DIRECTION_LETTERS:
            # остаток пустой или одна буква направления
            direction = tail.upper() or None
            state = ScanState.DONE
        elif state is ScanState.SKIP_SEP_3:
            raise ParseError(f"Unexpected trailing text {text[index:]!r} in {text!r}")
        else:
            state = _NEXT_STATE[state]

    runs.extend([None] * (3 - len(runs)))
    return DmsScanResult(
        degrees=runs[0],
        minutes=runs[1],
        seconds=runs[2],
        direction=direction,
    )
