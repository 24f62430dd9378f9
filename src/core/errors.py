"""
Errors — Таксономия исключений rational/geo ядра

Все исключения наследуют RationalGeoError и одновременно встроенный класс
соответствующей категории, поэтому вызывающий код может ловить либо
доменное исключение, либо стандартное (ValueError / OverflowError / TypeError).

Невалидная буква направления (N/E/S/W) здесь не представлена: GeoCoordinate
является Pydantic моделью, и такая ошибка приходит как pydantic.ValidationError.
"""


class RationalGeoError(Exception):
    """Базовое исключение ядра"""

    pass


class ParseError(RationalGeoError, ValueError):
    """
    Некорректный текст rational / координаты или неизвестный селектор формата.

    Выбрасывается parse-методами; try_parse-методы вместо этого возвращают
    флаг неуспеха.
    """

    pass


class RationalOverflowError(RationalGeoError, OverflowError):
    """
    Результат не помещается в диапазон представления T.

    Возникает при обратной конверсии из рабочего decimal-домена
    (approximate, арифметика, reduce, convert). Частичный или clamped
    результат никогда не возвращается.
    """

    pass


class StructuralRequirementError(RationalGeoError, TypeError):
    """Представление T не предоставляет parse / try_parse"""

    pass
