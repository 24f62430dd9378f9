"""
Тесты для GeoCoordinate

Проверяет:
1. Разложение десятичных градусов на D/M/S
2. Знаковое значение и направление
3. Валидацию направления при присваивании (pydantic)
4. Разбор текста (parse / try_parse)
5. Три режима вывода и fallback на десятичный формат
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.domain.geo_coordinate import CoordinateDirection, CoordinateFormat, GeoCoordinate
from src.core.errors import ParseError, RationalOverflowError
from src.core.math.rational import SRational, URational


def components(rational):
    return rational.numerator, rational.denominator


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def statue_of_liberty():
    """40.6892 N, собранная из десятичных градусов"""
    coordinate = GeoCoordinate.from_decimal(40.6892)
    coordinate.direction = "N"
    return coordinate


@pytest.fixture
def whole_dms():
    """40° 41' 21" без направления"""
    return GeoCoordinate.from_dms(40, 41, 21)


# =============================================================================
# CONSTRUCTION
# =============================================================================


class TestConstruction:
    """Построение координаты"""

    def test_default_components_empty(self) -> None:
        coordinate = GeoCoordinate()
        assert coordinate.degrees.is_empty
        assert coordinate.minutes.is_empty
        assert coordinate.seconds.is_empty
        assert coordinate.direction is None

    def test_from_decimal_components(self) -> None:
        coordinate = GeoCoordinate.from_decimal(40.6892)
        assert components(coordinate.degrees) == (40, 1)
        assert components(coordinate.minutes) == (41, 1)
        assert components(coordinate.seconds) == (528, 25)
        assert coordinate.direction is None

    def test_from_decimal_negative_overflows(self) -> None:
        """Компоненты unsigned: отрицательное значение не представимо"""
        with pytest.raises(RationalOverflowError):
            GeoCoordinate.from_decimal(-40.5)

    def test_from_dms(self, whole_dms) -> None:
        assert components(whole_dms.degrees) == (40, 1)
        assert components(whole_dms.minutes) == (41, 1)
        assert components(whole_dms.seconds) == (21, 1)

    def test_from_rational_triple_preserves_precision(self) -> None:
        seconds = URational(2112, 100)
        coordinate = GeoCoordinate.from_rational_triple(URational(40, 1), URational(41, 1), seconds)
        assert coordinate.seconds is seconds
        assert components(coordinate.seconds) == (2112, 100)

    def test_to_rational_triple(self, whole_dms) -> None:
        triple = whole_dms.to_rational_triple()
        assert [components(r) for r in triple] == [(40, 1), (41, 1), (21, 1)]

    def test_setters_use_approximation(self) -> None:
        coordinate = GeoCoordinate()
        coordinate.set_seconds(21.12)
        assert components(coordinate.seconds) == (528, 25)

    def test_from_signed_decimal_negative(self) -> None:
        coordinate = GeoCoordinate.from_signed_decimal(-73.9857, "E", "W")
        assert coordinate.direction == "W"
        assert float(coordinate.value) == pytest.approx(-73.9857, abs=1e-6)
        assert coordinate.to_string("N") == "-73.9857"

    def test_from_signed_decimal_positive_defaults_to_north(self) -> None:
        coordinate = GeoCoordinate.from_signed_decimal(40.6892)
        assert coordinate.direction == "N"
        assert coordinate.value == Decimal("40.6892")

    def test_component_type_checked(self) -> None:
        coordinate = GeoCoordinate()
        with pytest.raises(ValidationError):
            coordinate.degrees = SRational(1, 2)


# =============================================================================
# VALUE & DIRECTION
# =============================================================================


class TestValue:
    """Знаковые десятичные градусы"""

    def test_value(self, statue_of_liberty) -> None:
        assert statue_of_liberty.value == Decimal("40.6892")

    @pytest.mark.parametrize("direction,sign", [("N", 1), ("E", 1), ("S", -1), ("W", -1), (None, 1)])
    def test_direction_sign(self, direction, sign) -> None:
        coordinate = GeoCoordinate.from_dms(40, 30, 0)
        coordinate.direction = direction
        assert coordinate.value == sign * Decimal("40.5")

    def test_empty_value_is_zero(self) -> None:
        assert GeoCoordinate().value == Decimal(0)

    def test_zero_south_has_no_sign(self) -> None:
        coordinate = GeoCoordinate.from_dms(0, 0, 0)
        coordinate.direction = "S"
        assert coordinate.to_string("N") == "0.0"


class TestDirection:
    """Валидация направления"""

    def test_normalized_to_uppercase(self) -> None:
        assert GeoCoordinate(direction="s").direction == "S"

    def test_first_letter_used(self) -> None:
        assert GeoCoordinate(direction="North").direction == "N"

    def test_enum_accepted(self) -> None:
        assert GeoCoordinate(direction=CoordinateDirection.WEST).direction == "W"

    def test_empty_clears(self) -> None:
        coordinate = GeoCoordinate(direction="N")
        coordinate.direction = ""
        assert coordinate.direction is None

    def test_none_clears(self) -> None:
        coordinate = GeoCoordinate(direction="E")
        coordinate.direction = None
        assert coordinate.direction is None

    def test_invalid_on_construction(self) -> None:
        with pytest.raises(ValidationError, match="Invalid GPS direction"):
            GeoCoordinate(direction="X")

    def test_invalid_on_assignment(self) -> None:
        """validate_assignment: проверка при каждом присваивании"""
        coordinate = GeoCoordinate(direction="N")
        with pytest.raises(ValidationError, match="Invalid GPS direction"):
            coordinate.direction = "Q"
        assert coordinate.direction == "N"

    def test_non_string_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GeoCoordinate(direction=5)


# =============================================================================
# PARSING
# =============================================================================


class TestParse:
    """Разбор текста координаты"""

    def test_dms_with_marks(self) -> None:
        coordinate = GeoCoordinate.parse('40°41\'21.2"N')
        assert components(coordinate.degrees) == (40, 1)
        assert components(coordinate.minutes) == (41, 1)
        assert components(coordinate.seconds) == (106, 5)
        assert coordinate.direction == "N"
        assert float(coordinate.value) == pytest.approx(40.6892222, abs=1e-6)

    def test_decimal_degrees_only(self) -> None:
        """Только градусы: минуты и секунды остаются пустыми"""
        coordinate = GeoCoordinate.parse("40.6892 N")
        assert coordinate.minutes.is_empty
        assert coordinate.seconds.is_empty
        assert coordinate.direction == "N"
        assert float(coordinate.value) == pytest.approx(40.6892, abs=1e-6)

    def test_degrees_and_minutes_sets_zero_seconds(self) -> None:
        coordinate = GeoCoordinate.parse("40 41 N")
        assert components(coordinate.minutes) == (41, 1)
        assert components(coordinate.seconds) == (0, 1)
        assert not coordinate.seconds.is_empty

    def test_fractional_minutes(self) -> None:
        coordinate = GeoCoordinate.parse("40 41.352 N")
        assert coordinate.value == Decimal("40.6892")

    @pytest.mark.parametrize("text,expected", [("40,5", "40,5,0"), ("12 3", "12,3,0")])
    def test_single_digit_minutes(self, text, expected) -> None:
        coordinate = GeoCoordinate.parse(text)
        assert coordinate.to_string() == expected
        assert components(coordinate.seconds) == (0, 1)

    @pytest.mark.parametrize("text", ["40 41 5", "40°41'5"])
    def test_single_digit_seconds(self, text) -> None:
        coordinate = GeoCoordinate.parse(text)
        assert [components(r) for r in coordinate.to_rational_triple()] == [(40, 1), (41, 1), (5, 1)]
        assert coordinate.to_string() == "40,41,5"

    def test_single_digit_fields_try_parse(self) -> None:
        for text in ("40,5", "40 41 5", "40°41'5", "12 3"):
            ok, coordinate = GeoCoordinate.try_parse(text)
            assert ok is True
            assert coordinate is not None

    def test_south(self) -> None:
        assert GeoCoordinate.parse("40.5 S").value == Decimal("-40.5")

    @pytest.mark.parametrize("text", ["", None, "not-a-coordinate", "40 X", "40,41,21 NX"])
    def test_malformed(self, text) -> None:
        with pytest.raises(ParseError):
            GeoCoordinate.parse(text)

    def test_negative_component_overflows(self) -> None:
        with pytest.raises(RationalOverflowError):
            GeoCoordinate.parse("-40.5")

    def test_try_parse_success(self) -> None:
        ok, coordinate = GeoCoordinate.try_parse("40,41,21N")
        assert ok is True
        assert coordinate.to_string() == "40,41,21N"

    @pytest.mark.parametrize("text", ["", None, "not-a-coordinate", "-40.5", "40;41"])
    def test_try_parse_failure(self, text) -> None:
        """try_parse не выбрасывает исключения для некорректного текста"""
        assert GeoCoordinate.try_parse(text) == (False, None)


# =============================================================================
# FORMATTING
# =============================================================================


class TestToString:
    """Режимы вывода N / X / D"""

    def test_numeric(self, statue_of_liberty) -> None:
        assert statue_of_liberty.to_string("N") == "40.6892"

    def test_numeric_ignores_direction(self) -> None:
        coordinate = GeoCoordinate.parse("40.5 S")
        assert coordinate.to_string("N") == "-40.5"

    def test_xmp_fractional_seconds(self) -> None:
        assert GeoCoordinate.from_decimal(40.6892).to_string() == "40,41.352"

    def test_xmp_with_direction(self, statue_of_liberty) -> None:
        assert statue_of_liberty.to_string("X") == "40,41.352N"

    def test_xmp_whole_components(self, whole_dms) -> None:
        assert whole_dms.to_string() == "40,41,21"

    def test_degrees_whole_components(self, whole_dms) -> None:
        whole_dms.direction = "N"
        assert whole_dms.to_string("D") == "40° 41' 21\" N"

    def test_degrees_fractional(self, statue_of_liberty) -> None:
        assert statue_of_liberty.to_string("D") == "40° 41.352' N"

    def test_degrees_from_parsed_seconds(self) -> None:
        coordinate = GeoCoordinate.parse('40°41\'21.2"N')
        assert coordinate.to_string("D") == "40° 41.3533333' N"

    def test_fallback_when_component_empty(self) -> None:
        """Пустая компонента → десятичный вывод, модуль при наличии направления"""
        coordinate = GeoCoordinate.parse("40.5 S")
        assert coordinate.to_string("X") == "40.5S"
        assert coordinate.to_string("D") == "40.5° S"

    def test_fallback_without_direction(self) -> None:
        coordinate = GeoCoordinate.parse("40.5")
        assert coordinate.to_string("X") == "40.5"
        assert coordinate.to_string("D") == "40.5°"

    def test_fallback_when_degrees_fractional(self) -> None:
        coordinate = GeoCoordinate.from_rational_triple(URational(81, 2), URational(0, 1), URational(0, 1))
        assert coordinate.to_string() == "40.5"

    def test_zero_seconds(self) -> None:
        coordinate = GeoCoordinate.parse("40 41 N")
        assert coordinate.to_string() == "40,41,0N"
        assert coordinate.to_string("D") == "40° 41' 0\" N"

    def test_empty_coordinate(self) -> None:
        assert GeoCoordinate().to_string() == "0.0"

    @pytest.mark.parametrize("selector,expected", [("n", "40.6892"), ("x", "40,41.352N"), ("", "40,41.352N")])
    def test_selector_case_insensitive(self, statue_of_liberty, selector, expected) -> None:
        assert statue_of_liberty.to_string(selector) == expected

    def test_unknown_selector(self, statue_of_liberty) -> None:
        with pytest.raises(ParseError, match="Unknown coordinate format"):
            statue_of_liberty.to_string("Q")

    def test_str_and_format(self, statue_of_liberty) -> None:
        assert str(statue_of_liberty) == "40,41.352N"
        assert f"{statue_of_liberty}" == "40,41.352N"
        assert f"{statue_of_liberty:D}" == "40° 41.352' N"
        assert format(statue_of_liberty, "n") == "40.6892"

    def test_round_trip_through_text(self, whole_dms) -> None:
        whole_dms.direction = "W"
        parsed = GeoCoordinate.parse(whole_dms.to_string())
        assert parsed.value == whole_dms.value


class TestCoordinateFormat:
    """Селектор формата"""

    def test_default_is_xmp(self) -> None:
        assert CoordinateFormat.resolve(None) is CoordinateFormat.XMP
        assert CoordinateFormat.resolve("") is CoordinateFormat.XMP

    def test_resolve(self) -> None:
        assert CoordinateFormat.resolve("d") is CoordinateFormat.DEGREES
        assert CoordinateFormat.resolve("N") is CoordinateFormat.NUMERIC

    def test_unknown(self) -> None:
        with pytest.raises(ParseError):
            CoordinateFormat.resolve("XY")
