"""
Tests for JSON Schema Contract Validators

Комплексное тестирование JSON Schema валидатора GPS тегов:
- Валидность самой схемы
- Валидация правильных данных
- Детекция нарушений типов
- Детекция нарушений constraints (min/max/pattern/maxLength)
"""

import json
from importlib.resources import files
from pathlib import Path

import pytest
from jsonschema import ValidationError

from src.core.contracts import GpsTagsValidator, SchemaLoader, validate_gps_tags

# =============================================================================
# FIXTURES - VALID DATA SAMPLES
# =============================================================================


@pytest.fixture
def valid_gps_tags():
    """Валидные gps_tags для тестирования."""
    return {
        "GPSLatitude": ["40/1", "41/1", "2112/100"],
        "GPSLatitudeRef": "N",
        "GPSLongitude": [[74, 1], [2, 1], [4046, 100]],
        "GPSLongitudeRef": "W",
        "GPSAltitude": "934/10",
        "GPSTimeStamp": ["14/1", "5/1", "61/2"],
    }


@pytest.fixture
def validator():
    return GpsTagsValidator()


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class TestSchemaLoader:
    """Загрузка и meta-validation схем"""

    def test_schema_file_is_valid_json(self) -> None:
        schema_path = Path(__file__).parent.parent.parent / "src" / "core" / "contracts" / "schema" / "gps_tags.json"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
        assert schema["title"] == "gps_tags"

    def test_schema_shipped_as_package_resource(self) -> None:
        """Схема читается из пакета, а не из корня репозитория"""
        resource = files("src.core.contracts").joinpath("schema").joinpath("gps_tags.json")
        assert resource.is_file()
        assert json.loads(resource.read_text(encoding="utf-8"))["title"] == "gps_tags"

    def test_loader_does_not_depend_on_working_directory(self, tmp_path, monkeypatch) -> None:
        monkeypatch.chdir(tmp_path)
        schema = SchemaLoader().load_schema("gps_tags")
        assert schema["title"] == "gps_tags"

    def test_load_schema(self) -> None:
        schema = SchemaLoader().load_schema("gps_tags")
        assert schema["type"] == "object"
        assert "GPSLatitude" in schema["properties"]

    def test_load_schema_cached(self) -> None:
        loader = SchemaLoader()
        assert loader.load_schema("gps_tags") is loader.load_schema("gps_tags")

    def test_missing_schema(self) -> None:
        with pytest.raises(FileNotFoundError, match="Schema not found"):
            SchemaLoader().load_schema("does_not_exist")


# =============================================================================
# VALID DATA
# =============================================================================


class TestValidData:
    """Правильные данные проходят валидацию"""

    def test_full_payload(self, validator, valid_gps_tags) -> None:
        validator.validate(valid_gps_tags)
        assert validator.is_valid(valid_gps_tags)

    def test_convenience_function(self, valid_gps_tags) -> None:
        validate_gps_tags(valid_gps_tags)

    def test_empty_payload(self, validator) -> None:
        """Все теги необязательны"""
        assert validator.is_valid({})

    def test_numbers_allowed(self, validator) -> None:
        assert validator.is_valid({"GPSLatitude": [40, 41, 21.12], "GPSAltitude": 12.5})

    def test_bare_integer_string(self, validator) -> None:
        assert validator.is_valid({"GPSLatitude": ["40", "41", "21"]})

    def test_null_ref(self, validator) -> None:
        assert validator.is_valid({"GPSLatitudeRef": None})

    def test_unknown_tags_allowed(self, validator) -> None:
        assert validator.is_valid({"GPSMapDatum": "WGS-84"})

    def test_destination_tags(self, validator) -> None:
        payload = {"GPSDestLatitude": ["51/1", "30/1", "0/1"], "GPSDestLatitudeRef": "N"}
        assert validator.is_valid(payload)


# =============================================================================
# INVALID DATA
# =============================================================================


class TestInvalidData:
    """Нарушения контракта"""

    def test_coordinate_not_array(self, validator) -> None:
        with pytest.raises(ValidationError):
            validator.validate({"GPSLatitude": "40,41,21"})

    @pytest.mark.parametrize("values", [["40/1", "41/1"], ["40/1", "41/1", "21/1", "0/1"]])
    def test_coordinate_wrong_length(self, validator, values) -> None:
        assert not validator.is_valid({"GPSLatitude": values})

    @pytest.mark.parametrize("rational", ["-40/1", "40/-1", "40.5/1", "a/b", "40/"])
    def test_malformed_rational_string(self, validator, rational) -> None:
        assert not validator.is_valid({"GPSAltitude": rational})

    def test_negative_number(self, validator) -> None:
        assert not validator.is_valid({"GPSAltitude": -1})

    def test_pair_out_of_uint32_range(self, validator) -> None:
        assert not validator.is_valid({"GPSAltitude": [4294967296, 1]})

    def test_pair_wrong_size(self, validator) -> None:
        assert not validator.is_valid({"GPSAltitude": [1, 2, 3]})

    def test_ref_too_long(self, validator) -> None:
        assert not validator.is_valid({"GPSLatitudeRef": "North"})

    def test_ref_wrong_type(self, validator) -> None:
        assert not validator.is_valid({"GPSLatitudeRef": 1})

    def test_timestamp_too_long(self, validator) -> None:
        assert not validator.is_valid({"GPSTimeStamp": [1, 2, 3, 4]})

    def test_payload_not_object(self, validator) -> None:
        assert not validator.is_valid(["GPSLatitude"])

    def test_iter_errors_reports_each_violation(self, validator) -> None:
        errors = list(validator.iter_errors({"GPSLatitudeRef": "North", "GPSAltitude": -1}))
        assert len(errors) == 2

    def test_convenience_function_raises(self) -> None:
        with pytest.raises(ValidationError):
            validate_gps_tags({"GPSAltitude": "abc"})
