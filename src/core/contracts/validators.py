"""
JSON Schema Contract Validators

EXIF 2.3, раздел 4.6.6 (GPS Attribute Information)

Модуль для валидации JSON-представления GPS тегов согласно формальному
JSON Schema контракту. Использует библиотеку jsonschema.

Схемы:
- gps_tags.json (GPSLatitude/GPSLongitude/GPSDest*, Ref-буквы, GPSAltitude, GPSTimeStamp)
"""

import json
from importlib.resources import files
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы лежат в пакете src.core.contracts (каталог schema/) и читаются
    через importlib.resources, поэтому доступны и из установленного пакета.
    """

    def __init__(self):
        self._schema_dir = files(__package__).joinpath("schema")
        if not self._schema_dir.is_dir():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'gps_tags')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir.joinpath(f"{schema_name}.json")
        if not schema_path.is_file():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


# Глобальный экземпляр загрузчика
_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception"""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации"""
        return self.validator.iter_errors(data)


class GpsTagsValidator(ContractValidator):
    """Валидатор для gps_tags контракта"""

    def __init__(self):
        super().__init__("gps_tags")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_gps_tags(data: Dict[str, Any]) -> None:
    """
    Валидация gps_tags данных.

    Args:
        data: Данные для валидации

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    GpsTagsValidator().validate(data)
