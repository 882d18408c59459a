"""
Tests for dataclass field validation.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from leafutil.validation import ValidationError, is_field_empty, validate_struct_fields


@dataclass
class Database:
    host: str = field(default="", metadata={"yaml": "host"})
    port: int = field(default=0, metadata={"yaml": "port"})
    replica: str = field(default="", metadata={"yaml": "replica", "required": False})


@dataclass
class Settings:
    name: str = field(default="", metadata={"yaml": "name"})
    database: Database = field(default_factory=Database, metadata={"yaml": "database"})
    tags: List[str] = field(default_factory=list, metadata={"required": "false"})
    token: Optional[str] = field(default=None, metadata={"required": "true"})


@dataclass
class Marker:
    pass


@dataclass
class Holder:
    marker: Marker = field(default_factory=Marker, metadata={"required": False})


class TestIsFieldEmpty:
    """Test the per-field emptiness check."""

    @pytest.mark.parametrize("value", [None, "", 0, 0.0, False, [], {}, b"", Marker()])
    def test_empty(self, value):
        assert is_field_empty(value)

    @pytest.mark.parametrize("value", ["x", 4323423423423423423, 0.5, True, [0], {"a": 1}, Database()])
    def test_filled(self, value):
        assert not is_field_empty(value)


class TestValidateStructFields:
    """Test required/optional handling and nesting."""

    def test_all_filled(self):
        settings = Settings(
            name="app",
            database=Database(host="db", port=5432),
            token="secret",
        )
        assert validate_struct_fields(settings) == ["database.replica", "tags"]

    def test_missing_required(self):
        settings = Settings(name="app", database=Database(host="db"))
        with pytest.raises(ValidationError) as excinfo:
            validate_struct_fields(settings)
        assert excinfo.value.fields == ["database.port", "token"]
        assert "required fields are empty" in str(excinfo.value)

    def test_everything_missing(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_struct_fields(Settings())
        assert excinfo.value.fields == ["name", "database.host", "database.port", "token"]

    def test_path_prefix(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_struct_fields(Database(host="db"), path="primary.")
        assert excinfo.value.fields == ["primary.port"]

    def test_optional_nested_not_descended(self):
        assert validate_struct_fields(Holder()) == ["marker"]

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_struct_fields(Database())

    def test_rejects_non_dataclass(self):
        with pytest.raises(TypeError, match="expects a dataclass instance"):
            validate_struct_fields({"host": "db"})

    def test_rejects_dataclass_type(self):
        with pytest.raises(TypeError):
            validate_struct_fields(Database)
