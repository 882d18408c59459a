"""
Tests for YAML/JSON file loading.
"""

import json
from dataclasses import dataclass, field
from typing import List, Optional

import pytest
import yaml

from leafutil.loaders import LoaderError, dataclass_from_dict, json_from_file, yaml_from_file


@dataclass
class Endpoint:
    url: str = ""
    timeout: int = 30


@dataclass
class Config:
    name: str
    endpoint: Endpoint = field(default_factory=Endpoint)
    backup: Optional[Endpoint] = None
    mirrors: List[Endpoint] = field(default_factory=list)
    log_level: str = field(default="info", metadata={"yaml": "log-level"})


CONFIG_YAML = """
name: ingest
log-level: debug
endpoint:
  url: https://example.com
backup:
  url: https://backup.example.com
  timeout: 5
mirrors:
  - url: https://m1.example.com
  - url: https://m2.example.com
unknown: ignored
"""


class TestYAML:
    """Test YAML loading."""

    def test_plain_document(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)
        data = yaml_from_file(str(path))
        assert data["name"] == "ingest"
        assert data["endpoint"] == {"url": "https://example.com"}

    def test_into_dataclass(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(CONFIG_YAML)
        config = yaml_from_file(str(path), Config)
        assert config.name == "ingest"
        assert config.log_level == "debug"
        assert config.endpoint == Endpoint(url="https://example.com", timeout=30)
        assert config.backup == Endpoint(url="https://backup.example.com", timeout=5)
        assert [m.url for m in config.mirrors] == ["https://m1.example.com", "https://m2.example.com"]

    def test_empty_document_uses_defaults(self, tmp_path):
        path = tmp_path / "endpoint.yaml"
        path.write_text("")
        assert yaml_from_file(str(path), Endpoint) == Endpoint()

    def test_missing_file(self, tmp_path):
        with pytest.raises(LoaderError, match="failed reading file"):
            yaml_from_file(str(tmp_path / "missing.yaml"))

    def test_malformed(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("name: [unclosed")
        with pytest.raises(yaml.YAMLError):
            yaml_from_file(str(path))


class TestJSON:
    """Test JSON loading."""

    def test_into_dataclass(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"name": "ingest", "endpoint": {"url": "u", "timeout": 1}}))
        config = json_from_file(str(path), Config)
        assert config == Config(name="ingest", endpoint=Endpoint(url="u", timeout=1))

    def test_plain_document(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        assert json_from_file(str(path)) == [1, 2, 3]

    def test_malformed(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        with pytest.raises(json.JSONDecodeError):
            json_from_file(str(path))

    def test_missing_file_is_os_error(self, tmp_path):
        with pytest.raises(OSError):
            json_from_file(str(tmp_path / "missing.json"))


class TestDataclassFromDict:
    """Test mapping-to-dataclass conversion."""

    def test_requires_mapping(self):
        with pytest.raises(TypeError, match="cannot build Endpoint from list"):
            dataclass_from_dict(Endpoint, [1, 2])

    def test_requires_dataclass(self):
        with pytest.raises(TypeError, match="expected a dataclass type"):
            dataclass_from_dict(dict, {})

    def test_missing_required_field(self):
        with pytest.raises(TypeError):
            dataclass_from_dict(Config, {})
