"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest
import yaml

from inputdefense.config import CONFIG_ENV_VAR, DEFAULT_CONFIG, ConfigError, load_config


def _write_yaml(data) -> str:
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    yaml.dump(data, f)
    f.close()
    return f.name


def test_defaults(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    config = load_config()
    assert config is DEFAULT_CONFIG
    assert config.validation.max_input_length == 1000
    assert config.file_upload.max_size == 524288
    assert ".docx" in config.file_upload.allowed_extensions
    assert config.rate_limiting.window_ms == 900_000
    assert config.rate_limiting.max_requests == 100
    assert config.storage.namespace == "secure_"
    assert config.reporting.collector_path == "/api/security/csp-violation"


def test_overrides_from_yaml():
    path = _write_yaml({
        "validation": {"max_input_length": 50},
        "rate_limiting": {"max_requests": 5},
        "file_upload": {"allowed_extensions": [".pdf"]},
    })
    config = load_config(path)
    assert config.validation.max_input_length == 50
    assert config.rate_limiting.max_requests == 5
    assert config.rate_limiting.window_ms == 900_000
    assert config.file_upload.allowed_extensions == (".pdf",)


def test_env_var(monkeypatch):
    path = _write_yaml({"storage": {"namespace": "app_"}})
    monkeypatch.setenv(CONFIG_ENV_VAR, path)
    assert load_config().storage.namespace == "app_"


def test_empty_file_gives_defaults():
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    f.close()
    assert load_config(f.name) is DEFAULT_CONFIG


def test_unknown_section():
    with pytest.raises(ConfigError, match="section"):
        load_config(_write_yaml({"csp": {"default_src": ["'self'"]}}))


def test_unknown_key():
    with pytest.raises(ConfigError, match="validation.max_len"):
        load_config(_write_yaml({"validation": {"max_len": 5}}))


def test_list_setting_must_be_list():
    with pytest.raises(ConfigError):
        load_config(_write_yaml({"file_upload": {"allowed_types": "text/plain"}}))


def test_invalid_yaml():
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    f.write("{{invalid yaml::: [")
    f.close()
    with pytest.raises(ConfigError, match="YAML"):
        load_config(f.name)


def test_missing_file():
    with pytest.raises(ConfigError):
        load_config("/nonexistent/inputdefense.yaml")


def test_data_path():
    assert DEFAULT_CONFIG.data_path() == Path.home() / ".inputdefense"
