"""Security configuration.

Defaults mirror the values the showcase site ships with. A YAML file can
override any subset of them::

    validation:
      max_input_length: 500
    rate_limiting:
      max_requests: 20
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

CONFIG_ENV_VAR = "INPUTDEFENSE_CONFIG"

# Common punctuation, alphanumerics and whitespace.
DEFAULT_ALLOWED_CHARACTERS = r"""^[a-zA-Z0-9\s\-_.,!?()\[\]{}:;"'@#$%^&*+=<>/\\|`~]*$"""


class ConfigError(ValueError):
    """Raised when a configuration file cannot be loaded."""


@dataclass(frozen=True)
class ValidationConfig:
    max_input_length: int = 1000
    allowed_characters: str = DEFAULT_ALLOWED_CHARACTERS


@dataclass(frozen=True)
class FileUploadConfig:
    max_size: int = 512 * 1024  # 0.5 MiB
    allowed_types: tuple[str, ...] = (
        "application/pdf",
        "text/plain",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    )
    allowed_extensions: tuple[str, ...] = (".pdf", ".txt", ".doc", ".docx")


@dataclass(frozen=True)
class RateLimitConfig:
    window_ms: int = 15 * 60 * 1000
    max_requests: int = 100
    max_write_retries: int = 5


@dataclass(frozen=True)
class StorageConfig:
    namespace: str = "secure_"
    data_dir: Optional[str] = None  # defaults to ~/.inputdefense


@dataclass(frozen=True)
class ReportingConfig:
    collector_path: str = "/api/security/csp-violation"
    local_hosts: tuple[str, ...] = ("localhost", "127.0.0.1", "::1")
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class SessionConfig:
    suppress_context_menu: bool = True
    suppress_devtools_shortcuts: bool = True
    clear_storage_on_unload: bool = True
    issue_anti_forgery_token: bool = True
    anti_forgery_ttl_seconds: int = 300


@dataclass(frozen=True)
class SecurityConfig:
    """Aggregated configuration for every component."""

    validation: ValidationConfig = field(default_factory=ValidationConfig)
    file_upload: FileUploadConfig = field(default_factory=FileUploadConfig)
    rate_limiting: RateLimitConfig = field(default_factory=RateLimitConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    session: SessionConfig = field(default_factory=SessionConfig)

    def data_path(self) -> Path:
        """Directory holding file-backed state."""
        if self.storage.data_dir:
            return Path(self.storage.data_dir).expanduser()
        return Path.home() / ".inputdefense"


DEFAULT_CONFIG = SecurityConfig()


def _apply_section(section: Any, name: str, overrides: Any) -> Any:
    if not isinstance(overrides, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    known = {f.name: f for f in fields(section)}
    values: dict[str, Any] = {}
    for key, value in overrides.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{name}.{key}'")
        if isinstance(getattr(section, key), tuple):
            if not isinstance(value, list):
                raise ConfigError(f"Setting '{name}.{key}' must be a list")
            value = tuple(value)
        values[key] = value
    return replace(section, **values)


def config_from_dict(data: dict[str, Any]) -> SecurityConfig:
    """Build a SecurityConfig from a plain mapping, starting from defaults."""
    config = SecurityConfig()
    sections = {f.name for f in fields(config)}
    updates: dict[str, Any] = {}
    for name, overrides in (data or {}).items():
        if name not in sections:
            raise ConfigError(f"Unknown configuration section '{name}'")
        updates[name] = _apply_section(getattr(config, name), name, overrides)
    return replace(config, **updates)


def load_config(path: str | Path | None = None) -> SecurityConfig:
    """Load configuration from a YAML file.

    Falls back to ``$INPUTDEFENSE_CONFIG`` when *path* is None, and to the
    built-in defaults when neither is set.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return DEFAULT_CONFIG

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ConfigError("Top-level configuration must be a mapping")
    return config_from_dict(data)
