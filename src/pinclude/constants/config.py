"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "pinclude.yaml"

DEFAULT_ENVIRONMENT: str = "production"
DEFAULT_ENCODING: str = "utf-8"
DEFAULT_LOG_LEVEL: str = "INFO"

VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR"})

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset({"environment", "encoding", "log_level", "facts"})

CFG001: str = "CFG001"  # config file not found (explicit --config)
CFG002: str = "CFG002"  # invalid YAML parse
CFG003: str = "CFG003"  # top-level value is not a mapping
CFG004: str = "CFG004"  # unknown top-level key
CFG005: str = "CFG005"  # invalid value type
CFG006: str = "CFG006"  # invalid enum value
