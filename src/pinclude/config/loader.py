"""Config loading and normalization for pinclude."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from pinclude.config.model import PincludeConfig
from pinclude.config.validator import format_issues, validate_config_mapping
from pinclude.constants.config import (
    CFG001,
    CFG002,
    CFG003,
    CONFIG_FILENAME,
    DEFAULT_ENCODING,
    DEFAULT_ENVIRONMENT,
    DEFAULT_LOG_LEVEL,
)
from pinclude.exceptions import ConfigError

logger = logging.getLogger(__name__)


def load_config(root: Path, config_path: Path | None = None) -> PincludeConfig:
    """Load and validate config from ``pinclude.yaml`` in *root* or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"[{CFG001}] Config file not found: {path}")
        return PincludeConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"[{CFG001}] Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"[{CFG002}] Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"[{CFG003}] Config file at {path} must be a YAML mapping, got {type(raw).__name__}")

    issues = validate_config_mapping(raw, path)
    if issues:
        raise ConfigError(format_issues(issues))

    config = PincludeConfig(
        environment=raw.get("environment") or DEFAULT_ENVIRONMENT,
        encoding=raw.get("encoding") or DEFAULT_ENCODING,
        log_level=str(raw.get("log_level") or DEFAULT_LOG_LEVEL).upper(),
        facts=dict(raw.get("facts") or {}),
    )
    logger.debug("Loaded config from %s", path)
    return config
