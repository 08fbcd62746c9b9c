"""Configuration loading, validation, and normalization for pinclude."""

from __future__ import annotations

from pinclude.config.loader import load_config
from pinclude.config.model import PincludeConfig
from pinclude.config.validator import ConfigIssue, format_issues, validate_config_mapping

__all__ = [
    "ConfigIssue",
    "PincludeConfig",
    "format_issues",
    "load_config",
    "validate_config_mapping",
]
