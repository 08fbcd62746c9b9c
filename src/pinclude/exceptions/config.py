"""Configuration-related exceptions."""

from __future__ import annotations

from pinclude.exceptions.base import PincludeError


class ConfigError(PincludeError, ValueError):
    """Raised when pinclude configuration is invalid."""
