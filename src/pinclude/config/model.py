"""Config data model for pinclude compilations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pinclude.constants.config import DEFAULT_ENCODING, DEFAULT_ENVIRONMENT, DEFAULT_LOG_LEVEL


@dataclass(frozen=True)
class PincludeConfig:
    """Resolved compile config."""

    environment: str = DEFAULT_ENVIRONMENT
    encoding: str = DEFAULT_ENCODING
    log_level: str = DEFAULT_LOG_LEVEL
    facts: dict[str, Any] = field(default_factory=dict)
