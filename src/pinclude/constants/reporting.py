"""Constants for compile result rendering."""

from __future__ import annotations

VALID_OUTPUT_FORMATS: frozenset[str] = frozenset({"json", "yaml", "text"})
DEFAULT_OUTPUT_FORMAT: str = "json"
JSON_INDENT: int = 2
