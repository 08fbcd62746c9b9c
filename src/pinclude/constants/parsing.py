"""Constants for manifest parsing and include path resolution."""

from __future__ import annotations

import re
from pathlib import Path
from re import Pattern

GRAMMAR_PATH: Path = Path(__file__).resolve().parent.parent / "lang" / "grammar.lark"
GRAMMAR_START: str = "start"

# Include paths are joined with a literal separator, never normalized.
ABSOLUTE_PATH_MARKER: str = "/"
PATH_SEPARATOR: str = "/"
CURRENT_DIRECTORY: str = "."

# Matches `$name`, `$::name`, `$a::b` and `${...}` inside double-quoted strings.
INTERPOLATION_PATTERN: Pattern[str] = re.compile(
    r"\$\{(?P<braced>[^}]*)\}|\$(?P<bare>(?:::)?[a-z_][a-zA-Z0-9_]*(?:::[a-z_][a-zA-Z0-9_]*)*)"
)

VARIABLE_NAME_PATTERN: Pattern[str] = re.compile(r"(?:::)?[a-z_][a-zA-Z0-9_]*(?:::[a-z_][a-zA-Z0-9_]*)*")

DQ_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "s": " ",
    "\\": "\\",
    '"': '"',
    "$": "$",
    "'": "'",
}
SQ_ESCAPES: dict[str, str] = {
    "\\": "\\",
    "'": "'",
}
