"""Config file validation for pinclude."""

from __future__ import annotations

import codecs
import difflib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pinclude.constants.config import (
    ALLOWED_CONFIG_KEYS,
    CFG004,
    CFG005,
    CFG006,
    VALID_LOG_LEVELS,
)
from pinclude.constants.parsing import VARIABLE_NAME_PATTERN


@dataclass(frozen=True)
class ConfigIssue:
    """One config problem with a stable code and the offending key."""

    code: str
    path: str
    field: str
    message: str
    hint: str = ""

    def format(self) -> str:
        parts = [f"[{self.code}]", self.path]
        if self.field:
            parts.append(f"{self.field}:")
        parts.append(self.message)
        if self.hint:
            parts.append(f"({self.hint})")
        return " ".join(parts)


def validate_config_mapping(raw: dict[str, Any], path: Path) -> list[ConfigIssue]:
    """Check a parsed ``pinclude.yaml`` mapping and return every problem found."""
    issues: list[ConfigIssue] = []
    path_str = str(path)

    for key in sorted(raw, key=str):
        if key not in ALLOWED_CONFIG_KEYS:
            issues.append(
                ConfigIssue(
                    code=CFG004,
                    path=path_str,
                    field=str(key),
                    message=f"unknown key `{key}`",
                    hint=_suggest_key(str(key), ALLOWED_CONFIG_KEYS),
                )
            )

    for key in ("environment", "encoding"):
        if key in raw and (not isinstance(raw[key], str) or not raw[key].strip()):
            issues.append(
                ConfigIssue(
                    code=CFG005,
                    path=path_str,
                    field=key,
                    message=f"invalid type for `{key}`",
                    hint="expected a non-empty string",
                )
            )

    encoding = raw.get("encoding")
    if isinstance(encoding, str) and encoding.strip():
        try:
            codecs.lookup(encoding)
        except LookupError:
            issues.append(
                ConfigIssue(
                    code=CFG006,
                    path=path_str,
                    field="encoding",
                    message=f"unknown encoding {encoding!r}",
                )
            )

    if "log_level" in raw:
        level = raw["log_level"]
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            issues.append(
                ConfigIssue(
                    code=CFG006,
                    path=path_str,
                    field="log_level",
                    message="invalid value for `log_level`",
                    hint=f"expected one of: {', '.join(sorted(VALID_LOG_LEVELS))}; got: {level!r}",
                )
            )

    if "facts" in raw and raw["facts"] is not None:
        facts = raw["facts"]
        if not isinstance(facts, dict):
            issues.append(
                ConfigIssue(
                    code=CFG005,
                    path=path_str,
                    field="facts",
                    message="invalid type for `facts`",
                    hint="expected a mapping of variable names to values",
                )
            )
        else:
            for name, value in facts.items():
                if not isinstance(name, str) or "::" in name or not VARIABLE_NAME_PATTERN.fullmatch(name):
                    issues.append(
                        ConfigIssue(
                            code=CFG005,
                            path=path_str,
                            field=f"facts.{name}",
                            message=f"invalid fact name {name!r}",
                            hint="fact names must be unqualified lowercase variable names",
                        )
                    )
                if not _is_manifest_value(value):
                    issues.append(
                        ConfigIssue(
                            code=CFG005,
                            path=path_str,
                            field=f"facts.{name}",
                            message=f"invalid value for fact {name!r}",
                            hint="expected strings, numbers, booleans, null, lists, or mappings with string keys",
                        )
                    )

    return issues


def format_issues(issues: list[ConfigIssue]) -> str:
    """Format config issues deterministically, one per line."""
    ordered = sorted(issues, key=lambda issue: (issue.code, issue.path, issue.field))
    return "\n".join(issue.format() for issue in ordered)


def _is_manifest_value(value: Any) -> bool:
    """Return whether *value* maps onto a manifest value (YAML dates and non-string keys do not)."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return True
    if isinstance(value, list):
        return all(_is_manifest_value(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(key, str) and _is_manifest_value(item) for key, item in value.items())
    return False


def _suggest_key(unknown: str, allowed: frozenset[str]) -> str:
    """Return a 'did you mean ...' hint for a close key match, or empty string."""
    matches = difflib.get_close_matches(unknown, sorted(allowed), n=1, cutoff=0.6)
    if matches:
        return f"did you mean `{matches[0]}`?"
    return ""
