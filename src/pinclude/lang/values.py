"""Value semantics shared by the evaluator and builtin functions.

Manifest values map onto plain Python objects: strings, ints, floats,
booleans, ``None`` for ``undef``, lists for arrays and dicts for hashes.
"""

from __future__ import annotations

from typing import Any, TypeAlias

from pinclude.exceptions import EvaluationError

Value: TypeAlias = str | int | float | bool | None | list["Value"] | dict[str, "Value"]


def is_true(value: Value) -> bool:
    """Return manifest truthiness: ``undef``, ``false`` and ``""`` are false."""
    if value is None or value is False:
        return False
    if value == "":
        return False
    return True


def stringify(value: Value) -> str:
    """Render a value the way string interpolation shows it."""
    if value is None:
        return ""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, list):
        return "".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return "".join(f"{key}{stringify(item)}" for key, item in value.items())
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Value, *, file: str, line: int) -> int | float:
    """Coerce a number or numeric string for arithmetic and ordering."""
    if isinstance(value, bool):
        raise EvaluationError(f"Expected a number, got boolean {stringify(value)}", file=file, line=line)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return float(value)
        except ValueError:
            pass
    raise EvaluationError(f"Expected a number, got {value!r}", file=file, line=line)


def values_equal(left: Value, right: Value) -> bool:
    """Compare two values; strings compare case-insensitively."""
    if isinstance(left, str) and isinstance(right, str):
        return left.lower() == right.lower()
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(values_equal(a, b) for a, b in zip(left, right, strict=True))
    return left == right


def contains(needle: Value, haystack: Value, *, file: str, line: int) -> bool:
    """Implement the ``in`` operator for strings, arrays and hash keys."""
    if isinstance(haystack, str):
        return isinstance(needle, str) and needle in haystack
    if isinstance(haystack, list):
        return any(values_equal(needle, item) for item in haystack)
    if isinstance(haystack, dict):
        return any(values_equal(needle, key) for key in haystack)
    raise EvaluationError(f"'in' expects a string, array or hash, got {haystack!r}", file=file, line=line)


def freeze_key(value: Any, *, file: str, line: int) -> str:
    """Return a hash key; only strings and numbers may key a hash."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise EvaluationError(f"Hash keys must be strings or numbers, got {value!r}", file=file, line=line)
    return stringify(value)
