"""Resolve include paths relative to the including manifest."""

from __future__ import annotations

import os

from pinclude.constants.parsing import ABSOLUTE_PATH_MARKER, CURRENT_DIRECTORY, PATH_SEPARATOR
from pinclude.exceptions import InvalidPathError


def resolve_include_path(include_path: str, caller_file: str) -> str:
    """Return the path for *include_path* as seen from *caller_file*.

    Absolute paths pass through unchanged. Relative paths are appended to the
    caller's directory (``.`` when it has none) with a literal separator;
    ``.`` and ``..`` segments are left in place. Existence is not checked here.
    """
    if not isinstance(include_path, str) or not include_path:
        raise InvalidPathError(f"include path must be a non-empty string, got {include_path!r}")
    if "\x00" in include_path:
        raise InvalidPathError(f"include path contains a NUL byte: {include_path!r}")

    if include_path.startswith(ABSOLUTE_PATH_MARKER):
        return include_path
    directory = os.path.dirname(caller_file) or CURRENT_DIRECTORY
    return directory + PATH_SEPARATOR + include_path
