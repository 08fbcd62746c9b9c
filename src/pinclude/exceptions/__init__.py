"""Shared exception hierarchy for pinclude."""

from __future__ import annotations

from .base import PincludeError
from .config import ConfigError
from .evaluation import EvaluationError
from .parsing import EmptyFileError, IncludeFileNotFoundError, InvalidPathError, ManifestSyntaxError

__all__ = [
    "ConfigError",
    "EmptyFileError",
    "EvaluationError",
    "IncludeFileNotFoundError",
    "InvalidPathError",
    "ManifestSyntaxError",
    "PincludeError",
]
