"""Root exception type."""

from __future__ import annotations


class PincludeError(Exception):
    """Base class for every error raised by pinclude."""
