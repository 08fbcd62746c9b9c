"""Textual inclusion of manifests into the calling scope."""

from __future__ import annotations

from pinclude.include.resolver import resolve_include_path
from pinclude.include.splicer import splice_and_evaluate
from pinclude.include.statement import include_file
from pinclude.lang.context import CallerContext

__all__ = ["CallerContext", "include_file", "resolve_include_path", "splice_and_evaluate"]
