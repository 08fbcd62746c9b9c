"""The ``include_file`` statement function."""

from __future__ import annotations

import logging

from pinclude.include.resolver import resolve_include_path
from pinclude.include.splicer import splice_and_evaluate
from pinclude.lang.context import CallerContext
from pinclude.lang.parser import ManifestParser, UnitParser

logger = logging.getLogger(__name__)


def include_file(ctx: CallerContext, path: str, *, parser: UnitParser | None = None) -> None:
    """Splice the manifest at *path* into the caller's scope at the call site.

    *path* is absolute or relative to the calling manifest. The included
    file is parsed as its own compilation unit with the caller's environment,
    then evaluated in ``ctx.scope`` so its variables, resources and nested
    includes behave as if written inline. Nothing is returned.

    Includes are not tracked, so a file that includes itself recurses until
    the interpreter's recursion limit is hit.
    """
    logger.debug("inserting '%s' into '%s' at line %d", path, ctx.file, ctx.line)
    resolved = resolve_include_path(path, ctx.file)

    logger.debug("parsing '%s'", path)
    unit_parser = parser if parser is not None else ManifestParser(ctx.environment)
    unit = unit_parser.parse_file(resolved)

    logger.debug("evaluating the ast from '%s'", path)
    splice_and_evaluate(unit, ctx.scope)
    logger.debug("done inserting '%s' into '%s' at line %d", path, ctx.file, ctx.line)
