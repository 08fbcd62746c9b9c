"""Builtin manifest functions other than ``include_file``."""

from __future__ import annotations

import logging
from typing import Any

from pinclude.exceptions import EvaluationError
from pinclude.lang.context import CallerContext
from pinclude.lang.values import stringify, values_equal

logger = logging.getLogger(__name__)


def include_classes(ctx: CallerContext, *names: Any) -> None:
    """Evaluate each named class once, in a child of the top scope."""
    for raw in _flatten(names):
        name = stringify(raw)
        definition = ctx.environment.find_class(name)
        if definition is None:
            raise EvaluationError(f"Could not find class {name}", file=ctx.file, line=ctx.line)
        definition.evaluate_class(ctx.scope, file=ctx.file, line=ctx.line)


def notice(ctx: CallerContext, *messages: Any) -> None:
    logger.info("Scope(%s): %s", ctx.scope.name, _join(messages))


def warning(ctx: CallerContext, *messages: Any) -> None:
    logger.warning("Scope(%s): %s", ctx.scope.name, _join(messages))


def debug(ctx: CallerContext, *messages: Any) -> None:
    logger.debug("Scope(%s): %s", ctx.scope.name, _join(messages))


def fail(ctx: CallerContext, *messages: Any) -> None:
    raise EvaluationError(_join(messages), file=ctx.file, line=ctx.line)


def member(ctx: CallerContext, array: Any, item: Any) -> bool:
    """Return whether *item* is an element of *array*, comparing like the ``in`` operator."""
    if not isinstance(array, list):
        raise EvaluationError(
            f"member(): requires an array as first argument, got {array!r}",
            file=ctx.file,
            line=ctx.line,
        )
    return any(values_equal(element, item) for element in array)


def defined(ctx: CallerContext, *names: Any) -> bool:
    """Return whether every name is a known variable, type or function.

    Names starting with ``$`` are variables; anything else is checked
    against defines, classes and functions.
    """
    for raw in names:
        name = stringify(raw)
        if name.startswith("$"):
            if not ctx.scope.is_defined(name[1:]):
                return False
            continue
        if name in ctx.environment.known_types or ctx.environment.function(name) is not None:
            continue
        return False
    return True


def _join(messages: tuple[Any, ...]) -> str:
    return " ".join(stringify(message) for message in messages)


def _flatten(values: tuple[Any, ...]) -> list[Any]:
    flat: list[Any] = []
    for value in values:
        if isinstance(value, list):
            flat.extend(_flatten(tuple(value)))
        else:
            flat.append(value)
    return flat
