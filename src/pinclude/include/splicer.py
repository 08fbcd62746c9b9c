"""Evaluate a parsed unit directly in an existing scope."""

from __future__ import annotations

from pinclude.lang.ast import Manifest
from pinclude.lang.scope import Scope


def splice_and_evaluate(unit: Manifest, scope: Scope) -> None:
    """Evaluate *unit* against *scope* itself rather than a child scope.

    Bindings and declarations made by the unit land in *scope*. Errors
    propagate unchanged, and anything evaluated before the failing statement
    stays in effect.
    """
    unit.evaluate(scope)
