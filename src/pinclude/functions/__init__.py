"""Central function registry for manifest evaluation.

Maps function names to their descriptors. Only registered functions can be
called from manifests.
"""

from __future__ import annotations

from pinclude.functions.base import Function
from pinclude.functions.builtins import debug, defined, fail, include_classes, member, notice, warning
from pinclude.include.statement import include_file

FUNCTION_REGISTRY: dict[str, Function] = {
    "include_file": Function("include_file", "statement", include_file, min_args=1, max_args=1),
    "include": Function("include", "statement", include_classes, min_args=1),
    "notice": Function("notice", "statement", notice, min_args=1),
    "warning": Function("warning", "statement", warning, min_args=1),
    "debug": Function("debug", "statement", debug, min_args=1),
    "fail": Function("fail", "statement", fail, min_args=1),
    "member": Function("member", "rvalue", member, min_args=2, max_args=2),
    "defined": Function("defined", "rvalue", defined, min_args=1),
}

__all__ = ["FUNCTION_REGISTRY", "Function"]
