"""Function descriptors for manifest-callable functions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from pinclude.exceptions import EvaluationError
from pinclude.lang.context import CallerContext

FunctionKind: TypeAlias = Literal["statement", "rvalue"]


@dataclass(frozen=True)
class Function:
    """A named function callable from manifests.

    ``statement`` functions are called for their side effects and may not be
    used as values; ``rvalue`` functions must be.
    """

    name: str
    kind: FunctionKind
    impl: Callable[..., Any]
    min_args: int = 0
    max_args: int | None = None

    def call(self, ctx: CallerContext, arguments: Sequence[Any]) -> Any:
        """Check arity and invoke the implementation with *ctx* first."""
        count = len(arguments)
        if count < self.min_args or (self.max_args is not None and count > self.max_args):
            raise EvaluationError(
                f"{self.name}(): {self._arity_text()}, got {count}",
                file=ctx.file,
                line=ctx.line,
            )
        result = self.impl(ctx, *arguments)
        if self.kind == "statement":
            return None
        return result

    def _arity_text(self) -> str:
        if self.max_args == self.min_args:
            return f"expects exactly {self.min_args} argument(s)"
        if self.max_args is None:
            return f"expects at least {self.min_args} argument(s)"
        return f"expects between {self.min_args} and {self.max_args} arguments"
