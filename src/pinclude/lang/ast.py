"""Abstract syntax tree for manifests.

Every node carries the file and line it was parsed from. Statements mutate
the scope they are evaluated in; expressions return a value.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pinclude.exceptions import EvaluationError
from pinclude.lang.context import CallerContext
from pinclude.lang.scope import Resource
from pinclude.lang.values import (
    Value,
    contains,
    freeze_key,
    is_true,
    stringify,
    to_number,
    values_equal,
)

if TYPE_CHECKING:
    from pinclude.lang.environment import Definition
    from pinclude.lang.scope import Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    file: str
    line: int


class Expression(Node):
    def evaluate(self, scope: Scope) -> Value:
        raise NotImplementedError


class Statement(Node):
    def evaluate(self, scope: Scope) -> None:
        raise NotImplementedError

    def definitions(self) -> Iterator[Definition]:
        """Yield ``define``/``class`` definitions nested in this statement."""
        return iter(())


# Expressions


@dataclass(frozen=True)
class Literal(Expression):
    value: Value

    def evaluate(self, scope: Scope) -> Value:
        return self.value


@dataclass(frozen=True)
class InterpolatedString(Expression):
    parts: tuple[str | Expression, ...]

    def evaluate(self, scope: Scope) -> Value:
        rendered: list[str] = []
        for part in self.parts:
            if isinstance(part, str):
                rendered.append(part)
            else:
                rendered.append(stringify(part.evaluate(scope)))
        return "".join(rendered)


@dataclass(frozen=True)
class VariableRef(Expression):
    name: str

    def evaluate(self, scope: Scope) -> Value:
        return scope.lookup(self.name, file=self.file, line=self.line)


@dataclass(frozen=True)
class ArrayLiteral(Expression):
    items: tuple[Expression, ...]

    def evaluate(self, scope: Scope) -> Value:
        return [item.evaluate(scope) for item in self.items]


@dataclass(frozen=True)
class HashLiteral(Expression):
    pairs: tuple[tuple[Expression, Expression], ...]

    def evaluate(self, scope: Scope) -> Value:
        result: dict[str, Value] = {}
        for key_expr, value_expr in self.pairs:
            key = freeze_key(key_expr.evaluate(scope), file=self.file, line=self.line)
            result[key] = value_expr.evaluate(scope)
        return result


@dataclass(frozen=True)
class Index(Expression):
    target: Expression
    key: Expression

    def evaluate(self, scope: Scope) -> Value:
        container = self.target.evaluate(scope)
        key = self.key.evaluate(scope)
        if isinstance(container, list):
            position = to_number(key, file=self.file, line=self.line)
            if not isinstance(position, int):
                raise EvaluationError(f"Array index must be an integer, got {key!r}", file=self.file, line=self.line)
            if -len(container) <= position < len(container):
                return container[position]
            return None
        if isinstance(container, dict):
            return container.get(freeze_key(key, file=self.file, line=self.line))
        raise EvaluationError(f"Cannot index into {container!r}", file=self.file, line=self.line)


@dataclass(frozen=True)
class Arithmetic(Expression):
    operator: str
    left: Expression
    right: Expression

    def evaluate(self, scope: Scope) -> Value:
        left = to_number(self.left.evaluate(scope), file=self.file, line=self.line)
        right = to_number(self.right.evaluate(scope), file=self.file, line=self.line)
        if self.operator == "+":
            return left + right
        if self.operator == "-":
            return left - right
        if self.operator == "*":
            return left * right
        if right == 0:
            raise EvaluationError("Division by zero", file=self.file, line=self.line)
        if isinstance(left, int) and isinstance(right, int):
            return left // right
        return left / right


@dataclass(frozen=True)
class Comparison(Expression):
    operator: str
    left: Expression
    right: Expression

    def evaluate(self, scope: Scope) -> Value:
        left = self.left.evaluate(scope)
        right = self.right.evaluate(scope)
        if self.operator == "==":
            return values_equal(left, right)
        if self.operator == "!=":
            return not values_equal(left, right)
        lhs = to_number(left, file=self.file, line=self.line)
        rhs = to_number(right, file=self.file, line=self.line)
        if self.operator == "<":
            return lhs < rhs
        if self.operator == "<=":
            return lhs <= rhs
        if self.operator == ">":
            return lhs > rhs
        return lhs >= rhs


@dataclass(frozen=True)
class Membership(Expression):
    needle: Expression
    haystack: Expression

    def evaluate(self, scope: Scope) -> Value:
        return contains(
            self.needle.evaluate(scope),
            self.haystack.evaluate(scope),
            file=self.file,
            line=self.line,
        )


@dataclass(frozen=True)
class BooleanOp(Expression):
    operator: str
    left: Expression
    right: Expression

    def evaluate(self, scope: Scope) -> Value:
        left = is_true(self.left.evaluate(scope))
        if self.operator == "and":
            return left and is_true(self.right.evaluate(scope))
        return left or is_true(self.right.evaluate(scope))


@dataclass(frozen=True)
class Not(Expression):
    operand: Expression

    def evaluate(self, scope: Scope) -> Value:
        return not is_true(self.operand.evaluate(scope))


@dataclass(frozen=True)
class FunctionCall(Expression, Statement):
    """A function call, either as a statement or as an rvalue."""

    name: str
    arguments: tuple[Expression, ...]
    rvalue: bool

    def evaluate(self, scope: Scope) -> Value:
        function = scope.environment.function(self.name)
        if function is None:
            raise EvaluationError(f"Unknown function {self.name}", file=self.file, line=self.line)
        if self.rvalue and function.kind != "rvalue":
            raise EvaluationError(
                f"Function '{self.name}' does not return a value", file=self.file, line=self.line
            )
        if not self.rvalue and function.kind == "rvalue":
            raise EvaluationError(
                f"Function '{self.name}' must be the value of a statement", file=self.file, line=self.line
            )

        values = [argument.evaluate(scope) for argument in self.arguments]
        ctx = CallerContext(file=self.file, line=self.line, environment=scope.environment, scope=scope)
        return function.call(ctx, values)


# Statements


@dataclass(frozen=True)
class Assignment(Statement):
    name: str
    value: Expression

    def evaluate(self, scope: Scope) -> None:
        scope.setvar(self.name, self.value.evaluate(scope), file=self.file, line=self.line)


@dataclass(frozen=True)
class Conditional(Statement):
    """``if``/``elsif``/``else`` and ``unless``; branches share the enclosing scope."""

    branches: tuple[tuple[Expression, tuple[Statement, ...]], ...]
    otherwise: tuple[Statement, ...]

    def evaluate(self, scope: Scope) -> None:
        for condition, body in self.branches:
            if is_true(condition.evaluate(scope)):
                _evaluate_all(body, scope)
                return
        _evaluate_all(self.otherwise, scope)

    def definitions(self) -> Iterator[Definition]:
        for _, body in self.branches:
            yield from _definitions_in(body)
        yield from _definitions_in(self.otherwise)


@dataclass(frozen=True)
class DefinitionStatement(Statement):
    """A ``define`` or ``class`` body; registered at parse time, inert when evaluated."""

    definition: Definition

    def evaluate(self, scope: Scope) -> None:
        return None

    def definitions(self) -> Iterator[Definition]:
        yield self.definition
        yield from _definitions_in(self.definition.body)


@dataclass(frozen=True)
class ResourceBody:
    title: Expression
    attributes: tuple[tuple[str, Expression], ...]
    line: int


@dataclass(frozen=True)
class ResourceDeclaration(Statement):
    type_name: str
    bodies: tuple[ResourceBody, ...]

    def evaluate(self, scope: Scope) -> None:
        definition = scope.environment.find_define(self.type_name)
        for body in self.bodies:
            title_value = body.title.evaluate(scope)
            titles = title_value if isinstance(title_value, list) else [title_value]
            arguments = {name: value.evaluate(scope) for name, value in body.attributes}
            for title in titles:
                if title is None or isinstance(title, (bool, list, dict)):
                    raise EvaluationError(
                        f"Invalid title {title!r} for {self.type_name} resource", file=self.file, line=body.line
                    )
                title_str = stringify(title)
                scope.catalog.add(
                    Resource(
                        type=self.type_name,
                        title=title_str,
                        parameters=dict(arguments),
                        file=self.file,
                        line=body.line,
                    )
                )
                if definition is not None:
                    definition.instantiate(scope, title_str, arguments, file=self.file, line=body.line)


@dataclass(frozen=True)
class Manifest(Statement):
    """Root of one parsed compilation unit."""

    statements: tuple[Statement, ...]

    @property
    def path(self) -> str:
        return self.file

    def evaluate(self, scope: Scope) -> None:
        """Evaluate every statement against *scope* in place; no new scope is created."""
        _evaluate_all(self.statements, scope)

    def definitions(self) -> Iterator[Definition]:
        yield from _definitions_in(self.statements)


def _evaluate_all(statements: tuple[Statement, ...], scope: Scope) -> None:
    for statement in statements:
        statement.evaluate(scope)


def _definitions_in(statements: tuple[Statement, ...]) -> Iterator[Definition]:
    for statement in statements:
        yield from statement.definitions()
