"""Environments: the definitions and functions visible to a compilation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from pinclude.constants.config import DEFAULT_ENCODING, DEFAULT_ENVIRONMENT
from pinclude.exceptions import EvaluationError
from pinclude.lang.scope import Resource

if TYPE_CHECKING:
    from pinclude.functions.base import Function
    from pinclude.lang.ast import Expression, Statement
    from pinclude.lang.scope import Scope

logger = logging.getLogger(__name__)

DefinitionKind: TypeAlias = Literal["define", "class"]

# Metaparameters are accepted on every resource, including define instances.
METAPARAMETERS: frozenset[str] = frozenset(
    {"alias", "audit", "before", "loglevel", "noop", "notify", "require", "schedule", "stage", "subscribe", "tag"}
)


@dataclass(frozen=True)
class Parameter:
    """A declared ``define``/``class`` parameter with an optional default."""

    name: str
    default: Expression | None = None

    @property
    def required(self) -> bool:
        return self.default is None


@dataclass(frozen=True)
class Definition:
    """A named ``define`` or ``class`` body registered while parsing."""

    kind: DefinitionKind
    name: str
    parameters: tuple[Parameter, ...]
    body: tuple[Statement, ...]
    file: str
    line: int

    def same_origin(self, other: Definition) -> bool:
        return (self.kind, self.name, self.file, self.line) == (other.kind, other.name, other.file, other.line)

    def instantiate(self, scope: Scope, title: str, arguments: dict[str, Any], *, file: str, line: int) -> Scope:
        """Evaluate a define instance in a fresh child of the declaring scope."""
        accepted = {param.name for param in self.parameters} | {"name"}
        unknown = sorted(set(arguments) - accepted - METAPARAMETERS)
        if unknown:
            raise EvaluationError(
                f"Invalid parameter {', '.join(unknown)} for {self.name}[{title}]",
                file=file,
                line=line,
            )

        child = scope.new_child(f"{self.name}[{title}]")
        child.setvar("title", title, file=file, line=line)
        child.setvar("name", arguments.get("name", title), file=file, line=line)
        self._bind_parameters(child, arguments, label=f"{self.name}[{title}]", file=file, line=line)
        for statement in self.body:
            statement.evaluate(child)
        return child

    def evaluate_class(self, scope: Scope, *, file: str, line: int) -> Scope:
        """Evaluate a class once per catalog, in a child of the top scope."""
        catalog = scope.catalog
        existing = catalog.class_scopes.get(self.name)
        if existing is not None:
            logger.debug("Class %s already evaluated; skipping", self.name)
            return existing

        class_scope = scope.top.new_child(self.name)
        catalog.add(Resource(type="class", title=self.name, parameters={}, file=file, line=line))
        catalog.class_scopes[self.name] = class_scope
        class_scope.setvar("title", self.name, file=file, line=line)
        class_scope.setvar("name", self.name, file=file, line=line)
        self._bind_parameters(class_scope, {}, label=f"Class[{self.name}]", file=file, line=line)
        for statement in self.body:
            statement.evaluate(class_scope)
        return class_scope

    def _bind_parameters(
        self, scope: Scope, arguments: dict[str, Any], *, label: str, file: str, line: int
    ) -> None:
        for param in self.parameters:
            if param.name in ("title", "name"):
                continue
            if param.name in arguments:
                value = arguments[param.name]
            elif param.default is not None:
                value = param.default.evaluate(scope)
            else:
                raise EvaluationError(f"Must pass {param.name} to {label}", file=file, line=line)
            scope.setvar(param.name, value, file=file, line=line)


@dataclass
class Environment:
    """Loaded definitions and callable functions for one compilation run."""

    name: str = DEFAULT_ENVIRONMENT
    encoding: str = DEFAULT_ENCODING
    functions: dict[str, Function] = field(default_factory=dict)
    known_types: dict[str, Definition] = field(default_factory=dict)

    def register(self, definition: Definition) -> None:
        """Add a parsed definition; re-registering the same source location is a no-op."""
        existing = self.known_types.get(definition.name)
        if existing is not None:
            if existing.same_origin(definition):
                return
            raise EvaluationError(
                f"Duplicate definition: {definition.name} is already defined in file "
                f"{existing.file} at line {existing.line}; cannot redefine",
                file=definition.file,
                line=definition.line,
            )
        self.known_types[definition.name] = definition
        logger.debug("Registered %s %s from %s:%d", definition.kind, definition.name, definition.file, definition.line)

    def find_define(self, name: str) -> Definition | None:
        definition = self.known_types.get(name)
        if definition is None or definition.kind != "define":
            return None
        return definition

    def find_class(self, name: str) -> Definition | None:
        definition = self.known_types.get(name.removeprefix("::"))
        if definition is None or definition.kind != "class":
            return None
        return definition

    def function(self, name: str) -> Function | None:
        return self.functions.get(name)
