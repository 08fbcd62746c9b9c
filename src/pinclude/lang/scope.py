"""Variable scopes and the resource catalog they feed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pinclude.exceptions import EvaluationError

if TYPE_CHECKING:
    from pinclude.lang.environment import Environment
    from pinclude.lang.values import Value

logger = logging.getLogger(__name__)

_MISSING: Any = object()
_UNDEFINED: Any = object()


@dataclass(frozen=True)
class Resource:
    """A single declared resource (native type, define instance or class)."""

    type: str
    title: str
    parameters: dict[str, Any]
    file: str
    line: int

    @property
    def ref(self) -> str:
        """Return the ``Type[title]`` reference string."""
        type_name = "::".join(part.capitalize() for part in self.type.split("::"))
        return f"{type_name}[{self.title}]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "title": self.title,
            "parameters": dict(self.parameters),
            "file": self.file,
            "line": self.line,
        }


@dataclass
class Catalog:
    """Ordered collection of resources declared during one compilation."""

    resources: list[Resource] = field(default_factory=list)
    class_scopes: dict[str, Scope] = field(default_factory=dict)
    _index: dict[tuple[str, str], Resource] = field(default_factory=dict, repr=False)

    def add(self, resource: Resource) -> None:
        """Record a resource, rejecting a second declaration of the same ref."""
        key = (resource.type, resource.title)
        previous = self._index.get(key)
        if previous is not None:
            raise EvaluationError(
                f"Duplicate declaration: {resource.ref} is already declared in file "
                f"{previous.file} at line {previous.line}; cannot redeclare",
                file=resource.file,
                line=resource.line,
            )
        self._index[key] = resource
        self.resources.append(resource)
        logger.debug("Declared %s", resource.ref)

    def find(self, type_name: str, title: str) -> Resource | None:
        return self._index.get((type_name, title))

    def has_class(self, name: str) -> bool:
        return name in self.class_scopes

    @property
    def classes(self) -> list[str]:
        """Evaluated class names in evaluation order."""
        return list(self.class_scopes)


class Scope:
    """Mutable variable bindings with lookup fallback to enclosing scopes.

    Bindings are only ever added to the scope they are set on. A name may be
    bound once per scope; a child scope may shadow a parent's binding.
    """

    def __init__(
        self,
        environment: Environment,
        catalog: Catalog,
        *,
        parent: Scope | None = None,
        name: str = "main",
    ) -> None:
        self.environment = environment
        self.catalog = catalog
        self.parent = parent
        self.name = name
        self.variables: dict[str, Value] = {}
        self._origins: dict[str, tuple[str | None, int | None]] = {}

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, {len(self.variables)} variables)"

    @property
    def top(self) -> Scope:
        """Return the outermost scope of this chain."""
        scope = self
        while scope.parent is not None:
            scope = scope.parent
        return scope

    def new_child(self, name: str) -> Scope:
        """Create a nested scope sharing this scope's environment and catalog."""
        return Scope(self.environment, self.catalog, parent=self, name=name)

    def is_local(self, name: str) -> bool:
        return name in self.variables

    def lookup(self, name: str, default: Any = _MISSING, *, file: str | None = None, line: int | None = None) -> Value:
        """Resolve a variable name.

        ``::name`` reads the top scope and ``class::name`` reads the scope of
        an evaluated class. Unqualified names walk the parent chain. Unknown
        names raise :class:`EvaluationError` unless *default* is given.
        """
        if name.startswith("::"):
            return self.top.lookup_local(name[2:], default, file=file, line=line)

        if "::" in name:
            class_name, _, var_name = name.rpartition("::")
            class_scope = self.catalog.class_scopes.get(class_name)
            if class_scope is None:
                if default is not _MISSING:
                    return default
                raise EvaluationError(
                    f"Could not look up qualified variable '{name}'; class {class_name} has not been evaluated",
                    file=file,
                    line=line,
                )
            return class_scope.lookup_local(var_name, default, file=file, line=line)

        scope: Scope | None = self
        while scope is not None:
            if name in scope.variables:
                return scope.variables[name]
            scope = scope.parent

        if default is not _MISSING:
            return default
        raise EvaluationError(f"Unknown variable '${name}'", file=file, line=line)

    def lookup_local(
        self, name: str, default: Any = _MISSING, *, file: str | None = None, line: int | None = None
    ) -> Value:
        if name in self.variables:
            return self.variables[name]
        if default is not _MISSING:
            return default
        raise EvaluationError(f"Unknown variable '${name}' in scope {self.name}", file=file, line=line)

    def is_defined(self, name: str) -> bool:
        return self.lookup(name, _UNDEFINED) is not _UNDEFINED

    def setvar(self, name: str, value: Value, *, file: str | None = None, line: int | None = None) -> None:
        """Bind *name* in this scope; reassignment within the same scope is an error."""
        if "::" in name:
            raise EvaluationError(f"Cannot assign to qualified variable '${name}'", file=file, line=line)
        if name in self.variables:
            previous_file, previous_line = self._origins.get(name, (None, None))
            where = ""
            if previous_file is not None:
                where = f" (previously set at {previous_file}:{previous_line})"
            raise EvaluationError(
                f"Cannot reassign variable '${name}' in scope {self.name}{where}",
                file=file,
                line=line,
            )
        self.variables[name] = value
        self._origins[name] = (file, line)

    def to_dict(self) -> dict[str, Value]:
        """Return a shallow copy of this scope's own bindings."""
        return dict(self.variables)

