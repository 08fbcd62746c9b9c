"""Build AST nodes from lark parse trees."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lark import Token, Transformer, v_args
from lark.tree import Meta

from pinclude.constants.parsing import DQ_ESCAPES, INTERPOLATION_PATTERN, SQ_ESCAPES, VARIABLE_NAME_PATTERN
from pinclude.exceptions import ManifestSyntaxError
from pinclude.lang.ast import (
    Arithmetic,
    ArrayLiteral,
    Assignment,
    BooleanOp,
    Comparison,
    Conditional,
    DefinitionStatement,
    Expression,
    FunctionCall,
    HashLiteral,
    Index,
    InterpolatedString,
    Literal,
    Manifest,
    Membership,
    Not,
    ResourceBody,
    ResourceDeclaration,
    Statement,
    VariableRef,
)
from pinclude.lang.environment import Definition, DefinitionKind, Parameter


@dataclass(frozen=True)
class _Block:
    statements: tuple[Statement, ...]


@dataclass(frozen=True)
class _Params:
    parameters: tuple[Parameter, ...]


@dataclass(frozen=True)
class _Args:
    items: tuple[Expression, ...]


@dataclass(frozen=True)
class _Elsif:
    condition: Expression
    body: tuple[Statement, ...]


@dataclass(frozen=True)
class _Else:
    body: tuple[Statement, ...]


def _line(meta: Meta) -> int:
    return 0 if meta.empty else meta.line


def _variable_name(token: Token) -> str:
    return str(token)[1:]


@v_args(meta=True)
class ManifestTransformer(Transformer):
    """Transform a parse tree for one file into a :class:`Manifest`."""

    def __init__(self, path: str) -> None:
        super().__init__()
        self.path = path

    def _syntax_error(self, message: str, line: int) -> ManifestSyntaxError:
        return ManifestSyntaxError(message, self.path, line or None)

    # Structure

    def start(self, meta: Meta, children: list[Any]) -> Manifest:
        return Manifest(file=self.path, line=1, statements=tuple(children))

    def block(self, meta: Meta, children: list[Any]) -> _Block:
        return _Block(tuple(children))

    def args(self, meta: Meta, children: list[Any]) -> _Args:
        return _Args(tuple(children))

    # Statements

    def assignment(self, meta: Meta, children: list[Any]) -> Assignment:
        variable, value = children
        return Assignment(file=self.path, line=variable.line, name=_variable_name(variable), value=value)

    def call_stmt(self, meta: Meta, children: list[Any]) -> FunctionCall:
        return self._call(meta, children, rvalue=False)

    def include_stmt(self, meta: Meta, children: list[Any]) -> FunctionCall:
        return FunctionCall(file=self.path, line=_line(meta), name="include", arguments=tuple(children), rvalue=False)

    def if_stmt(self, meta: Meta, children: list[Any]) -> Conditional:
        condition, block, *rest = children
        branches: list[tuple[Expression, tuple[Statement, ...]]] = [(condition, block.statements)]
        otherwise: tuple[Statement, ...] = ()
        for clause in rest:
            if isinstance(clause, _Elsif):
                branches.append((clause.condition, clause.body))
            else:
                otherwise = clause.body
        return Conditional(file=self.path, line=_line(meta), branches=tuple(branches), otherwise=otherwise)

    def elsif_clause(self, meta: Meta, children: list[Any]) -> _Elsif:
        condition, block = children
        return _Elsif(condition, block.statements)

    def else_clause(self, meta: Meta, children: list[Any]) -> _Else:
        (block,) = children
        return _Else(block.statements)

    def unless_stmt(self, meta: Meta, children: list[Any]) -> Conditional:
        condition, block, *rest = children
        line = _line(meta)
        negated = Not(file=self.path, line=line, operand=condition)
        otherwise = rest[0].body if rest else ()
        return Conditional(file=self.path, line=line, branches=((negated, block.statements),), otherwise=otherwise)

    def define_def(self, meta: Meta, children: list[Any]) -> DefinitionStatement:
        return self._definition("define", meta, children)

    def class_def(self, meta: Meta, children: list[Any]) -> DefinitionStatement:
        return self._definition("class", meta, children)

    def param_list(self, meta: Meta, children: list[Any]) -> _Params:
        seen: set[str] = set()
        for param in children:
            if param.name in seen:
                raise self._syntax_error(f"duplicate parameter ${param.name}", _line(meta))
            seen.add(param.name)
        return _Params(tuple(children))

    def param(self, meta: Meta, children: list[Any]) -> Parameter:
        variable = children[0]
        default = children[1] if len(children) > 1 else None
        return Parameter(name=_variable_name(variable), default=default)

    def resource_decl(self, meta: Meta, children: list[Any]) -> ResourceDeclaration:
        type_token, *bodies = children
        return ResourceDeclaration(
            file=self.path,
            line=type_token.line,
            type_name=str(type_token).removeprefix("::"),
            bodies=tuple(bodies),
        )

    def resource_body(self, meta: Meta, children: list[Any]) -> ResourceBody:
        title, *attributes = children
        line = _line(meta)
        seen: set[str] = set()
        for name, _ in attributes:
            if name in seen:
                raise self._syntax_error(f"duplicate attribute '{name}' in resource body", line)
            seen.add(name)
        return ResourceBody(title=title, attributes=tuple(attributes), line=line)

    def attribute(self, meta: Meta, children: list[Any]) -> tuple[str, Expression]:
        name, value = children
        return str(name), value

    # Expressions

    def or_op(self, meta: Meta, children: list[Any]) -> BooleanOp:
        left, right = children
        return BooleanOp(file=self.path, line=_line(meta), operator="or", left=left, right=right)

    def and_op(self, meta: Meta, children: list[Any]) -> BooleanOp:
        left, right = children
        return BooleanOp(file=self.path, line=_line(meta), operator="and", left=left, right=right)

    def not_op(self, meta: Meta, children: list[Any]) -> Not:
        (operand,) = children
        return Not(file=self.path, line=_line(meta), operand=operand)

    def compare(self, meta: Meta, children: list[Any]) -> Comparison:
        left, operator, right = children
        return Comparison(file=self.path, line=operator.line, operator=str(operator), left=left, right=right)

    def in_op(self, meta: Meta, children: list[Any]) -> Membership:
        needle, haystack = children
        return Membership(file=self.path, line=_line(meta), needle=needle, haystack=haystack)

    def arith(self, meta: Meta, children: list[Any]) -> Arithmetic:
        left, operator, right = children
        return Arithmetic(file=self.path, line=operator.line, operator=str(operator), left=left, right=right)

    def index(self, meta: Meta, children: list[Any]) -> Index:
        target, key = children
        return Index(file=self.path, line=_line(meta), target=target, key=key)

    def call(self, meta: Meta, children: list[Any]) -> FunctionCall:
        return self._call(meta, children, rvalue=True)

    def var_ref(self, meta: Meta, children: list[Any]) -> VariableRef:
        (token,) = children
        return VariableRef(file=self.path, line=token.line, name=_variable_name(token))

    def bareword(self, meta: Meta, children: list[Any]) -> Literal:
        (token,) = children
        return Literal(file=self.path, line=token.line, value=str(token))

    def number(self, meta: Meta, children: list[Any]) -> Literal:
        (token,) = children
        text = str(token)
        value: int | float = float(text) if "." in text else int(text)
        return Literal(file=self.path, line=token.line, value=value)

    def true(self, meta: Meta, children: list[Any]) -> Literal:
        return Literal(file=self.path, line=_line(meta), value=True)

    def false(self, meta: Meta, children: list[Any]) -> Literal:
        return Literal(file=self.path, line=_line(meta), value=False)

    def undef(self, meta: Meta, children: list[Any]) -> Literal:
        return Literal(file=self.path, line=_line(meta), value=None)

    def array(self, meta: Meta, children: list[Any]) -> ArrayLiteral:
        return ArrayLiteral(file=self.path, line=_line(meta), items=tuple(children))

    def hash(self, meta: Meta, children: list[Any]) -> HashLiteral:
        return HashLiteral(file=self.path, line=_line(meta), pairs=tuple(children))

    def hash_pair(self, meta: Meta, children: list[Any]) -> tuple[Expression, Expression]:
        key, value = children
        return key, value

    def sq_string(self, meta: Meta, children: list[Any]) -> Literal:
        (token,) = children
        return Literal(file=self.path, line=token.line, value=_unescape(str(token)[1:-1], SQ_ESCAPES))

    def dq_string(self, meta: Meta, children: list[Any]) -> Expression:
        (token,) = children
        return self._interpolate(str(token)[1:-1], token.line)

    # Helpers

    def _call(self, meta: Meta, children: list[Any], *, rvalue: bool) -> FunctionCall:
        name_token, *rest = children
        arguments = rest[0].items if rest else ()
        return FunctionCall(
            file=self.path,
            line=name_token.line,
            name=str(name_token),
            arguments=arguments,
            rvalue=rvalue,
        )

    def _definition(self, kind: DefinitionKind, meta: Meta, children: list[Any]) -> DefinitionStatement:
        name_token = children[0]
        parameters: tuple[Parameter, ...] = ()
        body: tuple[Statement, ...] = ()
        for child in children[1:]:
            if isinstance(child, _Params):
                parameters = child.parameters
            elif isinstance(child, _Block):
                body = child.statements
        definition = Definition(
            kind=kind,
            name=str(name_token).removeprefix("::"),
            parameters=parameters,
            body=body,
            file=self.path,
            line=name_token.line,
        )
        return DefinitionStatement(file=self.path, line=name_token.line, definition=definition)

    def _interpolate(self, raw: str, line: int) -> Expression:
        """Split a double-quoted body into literal text and variable references."""
        parts: list[str | Expression] = []
        buffer: list[str] = []
        position = 0
        while position < len(raw):
            char = raw[position]
            if char == "\\" and position + 1 < len(raw):
                escaped = raw[position + 1]
                buffer.append(DQ_ESCAPES.get(escaped, "\\" + escaped))
                position += 2
                continue
            if char == "$":
                match = INTERPOLATION_PATTERN.match(raw, position)
                if match is not None:
                    if buffer:
                        parts.append("".join(buffer))
                        buffer = []
                    parts.append(VariableRef(file=self.path, line=line, name=self._interpolated_name(match, line)))
                    position = match.end()
                    continue
            buffer.append(char)
            position += 1
        if buffer:
            parts.append("".join(buffer))

        if all(isinstance(part, str) for part in parts):
            return Literal(file=self.path, line=line, value="".join(parts))  # type: ignore[arg-type]
        return InterpolatedString(file=self.path, line=line, parts=tuple(parts))

    def _interpolated_name(self, match: Any, line: int) -> str:
        braced = match.group("braced")
        if braced is None:
            return match.group("bare")
        name = braced.strip().removeprefix("$")
        if not VARIABLE_NAME_PATTERN.fullmatch(name):
            raise self._syntax_error(f"invalid interpolation '${{{braced}}}'", line)
        return name


def _unescape(raw: str, escapes: dict[str, str]) -> str:
    result: list[str] = []
    position = 0
    while position < len(raw):
        char = raw[position]
        if char == "\\" and position + 1 < len(raw) and raw[position + 1] in escapes:
            result.append(escapes[raw[position + 1]])
            position += 2
            continue
        result.append(char)
        position += 1
    return "".join(result)
