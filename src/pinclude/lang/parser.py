"""Single-file manifest parsing.

:class:`ManifestParser` parses one compilation unit at a time and hands the
AST back without evaluating it. Callers that need whole-program semantics
go through :mod:`pinclude.compiler`.
"""

from __future__ import annotations

import logging
from functools import cache
from typing import Protocol

from lark import Lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from pinclude.constants.parsing import GRAMMAR_PATH, GRAMMAR_START
from pinclude.exceptions import EmptyFileError, IncludeFileNotFoundError, ManifestSyntaxError
from pinclude.lang.ast import Manifest
from pinclude.lang.environment import Environment
from pinclude.lang.transformer import ManifestTransformer

logger = logging.getLogger(__name__)


class UnitParser(Protocol):
    """Anything that can turn one manifest file into an unevaluated AST."""

    def parse_file(self, path: str) -> Manifest: ...


@cache
def _grammar() -> Lark:
    """Build the LALR parser once per process; it holds no per-file state."""
    return Lark(
        GRAMMAR_PATH.read_text(encoding="utf-8"),
        start=GRAMMAR_START,
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
    )


class ManifestParser:
    """Parse manifests as standalone units against an environment.

    Definitions (``define``/``class``) found in a successfully parsed unit
    are registered in the environment before the AST is returned.
    """

    def __init__(self, environment: Environment, *, encoding: str | None = None) -> None:
        self.environment = environment
        self.encoding = encoding if encoding is not None else environment.encoding

    def parse_file(self, path: str) -> Manifest:
        """Read *path* and parse it as a single compilation unit."""
        text = self._read(path)
        return self.parse_string(text, path)

    def parse_string(self, text: str, path: str) -> Manifest:
        """Parse *text* as if it were the content of *path*."""
        if not text.strip():
            raise EmptyFileError(path)

        try:
            tree = _grammar().parse(text)
        except UnexpectedInput as exc:
            raise ManifestSyntaxError(
                _describe(exc),
                path,
                _position(exc.line),
                _position(exc.column),
                context=_context(exc, text),
            ) from exc

        try:
            unit = ManifestTransformer(path).transform(tree)
        except VisitError as exc:
            raise exc.orig_exc from exc

        for definition in unit.definitions():
            self.environment.register(definition)
        logger.debug("Parsed %s: %d top-level statements", path, len(unit.statements))
        return unit

    def _read(self, path: str) -> str:
        try:
            with open(path, encoding=self.encoding) as handle:
                return handle.read()
        except OSError as exc:
            raise IncludeFileNotFoundError(path, exc.strerror or type(exc).__name__) from exc
        except UnicodeDecodeError as exc:
            raise IncludeFileNotFoundError(path, f"not valid {self.encoding}: {exc.reason}") from exc


def _describe(exc: UnexpectedInput) -> str:
    """Turn a lark error into a one-line diagnostic."""
    if isinstance(exc, UnexpectedEOF):
        return "unexpected end of file"
    if isinstance(exc, UnexpectedToken):
        expected = ", ".join(sorted(exc.expected)) if exc.expected else "nothing"
        return f"unexpected {exc.token.type} {str(exc.token)!r}; expected one of: {expected}"
    if isinstance(exc, UnexpectedCharacters):
        return f"unexpected character {exc.char!r}"
    return str(exc)


def _context(exc: UnexpectedInput, text: str) -> str | None:
    """Return lark's excerpt of the offending line with a caret, if it has a position."""
    if not isinstance(exc.pos_in_stream, int) or exc.pos_in_stream < 0:
        return None
    return exc.get_context(text).rstrip("\n")


def _position(value: object) -> int | None:
    """Lark reports unknown positions as ``-1`` or ``'?'``."""
    if isinstance(value, int) and value > 0:
        return value
    return None
