"""Exceptions raised while locating, reading and parsing manifest files."""

from __future__ import annotations

from pinclude.exceptions.base import PincludeError


class InvalidPathError(PincludeError, ValueError):
    """Raised when an include path is empty or malformed."""


class IncludeFileNotFoundError(PincludeError, FileNotFoundError):
    """Raised when a manifest path does not name a readable regular file."""

    def __init__(self, path: str, reason: str = "no such file") -> None:
        super().__init__(f"Could not read manifest {path}: {reason}")
        self.filename = path


class EmptyFileError(PincludeError, ValueError):
    """Raised when a manifest file exists but has no content."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Manifest {path} is empty")
        self.path = path


class ManifestSyntaxError(PincludeError, SyntaxError):
    """Raised when manifest text does not conform to the grammar.

    ``filename``, ``lineno`` and ``offset`` follow the builtin ``SyntaxError``
    attributes so tracebacks point at the offending manifest. ``context`` is
    the parser's source excerpt with a caret under the error, when known.
    """

    def __init__(
        self,
        message: str,
        path: str,
        line: int | None = None,
        column: int | None = None,
        *,
        context: str | None = None,
    ) -> None:
        location = path
        if line is not None:
            location = f"{location}:{line}"
            if column is not None:
                location = f"{location}:{column}"
        text = f"Syntax error at {location}: {message}"
        if context:
            text = f"{text}\n{context}"
        super().__init__(text)
        self.filename = path
        self.lineno = line
        self.offset = column
        self.detail = message
        self.context = context

    def __str__(self) -> str:
        return str(self.msg)
