"""Evaluation-related exceptions."""

from __future__ import annotations

from pinclude.exceptions.base import PincludeError


class EvaluationError(PincludeError, RuntimeError):
    """Raised when a parsed manifest fails semantic evaluation."""

    def __init__(self, message: str, *, file: str | None = None, line: int | None = None) -> None:
        self.message = message
        self.file = file
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.file is None:
            return self.message
        if self.line is None:
            return f"{self.message} at {self.file}"
        return f"{self.message} at {self.file}:{self.line}"
