"""Explicit call context passed to every manifest function."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pinclude.constants.parsing import CURRENT_DIRECTORY

if TYPE_CHECKING:
    from pinclude.lang.environment import Environment
    from pinclude.lang.scope import Scope


@dataclass(frozen=True)
class CallerContext:
    """Where a function was called from and what it may read or mutate.

    The dataclass itself is immutable, but ``scope`` is the caller's live
    scope: statement functions such as ``include_file`` write into it.
    """

    file: str
    line: int
    environment: Environment
    scope: Scope

    @property
    def directory(self) -> str:
        """Directory containing the calling manifest."""
        return os.path.dirname(self.file) or CURRENT_DIRECTORY
