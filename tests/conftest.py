"""Shared pytest fixtures for manifest parsing and evaluation tests."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from pinclude.compiler import build_environment, new_top_scope
from pinclude.lang.context import CallerContext
from pinclude.lang.environment import Environment
from pinclude.lang.parser import ManifestParser
from pinclude.lang.scope import Scope


@pytest.fixture(scope="session")
def fixtures_root() -> Path:
    """Return root directory for test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def site_root(fixtures_root: Path) -> Path:
    """Return the fixture site with manifests, includes and modules."""
    return fixtures_root / "site"


@pytest.fixture
def environment() -> Environment:
    """Return a fresh environment with the builtin functions registered."""
    return build_environment()


@pytest.fixture
def scope(environment: Environment) -> Scope:
    """Return an empty top scope bound to ``environment``."""
    return new_top_scope(environment)


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes dedented manifest text under ``tmp_path``."""

    def _write(relative: str, text: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def run_manifest(environment: Environment, scope: Scope) -> Callable[[Path], Scope]:
    """Return a helper that parses a manifest file and evaluates it in ``scope``."""

    def _run(path: Path) -> Scope:
        unit = ManifestParser(environment).parse_file(str(path))
        unit.evaluate(scope)
        return scope

    return _run


@pytest.fixture
def caller(environment: Environment, scope: Scope, tmp_path: Path) -> CallerContext:
    """Return a call context for line 3 of ``tmp_path/site.pp``."""
    return CallerContext(file=str(tmp_path / "site.pp"), line=3, environment=environment, scope=scope)
