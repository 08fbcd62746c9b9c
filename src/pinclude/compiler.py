"""Whole-program compilation of a site manifest.

This is the top-level entry point: it builds the environment, the top scope
and the catalog, then parses and evaluates the site manifest. Included
files never come back through here; ``include_file`` parses them as single
units and evaluates them in the caller's scope.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pinclude.config import PincludeConfig
from pinclude.functions import FUNCTION_REGISTRY
from pinclude.lang.environment import Environment
from pinclude.lang.parser import ManifestParser
from pinclude.lang.scope import Catalog, Scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    """Top scope, catalog and environment produced by one compilation."""

    scope: Scope
    catalog: Catalog
    environment: Environment

    def to_dict(self) -> dict[str, Any]:
        return {
            "environment": self.environment.name,
            "variables": self.scope.to_dict(),
            "classes": self.catalog.classes,
            "resources": [resource.to_dict() for resource in self.catalog.resources],
        }


def build_environment(config: PincludeConfig | None = None) -> Environment:
    """Return a fresh environment with the builtin function registry."""
    config = config or PincludeConfig()
    return Environment(name=config.environment, encoding=config.encoding, functions=dict(FUNCTION_REGISTRY))


def new_top_scope(environment: Environment, config: PincludeConfig | None = None) -> Scope:
    """Create the top scope for a compilation and seed it with configured facts."""
    config = config or PincludeConfig()
    scope = Scope(environment, Catalog(), name="main")
    for name, value in sorted(config.facts.items()):
        scope.setvar(name, value)
    if not scope.is_local("environment"):
        scope.setvar("environment", environment.name)
    return scope


def compile_manifest(
    path: Path | str,
    *,
    environment: Environment | None = None,
    config: PincludeConfig | None = None,
) -> CompileResult:
    """Parse and evaluate the site manifest at *path*."""
    config = config or PincludeConfig()
    environment = environment or build_environment(config)
    manifest_path = str(Path(path).resolve())

    scope = new_top_scope(environment, config)
    logger.debug("Compiling %s in environment %s", manifest_path, environment.name)
    unit = ManifestParser(environment).parse_file(manifest_path)
    unit.evaluate(scope)
    logger.info(
        "Compiled %s: %d resources, %d classes",
        manifest_path,
        len(scope.catalog.resources),
        len(scope.catalog.classes),
    )
    return CompileResult(scope=scope, catalog=scope.catalog, environment=environment)


def check_syntax(path: Path | str, *, config: PincludeConfig | None = None) -> int:
    """Parse *path* without evaluating it; return its top-level statement count."""
    environment = build_environment(config)
    unit = ManifestParser(environment).parse_file(str(Path(path).resolve()))
    return len(unit.statements)
