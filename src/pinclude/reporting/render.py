"""Render compile results for terminal and machine consumption."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml

from pinclude.constants.reporting import JSON_INDENT, VALID_OUTPUT_FORMATS
from pinclude.exceptions import ConfigError
from pinclude.lang.values import stringify

if TYPE_CHECKING:
    from pinclude.compiler import CompileResult


def render_result(result: CompileResult, fmt: str) -> str:
    """Render *result* as ``json``, ``yaml`` or ``text``."""
    if fmt not in VALID_OUTPUT_FORMATS:
        raise ConfigError(
            f"Unknown output format {fmt!r}. Valid formats: {', '.join(sorted(VALID_OUTPUT_FORMATS))}"
        )
    payload = result.to_dict()
    if fmt == "json":
        return json.dumps(payload, indent=JSON_INDENT, sort_keys=True)
    if fmt == "yaml":
        return yaml.safe_dump(payload, sort_keys=True, default_flow_style=False).rstrip("\n")
    return _render_text(payload)


def _render_text(payload: dict[str, Any]) -> str:
    lines = [f"Environment: {payload['environment']}", "", "Variables:"]
    variables = payload["variables"]
    if not variables:
        lines.append("  (none)")
    for name in sorted(variables):
        lines.append(f"  ${name} = {_display(variables[name])}")

    lines.extend(["", "Classes:"])
    if not payload["classes"]:
        lines.append("  (none)")
    lines.extend(f"  {name}" for name in payload["classes"])

    lines.extend(["", "Resources:"])
    if not payload["resources"]:
        lines.append("  (none)")
    for resource in payload["resources"]:
        lines.append(f"  {resource['type']}[{resource['title']}]  ({resource['file']}:{resource['line']})")
        for key in sorted(resource["parameters"]):
            lines.append(f"      {key} => {_display(resource['parameters'][key])}")
    return "\n".join(lines)


def _display(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(_display(item) for item in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{key} => {_display(item)}" for key, item in value.items()) + "}"
    if isinstance(value, str):
        return json.dumps(value)
    if value is None:
        return "undef"
    return stringify(value)
