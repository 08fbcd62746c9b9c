"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "pinclude"
CLI_DESCRIPTION: str = f"{BRAND_NAME}: compile Puppet-style manifests with textual include_file support"
