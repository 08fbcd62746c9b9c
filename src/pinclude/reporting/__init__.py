"""Compile result rendering."""

from .render import render_result

__all__ = ["render_result"]
