"""Command-line interface for pinclude."""
