"""Command-line interface for sandboxfs."""

from sandboxfs.cli.app import app

__all__ = ["app"]
