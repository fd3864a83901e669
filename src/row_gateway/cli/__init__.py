"""Command-line interface for the row gateway."""

from .app import app

__all__ = ["app"]
