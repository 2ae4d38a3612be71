"""Command line interface for boottime."""

from .main import app, create_app

__all__ = ["app", "create_app"]
