"""Command-line interface for parsenip."""

from .main import main

__all__ = ["main"]
