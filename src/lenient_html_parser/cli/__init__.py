"""Command-line interface for the lenient HTML parser."""

from .main import main

__all__ = ["main"]
