"""
querybuilder CLI Module.

Provides a Typer/Rich command-line interface for inspecting compiled search
regexes and canonical filters.
"""

from .app import app, run_cli

__all__ = ["app", "run_cli"]
