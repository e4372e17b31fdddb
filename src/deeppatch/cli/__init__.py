"""
CLI module for deeppatch.

Provides the command-line interface using Click.
"""

from deeppatch.cli.main import cli, main

__all__ = ["main", "cli"]
