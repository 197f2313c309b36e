"""Command-line interface for fileaudit."""

from fileaudit.cli.main import cli

__all__ = ["cli"]
