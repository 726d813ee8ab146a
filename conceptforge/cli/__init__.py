"""Command-line interface for ConceptForge."""

from conceptforge.cli.main import app, cli_main

__all__ = ["app", "cli_main"]
