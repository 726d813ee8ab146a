"""Base class for CLI commands.

Commands implement execute() and return an exit code; the typer wrapper
turns a non-zero code into typer.Exit. Keeping the logic in a class lets
tests inject a recording console.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from rich.console import Console

from conceptforge.cli.console import ErrorRenderer, get_console


class ConceptForgeCommand(ABC):
    """Abstract base class for ConceptForge CLI commands.

    Example:
        class MyCommand(ConceptForgeCommand):
            def execute(self, name: str) -> int:
                self.print_success(f"Hello {name}")
                return 0
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize command.

        Args:
            console: Rich console (inject a recording console in tests)
        """
        self.console = console or get_console()

    @abstractmethod
    def execute(self, *args: Any, **kwargs: Any) -> int:
        """Run the command and return an exit code (0 = success)."""

    def print_success(self, message: str) -> None:
        self.console.print(f"[green][OK][/green] {message}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red][ERROR][/red] {message}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow][WARN][/yellow] {message}")

    def print_info(self, message: str) -> None:
        self.console.print(f"[blue][INFO][/blue] {message}")

    def handle_error(self, error: Exception, context: str = "") -> int:
        """Render error and return exit code 1."""
        ErrorRenderer.render(error, context=context, console=self.console)
        return 1
