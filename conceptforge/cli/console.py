"""Shared rich console and error rendering for the CLI.

Errors are shown as a panel with "Why it happened" and "How to fix"
sections taken from the ConceptForgeError that was raised. Plain
exceptions get generic guidance.
"""

from __future__ import annotations

import traceback
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from conceptforge.core.exceptions import ConceptForgeError, get_root_cause

_console: Optional[Console] = None

# Verbose mode flag (set by CLI --verbose flag)
_verbose_mode: bool = False

GENERIC_ERROR_CODE = "CF-ERR-999"


def get_console() -> Console:
    """Get the shared console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_verbose_mode(enabled: bool) -> None:
    """Enable or disable tracebacks in error output."""
    global _verbose_mode
    _verbose_mode = enabled


def is_verbose_mode() -> bool:
    return _verbose_mode


class ErrorRenderer:
    """Renders exceptions as helpful error panels."""

    @staticmethod
    def render(
        exc: BaseException,
        context: str = "",
        console: Optional[Console] = None,
    ) -> None:
        """Render an exception as an error panel.

        Args:
            exc: Exception to render
            context: Optional context line (e.g. "While reading notes.md")
            console: Console to print to (defaults to the shared console)
        """
        console = console or get_console()

        if isinstance(exc, ConceptForgeError):
            error_code = exc.error_code
            why = exc.why_it_happened
            how_to_fix = list(exc.how_to_fix)
        else:
            error_code = GENERIC_ERROR_CODE
            why = f"{type(exc).__name__} was raised"
            how_to_fix = ["Run with --verbose to see the full traceback"]

        root_cause = get_root_cause(exc)
        root_message = str(root_cause) if root_cause is not exc else None

        content = ErrorRenderer._build_error_content(
            message=str(exc),
            context=context,
            why=why,
            how_to_fix=how_to_fix,
            root_message=root_message,
        )
        console.print(
            Panel(
                content,
                title=f"[bold red]Error: {error_code}[/bold red]",
                border_style="red",
                padding=(1, 2),
            )
        )

        if is_verbose_mode():
            tb_text = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
            console.print(f"[dim]{tb_text}[/dim]")

    @staticmethod
    def _build_error_content(
        message: str,
        context: str,
        why: str,
        how_to_fix: List[str],
        root_message: Optional[str],
    ) -> Text:
        """Build the error panel body."""
        text = Text()

        if context:
            text.append(f"{context}\n\n", style="dim")

        text.append(message, style="bold red")
        text.append("\n\n")

        if root_message and root_message != message:
            text.append("Root cause: ", style="bold yellow")
            text.append(root_message, style="yellow")
            text.append("\n\n")

        text.append("Why it happened:\n", style="bold cyan")
        text.append(f"  {why}\n\n", style="cyan")

        text.append("How to fix:\n", style="bold green")
        for fix in how_to_fix:
            text.append(f"  - {fix}\n", style="green")

        return text
