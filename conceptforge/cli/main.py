"""ConceptForge CLI - Main application entry point.

Registers the commands of the ``conceptforge`` console script.
"""

from __future__ import annotations

import typer

from conceptforge.cli import concept_map

app = typer.Typer(
    name="conceptforge",
    help="Concept map generation from study notes",
    add_completion=False,
    pretty_exceptions_enable=False,
)


app.command("generate")(concept_map.command)


@app.command("version")
def version_command() -> None:
    """Show the ConceptForge version."""
    from conceptforge import __version__

    typer.echo(f"ConceptForge {__version__}")


def cli_main() -> None:
    """Entry point for console_scripts.

    This function is called when running 'conceptforge' command.
    """
    app()


if __name__ == "__main__":
    cli_main()
