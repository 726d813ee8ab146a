"""Generate command - build a concept map from study files.

Reads text/markdown files as source documents (optionally with flashcards
from JSON), runs the concept-map pipeline, prints the concepts as a table
and exports the map to JSON or Mermaid.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from conceptforge.cli.base import ConceptForgeCommand
from conceptforge.cli.console import is_verbose_mode, set_verbose_mode
from conceptforge.conceptmap.builder import ConceptMapBuilder
from conceptforge.conceptmap.models import ConceptMap
from conceptforge.core.config import Config, load_config
from conceptforge.core.logging import configure_logging, get_logger
from conceptforge.study.models import SourceDocument, load_document, load_flashcards
from conceptforge.viz.graph_export import ConceptMapExporter

logger = get_logger(__name__)

MAX_INPUT_FILES = 100


class GenerateCommand(ConceptForgeCommand):
    """Build a concept map from study files."""

    def execute(
        self,
        files: List[Path],
        title: Optional[str] = None,
        flashcards: Optional[Path] = None,
        output: Optional[Path] = None,
        config_path: Optional[Path] = None,
        seed: Optional[int] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        iterations: Optional[int] = None,
        provider: Optional[str] = None,
    ) -> int:
        """
        Generate a concept map.

        Rule #4: Function under 60 lines
        """
        try:
            if not files:
                self.print_error("At least one input file is required")
                return 1
            if len(files) > MAX_INPUT_FILES:
                self.print_error(f"Too many input files (max {MAX_INPUT_FILES})")
                return 1

            if output is not None:
                ConceptMapExporter.check_format(output)

            config = load_config(config_path)
            if not is_verbose_mode():
                configure_logging(level=config.log_level)
            self._apply_layout_overrides(config, seed, width, height, iterations)

            documents = self._load_documents(files, flashcards)
            map_title = title or files[0].stem

            builder = ConceptMapBuilder.from_config(config, provider)
            concept_map = asyncio.run(
                builder.generate_concept_map(map_title, documents)
            )

            if concept_map.is_empty:
                self.print_warning("No recurring concepts found in the input")
            else:
                self._display_concepts(concept_map)

            if output:
                path = ConceptMapExporter().export(concept_map, output)
                self.print_success(f"Concept map saved to {path}")

            return 0

        except Exception as e:
            return self.handle_error(e, "Concept map generation failed")

    def _apply_layout_overrides(
        self,
        config: Config,
        seed: Optional[int],
        width: Optional[float],
        height: Optional[float],
        iterations: Optional[int],
    ) -> None:
        """Copy command-line layout options over the loaded config."""
        if seed is not None:
            config.layout.seed = seed
        if width is not None:
            config.layout.width = width
        if height is not None:
            config.layout.height = height
        if iterations is not None:
            config.layout.iterations = iterations

    def _load_documents(
        self, files: List[Path], flashcards: Optional[Path]
    ) -> List[SourceDocument]:
        """Read input files; flashcards are attached to the first document."""
        documents = [load_document(path) for path in files]
        if flashcards is not None:
            cards = load_flashcards(flashcards)
            documents[0].generated_cards.extend(cards)
            logger.debug("Attached flashcards", count=len(cards))
        return documents

    def _display_concepts(self, concept_map: ConceptMap) -> None:
        """Print concepts in rank order."""
        table = Table(
            title=f"{concept_map.title}: {len(concept_map.nodes)} concepts, "
            f"{len(concept_map.edges)} relationships",
            show_lines=False,
        )
        table.add_column("Concept", style="yellow")
        table.add_column("Type", style="cyan")
        table.add_column("Importance", justify="right")
        table.add_column("Connections", justify="right")

        for node in concept_map.nodes:
            table.add_row(
                node.name,
                node.entity_type.value,
                f"{node.importance:.2f}",
                str(concept_map.connection_count(node.id)),
            )

        self.console.print(table)


def command(
    files: List[Path] = typer.Argument(
        ..., exists=True, dir_okay=False, readable=True, help="Text or markdown files"
    ),
    title: Optional[str] = typer.Option(
        None, "--title", "-t", help="Map title (defaults to the first file name)"
    ),
    flashcards: Optional[Path] = typer.Option(
        None,
        "--flashcards",
        "-f",
        exists=True,
        dir_okay=False,
        help="JSON list of {question, answer} flashcards",
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output file (.json, .md or .mmd)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="Config file"
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for a reproducible layout"
    ),
    width: Optional[float] = typer.Option(
        None, "--width", min=201, help="Canvas width"
    ),
    height: Optional[float] = typer.Option(
        None, "--height", min=201, help="Canvas height"
    ),
    iterations: Optional[int] = typer.Option(
        None, "--iterations", min=0, help="Layout iterations"
    ),
    provider: Optional[str] = typer.Option(
        None, "--provider", "-p", help="LLM provider (ollama or claude)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Debug logging and full tracebacks"
    ),
) -> None:
    """Generate a concept map from study notes.

    Extracts recurring concepts, defines them with the configured LLM,
    infers relationships between them and lays the graph out.

    Examples:
        # Print the concepts
        conceptforge generate biology.md

        # Save as D3 JSON with a fixed layout
        conceptforge generate biology.md --seed 7 -o biology.json

        # Mermaid diagram with flashcards linked
        conceptforge generate ch1.md ch2.md -f cards.json -o map.md
    """
    if verbose:
        configure_logging(level="DEBUG")
        set_verbose_mode(True)

    cmd = GenerateCommand()
    exit_code = cmd.execute(
        files,
        title=title,
        flashcards=flashcards,
        output=output,
        config_path=config,
        seed=seed,
        width=width,
        height=height,
        iterations=iterations,
        provider=provider,
    )
    if exit_code != 0:
        raise typer.Exit(code=exit_code)
