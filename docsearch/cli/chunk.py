"""CLI command for previewing how a document is chunked."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from config.settings import get_settings
from docsearch.errors import InvalidParameterError
from docsearch.ingestion.chunker import chunk_text
from docsearch.models.enums import SourceType

console = Console()
app = typer.Typer()


@app.command()
def chunk(
    file: Annotated[
        Path,
        typer.Argument(help="Text file to chunk", exists=True, dir_okay=False, readable=True),
    ],
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Target chunk size in characters"),
    ] = None,
    chunk_overlap: Annotated[
        int | None,
        typer.Option("--overlap", "--chunk-overlap", help="Overlap between chunks in characters"),
    ] = None,
    min_chunk_size: Annotated[
        int | None,
        typer.Option("--min-chunk-size", help="Drop inner chunks shorter than this"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Split a text file into chunks and show the resulting windows."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    text = file.read_text(encoding="utf-8", errors="replace")

    try:
        chunks = chunk_text(
            text,
            chunk_size=chunk_size if chunk_size is not None else settings.docsearch_chunk_size,
            overlap=chunk_overlap if chunk_overlap is not None else settings.docsearch_chunk_overlap,
            min_chunk_size=min_chunk_size if min_chunk_size is not None else settings.docsearch_min_chunk_size,
            source_id=str(file),
            source_type=SourceType.TEXT,
        )
    except InvalidParameterError as e:
        console.print(f"[bold red]Invalid chunking parameters:[/bold red] {e}")
        raise typer.Exit(1)

    if not chunks:
        console.print("[yellow]No text to chunk.[/yellow]")
        return

    table = Table(title=f"{len(chunks)} chunks from {file.name}")
    table.add_column("#", justify="right")
    table.add_column("Range")
    table.add_column("Chars", justify="right")
    table.add_column("Preview")
    for c in chunks:
        preview = c.text[:60] + ("..." if len(c.text) > 60 else "")
        table.add_row(str(c.chunk_index), f"{c.start_char}-{c.end_char}", str(len(c)), Text(preview))
    console.print(table)
