"""CLI command for searching a set of documents with a natural language query."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from config.settings import get_settings
from docsearch.embedding.sentence_transformer import SentenceTransformerEmbeddingProvider
from docsearch.errors import DocSearchError
from docsearch.ingestion.pipeline import ingest_documents
from docsearch.models.document import SourceDocument
from docsearch.models.enums import RetrievalStatus, SourceType
from docsearch.retrieval.retriever import Retriever
from docsearch.vectorstore.memory_store import InMemoryVectorIndex

console = Console()
app = typer.Typer()

logger = logging.getLogger(__name__)


def _load_documents(files: list[Path]) -> list[SourceDocument]:
    return [
        SourceDocument(
            source_id=str(path.resolve()),
            source_type=SourceType.TEXT,
            text=path.read_text(encoding="utf-8", errors="replace"),
            title=path.name,
        )
        for path in files
    ]


def _resolve_sources(sources: list[str] | None, files: list[Path]) -> list[str] | None:
    """Map --source values onto indexed source ids by path, falling back to file name."""
    if not sources:
        return None
    indexed = {str(path.resolve()): path.name for path in files}
    resolved = []
    for source in sources:
        source_id = str(Path(source).resolve())
        if source_id in indexed:
            resolved.append(source_id)
            continue
        matches = [sid for sid, name in indexed.items() if name == source]
        if not matches:
            logger.warning("--source %s does not match any indexed file", source)
        resolved.extend(matches)
    return resolved or [str(Path(s).resolve()) for s in sources]


@app.command()
def search(
    query: Annotated[
        str,
        typer.Argument(help="Natural language query"),
    ],
    files: Annotated[
        list[Path],
        typer.Option("--file", "-f", help="Text file to index (repeatable)", exists=True, dir_okay=False),
    ],
    top_k: Annotated[
        int | None,
        typer.Option("--top-k", "-k", help="Maximum number of chunks to return"),
    ] = None,
    min_score: Annotated[
        float | None,
        typer.Option("--min-score", help="Minimum cosine similarity"),
    ] = None,
    sources: Annotated[
        list[str] | None,
        typer.Option("--source", "-s", help="Only search chunks from these files (repeatable)"),
    ] = None,
    show_context: Annotated[
        bool,
        typer.Option("--context", help="Print the assembled prompt context"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Index the given files in memory and retrieve the chunks most relevant to QUERY."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    index = InMemoryVectorIndex()

    try:
        with console.status("[bold green]Loading embedding model..."):
            embedder = SentenceTransformerEmbeddingProvider(
                model_name=settings.docsearch_embedding_model,
                query_prefix=settings.docsearch_query_prefix,
            )

        with console.status("[bold green]Indexing documents..."):
            summary = ingest_documents(
                _load_documents(files),
                index,
                embedder,
                chunk_size=settings.docsearch_chunk_size,
                chunk_overlap=settings.docsearch_chunk_overlap,
                min_chunk_size=settings.docsearch_min_chunk_size,
            )
        logger.info("Ingestion summary: %s", summary)

        retriever = Retriever(index, embedder)
        result = retriever.retrieve(
            query,
            top_k=top_k if top_k is not None else settings.docsearch_top_k,
            min_score=min_score if min_score is not None else settings.docsearch_min_score,
            source_filter=_resolve_sources(sources, files),
        )
    except DocSearchError as e:
        console.print(f"[bold red]Search failed:[/bold red] {e}")
        raise typer.Exit(1)

    stats = index.stats()
    console.print(
        f"Indexed {stats.total_entries} chunks from {stats.total_sources} sources "
        f"({stats.average_dimensions} dims, {summary['errors']} errors)"
    )

    if result.status is RetrievalStatus.NO_DATA:
        console.print("[bold red]No data available.[/bold red] None of the files produced any chunks.")
        raise typer.Exit(1)
    if result.status is RetrievalStatus.NO_MATCHES:
        console.print("[yellow]No chunks matched the query above the score threshold.[/yellow]")
        return

    table = Table(title=f"Results for: {query}")
    table.add_column("Rank", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Source")
    table.add_column("Chunk", justify="right")
    table.add_column("Preview")
    for item in result.items:
        preview = item.chunk.text[:80] + ("..." if len(item.chunk.text) > 80 else "")
        table.add_row(
            str(item.rank),
            f"{item.score:.3f}",
            Path(item.chunk.source_id).name,
            str(item.chunk.chunk_index),
            Text(preview),
        )
    console.print(table)

    if show_context:
        console.print(Panel(Text(result.context), title="Context", border_style="blue"))
