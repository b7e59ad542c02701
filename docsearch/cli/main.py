"""docsearch CLI entry point."""

import typer

from docsearch.cli.chunk import chunk
from docsearch.cli.search import search

app = typer.Typer(
    name="docsearch",
    help="Chunk documents and retrieve the passages most relevant to a question.",
)

app.command(name="chunk")(chunk)
app.command(name="search")(search)


if __name__ == "__main__":
    app()
