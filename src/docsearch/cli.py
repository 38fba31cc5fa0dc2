"""Command line interface for docsearch."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from docsearch.config import SearchConfig
from docsearch.index.search import ResultList, SearchController, SearchResult
from docsearch.utils.text import MARK_CLOSE, MARK_OPEN
from docsearch.web.app import create_app


console = Console()
app = typer.Typer(help="docsearch - search a static documentation site")

QUIT_COMMAND = ":q"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _build_config(site: Optional[Path], url: Optional[str], literal: bool) -> SearchConfig:
    if site is not None and url is not None:
        raise typer.BadParameter("Use either --site or --url, not both")
    return SearchConfig(site_dir=site, base_url=url, fuzzy=not literal)


def _to_rich(markup: str) -> str:
    """Render highlight markers as reverse video for the console."""
    return escape(markup).replace(MARK_OPEN, "[reverse]").replace(MARK_CLOSE, "[/reverse]")


def _print_results(results: ResultList) -> None:
    matches = [result for result in results if isinstance(result, SearchResult)]
    if not matches:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Title")
    table.add_column("Target")
    table.add_column("Snippet")

    for result in matches:
        score = "-" if result.score is None else f"{result.score:.4f}"
        snippet = result.snippet.replace("\n", " ")
        table.add_row(score, _to_rich(result.title), result.target, _to_rich(snippet))

    console.print(table)


async def _prepare(controller: SearchController) -> None:
    if not await controller.wait_ready():
        console.print("[yellow]Search index unavailable, searches will return no results.[/yellow]")


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    site: Path = typer.Option(None, "--site", help="Built site directory"),
    url: str = typer.Option(None, "--url", help="Base URL of a deployed site"),
    literal: bool = typer.Option(False, "--literal", help="Use literal substring matching"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search the site index once and print the results."""
    _setup_logging(verbose)
    config = _build_config(site, url, literal)
    if not query.strip():
        console.print("[yellow]Empty query.[/yellow]")
        return

    controller = SearchController.from_config(config)

    async def _search() -> ResultList:
        await _prepare(controller)
        try:
            return controller.query_changed(query)
        finally:
            controller.dispose()

    _print_results(asyncio.run(_search()))


@app.command()
def interactive(
    site: Path = typer.Option(None, "--site", help="Built site directory"),
    url: str = typer.Option(None, "--url", help="Base URL of a deployed site"),
    literal: bool = typer.Option(False, "--literal", help="Use literal substring matching"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Read queries line by line and print results for each."""
    _setup_logging(verbose)
    config = _build_config(site, url, literal)
    controller = SearchController.from_config(config)

    async def _session() -> None:
        await _prepare(controller)
        console.print(f"Type a query, {QUIT_COMMAND} or Ctrl-D to quit.")
        try:
            while True:
                try:
                    line = await asyncio.to_thread(console.input, "[bold]search>[/bold] ")
                except EOFError:
                    break
                if line.strip() == QUIT_COMMAND:
                    break
                results = controller.query_changed(line)
                if controller.query:
                    _print_results(results)
        finally:
            controller.dispose()

    asyncio.run(_session())


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    site: Path = typer.Option(None, "--site", help="Built site directory"),
    url: str = typer.Option(None, "--url", help="Base URL of a deployed site"),
    literal: bool = typer.Option(False, "--literal", help="Use literal substring matching"),
) -> None:
    """Start the search web service."""
    config = _build_config(site, url, literal)
    source = config.resolve_index_source(Path.cwd())
    if isinstance(source, Path) and not source.exists():
        console.print(f"[yellow]Warning: search index not found at {source}, searches will be empty.[/yellow]")

    console.print(f"Starting search service on http://{host}:{port} (index: {source})")
    uvicorn.run(
        create_app(config),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
