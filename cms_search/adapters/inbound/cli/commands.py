"""CLI interface for CMS semantic search."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ....common.exception_handler import format_exception_json, get_error_code, log_exception
from ....composition.container import Container, build_container
from ....config import settings
from ....config.logging import get_logger, setup_logging
from ....core.domain import IndexStatus, SearchQuery
from .progress import SyncProgress

app = typer.Typer(
    name="cms-search",
    help="Semantic and visual search over headless CMS content",
    add_completion=False,
)

console = Console(force_terminal=True, legacy_windows=False)
logger = get_logger("cli")

T = TypeVar("T")


def handle_cli_error(exc: Exception) -> None:
    """Display an error; full JSON in debug mode, a short summary otherwise.

    Args:
        exc: The exception to handle.
    """
    log_exception(exc, log=logger, level=logging.DEBUG)
    error_data = format_exception_json(exc, include_trace=settings.debug)

    if settings.debug:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    console.print(f"\n[red]Error [{get_error_code(exc)}]:[/] {error_data['error']}")
    if error_data.get("details") and error_data["details"] != error_data["error"]:
        console.print(f"[dim]Details: {error_data['details']}[/]")
    location = error_data.get("location") or {}
    if location:
        loc_str = f"{location.get('file', '?')}:{location.get('line', '?')} in {location.get('method', '?')}"
        console.print(f"[dim]Location: {loc_str}[/]")
    console.print("[dim]Set DEBUG=true for full details[/]")


def run_with_container(operation: Callable[[Container], Awaitable[T]]) -> T:
    """Build the container, run ``operation`` on the event loop, then close it."""

    async def runner() -> T:
        container = build_container(settings)
        try:
            return await operation(container)
        finally:
            await container.aclose()

    try:
        return asyncio.run(runner())
    except Exception as exc:
        handle_cli_error(exc)
        raise typer.Exit(1) from exc


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")) -> None:
    setup_logging(level="DEBUG" if verbose else settings.log_level, json_format=settings.log_json)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(8000, help="Port"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    console.print(f"[bold]Starting CMS search API on {host}:{port}[/]")
    uvicorn.run("cms_search.adapters.inbound.api.main:app", host=host, port=port, reload=reload)


@app.command()
def status() -> None:
    """Show configured features and vector index statistics."""
    console.print("[bold]CMS Semantic Search Status[/]\n")

    checks = [
        (bool(settings.google_api_key), "Google API key", "GOOGLE_API_KEY"),
        (bool(settings.qdrant_url), "Qdrant URL", "QDRANT_URL"),
        (
            bool(settings.contentstack_api_key and settings.contentstack_delivery_token),
            "Contentstack delivery credentials",
            "CONTENTSTACK_API_KEY / CONTENTSTACK_DELIVERY_TOKEN",
        ),
        (bool(settings.webhook_password), "Webhook password", "WEBHOOK_PASSWORD"),
    ]
    for ok, label, env_name in checks:
        if ok:
            console.print(f"[green]OK[/] {label} configured")
        else:
            console.print(f"[red]--[/] {label} not set (set {env_name} in .env)")

    analysis = "enabled" if settings.image_analysis_configured else "disabled"
    console.print(f"\nImage analysis: [bold]{analysis}[/]")
    console.print(f"Region: {settings.contentstack_region} ({settings.contentstack_host})")

    if not settings.qdrant_url:
        return

    async def describe(container: Container) -> dict[str, Any]:
        return await container.vector_store.describe()

    stats = run_with_container(describe)
    console.print(f"\n[bold]Vector index ({stats.get('collection')}):[/]")
    console.print(f"  Records: {stats.get('totalVectorCount', 0)}")
    console.print(f"  Dimension: {stats.get('dimension')}")
    console.print(f"  Status: {stats.get('status')}")
    if not stats.get("hasData"):
        console.print("\n[yellow]Index is empty. Run 'cms-search sync' to index content.[/]")


@app.command()
def search(
    query: str = typer.Argument(..., help="Natural-language query"),
    content_type: list[str] = typer.Option([], "--type", "-t", help="Restrict to a display category"),
    locale: list[str] = typer.Option([], "--locale", "-l", help="Restrict to a locale"),
    limit: int = typer.Option(10, help="Number of results to show"),
) -> None:
    """Search indexed content from the terminal."""
    request = SearchQuery(query=query, content_types=content_type, locales=locale)

    async def run(container: Container):
        return await container.search_service.search(request)

    with console.status("[bold green]Searching...[/]"):
        response = run_with_container(run)

    context = response.search_context
    if context.is_visual_query:
        keywords = ", ".join(context.matched_visual_keywords)
        console.print(
            f"[magenta]Visual query[/] (confidence {context.visual_confidence:.2f}: {keywords})"
        )

    table = Table(title=f"{response.total_results} results in {response.search_time_ms}ms")
    table.add_column("#", justify="right")
    table.add_column("Title", style="bold")
    table.add_column("Type", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Images", justify="right")
    table.add_column("Snippet", style="dim", overflow="fold")
    for position, result in enumerate(response.results[:limit], start=1):
        images = str(result.image_count) if result.has_images else "-"
        if result.image_analyzed:
            images += " (AI)"
        table.add_row(
            str(position),
            result.title,
            result.type,
            f"{result.relevance:.3f}",
            images,
            result.snippet[:120],
        )
    console.print(table)


@app.command()
def reindex(
    content_type: str = typer.Argument(..., help="CMS content type uid"),
    entry_uid: str = typer.Argument(..., help="Entry uid"),
    locale: str = typer.Option(None, help="Entry locale (defaults to DEFAULT_LOCALE)"),
) -> None:
    """Fetch one entry from the CMS and reindex it."""
    target_locale = locale or settings.default_locale

    async def run(container: Container):
        return await container.sync_service.reindex_entry(content_type, entry_uid, target_locale)

    with console.status(f"[bold green]Reindexing {content_type}:{entry_uid}...[/]"):
        outcome = run_with_container(run)

    if outcome.status is IndexStatus.SKIPPED:
        console.print(f"[yellow]Skipped {outcome.record_id}: {outcome.reason}[/]")
        return
    mapped = outcome.mapped_type.value if outcome.mapped_type else "?"
    console.print(
        f"[green]Indexed {outcome.record_id}[/] as {mapped} "
        f"({outcome.image_count} images, analyzed={outcome.image_analyzed})"
    )


@app.command()
def sync(
    content_type: list[str] = typer.Option(
        [], "--type", "-t", help="Content types to sync (defaults to SYNC_CONTENT_TYPES)"
    ),
    locale: str = typer.Option(None, help="Locale to sync (defaults to DEFAULT_LOCALE)"),
) -> None:
    """Reindex every entry of the configured content types."""
    targets = content_type or settings.sync_content_types
    target_locale = locale or settings.default_locale
    progress = SyncProgress(console)

    console.print(f"[bold]Syncing {', '.join(targets)} ({target_locale})[/]")
    if not settings.image_analysis_configured:
        console.print("[yellow]Image analysis disabled; indexing text only[/]")

    async def run(container: Container) -> None:
        await container.sync_service.sync_all(
            targets,
            target_locale,
            on_start=progress.start_content_type,
            on_report=progress.add,
        )

    run_with_container(run)
    if not progress.reports:
        console.print("[yellow]None of the requested content types exist in the CMS.[/]")
        return
    progress.finish()


@app.command("analyze-image")
def analyze_image(
    image_url: str = typer.Argument(..., help="Image URL"),
    query: str = typer.Option(None, help="Search query used as context"),
) -> None:
    """Describe an image with the configured vision model."""

    async def run(container: Container):
        container.image_analyzer.require_enabled()
        return await container.image_analyzer.analyze(image_url, query=query)

    with console.status("[bold green]Analyzing image...[/]"):
        result = run_with_container(run)

    console.print(Panel(result.caption or "Unable to analyze image", title=image_url, border_style="magenta"))


if __name__ == "__main__":
    app()
