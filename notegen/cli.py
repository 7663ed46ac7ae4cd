"""CLI entry points: `notegen serve`, `notegen generate` and config commands."""

from __future__ import annotations

import asyncio
import json
import logging

import typer
from rich.console import Console
from rich.table import Table

from notegen.config import NotegenConfig, load_config, mask_secret, save_config
from notegen.generation.handler import GenerationHandler, HandlerResponse
from notegen.generation.invoker import make_client
from notegen.store.base import backend_name, get_store

app = typer.Typer(name="notegen", help="Generate notebook content from its sources.")
console = Console()


def _setup_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to serve on"),
) -> None:
    """Start the notegen HTTP server."""
    import uvicorn

    config = load_config()
    _setup_logging(config.server.log_level)
    if not config.generation.is_configured:
        console.print("[yellow]Generation service not configured; requests will fail until it is.[/yellow]")

    bind_host = host or config.server.host
    bind_port = port or config.server.port
    console.print(f"[bold]Starting notegen on {bind_host}:{bind_port}...[/bold]")
    uvicorn.run("notegen.server:app", host=bind_host, port=bind_port, reload=False)


@app.command()
def generate(
    notebook_id: str = typer.Argument(help="Notebook to generate content for"),
    source_type: str = typer.Option(..., "--source-type", "-t", help="text, website, pdf, audio, ..."),
    file_path: str | None = typer.Option(None, "--file-path", "-f", help="File reference for file-backed sources"),
) -> None:
    """Run one generation request and print the outcome."""
    config = load_config()
    _setup_logging(config.server.log_level)

    body = {"notebookId": notebook_id, "sourceType": source_type}
    if file_path:
        body["filePath"] = file_path
    response = asyncio.run(_generate(config, json.dumps(body)))

    if response.status_code != 200:
        console.print(f"[red]Error ({response.status_code}):[/red] {response.body.get('error')}")
        raise typer.Exit(1)

    t = Table(title=f"Notebook {notebook_id}", show_header=False)
    t.add_column("Field", style="cyan")
    t.add_column("Value")
    t.add_row("Title", str(response.body["title"]))
    t.add_row("Description", str(response.body["description"] or ""))
    t.add_row("Icon", str(response.body["icon"]))
    t.add_row("Color", str(response.body["color"]))
    for i, question in enumerate(response.body["exampleQuestions"], start=1):
        t.add_row(f"Question {i}", question)
    console.print(t)
    console.print(f"[green]{response.body['message']}[/green]")


async def _generate(config: NotegenConfig, raw: str) -> HandlerResponse:
    store = get_store(config.store)
    async with make_client(config.generation) as client:
        return await GenerationHandler(config.generation, store, client).handle(raw)


@app.command()
def configure(
    url: str | None = typer.Option(None, "--url", help="Generation service endpoint"),
    auth: str | None = typer.Option(None, "--auth", help="Authorization header value for the generation service"),
    store_url: str | None = typer.Option(None, "--store-url", help="postgres://, https:// or file:// store URL"),
    store_key: str | None = typer.Option(None, "--store-key", help="Store service credential"),
) -> None:
    """Update the saved configuration file."""
    config = load_config(env={})
    if url is not None:
        config.generation.url = url
    if auth is not None:
        config.generation.auth = auth
    if store_url is not None:
        config.store.url = store_url
    if store_key is not None:
        config.store.key = store_key

    try:
        backend_name(config.store)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    save_config(config)
    console.print("[green]Configuration saved.[/green]")


@app.command("show-config")
def show_config() -> None:
    """Print the effective configuration with secrets masked."""
    config = load_config()
    t = Table(show_header=False)
    t.add_column("Setting", style="cyan")
    t.add_column("Value")
    t.add_row("generation.url", config.generation.url or "[red]missing[/red]")
    t.add_row("generation.auth", mask_secret(config.generation.auth) or "[red]missing[/red]")
    timeout = config.generation.timeout_seconds
    t.add_row("generation.timeout_seconds", "none" if timeout is None else str(timeout))
    t.add_row("store.url", config.store.url or "(default file store)")
    t.add_row("store.key", mask_secret(config.store.key))
    t.add_row("server", f"{config.server.host}:{config.server.port}")
    console.print(t)


def main() -> None:
    app()
