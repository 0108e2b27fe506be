"""CLI entrypoint for the stamp tour service."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import httpx
import typer

from . import __version__
from .config import get_settings
from .logging_utils import configure_logging
from .tour.catalog import load_catalog

app = typer.Typer(help="Stamp tour service command line interface")

logger = logging.getLogger(__name__)


@app.command()
def show_config() -> None:
    """Print the active configuration."""

    settings = get_settings()
    typer.echo(settings.model_dump_json(indent=2))


@app.command()
def serve(
    address: Optional[str] = typer.Option(None, "--address", "-a", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
    protocol: Optional[str] = typer.Option(None, "--protocol", help="Protocol shown in the startup banner"),
    log_file: Optional[Path] = typer.Option(None, help="Optional rotating log file"),
) -> None:
    """Load the catalog and snapshots, then run the HTTP server."""

    import uvicorn

    from .main import create_app

    overrides = {
        key: value
        for key, value in {"host": address, "port": port, "protocol": protocol, "log_file": log_file}.items()
        if value is not None
    }
    settings = get_settings().model_copy(update=overrides)
    configure_logging(settings.log_file, settings.log_level)

    logger.info(
        "[ version ]: %s | Python %s FastAPI server started at %s://%s:%s",
        __version__,
        settings.protocol,
        settings.protocol,
        settings.host,
        settings.port,
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@app.command()
def admin(
    command: str = typer.Argument(..., help='Operator command, e.g. "stamp status" or "save all"'),
    url: str = typer.Option("http://127.0.0.1:80/admin", help="Admin endpoint of a running server"),
    timeout: float = typer.Option(10.0, help="Request timeout in seconds"),
) -> None:
    """Send an operator command to a running server."""

    try:
        response = httpx.post(url, json={"command": command}, timeout=timeout)
    except httpx.HTTPError as exc:
        typer.echo(f"Request to {url} failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    if response.status_code != 200:
        typer.echo(f"Server answered {response.status_code}", err=True)
        raise typer.Exit(code=1)

    payload = response.json()
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    if not payload.get("ok", True):
        raise typer.Exit(code=1)


@app.command()
def catalog(path: Optional[Path] = typer.Argument(None, help="Catalog JSON, defaults to the configured one")) -> None:
    """List the checkpoints the server would load."""

    checkpoints = load_catalog(path or get_settings().resolved_catalog_path)
    for checkpoint in checkpoints.values():
        typer.echo(f"{checkpoint.id}\t{checkpoint.name}\t{checkpoint.location}")
    typer.echo(f"{len(checkpoints)} checkpoints")


if __name__ == "__main__":
    app()
