"""CLI entry point for claude-code-share."""

import logging
from pathlib import Path

import click
import uvicorn

from .config import DEFAULT_HOST, DEFAULT_PORT, get_log_dir
from .network import lan_addresses
from .server import create_app

logger = logging.getLogger(__name__)


@click.group()
def main():
    """Share Claude Code conversation logs over a read-only web view."""
    pass


@main.command()
@click.option("--port", default=DEFAULT_PORT, help="HTTP server port.")
@click.option("--host", default=DEFAULT_HOST, help="HTTP server host.")
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Path to Claude Code projects directory.",
)
@click.option("--verbose", is_flag=True, help="Enable debug logging.")
def serve(port: int, host: str, log_dir: Path | None, verbose: bool):
    """Start the web interface."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log_dir = log_dir or get_log_dir()

    _print_startup_info(port, log_dir)
    logger.info("Starting server on %s:%d (log dir %s)", host, port, log_dir)
    uvicorn.run(create_app(log_dir), host=host, port=port, reload=False)


def _print_startup_info(port: int, log_dir: Path):
    click.echo("claude-code-share")
    click.echo(f"  Log directory: {log_dir}")
    click.echo(f"  Local:         http://localhost:{port}")
    for addr in lan_addresses():
        click.echo(f"  Network:       http://{addr.ip}:{port} ({addr.interface})")
    click.echo()
