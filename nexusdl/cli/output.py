"""Shared CLI plumbing — logging setup and batch execution with Rich output."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from nexusdl.config import DownloaderSettings
from nexusdl.core.orchestrator import Orchestrator
from nexusdl.models.config import DownloaderConfig

console = Console()

_PACKAGE_LOGGER = "nexusdl"


def configure_logging(verbosity: int, settings: DownloaderSettings) -> None:
    """Install a RichHandler on the ``nexusdl`` logger.

    ``0`` uses the configured ``log_level``, ``1`` DEBUG, ``2`` also turns
    on the HTTP client's debug output.
    """
    level = logging.DEBUG if verbosity > 0 else logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=verbosity > 0)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    http_level = logging.DEBUG if verbosity > 1 else logging.WARNING
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(http_level)


def effective_verbosity(cli_verbosity: int, config: DownloaderConfig) -> int:
    """Command-line ``-v`` flags win over the configuration's flags."""
    if cli_verbosity:
        return cli_verbosity
    if config.more_verbose:
        return 2
    return 1 if config.verbose else 0


def execute(config: DownloaderConfig, settings: DownloaderSettings) -> None:
    """Run every configured artifact; exit with code 1 on the first failure."""
    if not config.artifacts:
        console.print("[yellow]No artifacts configured.[/yellow]")
        return

    with Orchestrator(config, settings) as orchestrator:
        results = orchestrator.run()

    for result in results:
        if result.success:
            console.print(f"[green]{result.message}[/green]")
            continue
        kind = result.error_kind.value if result.error_kind else "ERROR"
        console.print(f"[bold red]{kind}[/bold red] {result.coordinates}: {result.message}")
        raise typer.Exit(code=1)
