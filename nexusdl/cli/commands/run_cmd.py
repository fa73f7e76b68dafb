"""``nexusdl run SOURCE [VARIANT]`` — process a configuration.

SOURCE is a configuration file if such a file exists, otherwise a project
id whose configuration VARIANT is requested from the configuration server.
"""

from __future__ import annotations

from pathlib import Path

import typer

from nexusdl.cli.output import configure_logging, console, effective_verbosity, execute
from nexusdl.config import DownloaderSettings
from nexusdl.core.config_loader import ConfigurationError, fetch_remote_config, load_config_file


def run_cmd(
    source: str = typer.Argument(
        ...,
        help="Configuration file, or project id on the configuration server.",
    ),
    variant: str = typer.Argument(
        "",
        help="Configuration variant on the server (default: default.json).",
    ),
    config_server: str = typer.Option(
        None,
        "--config-server",
        help="Configuration server host (overrides NEXUSDL_CONFIG_SERVER).",
    ),
    hostname: str = typer.Option(
        None,
        "--hostname",
        help="Host name reported to the configuration server.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="-v for debug output, -vv to include HTTP traffic.",
    ),
) -> None:
    """Download, verify, archive and link every artifact of a configuration."""
    settings = DownloaderSettings()
    configure_logging(verbose, settings)

    path = Path(source)
    try:
        if path.is_file():
            config = load_config_file(path, settings)
        else:
            config = fetch_remote_config(
                source,
                variant or None,
                server=config_server,
                hostname=hostname,
                settings=settings,
            )
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    configure_logging(effective_verbosity(verbose, config), settings)
    execute(config, settings)
