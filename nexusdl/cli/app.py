"""Main Typer application — registers the CLI commands.

Entry point: ``nexusdl`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from nexusdl.cli.commands.get_cmd import get_cmd
from nexusdl.cli.commands.run_cmd import run_cmd

app = typer.Typer(
    name="nexusdl",
    help="nexusdl: fetch, verify, archive and link Maven artifacts.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

app.command(name="run", help="Process a configuration file or server configuration.")(run_cmd)
app.command(name="get", help="Fetch a single artifact given on the command line.")(get_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
