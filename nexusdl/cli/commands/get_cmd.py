"""``nexusdl get`` — fetch a single artifact described by options."""

from __future__ import annotations

from pathlib import Path

import typer

from nexusdl.cli.output import configure_logging, console, execute
from nexusdl.config import DownloaderSettings
from nexusdl.core.config_loader import ConfigurationError, config_from_options
from nexusdl.models.artifacts import RepositoryStrategy
from nexusdl.models.config import DEFAULT_KEEP_COUNT, SnapshotResolution


def get_cmd(
    url: str = typer.Option("", "--url", help="Repository URL (Nexus, or a Maven mirror)."),
    username: str = typer.Option("", "--username", help="Nexus user or GitHub owner."),
    password: str = typer.Option("", "--password", help="Nexus password or GitHub token."),
    group_id: str = typer.Option(..., "--group-id", "-g", help="Maven group id."),
    artifact_id: str = typer.Option(..., "--artifact-id", "-a", help="Maven artifact id."),
    repository: str = typer.Option("releases", "--repository", "-r", help="Repository name."),
    artifact_type: str = typer.Option(
        "jar", "--type", "-t", help="Type, e.g. 'jar' or 'runnable.jar'."
    ),
    version: str = typer.Option(None, "--version", help="Fixed version; latest if omitted."),
    strategy: RepositoryStrategy = typer.Option(
        RepositoryStrategy.NEXUS, "--strategy", case_sensitive=False, help="Repository backend."
    ),
    github_repo: str = typer.Option("", "--github-repo", help="GitHub repository hosting packages."),
    snapshot_resolution: SnapshotResolution = typer.Option(
        SnapshotResolution.TIMESTAMP,
        "--snapshot-resolution",
        case_sensitive=False,
        help="How GitHub Packages snapshot builds are chosen.",
    ),
    delete: bool = typer.Option(False, "--delete", help="Delete old archive entries."),
    count: int = typer.Option(DEFAULT_KEEP_COUNT, "--count", help="Archive entries to keep."),
    relative_symlink: bool = typer.Option(
        False, "--relative-symlink", help="Create relative instead of absolute links."
    ),
    working_path: Path = typer.Option(Path("."), "--working-path", help="Working root."),
    verbose: int = typer.Option(
        0, "--verbose", "-v", count=True, help="-v for debug output, -vv to include HTTP traffic."
    ),
) -> None:
    """Download, verify, archive and link one artifact."""
    settings = DownloaderSettings()
    configure_logging(verbose, settings)

    try:
        config = config_from_options(
            url=url,
            username=username,
            password=password,
            group_id=group_id,
            artifact_id=artifact_id,
            repository=repository,
            type_=artifact_type,
            version=version,
            strategy=strategy,
            delete_old_entries=delete,
            keep_count=count,
            relative_symlinks=relative_symlink,
            working_path=working_path,
            verbose=verbose > 0,
            more_verbose=verbose > 1,
            github_repo=github_repo,
            snapshot_resolution=snapshot_resolution,
            settings=settings,
        )
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc}")
        raise typer.Exit(code=1) from exc

    execute(config, settings)
