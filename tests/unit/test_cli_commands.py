"""Unit tests for the CLI — command registration and exit codes.

Backends are served by the in-memory repository: the orchestrator used by
the CLI is swapped for one bound to the fake transport.
"""

from __future__ import annotations

import functools
import hashlib
import json
import logging

import pytest
from rich.logging import RichHandler
from typer.testing import CliRunner

from nexusdl.cli import output
from nexusdl.cli.app import app
from nexusdl.core.orchestrator import Orchestrator

runner = CliRunner()

BASE = "https://nexus.test/repository/releases/com/example/app"


@pytest.fixture
def cli_repo(fake_repo, monkeypatch, tmp_path):
    """Route CLI downloads through the fake repository, isolated from env files."""
    monkeypatch.chdir(tmp_path)
    for name in ("NEXUSDL_CONFIG_SERVER", "NEXUSDL_LOG_LEVEL", "NEXUSDL_CONFIG_SERVER_INSECURE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        output, "Orchestrator", functools.partial(Orchestrator, transport=fake_repo.transport)
    )
    return fake_repo


def serve_release(fake_repo, content: bytes = b"payload", sha1: str | None = None) -> None:
    url = f"{BASE}/1.0.0/app-1.0.0.jar"
    fake_repo.add(url, content)
    fake_repo.add_search_page({
        "items": [{
            "version": "1.0.0",
            "assets": [{
                "downloadUrl": url,
                "checksum": {"sha1": sha1 or hashlib.sha1(content).hexdigest()},
            }],
        }],
    })


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "run" in result.output
        assert "get" in result.output

    @pytest.mark.parametrize("command", ["run", "get"])
    def test_command_help(self, command):
        assert runner.invoke(app, [command, "--help"]).exit_code == 0


# ---------------------------------------------------------------------------
# Test: get
# ---------------------------------------------------------------------------


class TestGetCommand:
    ARGS = [
        "get", "--url", "https://nexus.test/", "--username", "deploy", "--password", "secret",
        "-g", "com.example", "-a", "app",
    ]

    def test_success_creates_link(self, cli_repo, tmp_path):
        serve_release(cli_repo)
        result = runner.invoke(app, [*self.ARGS, "--working-path", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "app.jar").is_symlink()
        assert (tmp_path / "app.jar").read_bytes() == b"payload"

    def test_failure_exits_one(self, cli_repo, tmp_path):
        cli_repo.add_search_page({"items": []})
        result = runner.invoke(app, [*self.ARGS, "--working-path", str(tmp_path)])
        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output

    def test_hash_mismatch_exits_one(self, cli_repo, tmp_path):
        serve_release(cli_repo, sha1="0" * 40)
        result = runner.invoke(app, [*self.ARGS, "--working-path", str(tmp_path)])
        assert result.exit_code == 1
        assert "INTERNAL_ERROR" in result.output

    def test_strategy_is_case_insensitive(self, cli_repo, tmp_path):
        result = runner.invoke(
            app, [*self.ARGS, "--strategy", "github_packages", "--working-path", str(tmp_path)]
        )
        # No GitHub repository configured, so the backend is missing.
        assert result.exit_code == 1
        assert "INTERNAL_ERROR" in result.output

    def test_group_id_required(self):
        result = runner.invoke(app, ["get", "-a", "app"])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# Test: run
# ---------------------------------------------------------------------------


class TestRunCommand:
    @staticmethod
    def write_config(tmp_path, **base) -> str:
        document = {
            "baseConfig": {
                "nexusUrl": "https://nexus.test/",
                "nexusUsername": "deploy",
                "nexusPassword": "secret",
                "basePath": str(tmp_path),
                **base,
            },
            "mavenArtifacts": [{"groupId": "com.example", "artifactId": "app", "type": "jar"}],
        }
        path = tmp_path / "downloader.json"
        path.write_text(json.dumps(document))
        return str(path)

    def test_config_file(self, cli_repo, tmp_path):
        serve_release(cli_repo)
        result = runner.invoke(app, ["run", self.write_config(tmp_path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "app.jar").is_symlink()

    def test_broken_config_file(self, cli_repo, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{}")
        result = runner.invoke(app, ["run", str(path)])
        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_unknown_source_without_server(self, cli_repo):
        result = runner.invoke(app, ["run", "some-project-id"])
        assert result.exit_code == 1
        assert "No configuration server" in result.output

    def test_verbose_flag_enables_debug(self, cli_repo, tmp_path):
        serve_release(cli_repo)
        result = runner.invoke(app, ["run", self.write_config(tmp_path), "-v"])
        assert result.exit_code == 0, result.output
        assert logging.getLogger("nexusdl").level == logging.DEBUG


class TestLoggingSetup:
    def test_single_rich_handler(self, settings):
        output.configure_logging(0, settings)
        output.configure_logging(1, settings)
        handlers = [h for h in logging.getLogger("nexusdl").handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logging.getLogger("nexusdl").level == logging.DEBUG

    def test_http_debug_only_when_very_verbose(self, settings):
        output.configure_logging(1, settings)
        assert logging.getLogger("httpx").level == logging.WARNING
        output.configure_logging(2, settings)
        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_config_flags_used_without_cli_flags(self, make_config):
        assert output.effective_verbosity(0, make_config(more_verbose=True)) == 2
        assert output.effective_verbosity(0, make_config(verbose=True)) == 1
        assert output.effective_verbosity(1, make_config(more_verbose=True)) == 1
