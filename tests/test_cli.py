"""Tests for the gatehouse Typer CLI."""

from __future__ import annotations

import json
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import pytest
from typer.testing import CliRunner

from gatehouse import __version__
from gatehouse.app import app


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "gatehouse.json"
    path.write_text(
        json.dumps(
            {
                "oauth_client_id": "client-123",
                "oauth_client_secret": "secret-456",
                "oauth_scopes": ["user:email"],
                "oauth_callback_url": "/auth/callback",
            }
        ),
        encoding="utf-8",
    )
    return path


def _query(url: str) -> dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlsplit(url).query).items()}


class TestVersion:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestConfigCommands:
    def test_show_redacts_secret(
        self, cli_runner: CliRunner, isolated_config: Path, config_file: Path
    ) -> None:
        result = cli_runner.invoke(app, ["--json", "--config", str(config_file), "config", "show"])
        assert result.exit_code == 0, result.output
        assert "secret-456" not in result.stdout
        data = json.loads(result.stdout[result.stdout.index("{") :])
        assert data["oauth_client_id"] == "client-123"
        assert data["oauth_client_secret"] == "********"

    def test_validate_ok(
        self, cli_runner: CliRunner, isolated_config: Path, config_file: Path
    ) -> None:
        result = cli_runner.invoke(app, ["--config", str(config_file), "config", "validate"])
        assert result.exit_code == 0, result.output

    def test_validate_reports_problems(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "validate"])
        assert result.exit_code == 2
        assert "oauth_client_id" in result.output

    def test_missing_config_file(
        self, cli_runner: CliRunner, isolated_config: Path, tmp_path: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["--config", str(tmp_path / "missing.json"), "config", "show"]
        )
        assert result.exit_code == 2


class TestAuthorizeUrl:
    def test_prints_provider_url(
        self, cli_runner: CliRunner, isolated_config: Path, config_file: Path
    ) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--config",
                str(config_file),
                "authorize-url",
                "https://app.example.com/dashboard",
                "--state",
                "abc123",
            ],
        )
        assert result.exit_code == 0, result.output
        location = result.stdout.strip()
        assert location.startswith("https://github.com/login/oauth/authorize?")
        assert _query(location) == {
            "response_type": "code",
            "client_id": "client-123",
            "redirect_uri": "https://app.example.com/auth/callback",
            "state": "abc123",
            "scope": "user:email",
        }

    def test_keeps_non_default_port_and_forwarded_proto(
        self, cli_runner: CliRunner, isolated_config: Path, config_file: Path
    ) -> None:
        result = cli_runner.invoke(
            app,
            [
                "--config",
                str(config_file),
                "authorize-url",
                "http://localhost:8000/",
                "--forwarded-proto",
                "https",
            ],
        )
        assert result.exit_code == 0, result.output
        query = _query(result.stdout.strip())
        assert query["redirect_uri"] == "https://localhost:8000/auth/callback"
        assert len(query["state"]) == 40

    def test_rejects_relative_url(
        self, cli_runner: CliRunner, isolated_config: Path, config_file: Path
    ) -> None:
        result = cli_runner.invoke(
            app, ["--config", str(config_file), "authorize-url", "/dashboard"]
        )
        assert result.exit_code == 2


class TestStrategiesCommand:
    def test_lists_oauth(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "strategies"])
        assert result.exit_code == 0, result.output
        assert "oauth\tOAuthRedirectStrategy" in result.stdout
