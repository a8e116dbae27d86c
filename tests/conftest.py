"""Shared test fixtures for gatehouse.

Provides request contexts, a stub OAuth client standing in for the provider,
isolated configuration directories, and output-manager resets. These
fixtures are discovered by pytest and available to all test modules.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode

import pytest

from gatehouse.config import ENV_VARS
from gatehouse.context import RequestContext
from gatehouse.exceptions import BadVerificationCodeError
from gatehouse.models import OAuthClientConfig, StrategyConfig, User
from gatehouse.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Drop the global OutputManager so CliRunner stream swaps don't leak."""
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Stub provider collaborators
# ---------------------------------------------------------------------------


class StubOAuthClient:
    """OAuth client that never touches the network.

    ``bad_code`` makes :meth:`access_token` raise the provider's
    invalid-code error, mimicking an expired or replayed code.
    """

    def __init__(
        self,
        config: OAuthClientConfig,
        token: str = "gho_test_token",
        bad_code: Optional[str] = None,
    ) -> None:
        self.config = config
        self.token = token
        self.bad_code = bad_code
        self.exchanges = 0

    @property
    def authorize_uri(self) -> str:
        params = {
            "client_id": self.config.client_id,
            "scope": self.config.scope,
            "state": self.config.state,
            "redirect_uri": self.config.redirect_uri,
        }
        return f"https://provider.test/authorize?{urlencode(params)}"

    def access_token(self) -> str:
        self.exchanges += 1
        if self.bad_code:
            raise BadVerificationCodeError(self.bad_code)
        return self.token


class StubClientFactory:
    """Client factory that builds :class:`StubOAuthClient` and remembers each one."""

    def __init__(self, **client_kwargs: Any) -> None:
        self.client_kwargs = client_kwargs
        self.built: list[StubOAuthClient] = []

    def __call__(self, config: OAuthClientConfig, ctx: RequestContext) -> StubOAuthClient:
        client = StubOAuthClient(config, **self.client_kwargs)
        self.built.append(client)
        return client


@pytest.fixture
def client_factory() -> StubClientFactory:
    return StubClientFactory()


@pytest.fixture
def make_client_factory():
    """Build a :class:`StubClientFactory` with custom stub behaviour."""
    return StubClientFactory


@pytest.fixture
def user() -> User:
    return User.from_payload(
        {"id": 42, "login": "octocat", "name": "The Octocat", "email": "octo@example.com"},
        "gho_test_token",
    )


# ---------------------------------------------------------------------------
# Context fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def strategy_config() -> StrategyConfig:
    return StrategyConfig(
        oauth_client_id="client-123",
        oauth_client_secret="secret-456",
        oauth_scopes=["user:email", "read:org"],
        oauth_callback_url="/callback",
    )


@pytest.fixture
def make_context(strategy_config: StrategyConfig):
    """Factory for request contexts on ``https://host`` sharing one session by default."""

    def _make(
        path: str = "/protected",
        params: Optional[dict[str, str]] = None,
        session: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        scheme: str = "https",
        host: str = "host",
        port: int = 443,
        config: Optional[StrategyConfig] = None,
        url: Optional[str] = None,
    ) -> RequestContext:
        return RequestContext(
            url=url if url is not None else path,
            scheme=scheme,
            host=host,
            port=port,
            path=path,
            params=params or {},
            headers=headers or {},
            session=session if session is not None else {},
            config=config or strategy_config,
        )

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at tmp_path and clear GATEHOUSE_* variables.

    Returns:
        The gatehouse config directory (not yet created).
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("gatehouse.config._is_xdg_platform", lambda: True)
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "config" / "gatehouse"


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
