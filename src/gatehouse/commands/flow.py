"""Flow commands -- preview the OAuth redirect and list strategies."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit

import typer

from gatehouse.commands import load_config_or_exit
from gatehouse.exit_codes import EXIT_INVALID_USAGE
from gatehouse.output import debug, error, print_data, print_table


def authorize_url_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Absolute URL of the protected page, e.g. https://app.example.com/dashboard."),
    state: Optional[str] = typer.Option(
        None, "--state", help="Use this state instead of generating one."
    ),
    forwarded_proto: Optional[str] = typer.Option(
        None, "--forwarded-proto", help="Simulate an X-Forwarded-Proto header."
    ),
) -> None:
    """Print the provider URL a fresh request to URL would be redirected to.

    Example::

        gatehouse authorize-url https://app.example.com/dashboard
        gatehouse authorize-url http://localhost:8000/ --state abc123
    """
    from gatehouse.context import RequestContext
    from gatehouse.results import Redirect
    from gatehouse.strategies.oauth_redirect import SESSION_KEY, OAuthRedirectStrategy

    config = load_config_or_exit(ctx)

    parts = urlsplit(url)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        error(f"Expected an absolute http(s) URL, got: {url}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    session: dict[str, object] = {}
    if state:
        session[SESSION_KEY] = {"state": state, "return_to": url}

    request_ctx = RequestContext(
        url=url,
        scheme=parts.scheme,
        host=parts.hostname,
        port=parts.port or (443 if parts.scheme == "https" else 80),
        path=parts.path or "/",
        headers={"X-Forwarded-Proto": forwarded_proto} if forwarded_proto else {},
        session=session,
        config=config,
    )
    result = OAuthRedirectStrategy(request_ctx).authenticate()
    assert isinstance(result, Redirect)  # no callback params, so always a redirect
    debug(f"Flow session: {session[SESSION_KEY]}")
    print_data(result.location)


def strategies_command() -> None:
    """List the registered strategies, including entry-point plugins."""
    from gatehouse.strategies import create_default_manager

    manager = create_default_manager(discover=True)
    rows = [
        [name, manager.get_strategy_class(name).__qualname__]
        for name in manager.list_names()
    ]
    print_table(["Name", "Class"], rows, title="Strategies")
