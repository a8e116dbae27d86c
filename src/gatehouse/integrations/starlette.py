"""Starlette (and FastAPI) integration.

Translates between Starlette requests/responses and gatehouse contexts and
results. The session comes from Starlette's ``SessionMiddleware``, which must
be installed on the application.

Example::

    from starlette.applications import Starlette
    from starlette.middleware.sessions import SessionMiddleware

    from gatehouse.integrations.starlette import login_required

    @login_required(manager, config)
    async def dashboard(request):
        return JSONResponse({"user": request.state.user})

The callback path configured in ``oauth_callback_url`` must be routed to a
protected endpoint as well, so the strategy sees the provider's redirect.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Union

from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response

from gatehouse.context import RequestContext
from gatehouse.models import StrategyConfig
from gatehouse.results import Failure, Redirect, StrategyResult, Success
from gatehouse.strategies.manager import StrategyManager

logger = logging.getLogger(__name__)

USER_SESSION_KEY = "gatehouse.user"
"""Session key under which the authenticated user is stored."""

_DEFAULT_PORTS = {"http": 80, "https": 443}

Endpoint = Callable[[Request], Awaitable[Response]]


def context_from_request(request: Request, config: StrategyConfig) -> RequestContext:
    """Build a :class:`RequestContext` sharing the request's session."""
    url = request.url
    port = url.port or _DEFAULT_PORTS.get(url.scheme, 80)
    return RequestContext(
        url=str(url),
        scheme=url.scheme,
        host=url.hostname or "",
        port=port,
        path=url.path,
        params=dict(request.query_params),
        headers=dict(request.headers),
        session=request.session,
        config=config,
    )


def to_response(result: StrategyResult) -> Response:
    """Turn a halting result into a response.

    Raises:
        TypeError: For a :class:`~gatehouse.results.Success`, which the host
            must store rather than send.
    """
    if isinstance(result, Redirect):
        return RedirectResponse(result.location, status_code=302)
    if isinstance(result, Failure):
        return JSONResponse({"error": result.message}, status_code=401)
    raise TypeError(f"Cannot turn a {result.kind} result into a response")


def serialize_user(user: Any) -> Any:
    """Return a session-safe form of *user*; access tokens are never stored."""
    if isinstance(user, BaseModel):
        return user.model_dump(mode="json", exclude={"token", "attribs"})
    return user


async def authenticate_request(
    request: Request,
    manager: StrategyManager,
    config: StrategyConfig,
    strategy: str = "oauth",
) -> Union[Response, Any]:
    """Authenticate *request*, returning either the stored user or a response to send.

    A user already in the session is returned as-is. Otherwise the strategy
    runs; on success the user is stored in the session and the strategy's
    post-success hook decides the response (the OAuth strategy redirects
    back to the original page).
    """
    user = request.session.get(USER_SESSION_KEY)
    if user is not None:
        return user

    ctx = context_from_request(request, config)
    result = await run_in_threadpool(manager.run, strategy, ctx)
    if not isinstance(result, Success):
        return to_response(result)

    stored = serialize_user(result.user)
    request.session[USER_SESSION_KEY] = stored
    logger.info("Authenticated request with strategy '%s'", strategy)

    final = manager.finalize(strategy, ctx, result.user)
    if final is not None:
        return to_response(final)
    return stored


def login_required(
    manager: StrategyManager,
    config: StrategyConfig,
    strategy: str = "oauth",
) -> Callable[[Endpoint], Endpoint]:
    """Decorate a Starlette endpoint so it only runs for authenticated users.

    The user is exposed to the endpoint as ``request.state.user``.
    """

    def decorator(endpoint: Endpoint) -> Endpoint:
        @functools.wraps(endpoint)
        async def wrapper(request: Request) -> Response:
            outcome = await authenticate_request(request, manager, config, strategy)
            if isinstance(outcome, Response):
                return outcome
            request.state.user = outcome
            return await endpoint(request)

        return wrapper

    return decorator


def logout(request: Request) -> None:
    """Forget the authenticated user for this session."""
    request.session.pop(USER_SESSION_KEY, None)
