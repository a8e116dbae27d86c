"""Resolve an identity from an OAuth client.

A user loader is any callable taking an
:class:`~gatehouse.oauth.client.OAuthClient` and returning the identity the
host should see. :func:`load_user` is the default: it exchanges the code for
a token and reads the provider's user endpoint.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

import httpx

from gatehouse.exceptions import ProviderError
from gatehouse.models import StrategyConfig, User
from gatehouse.oauth.client import OAuthClient

UserLoader = Callable[[OAuthClient], Any]


def fetch_user(token: str, settings: StrategyConfig) -> User:
    """Read the authenticated user's profile with *token*.

    Raises:
        ProviderError: If the request fails or the payload is not a user.
    """
    try:
        response = httpx.get(
            settings.user_url,
            headers={
                "Accept": "application/json",
                "Authorization": f"Bearer {token}",
            },
            timeout=settings.http_timeout,
        )
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPStatusError as exc:
        raise ProviderError(
            f"User lookup failed with status {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise ProviderError(f"User lookup failed: {exc}") from exc
    except ValueError as exc:
        raise ProviderError(f"User endpoint returned invalid JSON: {exc}") from exc

    if not isinstance(payload, dict) or "id" not in payload or "login" not in payload:
        raise ProviderError("User endpoint response is missing 'id' or 'login'")
    return User.from_payload(payload, token)


def load_user(client: OAuthClient, settings: Optional[StrategyConfig] = None) -> User:
    """Exchange the client's code and load the matching user.

    ``BadVerificationCodeError`` from the token exchange propagates unchanged.
    """
    token = client.access_token()
    return fetch_user(token, settings or StrategyConfig())
