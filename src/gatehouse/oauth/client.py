"""OAuth client used by the redirect strategy to talk to the provider.

:class:`OAuthClient` is the protocol the strategy depends on: an
authorization URL to send the user to, and an operation that exchanges the
authorization code for an access token. :class:`HTTPOAuthClient` is the
default implementation, speaking the GitHub flavour of the authorization-code
grant over ``httpx``.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from gatehouse.exceptions import BadVerificationCodeError, ProviderError
from gatehouse.models import OAuthClientConfig, StrategyConfig

_BAD_CODE_ERRORS = frozenset({"bad_verification_code", "invalid_grant"})


@runtime_checkable
class OAuthClient(Protocol):
    """What the strategy needs from an OAuth client."""

    @property
    def authorize_uri(self) -> str:
        """Provider URL the user agent is redirected to."""
        ...

    def access_token(self) -> str:
        """Exchange the authorization code for an access token.

        Raises:
            BadVerificationCodeError: If the provider rejects the code.
        """
        ...


class HTTPOAuthClient:
    """Authorization-code client backed by ``httpx``.

    Args:
        config: Per-request client fields (code, state, scope, credentials,
            redirect URI).
        settings: Strategy configuration providing the provider endpoints
            and HTTP timeout.
    """

    def __init__(self, config: OAuthClientConfig, settings: StrategyConfig) -> None:
        self.config = config
        self.settings = settings
        self._access_token: Optional[str] = None

    @property
    def authorize_uri(self) -> str:
        params = {
            "response_type": "code",
            "client_id": self.config.client_id,
            "redirect_uri": self.config.redirect_uri,
            "state": self.config.state,
        }
        if self.config.scope:
            params["scope"] = self.config.scope
        parts = urlsplit(self.settings.authorize_url)
        query = urlencode(parse_qsl(parts.query, keep_blank_values=True) + list(params.items()))
        return urlunsplit(parts._replace(query=query))

    def access_token(self) -> str:
        """Exchange the code once and return the memoised access token.

        Raises:
            BadVerificationCodeError: If no code is available or the provider
                reports it as invalid or expired.
            ProviderError: On HTTP or transport failures, or a response
                without ``access_token``.
        """
        if self._access_token is None:
            self._access_token = self._exchange_code()
        return self._access_token

    def _exchange_code(self) -> str:
        if not self.config.code:
            raise BadVerificationCodeError("No authorization code received")

        data = {
            "grant_type": "authorization_code",
            "code": self.config.code,
            "state": self.config.state,
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "redirect_uri": self.config.redirect_uri,
        }

        try:
            response = httpx.post(
                self.settings.token_url,
                data=data,
                headers={"Accept": "application/json"},
                timeout=self.settings.http_timeout,
            )
            if response.status_code >= 500:
                response.raise_for_status()
            token_data: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderError(
                f"Token exchange failed with status {exc.response.status_code}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"Token exchange failed: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"Token endpoint returned invalid JSON: {exc}") from exc

        error = token_data.get("error")
        if error:
            message = token_data.get("error_description") or error
            if error in _BAD_CODE_ERRORS:
                raise BadVerificationCodeError(message)
            raise ProviderError(f"Token exchange failed: {message}")

        if "access_token" not in token_data:
            raise ProviderError("Token response missing 'access_token' field")

        return token_data["access_token"]
