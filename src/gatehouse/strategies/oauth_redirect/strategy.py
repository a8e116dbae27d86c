"""OAuth2 authorization-code strategy driven by browser redirects.

The first time :meth:`OAuthRedirectStrategy.authenticate` runs for a caller,
the flow is set up: a ``state`` token and the requested URL are stored in the
session and the user agent is redirected to the provider.

When the provider redirects back with ``state`` and ``code``, the state is
checked against the session, the code is exchanged for a token, and the user
is loaded and returned as a success.

If anything goes wrong the flow is torn down and a failure is returned. Once
the host has stored the user it calls :meth:`~OAuthRedirectStrategy.finalize_flow`
(through :meth:`~OAuthRedirectStrategy.after_authentication`), which sends
the user back to the page they originally asked for. Success and redirect are
separate results, which is why the final redirect lives in that hook.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
from functools import partial
from collections.abc import Callable
from typing import Any, Optional

from pydantic import ValidationError

from gatehouse.context import RequestContext
from gatehouse.exceptions import AuthError, BadVerificationCodeError, StateMismatchError
from gatehouse.models import FlowSession, OAuthClientConfig
from gatehouse.oauth.client import HTTPOAuthClient, OAuthClient
from gatehouse.oauth.user import UserLoader, load_user
from gatehouse.results import Failure, Redirect, StrategyResult, Success
from gatehouse.strategies.base import Strategy

logger = logging.getLogger(__name__)

SESSION_KEY = "gatehouse.oauth"
"""Session key holding the :class:`~gatehouse.models.FlowSession` of an in-progress flow."""

_DEFAULT_PORTS = {"http": 80, "https": 443}

ClientFactory = Callable[[OAuthClientConfig, RequestContext], OAuthClient]


def _default_client_factory(config: OAuthClientConfig, ctx: RequestContext) -> OAuthClient:
    return HTTPOAuthClient(config, ctx.config)


def generate_state() -> str:
    """Return a fresh anti-forgery token: the SHA-1 hex digest of 32 random bytes."""
    return hashlib.sha1(secrets.token_bytes(32)).hexdigest()


def _forwarded_scheme(scheme: str, proto: Optional[str]) -> str:
    """Return ``https`` when *proto* says the client spoke https, else *scheme*.

    Only the first entry of a comma-separated proxy chain is considered.
    """
    if proto and proto.split(",")[0].strip().lower() == "https":
        return "https"
    return scheme


def absolute_uri(
    scheme: str,
    host: str,
    port: int,
    path: str = "",
    proto: Optional[str] = None,
) -> str:
    """Build an absolute URL for *path* on the current host.

    The port is left out when it is the default for the request *scheme*.
    *proto* (usually ``X-Forwarded-Proto``) switches the resulting URL to
    ``https`` when it names that scheme; any other value is ignored.
    IPv6 literals are bracketed.

    Example::

        >>> absolute_uri("http", "example.com", 8080, "/callback")
        'http://example.com:8080/callback'
        >>> absolute_uri("http", "example.com", 80, "/callback", proto="https")
        'https://example.com/callback'
    """
    if ":" in host and not host.startswith("["):
        host = f"[{host}]"
    port_part = "" if _DEFAULT_PORTS.get(scheme) == port else f":{port}"
    return f"{_forwarded_scheme(scheme, proto)}://{host}{port_part}{path}"


class OAuthRedirectStrategy(Strategy):
    """Authenticate through the provider's authorization-code flow.

    Args:
        ctx: The request context. ``ctx.config`` supplies client id and
            secret, scopes, the optional callback path, and the provider
            endpoints.
        client_factory: Builds the OAuth client from an
            :class:`~gatehouse.models.OAuthClientConfig` and the request
            context. Defaults to
            :class:`~gatehouse.oauth.client.HTTPOAuthClient`.
        user_loader: Resolves the identity from the client. Defaults to
            :func:`~gatehouse.oauth.user.load_user`.
    """

    def __init__(
        self,
        ctx: RequestContext,
        client_factory: Optional[ClientFactory] = None,
        user_loader: Optional[UserLoader] = None,
    ) -> None:
        super().__init__(ctx)
        self._client_factory = client_factory or _default_client_factory
        self._user_loader = user_loader or partial(load_user, settings=ctx.config)
        self._state: Optional[str] = None
        self._client: Optional[OAuthClient] = None

    @property
    def name(self) -> str:
        return "oauth"

    def authenticate(self) -> StrategyResult:
        if self.in_flow():
            return self._continue_flow()
        return self._begin_flow()

    def after_authentication(self, user: Any) -> Optional[StrategyResult]:
        return self.finalize_flow()

    def finalize_flow(self) -> Optional[StrategyResult]:
        """Redirect to the URL the flow started from and clear the flow session.

        Returns ``None`` when there is no flow to finalize.
        """
        flow = self.flow_session
        if flow is None:
            return None
        self._teardown_flow()
        logger.debug("Finalized OAuth flow, returning to %s", flow.return_to)
        return Redirect(flow.return_to)

    # ------------------------------------------------------------------
    # Flow
    # ------------------------------------------------------------------

    def in_flow(self) -> bool:
        """Return True when the session holds a flow and the request carries the callback params."""
        return (
            bool(self.session.get(SESSION_KEY))
            and bool(self.params.get("state"))
            and bool(self.params.get("code"))
        )

    @property
    def flow_session(self) -> Optional[FlowSession]:
        data = self.session.get(SESSION_KEY)
        if not data:
            return None
        try:
            return FlowSession.model_validate(data)
        except ValidationError:
            logger.warning("Discarding malformed OAuth flow session")
            return None

    def _begin_flow(self) -> Redirect:
        flow = FlowSession(state=self.state, return_to=self.ctx.url)
        self.session[SESSION_KEY] = flow.model_dump()
        logger.debug("Starting OAuth flow for %s", self.ctx.url)
        return Redirect(self.oauth.authorize_uri)

    def _continue_flow(self) -> StrategyResult:
        if not self._valid_state():
            return self._abort_flow(StateMismatchError())
        try:
            user = self._user_loader(self.oauth)
        except BadVerificationCodeError as exc:
            return self._abort_flow(exc)
        return Success(user)

    def _abort_flow(self, error: AuthError) -> Failure:
        self._teardown_flow()
        logger.warning("OAuth flow aborted: %s", error.message)
        return Failure(error.message)

    def _teardown_flow(self) -> None:
        self.session.pop(SESSION_KEY, None)

    def _valid_state(self) -> bool:
        returned = self.params.get("state", "")
        return secrets.compare_digest(returned.encode(), self.state.encode())

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def state(self) -> str:
        """The flow's anti-forgery token.

        Reuses the value stored in the flow session, otherwise generates a
        new one. Cached for the lifetime of this instance.
        """
        if self._state is None:
            flow = self.flow_session
            self._state = flow.state if flow is not None else generate_state()
        return self._state

    @property
    def oauth(self) -> OAuthClient:
        if self._client is None:
            config = self.ctx.config
            client_config = OAuthClientConfig(
                code=self.params.get("code"),
                state=self.state,
                scope=config.scope,
                client_id=config.oauth_client_id,
                client_secret=config.oauth_client_secret,
                redirect_uri=self.redirect_uri,
            )
            self._client = self._client_factory(client_config, self.ctx)
        return self._client

    @property
    def redirect_uri(self) -> str:
        return absolute_uri(
            self.ctx.scheme,
            self.ctx.host,
            self.ctx.port,
            self.callback_path,
            self.ctx.header("X-Forwarded-Proto"),
        )

    @property
    def callback_path(self) -> str:
        return self.ctx.config.oauth_callback_url or self.ctx.path
