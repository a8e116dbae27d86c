"""Canonical Pydantic models shared across gatehouse modules.

**Configuration** -- :class:`StrategyConfig` holds everything the OAuth
redirect strategy reads from its host: client credentials, requested scopes,
the optional callback path override, and the provider endpoints.

**Flow state** -- :class:`FlowSession` is the shape of the scratch entry the
strategy keeps in the caller's session between the redirect and the callback.

**Collaborator input/output** -- :class:`OAuthClientConfig` is the explicit
set of fields an OAuth client is built from, and :class:`User` is the
resolved identity handed back to the host on success.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_USER_URL = "https://api.github.com/user"


class StrategyConfig(BaseModel):
    """Host configuration consumed by the OAuth redirect strategy.

    Secrets may be given as credential sources (``env:VAR`` or
    ``file:/path``); :func:`gatehouse.config.load_config` resolves them
    before the model is built.

    Example::

        StrategyConfig(
            oauth_client_id="abc",
            oauth_client_secret="s3cret",
            oauth_scopes=["user:email"],
            oauth_callback_url="/auth/callback",
        )
    """

    model_config = ConfigDict(extra="forbid")

    oauth_client_id: str = Field(default="", description="OAuth application client id")
    oauth_client_secret: str = Field(
        default="", description="OAuth application client secret"
    )
    oauth_scopes: list[str] = Field(
        default_factory=list, description="Scopes requested from the provider"
    )
    oauth_callback_url: Optional[str] = Field(
        default=None,
        description="Path the provider redirects back to; defaults to the request path",
    )
    authorize_url: str = Field(default=GITHUB_AUTHORIZE_URL)
    token_url: str = Field(default=GITHUB_TOKEN_URL)
    user_url: str = Field(default=GITHUB_USER_URL)
    http_timeout: float = Field(default=30.0, gt=0)

    @property
    def scope(self) -> str:
        """Scopes in the comma-separated form the provider expects."""
        return ",".join(self.oauth_scopes)

    def redacted(self) -> dict[str, Any]:
        """Return a JSON-ready dump with the client secret masked."""
        data = self.model_dump(mode="json")
        if data.get("oauth_client_secret"):
            data["oauth_client_secret"] = "********"
        return data


class FlowSession(BaseModel):
    """In-progress flow data kept in the session between redirect and callback."""

    state: str
    return_to: str


class OAuthClientConfig(BaseModel):
    """The fields an OAuth client is constructed from for a single request."""

    model_config = ConfigDict(frozen=True)

    code: Optional[str] = None
    state: str
    scope: str = ""
    client_id: str
    client_secret: str
    redirect_uri: str


class User(BaseModel):
    """Identity resolved from an access token.

    ``attribs`` keeps the full provider payload so hosts can reach fields
    that are not promoted to attributes here.
    """

    id: int
    login: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None
    token: str = Field(repr=False)
    attribs: dict[str, Any] = Field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: dict[str, Any], token: str) -> User:
        """Build a user from the provider's user endpoint response."""
        return cls(
            id=payload["id"],
            login=payload["login"],
            name=payload.get("name"),
            email=payload.get("email"),
            avatar_url=payload.get("avatar_url"),
            token=token,
            attribs=payload,
        )
