"""OAuth2 authorization-code strategy driven by browser redirects.

Provides :class:`OAuthRedirectStrategy`, registered as ``"oauth"`` by
:func:`gatehouse.strategies.create_default_manager`.
"""

from gatehouse.strategies.oauth_redirect.strategy import (
    SESSION_KEY,
    OAuthRedirectStrategy,
    absolute_uri,
    generate_state,
)

__all__ = ["OAuthRedirectStrategy", "SESSION_KEY", "absolute_uri", "generate_state"]
