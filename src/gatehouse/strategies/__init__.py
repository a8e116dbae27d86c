"""Pluggable authentication strategies.

- :class:`Strategy` -- abstract base class for a strategy.
- :class:`StrategyManager` -- registry and per-request dispatcher.
- :func:`create_default_manager` -- manager with the built-in strategies.
- :class:`OAuthRedirectStrategy` -- OAuth2 authorization-code flow.
"""

from gatehouse.strategies.base import Strategy
from gatehouse.strategies.manager import StrategyManager, create_default_manager
from gatehouse.strategies.oauth_redirect import OAuthRedirectStrategy

__all__ = [
    "Strategy",
    "StrategyManager",
    "OAuthRedirectStrategy",
    "create_default_manager",
]
