"""Strategy manager -- registry, discovery, and per-request dispatch.

:class:`StrategyManager` maps strategy names to :class:`Strategy` classes.
Each :meth:`~StrategyManager.run` builds a new strategy instance from the
request context, so no state survives from one request to the next.

Third-party packages register strategies as entry points::

    [project.entry-points."gatehouse.strategies"]
    saml = "my_package.saml:SAMLStrategy"
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, Optional

from gatehouse.context import RequestContext
from gatehouse.exceptions import StrategyError
from gatehouse.results import Failure, StrategyResult
from gatehouse.strategies.base import Strategy

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "gatehouse.strategies"
"""The entry-point group name used for strategy discovery."""


class StrategyManager:
    """Registry and dispatcher for authentication strategies.

    Example::

        manager = StrategyManager()
        manager.register("oauth", OAuthRedirectStrategy)
        result = manager.run("oauth", ctx)
    """

    def __init__(self) -> None:
        self._strategies: dict[str, type[Strategy]] = {}

    def register(self, name: str, strategy_cls: type[Strategy]) -> None:
        """Register *strategy_cls* under *name*, replacing any previous entry."""
        if name in self._strategies:
            logger.debug("Replacing strategy '%s'", name)
        self._strategies[name] = strategy_cls
        logger.info("Registered strategy '%s' (%s)", name, strategy_cls.__name__)

    def get_strategy_class(self, name: str) -> type[Strategy]:
        """Look up a registered strategy class.

        Raises:
            StrategyError: If nothing is registered under *name*.
        """
        strategy_cls = self._strategies.get(name)
        if strategy_cls is None:
            available = ", ".join(sorted(self._strategies)) or "(none)"
            raise StrategyError(
                f"No strategy registered under '{name}'. Available: {available}"
            )
        return strategy_cls

    def list_names(self) -> list[str]:
        return sorted(self._strategies)

    def discover(self) -> list[str]:
        """Register strategies advertised in the ``gatehouse.strategies`` entry-point group.

        Entry points that fail to load are logged and skipped.

        Returns:
            Names of the strategies that were registered.
        """
        loaded: list[str] = []
        for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
            try:
                strategy_cls = ep.load()
            except Exception as exc:
                logger.warning("Failed to load strategy '%s': %s", ep.name, exc)
                continue
            if not (isinstance(strategy_cls, type) and issubclass(strategy_cls, Strategy)):
                logger.warning("Entry point '%s' is not a Strategy subclass", ep.name)
                continue
            self.register(ep.name, strategy_cls)
            loaded.append(ep.name)
        return loaded

    def build(self, name: str, ctx: RequestContext) -> Strategy:
        """Instantiate the strategy registered under *name* for one request."""
        return self.get_strategy_class(name)(ctx)

    def run(self, name: str, ctx: RequestContext) -> StrategyResult:
        """Authenticate the request in *ctx* with a fresh strategy instance.

        Returns:
            The strategy's result, or a :class:`~gatehouse.results.Failure`
            when the strategy declares itself not valid for the request.
        """
        strategy = self.build(name, ctx)
        if not strategy.valid():
            logger.debug("Strategy '%s' not valid for %s", name, ctx.path)
            return Failure(f"Strategy '{name}' cannot handle this request")
        return strategy.authenticate()

    def finalize(self, name: str, ctx: RequestContext, user: Any) -> Optional[StrategyResult]:
        """Run the post-success hook of strategy *name* after the host stored *user*."""
        return self.build(name, ctx).after_authentication(user)


def create_default_manager(discover: bool = False) -> StrategyManager:
    """Create a :class:`StrategyManager` with the built-in strategies.

    Registers :class:`~gatehouse.strategies.oauth_redirect.OAuthRedirectStrategy`
    as ``"oauth"``. With *discover*, entry-point strategies are added too.
    """
    from gatehouse.strategies.oauth_redirect import OAuthRedirectStrategy

    manager = StrategyManager()
    manager.register("oauth", OAuthRedirectStrategy)
    if discover:
        manager.discover()
    return manager
