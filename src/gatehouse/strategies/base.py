"""Abstract base class for authentication strategies.

To implement a new strategy, subclass :class:`Strategy`, set the
:attr:`~Strategy.name` property, and implement :meth:`~Strategy.authenticate`.
Optionally override :meth:`~Strategy.valid` to opt out of requests the
strategy cannot handle, and :meth:`~Strategy.after_authentication` to act once
the host has accepted a :class:`~gatehouse.results.Success`.

Strategies are constructed with the :class:`~gatehouse.context.RequestContext`
of a single request and must not be reused across requests.

See Also:
    :mod:`gatehouse.strategies.manager` for registration and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any, Optional

from gatehouse.context import RequestContext
from gatehouse.results import StrategyResult


class Strategy(ABC):
    """Base class for all authentication strategies.

    The lifecycle for one request is:

    1. Instantiation with the request context.
    2. :meth:`valid` -- the manager skips the strategy when this is ``False``.
    3. :meth:`authenticate` -- returns a redirect, success, or failure.
    4. :meth:`after_authentication` -- only after the host stored a success.
    """

    def __init__(self, ctx: RequestContext) -> None:
        self.ctx = ctx

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name the strategy is registered under (e.g. ``"oauth"``)."""
        ...

    @property
    def session(self) -> MutableMapping[str, Any]:
        return self.ctx.session

    @property
    def params(self) -> dict[str, str]:
        return self.ctx.params

    def valid(self) -> bool:
        """Return whether this strategy applies to the current request."""
        return True

    @abstractmethod
    def authenticate(self) -> StrategyResult:
        """Run the strategy for the current request.

        Returns:
            A :class:`~gatehouse.results.Redirect`,
            :class:`~gatehouse.results.Success`, or
            :class:`~gatehouse.results.Failure`.
        """
        ...

    def after_authentication(self, user: Any) -> Optional[StrategyResult]:
        """Hook run after the host has accepted a success for *user*.

        The default does nothing and returns ``None``.
        """
        return None
