"""Request-scoped context handed to strategies.

:class:`RequestContext` carries everything a strategy may read or mutate for
one request: the request URL and its parts, query parameters, headers, the
caller's session, and the host configuration. Hosts build one per request
(see :func:`gatehouse.integrations.starlette.context_from_request`) so
strategies never touch framework globals.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from dataclasses import dataclass, field
from typing import Any, Optional

from gatehouse.models import StrategyConfig


@dataclass
class RequestContext:
    """Everything a strategy sees of the current request.

    Attributes:
        url: The full URL of the current request.
        scheme: ``"http"`` or ``"https"`` as seen by the server.
        host: Host name without port.
        port: Port the request was received on.
        path: Request path (no query string).
        params: Query parameters.
        headers: Request headers. Use :meth:`header` for case-insensitive lookup.
        session: The caller's mutable session store.
        config: Host configuration for the strategy.
    """

    url: str
    scheme: str
    host: str
    port: int
    path: str = "/"
    params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    session: MutableMapping[str, Any] = field(default_factory=dict)
    config: StrategyConfig = field(default_factory=StrategyConfig)

    def header(self, name: str) -> Optional[str]:
        """Return the value of header *name*, ignoring case, or ``None``."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None
