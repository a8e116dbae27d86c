"""gatehouse -- pluggable authentication strategies with an OAuth2 redirect flow.

A host builds a :class:`~gatehouse.context.RequestContext` per request, asks a
:class:`~gatehouse.strategies.StrategyManager` to run a strategy, and turns
the returned :class:`~gatehouse.results.Redirect`,
:class:`~gatehouse.results.Success` or :class:`~gatehouse.results.Failure`
into a response.

Typical usage::

    from gatehouse.strategies import create_default_manager

    manager = create_default_manager()
    result = manager.run("oauth", ctx)

Modules:
    models: Pydantic models for configuration, flow state and users.
    config: Configuration loading and credential resolution.
    strategies: Strategy base class, manager and the OAuth redirect strategy.
    oauth: Default httpx OAuth client and user loader.
    integrations: Host framework adapters (Starlette).
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"
