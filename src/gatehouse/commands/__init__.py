"""Built-in CLI commands.

- :mod:`~gatehouse.commands.config` -- ``gatehouse config show|validate``
- :mod:`~gatehouse.commands.flow` -- ``gatehouse authorize-url`` and ``gatehouse strategies``
"""

from __future__ import annotations

import typer

from gatehouse.exceptions import ConfigError
from gatehouse.models import StrategyConfig


def load_config_or_exit(ctx: typer.Context) -> StrategyConfig:
    """Load the configuration named by ``--config``, exiting cleanly on errors."""
    from gatehouse.config import load_config
    from gatehouse.output import error

    path = ctx.obj.get("config_path") if ctx.obj else None
    try:
        return load_config(path)
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
