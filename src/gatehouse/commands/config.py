"""Config commands -- view and check the effective strategy configuration.

Provides the ``gatehouse config`` sub-command group. Both commands read the
file given with ``--config`` (or the default ``config.json``) overlaid with
``GATEHOUSE_*`` environment variables.
"""

from __future__ import annotations

import typer

from gatehouse.commands import load_config_or_exit
from gatehouse.exit_codes import EXIT_INVALID_USAGE
from gatehouse.output import error, format_response, info, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration with the client secret redacted.

    Example::

        gatehouse config show
        gatehouse --json config show
    """
    from gatehouse.config import default_config_path

    config = load_config_or_exit(ctx)
    path = (ctx.obj or {}).get("config_path") or default_config_path()
    info(f"Config file: {path}")
    format_response(config.redacted())


@config_app.command("validate")
def config_validate(ctx: typer.Context) -> None:
    """Check that the configuration is complete enough to run a flow.

    Exits with code 2 when problems are found.
    """
    from gatehouse.config import validate_config

    config = load_config_or_exit(ctx)
    problems = validate_config(config)
    if problems:
        for problem in problems:
            error(problem)
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    success("Configuration is valid.")
