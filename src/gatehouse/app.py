"""Typer application and CLI entry point for gatehouse.

The CLI is an operator's aid for the OAuth redirect strategy: it shows and
validates the effective configuration, prints the authorization URL a new
flow would redirect to, and lists the registered strategies.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. :class:`~gatehouse.exceptions.GatehouseError` exits with
the error's ``exit_code``; anything else exits with
:data:`~gatehouse.exit_codes.EXIT_GENERIC_FAILURE`.
"""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import typer

from gatehouse import __version__
from gatehouse.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="gatehouse",
    help="Inspect and exercise gatehouse authentication strategies.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"gatehouse {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a JSON config file."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the output manager and stash shared options in ``ctx.obj``."""
    from gatehouse.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, verbose=verbose))
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config


from gatehouse.commands.config import config_app  # noqa: E402
from gatehouse.commands.flow import authorize_url_command, strategies_command  # noqa: E402

app.add_typer(config_app, name="config", help="Show and validate configuration.")
app.command("authorize-url")(authorize_url_command)
app.command("strategies")(strategies_command)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``gatehouse`` console script."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from gatehouse.exceptions import GatehouseError
        from gatehouse.output import error

        if isinstance(exc, GatehouseError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
