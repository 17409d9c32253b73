"""cbt main entry point and command registration."""

from __future__ import annotations

import atexit
from typing import Annotated

import sentry_sdk
import typer

from cbt_tool.__about__ import __version__
from cbt_tool.cli.commands.format import format_app
from cbt_tool.core.exceptions import CbtError
from cbt_tool.core.logging import setup_logging
from cbt_tool.core.monitoring import setup_sentry

app = typer.Typer(
    help="cbt - wide-column table client tools",
    no_args_is_help=True,
)

app.add_typer(format_app, name="format")


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cbt {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable verbose logging"),
    ] = False,
) -> None:
    """cbt - wide-column table client tools."""
    setup_logging(verbose)
    setup_sentry()

    transaction = sentry_sdk.start_transaction(
        op="cli", name=ctx.invoked_subcommand or "cbt"
    )
    transaction.__enter__()

    def cleanup() -> None:
        transaction.__exit__(None, None, None)
        sentry_sdk.flush(timeout=2)

    atexit.register(cleanup)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


def run() -> None:
    """Entry point with global error handling."""
    try:
        app()
    except CbtError as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e.message}", err=True)
        raise SystemExit(e.exit_code) from None
    except SystemExit:
        raise
    except KeyboardInterrupt:
        raise SystemExit(130) from None
    except Exception as e:
        sentry_sdk.capture_exception(e)
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from None
