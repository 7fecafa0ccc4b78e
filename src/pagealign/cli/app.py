"""Root Typer application with subcommand registration."""

from __future__ import annotations

from typing import Optional

import typer

from pagealign import PageAlignContext, __version__

app = typer.Typer(
    name="pagealign",
    help="pagealign — Android 16KB page size compliance checker",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Shared state across commands
_ctx = PageAlignContext()


def get_context() -> PageAlignContext:
    return _ctx


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"pagealign {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Optional[str] = typer.Option(None, "--config", "-C", help="Path to pagealign.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines"),
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=_version_callback, is_eager=True
    ),
) -> None:
    """pagealign — Android 16KB page size compliance checker."""
    from pagealign.config.loader import load_config
    from pagealign.errors import SetupError
    from pagealign.utils.formatters import print_error
    from pagealign.utils.logging import setup_logging

    setup_logging(level="DEBUG" if verbose else "WARNING", json_output=json_logs)
    try:
        _ctx.configure(load_config(config))
    except SetupError as exc:
        print_error(str(exc))
        raise typer.Exit(1)


# -- Subcommand registration --
from pagealign.cli.check import check_cmd  # noqa: E402
from pagealign.cli.tools import tools_cmd  # noqa: E402

app.command(name="check")(check_cmd)
app.command(name="tools")(tools_cmd)
