"""Main Typer application definition."""

from __future__ import annotations

import typer
from dotenv import load_dotenv
from rich.console import Console

from photostudio.cli.commands.edit import edit_command
from photostudio.cli.commands.setup import setup_command
from photostudio.cli.commands.templates import templates_command
from photostudio.cli.errors import render_cli_error
from photostudio.core.config import load_global_config
from photostudio.utils.logger import configure_logging

console = Console()
app = typer.Typer(
    help="Edit your photos with the power of Gemini.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Emit logs in a JSON-friendly format."
    ),
) -> None:
    """Configure the runtime environment for all commands."""
    load_dotenv()
    configure_logging(verbose=verbose, json_output=json_output)
    ctx.obj = ctx.obj or {}
    ctx.obj["config"] = load_global_config()


app.command("edit")(edit_command)
app.command("templates")(templates_command)
app.command("setup")(setup_command)


def run() -> None:
    """CLI entrypoint used by console scripts."""
    try:
        app()
    except typer.Exit as exc:
        raise SystemExit(exc.exit_code) from None
    except KeyboardInterrupt as exc:
        render_cli_error(exc, console=console)
        raise SystemExit(130) from None
    except Exception as exc:
        render_cli_error(exc, console=console)
        raise SystemExit(1) from None
