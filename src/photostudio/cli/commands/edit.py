"""Edit command implementation."""

from __future__ import annotations

import asyncio
from pathlib import Path
import sys

import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from photostudio.cli.commands.templates import render_templates_table
from photostudio.cli.errors import render_edit_failure
from photostudio.cli.image_store import save_result
from photostudio.core.codec import read_user_file
from photostudio.core.config import GlobalConfig, get_gemini_api_key, load_global_config
from photostudio.core.errors import PhotoStudioError, PreconditionError
from photostudio.core.session import EditSession, SessionStatus
from photostudio.core.templates import DEFAULT_CATALOG, TemplateCatalog
from photostudio.engines.gemini import GeminiEditClient, GeminiModel

console = Console()


def edit_command(
    ctx: typer.Context,
    image: Path = typer.Argument(
        ...,
        help="Photo to edit (PNG, JPG, WEBP up to 10MB).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    instruction: str | None = typer.Argument(
        None, help="Describe your edit (prompted if omitted)."
    ),
    template: str | None = typer.Option(
        None,
        "--template",
        "-t",
        help="Use a prompt template ID instead of a free-text instruction.",
    ),
    model: GeminiModel | None = typer.Option(
        None,
        "--model",
        help="Gemini image model selector.",
        case_sensitive=False,
    ),
    output_dir: Path | None = typer.Option(
        None,
        "--output-dir",
        help="Directory where the edited image is saved.",
    ),
    output_name: str | None = typer.Option(
        None,
        "--output-name",
        help="File name of the saved edited image.",
    ),
    timeout_seconds: float | None = typer.Option(
        None,
        "--timeout",
        min=1.0,
        help="Seconds to wait for the model before giving up.",
    ),
    no_interactive: bool = typer.Option(
        False,
        "--no-interactive",
        help="Never prompt for a missing instruction.",
    ),
) -> None:
    """Edit a photo with a natural-language instruction."""
    if instruction and template:
        console.print("[bold red]Use either an instruction or --template, not both.[/]")
        raise typer.Exit(code=1)

    config = _resolve_config(ctx)
    target_output_dir = output_dir or Path(config.default_output_dir)
    file_name = output_name or config.download_file_name
    try:
        photo = read_user_file(image)
        selected_instruction = _resolve_instruction(
            instruction,
            template,
            interactive=not no_interactive and sys.stdin.isatty(),
        )
        if not selected_instruction:
            raise PreconditionError("Please upload an image and enter a prompt.")
    except PhotoStudioError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise typer.Exit(code=1) from exc

    try:
        effective_model = model or GeminiModel(config.default_model)
        client = GeminiEditClient(
            model=effective_model,
            api_key=get_gemini_api_key(config),
            timeout_seconds=timeout_seconds or config.timeout_seconds,
        )
    except ValueError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise typer.Exit(code=1) from exc

    session = EditSession(client)
    try:
        session.set_image(photo.data, photo.media_type)
        session.set_instruction(selected_instruction)
        with console.status("[bold cyan]Generating...[/]", spinner="dots"):
            state = asyncio.run(session.generate())
    except PhotoStudioError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise typer.Exit(code=1) from exc

    if state.status is SessionStatus.FAILED or state.result is None:
        render_edit_failure(state.error_message or "The edit did not finish.", console=console)
        raise typer.Exit(code=1)

    saved_path = save_result(state.result, output_dir=target_output_dir, file_name=file_name)
    lines = [
        "[bold green]Image edited[/]",
        f"Source: [bold]{image}[/]",
        f"Model: [bold]{effective_model.value}[/]",
        f"Saved to [bold]{saved_path}[/]",
    ]
    console.print(Panel.fit("\n".join(lines), title="photostudio", border_style="green"))
    if state.result.narrative_text:
        console.print(
            Panel(state.result.narrative_text, title="AI Message", border_style="magenta")
        )


def _resolve_instruction(
    instruction: str | None,
    template: str | None,
    *,
    interactive: bool,
) -> str:
    if template:
        return DEFAULT_CATALOG.select(template)
    if instruction:
        return instruction
    if interactive:
        return _prompt_instruction(DEFAULT_CATALOG)
    return ""


def _prompt_instruction(catalog: TemplateCatalog) -> str:
    render_templates_table(catalog, console=console)
    known_ids = set(catalog.ids())
    while True:
        answer = Prompt.ask("Describe your edit or enter a template ID").strip()
        if answer in known_ids:
            return catalog.select(answer)
        if answer:
            return answer
        console.print("[bold red]Instruction cannot be empty.[/]")


def _resolve_config(ctx: typer.Context) -> GlobalConfig:
    if ctx.obj and isinstance(ctx.obj.get("config"), GlobalConfig):
        return ctx.obj["config"]
    return load_global_config()
