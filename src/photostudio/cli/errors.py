"""Shared CLI error rendering helpers."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel

from photostudio.core.errors import PhotoStudioError
from photostudio.core.provider_errors import describe_provider_error


def render_cli_error(
    exc: BaseException,
    *,
    console: Console,
    action: str | None = None,
) -> None:
    """Render a friendly TUI panel for a command failure."""
    title, summary, hint = _classify_error(exc)

    lines: list[str] = []
    if action:
        lines.append(f"[bold]{action}[/]")
        lines.append("")
    lines.append(f"[bold red]{title}[/]")
    lines.append(summary)
    if hint:
        lines.append(f"[dim]{hint}[/]")

    console.print(
        Panel.fit(
            "\n".join(lines),
            title="photostudio",
            border_style="red",
        )
    )


def render_edit_failure(message: str, *, console: Console) -> None:
    """Render the error message of a failed edit session."""
    console.print(
        Panel.fit(
            f"[bold red]Edit failed[/]\n{message}",
            title="photostudio",
            border_style="red",
        )
    )


def _classify_error(exc: BaseException) -> tuple[str, str, str]:
    if isinstance(exc, KeyboardInterrupt):
        return (
            "Command cancelled",
            "The command was cancelled before it finished.",
            "",
        )
    if isinstance(exc, PhotoStudioError):
        return ("Edit failed", str(exc), "")
    if isinstance(exc, ValueError):
        return (
            "Invalid configuration",
            str(exc),
            "Verify your Gemini key with `photostudio setup` and retry.",
        )
    return (
        "Command failed",
        describe_provider_error(exc),
        "Try again. If the issue persists, rerun with --verbose for more context.",
    )
