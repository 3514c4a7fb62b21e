"""
Console output for storetranslate.

Every message goes through the shared rich ``console``. Callers escape any
user-supplied text (paths, locales, model answers) before passing it in,
since messages are rendered as rich markup.
"""

from __future__ import annotations

import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn, TimeRemainingColumn
from rich.table import Table

if TYPE_CHECKING:
    from storetranslate.metadata import RunSummary

console = Console()

BADGE = "[bold white on dark_green] ST [/bold white on dark_green]"

# Styles for the states reported by MetadataTranslator.locale_states
LOCALE_STATE_STYLES = {
    "master": "bold",
    "master (missing)": "red",
    "up to date": "green",
    "stale": "yellow",
    "missing": "yellow",
}


def _emit(icon: str, color: str, message: str, details: str, details_style: str, badge: bool):
    prefix = f"{BADGE} " if badge else ""
    console.print(f"{prefix}[{color}]{icon}[/{color}] {message}")
    if details:
        console.print(f"    [{details_style}]{details}[/{details_style}]")


def success(message: str, details: str = "", badge: bool = True):
    _emit("✓", "green", message, details, "dim", badge)


def error(message: str, details: str = "", badge: bool = True):
    _emit("✗", "red", message, details, "red", badge)


def warning(message: str, details: str = "", badge: bool = True):
    _emit("⚠", "yellow", message, details, "dim", badge)


def info(message: str, badge: bool = False):
    prefix = f"{BADGE} [dim]│[/dim] " if badge else ""
    console.print(f"{prefix}{message}")


def section(title: str):
    console.print()
    console.rule(f"[bold green]{title}[/bold green]", style="green")
    console.print()


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a spinner while a completion request is in flight."""
    with console.status(f"[bold green]{message}[/bold green]", spinner="dots"):
        yield


def status_box(title: str, items: dict[str, str]):
    """Boxed key/value listing, used for the effective configuration."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="dim", no_wrap=True)
    table.add_column()
    for key, value in items.items():
        table.add_row(f"{key}:", escape(value))

    console.print(
        Panel(table, title=f"[bold]{title}[/bold]", border_style="green", padding=(1, 2), expand=False)
    )


def _locale_list(locales: Sequence[str]) -> str:
    return escape(", ".join(locales)) if locales else "[dim]none[/dim]"


def run_summary(summary: RunSummary):
    """Panel listing the translated, skipped and failed locales of a run."""
    color, icon, title = (
        ("green", "✓", "TRANSLATION COMPLETE")
        if summary.success
        else ("red", "✗", "TRANSLATION FINISHED WITH ERRORS")
    )

    lines = [
        f"[{color}]{icon}[/{color}] {title}",
        "",
        f"  Source:     {escape(summary.master_locale)} ({escape(summary.master_file.name)})",
        f"  Translated: {_locale_list(summary.translated)}",
        f"  Up to date: {_locale_list(summary.skipped)}",
    ]
    if summary.failed:
        lines.append(f"  Failed:     [red]{_locale_list(summary.failed)}[/red]")

    console.print()
    console.print(Panel("\n".join(lines), border_style=color, padding=(1, 2), expand=False))
    if not summary.success:
        info("Run the command again to retry the failed locales.")


def locale_table(title: str, input_file: str, states: Sequence[tuple[str, str]]) -> Table:
    """Print one row per locale with the state of its copy of input_file."""
    table = Table(title=escape(title), title_style="bold", border_style="dim")
    table.add_column("Locale", style="green", no_wrap=True)
    table.add_column(escape(input_file))

    for locale, state in states:
        style = LOCALE_STATE_STYLES.get(state)
        table.add_row(escape(locale), f"[{style}]{state}[/{style}]" if style else state)

    console.print()
    console.print(table)
    console.print()
    return table


def wait(seconds: int, description: str = "Waiting"):
    """Sleep for a number of seconds, one second at a time, behind a countdown bar."""
    if seconds <= 0:
        return

    with Progress(
        TextColumn("[dim]{task.description}"),
        BarColumn(),
        TimeRemainingColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=seconds)
        for _ in range(seconds):
            time.sleep(1)
            progress.advance(task)
