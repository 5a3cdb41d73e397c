"""Styled status lines printed outside the TUI."""

from __future__ import annotations

from rich.console import Console
from rich.theme import Theme

THEME = Theme(
    {
        "info": "italic grey58",
        "success": "bold green",
        "error": "bold red",
        "question": "bold medium_purple1",
        "answer": "aquamarine1",
    }
)

console = Console(theme=THEME, highlight=False)
err_console = Console(theme=THEME, highlight=False, stderr=True)


def print_info(message: str) -> None:
    """Print an informational message."""
    console.print(message, style="info", markup=False)


def print_success(message: str) -> None:
    console.print(message, style="success", markup=False)


def print_error(message: str, exc: BaseException | None = None) -> None:
    """Print an error message, followed by the underlying cause if given."""
    text = f"{message} {exc}" if exc is not None else message
    err_console.print(text, style="error", markup=False)
