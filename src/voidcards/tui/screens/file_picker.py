"""File picker screen for voidcards TUI.

This screen lists the source files cards were generated from, with an
"All Files" entry on top. Space toggles the highlighted entry and Enter
confirms; quitting leaves the selection empty.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.widgets import ListItem, ListView, Static

from ...selection import FileSelection

if TYPE_CHECKING:
    from ..app import VoidcardsApp


class FileListItem(ListItem):
    """A list item representing one selectable entry."""

    def __init__(self, index: int, label: str, due: int | None = None) -> None:
        super().__init__()
        self.entry_index = index
        self.entry_label = label
        self.due = due
        self.checked = False

    def compose(self) -> ComposeResult:
        yield Static(self._label_markup(), markup=True)

    def _label_markup(self) -> str:
        box = "[green]☑[/green]" if self.checked else "[dim]☐[/dim]"
        text = escape(self.entry_label)
        if self.checked:
            text = f"[bold]{text}[/bold]"
        due = f"  [dim]({self.due} due)[/dim]" if self.due is not None else ""
        return f"{box} {text}{due}"

    def set_checked(self, checked: bool) -> None:
        self.checked = checked
        if self.is_mounted:
            self.query_one(Static).update(self._label_markup())


class FilePickerScreen(Screen[None]):
    """Screen for choosing which files to review."""

    BINDINGS = [
        Binding("q", "cancel", "Quit"),
        Binding("escape", "cancel", "Quit", show=False),
        Binding("space", "toggle", "Toggle"),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._selection = FileSelection([])

    @property
    def voidcards_app(self) -> "VoidcardsApp":
        """Get the typed app instance."""
        from ..app import VoidcardsApp

        assert isinstance(self.app, VoidcardsApp)
        return self.app

    @property
    def selection(self) -> FileSelection:
        return self._selection

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Select file(s) to review", classes="title"),
            ListView(id="file-list"),
            Static("", id="selected-count", classes="selected-count"),
            classes="frame",
        )
        yield Static(
            "[dim]↑/↓[/dim] navigate  [dim]Space[/dim] toggle  "
            "[dim]Enter[/dim] confirm  [dim]q[/dim] quit",
            classes="help-text",
            markup=True,
        )

    async def on_mount(self) -> None:
        """Fill the list from the app state."""
        state = self.voidcards_app.state
        self._selection = FileSelection(state.files)

        list_view = self.query_one("#file-list", ListView)
        for index, label in enumerate(self._selection.entries):
            due = state.due_counts.get(label) if index > 0 else None
            await list_view.append(FileListItem(index, label, due))
        list_view.index = 0
        list_view.focus()
        self._update_count()

    def _items(self) -> list[FileListItem]:
        return list(self.query(FileListItem))

    def _update_count(self) -> None:
        count = len(self._selection.selected_files)
        text = f"Selected: {count} file(s)" if count else ""
        self.query_one("#selected-count", Static).update(text)

    def action_toggle(self) -> None:
        """Toggle the highlighted entry."""
        list_view = self.query_one("#file-list", ListView)
        if list_view.index is None:
            return
        self._selection.toggle(list_view.index)
        for item in self._items():
            item.set_checked(self._selection.is_selected(item.entry_index))
        self._update_count()

    def action_cursor_down(self) -> None:
        self.query_one("#file-list", ListView).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#file-list", ListView).action_cursor_up()

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Enter confirms the current selection."""
        self._finish(self._selection.selected_files)

    def action_cancel(self) -> None:
        self._finish([])

    def _finish(self, files: list[str]) -> None:
        self.voidcards_app.state.selected_files = files
        self.app.exit()
