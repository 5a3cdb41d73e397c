"""Textual TUI application for voidcards.

The app is run twice per review: once to pick source files and once to
review the due cards from those files. Results are left on the app's
state for the CLI to read after the app exits; the store itself is never
touched from inside the TUI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from textual.app import App

from ..config_store import Config
from ..review import ReviewSession

if TYPE_CHECKING:
    from ..store import Flashcard


@dataclass
class AppState:
    """Shared application state."""

    config: Config = field(default_factory=Config)
    files: list[str] = field(default_factory=list)
    due_counts: dict[str, int] = field(default_factory=dict)
    selected_files: list[str] = field(default_factory=list)
    cards: list[Flashcard] = field(default_factory=list)
    session: ReviewSession | None = None


class VoidcardsApp(App[None]):
    """Main Textual application for voidcards."""

    TITLE = "voidcards"
    CSS = """
    Screen {
        background: $surface;
        align: center middle;
    }

    .frame {
        width: 80;
        max-width: 100%;
        height: auto;
        border: round $primary;
        padding: 1 1;
    }

    #file-list {
        height: auto;
        max-height: 20;
    }

    .title {
        text-style: bold;
        color: $primary;
        text-align: center;
        padding: 1 0;
        width: 100%;
    }

    .selected-count {
        color: $success;
        text-style: bold;
        margin-top: 1;
    }

    .help-text {
        dock: bottom;
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        text-align: center;
    }
    """

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
    ]

    def __init__(self, state: AppState, mode: str = "review") -> None:
        """Initialize the app.

        Args:
            state: Shared state; results are written back onto it.
            mode: "picker" to choose files, "review" to review state.cards.
        """
        super().__init__()
        if mode not in ("picker", "review"):
            raise ValueError(f"unknown mode: {mode!r}")
        self._state = state
        self._mode = mode

    @property
    def state(self) -> AppState:
        """Get the shared application state."""
        return self._state

    async def on_mount(self) -> None:
        """Push the screen for the requested mode."""
        if self._mode == "picker":
            from .screens.file_picker import FilePickerScreen

            await self.push_screen(FilePickerScreen())
        else:
            from .screens.review import ReviewScreen

            await self.push_screen(ReviewScreen())


def run_file_picker(
    files: Sequence[str], due_counts: dict[str, int] | None = None
) -> list[str]:
    """Run the file picker and return the selected files (empty if quit)."""
    state = AppState(files=list(files), due_counts=dict(due_counts or {}))
    app = VoidcardsApp(state, mode="picker")
    app.run()
    return state.selected_files


def run_review(cards: Sequence[Flashcard], config: Config) -> ReviewSession:
    """Run a review over cards and return the session once it has ended.

    If the app exits before the review screen starts, an untouched session
    is returned, so every card reads as unanswered.
    """
    state = AppState(config=config, cards=list(cards))
    app = VoidcardsApp(state, mode="review")
    app.run()
    if state.session is None:
        return ReviewSession(
            state.cards,
            duration=config.question_seconds,
            interval=config.tick_interval,
        )
    return state.session
