"""Review screen for voidcards TUI.

This screen drives a ReviewSession:
- Key presses and timer callbacks become session events
- Commands returned by the session start/stop the countdown timers,
  move the progress bar, or exit the app
- Every event is followed by a redraw from the session snapshot
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import Screen
from textual.timer import Timer
from textual.widgets import ProgressBar, Static

from ...review import (
    ChooseInterval,
    Command,
    Confirm,
    CountdownExpired,
    Event,
    Exit,
    JudgeCorrect,
    JudgeIncorrect,
    ProgressFrame,
    Quit,
    RenderProgress,
    Resize,
    ReviewSession,
    StartCountdown,
    StopCountdown,
    Tick,
    View,
)
from ..widgets.card_view import CardViewWidget
from ..widgets.stats_bar import StatsBar

if TYPE_CHECKING:
    from ..app import VoidcardsApp


class ReviewScreen(Screen[None]):
    """Screen for reviewing the due cards on the app state."""

    BINDINGS = [
        Binding("q", "quit_review", "Quit"),
        Binding("enter", "confirm", "Reveal", show=False),
        Binding("c", "judge_correct", "Correct", show=False),
        Binding("i", "judge_incorrect", "Incorrect", show=False),
        Binding("1", "choose(1)", "1 day", show=False),
        Binding("3", "choose(3)", "3 days", show=False),
        Binding("7", "choose(7)", "7 days", show=False),
        Binding("9", "choose(9)", "9 days", show=False),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._session: ReviewSession | None = None
        self._tick_timer: Timer | None = None
        self._expiry_timer: Timer | None = None
        self._timer_generation: int | None = None

    @property
    def voidcards_app(self) -> "VoidcardsApp":
        """Get the typed app instance."""
        from ..app import VoidcardsApp

        assert isinstance(self.app, VoidcardsApp)
        return self.app

    @property
    def session(self) -> ReviewSession | None:
        return self._session

    def compose(self) -> ComposeResult:
        yield Vertical(
            CardViewWidget(id="card-view"),
            ProgressBar(
                total=1.0,
                show_eta=False,
                show_percentage=False,
                id="countdown",
            ),
            StatsBar(id="stats-bar"),
            classes="frame",
        )
        yield Static(
            "[dim]Enter[/dim] confirm  [dim]q[/dim] quit",
            id="help-bar",
            classes="help-text",
            markup=True,
        )

    async def on_mount(self) -> None:
        """Create the session and start the first countdown."""
        state = self.voidcards_app.state
        self._session = ReviewSession(
            state.cards,
            duration=state.config.question_seconds,
            interval=state.config.tick_interval,
        )
        state.session = self._session
        self._run_commands(self._session.start())
        self._render_session()

    def on_resize(self, event: events.Resize) -> None:
        """Re-layout on terminal resize; review state is unaffected."""
        self._deliver(Resize(event.size.width, event.size.height))
        if self._timer_generation is not None:
            self._deliver(ProgressFrame(self._timer_generation))

    def _deliver(self, event: Event) -> None:
        """Deliver one event to the session and carry out its commands."""
        if self._session is None:
            return
        self._run_commands(self._session.handle(event))
        self._render_session()

    def _run_commands(self, commands: list[Command]) -> None:
        for command in commands:
            if isinstance(command, StartCountdown):
                self._start_timers(command)
            elif isinstance(command, StopCountdown):
                if command.generation == self._timer_generation:
                    self._stop_timers()
            elif isinstance(command, RenderProgress):
                self.query_one("#countdown", ProgressBar).update(progress=command.fraction)
            elif isinstance(command, Exit):
                self._stop_timers()
                self.app.exit()

    def _start_timers(self, command: StartCountdown) -> None:
        self._stop_timers()
        self._timer_generation = command.generation
        self._tick_timer = self.set_interval(
            command.interval, partial(self._deliver, Tick(command.generation))
        )
        self._expiry_timer = self.set_timer(
            command.duration,
            partial(self._deliver, CountdownExpired(command.generation)),
        )

    def _stop_timers(self) -> None:
        for timer in (self._tick_timer, self._expiry_timer):
            if timer is not None:
                timer.stop()
        self._tick_timer = None
        self._expiry_timer = None
        self._timer_generation = None

    def _render_session(self) -> None:
        if self._session is None:
            return

        snapshot = self._session.snapshot()
        card_view = self.query_one("#card-view", CardViewWidget)
        progress_bar = self.query_one("#countdown", ProgressBar)

        if snapshot.view is View.QUESTION:
            card_view.show_question(snapshot.question)
        elif snapshot.view is View.ANSWER:
            card_view.show_answer(snapshot.answer)
        elif snapshot.view is View.REVISIT_CHOICE:
            card_view.show_revisit(snapshot.result_message)
        else:
            card_view.show_done(snapshot.completion_message)
        progress_bar.display = snapshot.view is View.QUESTION

        self.query_one("#stats-bar", StatsBar).update_counts(
            correct=snapshot.correct_count,
            incorrect=snapshot.incorrect_count,
            current=snapshot.current,
            total=snapshot.total,
        )
        self.query_one("#help-bar", Static).update(self._get_help_text(snapshot.view))

    def _get_help_text(self, view: View) -> str:
        """Get context-appropriate help text."""
        if view is View.ANSWER:
            return "[dim]c[/dim] correct  [dim]i[/dim] incorrect  [dim]q[/dim] quit"
        if view is View.REVISIT_CHOICE:
            return "[dim]1/3/7/9[/dim] revisit in days  [dim]q[/dim] quit"
        if view is View.DONE:
            return "[dim]q[/dim] quit"
        return "[dim]Enter[/dim] confirm  [dim]q[/dim] quit"

    def action_confirm(self) -> None:
        """Reveal the answer."""
        self._deliver(Confirm())

    def action_judge_correct(self) -> None:
        self._deliver(JudgeCorrect())

    def action_judge_incorrect(self) -> None:
        self._deliver(JudgeIncorrect())

    def action_choose(self, days: int) -> None:
        """Schedule the card to come back in the given number of days."""
        self._deliver(ChooseInterval(days))

    def action_quit_review(self) -> None:
        """End the review; unanswered cards keep no outcome."""
        self._deliver(Quit())
