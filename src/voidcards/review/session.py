"""Review session state machine.

A ReviewSession walks a fixed deck of flashcards through the views
question -> answer -> revisit choice, one card at a time. It is driven
entirely by events passed to handle(), which returns the commands the
driving loop must carry out (start or stop the countdown timers, redraw
the progress bar, exit). The session never blocks and owns no timers of
its own, so it can be exercised without a terminal.

After the session is finished or quit, was_correct() and
revisit_interval() expose the recorded outcomes for the write-back step.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Protocol, Sequence

from ..store import Flashcard
from .countdown import (
    DEFAULT_DURATION,
    DEFAULT_INTERVAL,
    Clock,
    Countdown,
    pick_completion_message,
)

logger = logging.getLogger(__name__)

REVISIT_CHOICES: tuple[int, ...] = (1, 3, 7, 9)

COMPLETION_MESSAGES: tuple[str, ...] = (
    "Deck cleared. The void blinks first.",
    "Every card answered. Nothing left in the dark.",
    "Review complete. Your memory just got a little heavier.",
    "That's the lot. The void will have to wait.",
    "Session done. The cards return to the deep.",
    "All caught up. Even the void is impressed.",
)

INCORRECT_MESSAGE = "Marked incorrect. Card will not be scheduled for repetition."


class View(Enum):
    """Which part of the review is on screen."""

    QUESTION = "question"
    ANSWER = "answer"
    REVISIT_CHOICE = "revisit_choice"
    DONE = "done"


# Events --------------------------------------------------------------------


class Event:
    """Base class for everything handle() accepts."""


@dataclass(frozen=True)
class Confirm(Event):
    """Reveal the answer."""


@dataclass(frozen=True)
class JudgeCorrect(Event):
    pass


@dataclass(frozen=True)
class JudgeIncorrect(Event):
    pass


@dataclass(frozen=True)
class ChooseInterval(Event):
    days: int


@dataclass(frozen=True)
class Quit(Event):
    pass


@dataclass(frozen=True)
class CountdownExpired(Event):
    generation: int


@dataclass(frozen=True)
class Tick(Event):
    generation: int


@dataclass(frozen=True)
class ProgressFrame(Event):
    generation: int


@dataclass(frozen=True)
class Resize(Event):
    width: int
    height: int


# Commands ------------------------------------------------------------------


class Command:
    """Base class for everything handle() asks the driving loop to do."""


@dataclass(frozen=True)
class StartCountdown(Command):
    """Cancel any running timers and start new ones for this generation."""

    generation: int
    duration: float
    interval: float


@dataclass(frozen=True)
class StopCountdown(Command):
    generation: int


@dataclass(frozen=True)
class RenderProgress(Command):
    fraction: float


@dataclass(frozen=True)
class Exit(Command):
    pass


KEY_EVENTS: dict[str, Event] = {
    "enter": Confirm(),
    "c": JudgeCorrect(),
    "i": JudgeIncorrect(),
    "q": Quit(),
    **{str(days): ChooseInterval(days) for days in REVISIT_CHOICES},
}


def event_for_key(key: str) -> Event | None:
    """Translate a key name into a session event, or None if unbound."""
    return KEY_EVENTS.get(key.lower())


class ReviewOutcomes(Protocol):
    """Read access to per-card results."""

    def was_correct(self, index: int) -> bool: ...

    def revisit_interval(self, index: int) -> int: ...


@dataclass(frozen=True)
class ReviewSnapshot:
    """Everything the presentation layer needs to draw the session."""

    view: View
    question: str
    answer: str
    progress: float
    correct_count: int
    incorrect_count: int
    current: int
    total: int
    result_message: str
    completion_message: str
    terminated: bool


def _revisit_message(days: int) -> str:
    unit = "day" if days == 1 else "days"
    return f"Revisit in {days} {unit}"


class ReviewSession:
    """State machine for one pass over a deck of due cards."""

    def __init__(
        self,
        cards: Iterable[Flashcard],
        duration: float = DEFAULT_DURATION,
        interval: float = DEFAULT_INTERVAL,
        clock: Clock = time.monotonic,
        randbelow: Callable[[int], int] = secrets.randbelow,
        messages: Sequence[str] = COMPLETION_MESSAGES,
    ) -> None:
        self._deck: tuple[Flashcard, ...] = tuple(cards)
        self._position = 0
        self._correct = [False] * len(self._deck)
        self._revisit = [0] * len(self._deck)
        self._randbelow = randbelow
        self._messages = tuple(messages)
        self._terminated = False
        self._result_message = ""
        self._last_result_message = ""
        self._completion_message = ""
        self._progress = 0.0
        self.size: tuple[int, int] = (0, 0)

        self._countdown = Countdown(duration, interval, generation=1, clock=clock)

        if self._deck:
            self._view = View.QUESTION
        else:
            self._enter_done()

    # Read-only state -------------------------------------------------------

    @property
    def deck(self) -> tuple[Flashcard, ...]:
        return self._deck

    @property
    def position(self) -> int:
        return self._position

    @property
    def view(self) -> View:
        return self._view

    @property
    def terminated(self) -> bool:
        """True once the user quit, whether or not the deck was finished."""
        return self._terminated

    @property
    def finished(self) -> bool:
        return self._view is View.DONE

    @property
    def countdown(self) -> Countdown:
        return self._countdown

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def result_message(self) -> str:
        return self._result_message

    @property
    def last_result_message(self) -> str:
        """Result of the most recently finished card, kept after advancing."""
        return self._last_result_message

    @property
    def completion_message(self) -> str:
        return self._completion_message

    @property
    def current_card(self) -> Flashcard | None:
        if self._position < len(self._deck):
            return self._deck[self._position]
        return None

    @property
    def correct_count(self) -> int:
        return sum(1 for i in range(self._position) if self._correct[i])

    @property
    def incorrect_count(self) -> int:
        return self._position - self.correct_count

    # Outcome API -----------------------------------------------------------

    def was_correct(self, index: int) -> bool:
        """Whether card index was judged correct; False if out of range."""
        if index < 0 or index >= len(self._correct):
            return False
        return self._correct[index]

    def revisit_interval(self, index: int) -> int:
        """Recorded revisit interval in days for card index; 0 if none."""
        if index < 0 or index >= len(self._revisit):
            return 0
        return self._revisit[index]

    # Event handling --------------------------------------------------------

    def start(self) -> list[Command]:
        """Commands needed before the first event is delivered."""
        if self._terminated or self._view is not View.QUESTION:
            return []
        return [self._start_command()]

    def handle(self, event: Event) -> list[Command]:
        """Apply one event and return the resulting commands."""
        if self._terminated:
            return []

        if isinstance(event, Quit):
            if self._view is View.REVISIT_CHOICE:
                # No interval chosen yet, so the card keeps no outcome.
                self._correct[self._position] = False
            self._terminated = True
            logger.debug("Session quit at card %d/%d", self._position, len(self._deck))
            return [Exit()]
        if isinstance(event, Resize):
            self.size = (event.width, event.height)
            return []
        if isinstance(event, Tick):
            return self._on_tick(event.generation)
        if isinstance(event, ProgressFrame):
            if self._view is View.QUESTION and event.generation == self._countdown.generation:
                return [RenderProgress(self._progress)]
            return []
        if isinstance(event, CountdownExpired):
            if self._view is View.QUESTION and event.generation == self._countdown.generation:
                logger.debug("Countdown expired on card %d", self._position)
                return self._reveal()
            return []

        if self._view is View.QUESTION:
            if isinstance(event, Confirm):
                return self._reveal()
        elif self._view is View.ANSWER:
            if isinstance(event, JudgeCorrect):
                self._correct[self._position] = True
                self._view = View.REVISIT_CHOICE
            elif isinstance(event, JudgeIncorrect):
                self._correct[self._position] = False
                self._result_message = INCORRECT_MESSAGE
                return self._advance()
        elif self._view is View.REVISIT_CHOICE:
            if isinstance(event, ChooseInterval) and event.days in REVISIT_CHOICES:
                self._revisit[self._position] = event.days
                self._result_message = _revisit_message(event.days)
                return self._advance()
        return []

    def snapshot(self) -> ReviewSnapshot:
        card = self.current_card
        total = len(self._deck)
        current = total if self._view is View.DONE else self._position + 1
        return ReviewSnapshot(
            view=self._view,
            question=card.question if card else "",
            answer=card.answer if card else "",
            progress=self._progress,
            correct_count=self.correct_count,
            incorrect_count=self.incorrect_count,
            current=current,
            total=total,
            result_message=self._result_message,
            completion_message=self._completion_message,
            terminated=self._terminated,
        )

    # Transitions -----------------------------------------------------------

    def _start_command(self) -> StartCountdown:
        return StartCountdown(
            generation=self._countdown.generation,
            duration=self._countdown.duration,
            interval=self._countdown.interval,
        )

    def _on_tick(self, generation: int) -> list[Command]:
        if self._view is not View.QUESTION or generation != self._countdown.generation:
            return []
        self._progress = self._countdown.fraction()
        return [RenderProgress(self._progress)]

    def _reveal(self) -> list[Command]:
        self._view = View.ANSWER
        return [StopCountdown(self._countdown.generation)]

    def _advance(self) -> list[Command]:
        self._last_result_message = self._result_message
        self._position += 1
        if self._position >= len(self._deck):
            self._enter_done()
            return [StopCountdown(self._countdown.generation)]
        self._view = View.QUESTION
        self._result_message = ""
        self._progress = 0.0
        self._countdown = self._countdown.restart()
        return [self._start_command(), RenderProgress(0.0)]

    def _enter_done(self) -> None:
        self._view = View.DONE
        self._completion_message = pick_completion_message(
            self._messages, self._randbelow
        )
