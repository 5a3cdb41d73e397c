"""Persist the results of a finished review session.

For each card in deck order:

- judged correct with an interval recorded: store that interval
- judged incorrect with an interval recorded: store an interval of 1
- anything else (unreached, or no interval): leave the card alone

A failing update is logged and collected; the remaining cards are still
processed.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field, replace
from typing import Callable, Protocol, Sequence

from ..store import Flashcard, StoreError
from .session import ReviewOutcomes

logger = logging.getLogger(__name__)

INCORRECT_REVISIT_DAYS = 1


class CardUpdater(Protocol):
    def update_flashcard(self, card: Flashcard) -> None: ...


@dataclass
class CardUpdate:
    """A single applied change."""

    card: Flashcard
    correct: bool

    @property
    def message(self) -> str:
        if self.correct:
            return f"Updated flashcard {self.card.id}: revisit in {self.card.revisit_in} day(s)"
        return f"Marked flashcard {self.card.id} incorrect: revisit in {self.card.revisit_in} day(s)"


@dataclass
class CardFailure:
    card: Flashcard
    error: Exception

    @property
    def message(self) -> str:
        return f"Could not update flashcard {self.card.id}: {self.error}"


@dataclass
class WritebackSummary:
    """What write_back() did."""

    updated: list[CardUpdate] = field(default_factory=list)
    failures: list[CardFailure] = field(default_factory=list)
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures


def planned_update(
    card: Flashcard, outcomes: ReviewOutcomes, index: int
) -> Flashcard | None:
    """Return the card as it should be stored, or None if it is unchanged."""
    interval = outcomes.revisit_interval(index)
    if interval <= 0:
        return None
    if outcomes.was_correct(index):
        return replace(card, revisit_in=interval)
    # An interval without a correct judgment cannot come from the review
    # screen today; such cards are brought back as soon as possible.
    return replace(card, revisit_in=INCORRECT_REVISIT_DAYS)


def write_back(
    store: CardUpdater,
    cards: Sequence[Flashcard],
    outcomes: ReviewOutcomes,
    log: Callable[[str], None] | None = None,
) -> WritebackSummary:
    """Apply session outcomes to the store.

    Args:
        store: Anything with update_flashcard(card).
        cards: The deck in the order it was reviewed.
        outcomes: The finished (or quit) review session.
        log: Optional callback receiving one line per update or failure.

    Returns:
        WritebackSummary listing updated cards and failures.
    """
    summary = WritebackSummary()
    for index, card in enumerate(cards):
        updated = planned_update(card, outcomes, index)
        if updated is None:
            summary.skipped += 1
            continue

        try:
            store.update_flashcard(updated)
        except (StoreError, sqlite3.Error) as exc:
            failure = CardFailure(card=updated, error=exc)
            logger.error("Write-back failed for flashcard %d: %s", card.id, exc)
            summary.failures.append(failure)
            if log is not None:
                log(failure.message)
            continue

        change = CardUpdate(card=updated, correct=outcomes.was_correct(index))
        logger.info(change.message)
        summary.updated.append(change)
        if log is not None:
            log(change.message)
    return summary
