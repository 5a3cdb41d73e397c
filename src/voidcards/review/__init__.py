"""Review session management for voidcards."""

from .countdown import Countdown, completion_fraction, pick_completion_message
from .session import (
    COMPLETION_MESSAGES,
    REVISIT_CHOICES,
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
    ReviewOutcomes,
    ReviewSession,
    ReviewSnapshot,
    StartCountdown,
    StopCountdown,
    Tick,
    View,
    event_for_key,
)
from .writeback import WritebackSummary, planned_update, write_back

__all__ = [
    "COMPLETION_MESSAGES",
    "REVISIT_CHOICES",
    "ChooseInterval",
    "Command",
    "Confirm",
    "Countdown",
    "CountdownExpired",
    "Event",
    "Exit",
    "JudgeCorrect",
    "JudgeIncorrect",
    "ProgressFrame",
    "Quit",
    "RenderProgress",
    "Resize",
    "ReviewOutcomes",
    "ReviewSession",
    "ReviewSnapshot",
    "StartCountdown",
    "StopCountdown",
    "Tick",
    "View",
    "WritebackSummary",
    "completion_fraction",
    "event_for_key",
    "pick_completion_message",
    "write_back",
    "planned_update",
]
