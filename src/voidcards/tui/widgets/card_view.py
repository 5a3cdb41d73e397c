"""Card view widget for displaying the current step of a review."""

from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.widgets import Static

from ...review import REVISIT_CHOICES

logger = logging.getLogger(__name__)

_SECTION_CLASSES = ("question-section", "answer-section", "revisit-section", "done-section")


class CardViewWidget(Vertical):
    """Widget for displaying a question, an answer, the revisit prompt or the end message."""

    DEFAULT_CSS = """
    CardViewWidget {
        height: auto;
        padding: 0 1;
    }

    CardViewWidget .section-label {
        text-style: bold;
        margin-bottom: 1;
    }

    CardViewWidget.question-section .section-label {
        color: $primary;
    }

    CardViewWidget.answer-section .section-label {
        color: $success;
    }

    CardViewWidget .content {
        height: auto;
    }

    CardViewWidget .prompt {
        color: $text-muted;
        text-style: italic;
        margin-top: 1;
    }

    CardViewWidget.done-section .content {
        color: $success;
        text-style: bold;
        text-align: center;
    }
    """

    def __init__(self, id: str | None = None) -> None:
        super().__init__(id=id)
        self._label = ""
        self._body = ""

    def compose(self) -> ComposeResult:
        yield Static("", id="card-label", classes="section-label")
        yield Static("", id="card-body", classes="content", markup=False)
        yield Static("", id="card-prompt", classes="prompt", markup=False)

    @property
    def label_text(self) -> str:
        return self._label

    @property
    def body_text(self) -> str:
        return self._body

    def show_question(self, question: str) -> None:
        """Display the question side of the current card."""
        self._set("question-section", "Question:", question, "")

    def show_answer(self, answer: str) -> None:
        """Display the answer and ask for a judgment."""
        self._set(
            "answer-section",
            "Answer:",
            answer,
            "Was your answer correct? [c]orrect / [i]ncorrect",
        )

    def show_revisit(self, message: str) -> None:
        choices = "  ".join(f"[{days}]" for days in REVISIT_CHOICES)
        self._set("revisit-section", "Revisit in (days):", choices, message)

    def show_done(self, message: str) -> None:
        self._set("done-section", "", message, "")

    def _set(self, section: str, label: str, body: str, prompt: str) -> None:
        self._label = label
        self._body = body
        for name in _SECTION_CLASSES:
            self.set_class(name == section, name)
        try:
            self.query_one("#card-label", Static).update(label)
            self.query_one("#card-body", Static).update(body)
            prompt_widget = self.query_one("#card-prompt", Static)
            prompt_widget.update(prompt)
            prompt_widget.display = bool(prompt)
        except NoMatches:
            # Not composed yet; the next call after mounting will draw it.
            logger.debug("Card view not mounted, deferring %s", section)
