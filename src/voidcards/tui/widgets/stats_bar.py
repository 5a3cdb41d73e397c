"""Stats bar widget for displaying running review results."""

from __future__ import annotations

from textual.widgets import Static


class StatsBar(Static):
    """Widget showing correct count, position and incorrect count."""

    DEFAULT_CSS = """
    StatsBar {
        height: 1;
        margin-top: 1;
        padding: 0 1;
    }
    """

    def __init__(self, id: str | None = None) -> None:
        super().__init__(id=id)
        self._correct = 0
        self._incorrect = 0
        self._current = 0
        self._total = 0

    @property
    def summary(self) -> str:
        return self._format_counts()

    def update_counts(self, correct: int, incorrect: int, current: int, total: int) -> None:
        """Update the displayed counts."""
        self._correct = correct
        self._incorrect = incorrect
        self._current = current
        self._total = total
        self._refresh_display()

    def _format_counts(self) -> str:
        width = max(self.size.width - 2, 24)
        left = f"✅ {self._correct}"
        center = f"{self._current}/{self._total}"
        right = f"❌ {self._incorrect}"
        gap = width - len(left) - len(center) - len(right)
        left_gap = max(gap // 2, 1)
        right_gap = max(gap - left_gap, 1)
        return f"{left}{' ' * left_gap}{center}{' ' * right_gap}{right}"

    def _refresh_display(self) -> None:
        self.update(self._format_counts())

    def on_resize(self) -> None:
        self._refresh_display()
