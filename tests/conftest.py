"""Shared fixtures for voidcards tests."""

from __future__ import annotations

import pytest

import voidcards.config_store as config_store
from voidcards.store import Flashcard, open_store


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_cards(count: int, file: str = "notes.md") -> list[Flashcard]:
    return [
        Flashcard(id=i + 1, file=file, question=f"Q{i + 1}", answer=f"A{i + 1}")
        for i in range(count)
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    config_store.clear_config_cache()
    monkeypatch.setattr(config_store, "_get_config_dir", lambda: tmp_path / "config")
    monkeypatch.delenv(config_store.DATA_DIR_ENV, raising=False)
    yield
    config_store.clear_config_cache()


@pytest.fixture
def store(tmp_path):
    flashcard_store = open_store(tmp_path / "flashcards.db")
    yield flashcard_store
    flashcard_store.close()
