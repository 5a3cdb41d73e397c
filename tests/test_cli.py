"""Tests for cli.py - command routing, plain mode and write-back reporting."""

from unittest.mock import patch

import logging

import pytest

from conftest import FakeClock
from voidcards.cli import _plain_pick_files, _plain_review, main
from voidcards.config_store import Config
from voidcards.review import ChooseInterval, Confirm, JudgeCorrect, Quit, ReviewSession
from voidcards.store import open_store


def _responses(monkeypatch, answers):
    replies = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(replies))


def _cards_in(data_dir):
    store = open_store(data_dir / "flashcards.db")
    try:
        return store.get_all_flashcards()
    finally:
        store.close()


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "data"


def _add(data_dir, file, question, answer, *extra):
    return main(["--data-dir", str(data_dir), "add", file, question, answer, *extra])


class TestAddAndFiles:
    """Tests for the add and files commands."""

    def test_add_creates_card(self, data_dir, capsys):
        assert _add(data_dir, "a.md", "What?", "That.") == 0
        cards = _cards_in(data_dir)
        assert [(c.file, c.question, c.answer, c.revisit_in) for c in cards] == [
            ("a.md", "What?", "That.", 0)
        ]
        assert "Added flashcard" in capsys.readouterr().out

    def test_add_rejects_blank_question(self, data_dir, capsys):
        assert _add(data_dir, "a.md", "  ", "That.") == 1
        assert "cannot be empty" in capsys.readouterr().err

    def test_files_lists_due_counts(self, data_dir, capsys):
        _add(data_dir, "a.md", "Q1", "A1")
        _add(data_dir, "a.md", "Q2", "A2", "--revisit-in", "3")
        capsys.readouterr()
        assert main(["--data-dir", str(data_dir), "files"]) == 0
        assert "a.md  (1 due)" in capsys.readouterr().out

    def test_unusable_data_dir(self, tmp_path, capsys):
        blocker = tmp_path / "file"
        blocker.write_text("")
        assert main(["--data-dir", str(blocker), "files"]) == 1
        assert "Error:" in capsys.readouterr().err


class TestPlainReview:
    """Tests for the line-based review loop."""

    def test_empty_database(self, data_dir, capsys):
        assert main(["--data-dir", str(data_dir), "--plain"]) == 0
        assert "No files found" in capsys.readouterr().out

    def test_no_selection(self, data_dir, monkeypatch, capsys):
        _add(data_dir, "a.md", "Q1", "A1")
        _responses(monkeypatch, [""])
        assert main(["--data-dir", str(data_dir), "review", "--plain"]) == 0
        assert "No files selected" in capsys.readouterr().out

    def test_nothing_due(self, data_dir, monkeypatch, capsys):
        _add(data_dir, "a.md", "Q1", "A1", "--revisit-in", "5")
        _responses(monkeypatch, ["a"])
        assert main(["--data-dir", str(data_dir), "--plain"]) == 0
        assert "No flashcards due" in capsys.readouterr().out

    def test_full_review_writes_back(self, data_dir, monkeypatch, capsys):
        _add(data_dir, "a.md", "Q1", "A1")
        _add(data_dir, "a.md", "Q2", "A2")
        _responses(monkeypatch, ["a", "", "c", "7", "", "i"])

        assert main(["--data-dir", str(data_dir), "--plain"]) == 0

        cards = _cards_in(data_dir)
        assert [c.revisit_in for c in cards] == [7, 0]
        out = capsys.readouterr().out
        assert "Updated flashcard 1: revisit in 7 day(s)" in out
        assert "Revisit in 7 days" in out
        assert "Marked incorrect." in out

    def test_quit_midway(self, data_dir, monkeypatch, capsys):
        _add(data_dir, "a.md", "Q1", "A1")
        _add(data_dir, "b.md", "Q2", "A2")
        _responses(monkeypatch, ["1,2", "", "c", "3", "q"])

        assert main(["--data-dir", str(data_dir), "--plain"]) == 0

        assert [c.revisit_in for c in _cards_in(data_dir)] == [3, 0]
        assert "1 card(s) left unanswered" in capsys.readouterr().out

    def test_invalid_choice_reprompts(self, capsys):
        from voidcards.store import Flashcard

        cards = [Flashcard(1, "a.md", "Q1", "A1")]
        replies = iter(["", "x", "c", "2", "9"])
        session = _plain_review(cards, Config(), input_fn=lambda prompt: next(replies))
        assert session.finished
        assert session.revisit_interval(0) == 9
        assert capsys.readouterr().out.count("Invalid choice.") == 2

    def test_eof_quits(self):
        from voidcards.store import Flashcard

        def eof(prompt):
            raise EOFError

        session = _plain_review([Flashcard(1, "a.md", "Q", "A")], Config(), input_fn=eof)
        assert session.terminated
        assert session.position == 0


class TestPlainPickFiles:
    def test_numbers(self):
        assert _plain_pick_files(["a", "b", "c"], lambda p: "3, 1") == ["a", "c"]

    def test_all(self):
        assert _plain_pick_files(["a", "b"], lambda p: "a") == ["a", "b"]

    def test_invalid_entries_skipped(self, capsys):
        assert _plain_pick_files(["a", "b"], lambda p: "x,2,9") == ["b"]
        assert "Ignoring invalid choice: x" in capsys.readouterr().out


class TestTuiReview:
    """The TUI path with the Textual apps replaced."""

    def test_uses_tui_results(self, data_dir, capsys):
        _add(data_dir, "a.md", "Q1", "A1")
        _add(data_dir, "a.md", "Q2", "A2")

        def fake_review(cards, config):
            session = ReviewSession(cards, clock=FakeClock())
            for event in (Confirm(), JudgeCorrect(), ChooseInterval(9), Quit()):
                session.handle(event)
            return session

        with patch("voidcards.tui.run_file_picker", return_value=["a.md"]) as picker, patch(
            "voidcards.tui.run_review", side_effect=fake_review
        ), patch("voidcards.cli._check_tui_available", return_value=True):
            assert main(["--data-dir", str(data_dir)]) == 0

        assert picker.call_args.args[0] == ["a.md"]
        assert [c.revisit_in for c in _cards_in(data_dir)] == [9, 0]
        assert "Updated flashcard 1" in capsys.readouterr().out

    def test_write_failure_is_reported(self, data_dir, capsys):
        _add(data_dir, "a.md", "Q1", "A1")

        def fake_review(cards, config):
            session = ReviewSession(cards, clock=FakeClock())
            for event in (Confirm(), JudgeCorrect(), ChooseInterval(1)):
                session.handle(event)
            return session

        from voidcards.store import FlashcardStore, StoreError

        with patch("voidcards.tui.run_file_picker", return_value=["a.md"]), patch(
            "voidcards.tui.run_review", side_effect=fake_review
        ), patch("voidcards.cli._check_tui_available", return_value=True), patch.object(
            FlashcardStore, "update_flashcard", side_effect=StoreError("locked")
        ):
            assert main(["--data-dir", str(data_dir)]) == 0

        assert "DB update error: locked" in capsys.readouterr().err


class TestLogFile:
    """Tests for --log-file handling."""

    @pytest.fixture
    def package_logger(self):
        package_logger = logging.getLogger("voidcards")
        before = list(package_logger.handlers)
        level = package_logger.level
        yield package_logger
        for handler in package_logger.handlers:
            if handler not in before:
                package_logger.removeHandler(handler)
                handler.close()
        package_logger.setLevel(level)

    def _file_handlers(self, package_logger):
        return [h for h in package_logger.handlers if isinstance(h, logging.FileHandler)]

    def test_repeated_runs_share_one_handler(self, data_dir, tmp_path, package_logger):
        log_file = tmp_path / "voidcards.log"
        for _ in range(3):
            assert main(["--data-dir", str(data_dir), "--log-file", str(log_file), "files"]) == 0
        handlers = self._file_handlers(package_logger)
        assert len(handlers) == 1
        assert handlers[0].baseFilename == str(log_file)

    def test_store_path_is_logged(self, data_dir, tmp_path, package_logger):
        log_file = tmp_path / "voidcards.log"
        assert main(["--data-dir", str(data_dir), "--log-file", str(log_file), "files"]) == 0
        for handler in self._file_handlers(package_logger):
            handler.flush()
        assert f"Closed flashcard store at {data_dir / 'flashcards.db'}" in log_file.read_text()
