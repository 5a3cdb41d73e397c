"""Headless tests for the Textual screens using the app pilot."""

import asyncio

from conftest import make_cards
from voidcards.config_store import Config
from voidcards.review import View
from voidcards.tui.app import AppState, VoidcardsApp
from voidcards.tui.screens.file_picker import FilePickerScreen
from voidcards.tui.screens.review import ReviewScreen
from voidcards.tui.widgets.card_view import CardViewWidget
from voidcards.tui.widgets.stats_bar import StatsBar


def _review_state(count, question_seconds=30.0, tick_interval=0.1):
    config = Config(question_seconds=question_seconds, tick_interval=tick_interval)
    return AppState(config=config, cards=make_cards(count))


class TestReviewScreen:
    """Tests for ReviewScreen key handling and timers."""

    def test_full_flow(self):
        state = _review_state(2)

        async def scenario():
            app = VoidcardsApp(state, mode="review")
            async with app.run_test() as pilot:
                await pilot.pause()
                assert isinstance(app.screen, ReviewScreen)
                card_view = app.screen.query_one(CardViewWidget)
                assert card_view.label_text == "Question:"
                assert card_view.body_text == "Q1"

                await pilot.press("enter")
                assert card_view.label_text == "Answer:"
                assert card_view.body_text == "A1"

                await pilot.press("c")
                assert state.session.view is View.REVISIT_CHOICE
                await pilot.press("7")
                assert card_view.body_text == "Q2"
                assert "2/2" in app.screen.query_one(StatsBar).summary

                await pilot.press("enter", "i")
                assert state.session.view is View.DONE
                assert card_view.body_text == state.session.completion_message

                await pilot.press("q")

        asyncio.run(scenario())

        session = state.session
        assert session.terminated
        assert session.finished
        assert session.revisit_interval(0) == 7
        assert session.was_correct(1) is False

    def test_countdown_expiry_reveals_answer(self):
        state = _review_state(1, question_seconds=0.3, tick_interval=0.05)

        async def scenario():
            app = VoidcardsApp(state, mode="review")
            async with app.run_test() as pilot:
                await pilot.pause()
                assert state.session.view is View.QUESTION
                await pilot.pause(0.8)
                assert state.session.view is View.ANSWER
                assert state.session.was_correct(0) is False
                await pilot.press("q")

        asyncio.run(scenario())
        assert state.session.terminated

    def test_quit_on_question(self):
        state = _review_state(3)

        async def scenario():
            app = VoidcardsApp(state, mode="review")
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("q")

        asyncio.run(scenario())
        assert state.session.terminated
        assert state.session.position == 0


class TestFilePickerScreen:
    """Tests for FilePickerScreen selection."""

    def test_select_all_and_confirm(self):
        state = AppState(files=["a.md", "b.md"], due_counts={"a.md": 1, "b.md": 0})

        async def scenario():
            app = VoidcardsApp(state, mode="picker")
            async with app.run_test() as pilot:
                await pilot.pause()
                assert isinstance(app.screen, FilePickerScreen)
                await pilot.press("space")
                assert app.screen.selection.all_selected
                await pilot.press("enter")

        asyncio.run(scenario())
        assert state.selected_files == ["a.md", "b.md"]

    def test_single_file(self):
        state = AppState(files=["a.md", "b.md"])

        async def scenario():
            app = VoidcardsApp(state, mode="picker")
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("down", "down", "space", "enter")

        asyncio.run(scenario())
        assert state.selected_files == ["b.md"]

    def test_quit_selects_nothing(self):
        state = AppState(files=["a.md"])

        async def scenario():
            app = VoidcardsApp(state, mode="picker")
            async with app.run_test() as pilot:
                await pilot.pause()
                await pilot.press("space", "q")

        asyncio.run(scenario())
        assert state.selected_files == []
