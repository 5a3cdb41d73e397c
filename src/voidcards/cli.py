"""CLI command routing for voidcards.

This module provides the command-line interface with support for:
- Review mode (default): pick files, review due cards, write results back
- Plain terminal mode when Textual is unavailable or --plain is given
- Listing source files with due counts
- Adding a card by hand
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Callable, Sequence

from . import __version__
from .config_store import Config, ConfigError, load_config
from .console import console, print_error, print_info, print_success
from .review import (
    REVISIT_CHOICES,
    Confirm,
    Quit,
    ReviewSession,
    View,
    event_for_key,
    write_back,
)
from .selection import FileSelection
from .store import Flashcard, FlashcardStore, StoreError, close_store, open_store

logger = logging.getLogger(__name__)

InputFn = Callable[[str], str]


def _check_tui_available() -> bool:
    """Check if TUI dependencies are available."""
    try:
        import textual  # noqa: F401

        return True
    except ImportError:
        return False


def _resolve_config(args: argparse.Namespace) -> Config:
    """Load config and apply command-line overrides without touching the cache."""
    config = load_config()
    overrides: dict[str, object] = {}
    if getattr(args, "data_dir", None):
        overrides["data_dir"] = Path(args.data_dir).expanduser()
    if getattr(args, "log_file", None):
        overrides["log_file"] = Path(args.log_file).expanduser()
    if overrides:
        config = replace(config, **overrides)  # type: ignore[arg-type]
    config.validate()
    return config


def _setup_logging(config: Config) -> None:
    """Send package logs to the configured file, if any."""
    if config.log_file is None:
        return
    package_logger = logging.getLogger("voidcards")
    log_path = os.path.abspath(config.log_file)
    for existing in package_logger.handlers:
        if isinstance(existing, logging.FileHandler) and existing.baseFilename == log_path:
            return
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def _open_configured_store(config: Config) -> FlashcardStore:
    config.ensure_data_dir()
    return open_store(config.database_path)


# Plain mode -----------------------------------------------------------------


def _plain_pick_files(files: Sequence[str], input_fn: InputFn | None = None) -> list[str]:
    """Ask for a file selection on a plain terminal."""
    read = input_fn or input
    selection = FileSelection(files)
    print("Select file(s) to review:")
    print("-" * 40)
    for number, name in enumerate(selection.files, start=1):
        print(f"  {number}. {name}")
    print()
    try:
        choice = read("Numbers separated by commas, 'a' for all, Enter to cancel: ")
    except (EOFError, KeyboardInterrupt):
        print()
        return []

    choice = choice.strip().lower()
    if choice in {"a", "all"}:
        selection.toggle(0)
        return selection.selected_files

    for part in choice.replace(" ", ",").split(","):
        if not part:
            continue
        if not part.isdigit():
            print(f"Ignoring invalid choice: {part}")
            continue
        index = int(part)
        if 1 <= index <= len(selection.files) and not selection.is_selected(index):
            selection.toggle(index)
    return selection.selected_files


def _plain_review(
    cards: Sequence[Flashcard], config: Config, input_fn: InputFn | None = None
) -> ReviewSession:
    """Run a review session with line-based prompts.

    The countdown is not enforced here; timer commands from the session
    are ignored.
    """
    read = input_fn or input
    session = ReviewSession(
        cards,
        duration=config.question_seconds,
        interval=config.tick_interval,
    )
    session.start()
    revisit_prompt = "  ".join(f"[{days}]" for days in REVISIT_CHOICES)

    while not session.terminated:
        snapshot = session.snapshot()
        if snapshot.view is View.DONE:
            print("-" * 40)
            console.print(snapshot.completion_message, style="success", markup=False)
            print(f"Correct: {snapshot.correct_count}  Incorrect: {snapshot.incorrect_count}")
            break

        try:
            if snapshot.view is View.QUESTION:
                print("-" * 40)
                print(f"Card {snapshot.current}/{snapshot.total}")
                print("-" * 40)
                console.print("Question:", style="question")
                print(f"{snapshot.question}\n")
                key = read("Press Enter to show answer (q to quit)... ")
                event = Quit() if key.strip().lower() == "q" else Confirm()
            elif snapshot.view is View.ANSWER:
                console.print("\nAnswer:", style="answer")
                print(f"{snapshot.answer}\n")
                key = read("Was your answer correct? [c]orrect / [i]ncorrect / [q]uit > ")
                event = event_for_key(key.strip())
            else:
                key = read(f"Revisit in (days): {revisit_prompt}  [q]uit > ")
                event = event_for_key(key.strip())
        except (EOFError, KeyboardInterrupt):
            print("\nExiting review.")
            event = Quit()

        if event is None:
            print("Invalid choice.")
            continue
        position = session.position
        session.handle(event)
        if session.position != position and session.last_result_message:
            print(session.last_result_message)

    return session


# Commands ---------------------------------------------------------------------


def _report_writeback(
    store: FlashcardStore, cards: Sequence[Flashcard], session: ReviewSession
) -> None:
    summary = write_back(store, cards, session)
    for change in summary.updated:
        print_success(change.message)
    for failure in summary.failures:
        print_error("DB update error:", failure.error)
    if session.terminated and not session.finished:
        print_info(
            f"Review ended early; {len(cards) - session.position} card(s) left unanswered."
        )


def _review(store: FlashcardStore, config: Config, use_plain: bool) -> int:
    files = store.get_unique_files()
    if not files:
        print_info("No files found in the database. Add flashcards first.")
        return 0

    use_tui = not use_plain and _check_tui_available()
    if use_tui:
        from .tui import run_file_picker

        selected = run_file_picker(files, store.count_due_by_file())
    else:
        selected = _plain_pick_files(files)

    if not selected:
        print_info("No files selected. See you next time!")
        return 0

    cards = store.get_due_for_files(selected)
    if not cards:
        print_info("No flashcards due for review in the selected file(s). Well done!")
        return 0

    logger.info("Reviewing %d card(s) from %d file(s)", len(cards), len(selected))
    if use_tui:
        from .tui import run_review

        session = run_review(cards, config)
    else:
        session = _plain_review(cards, config)

    _report_writeback(store, cards, session)
    return 0


def _cmd_review(args: argparse.Namespace) -> int:
    """Handle review command."""
    try:
        config = _resolve_config(args)
        _setup_logging(config)
        store = _open_configured_store(config)
    except (ConfigError, StoreError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        return _review(store, config, args.plain)
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_store(store)


def _cmd_files(args: argparse.Namespace) -> int:
    """Handle files command."""
    try:
        config = _resolve_config(args)
        _setup_logging(config)
        store = _open_configured_store(config)
    except (ConfigError, StoreError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        counts = store.count_due_by_file()
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_store(store)

    if not counts:
        print_info("No files found in the database. Add flashcards first.")
        return 0

    print("Files:")
    print("-" * 40)
    for name, due in counts.items():
        print(f"{name}  ({due} due)")
    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    """Handle add command."""
    question = args.question.strip()
    answer = args.answer.strip()
    if not question or not answer:
        print("Error: question and answer cannot be empty", file=sys.stderr)
        return 1

    try:
        config = _resolve_config(args)
        _setup_logging(config)
        store = _open_configured_store(config)
    except (ConfigError, StoreError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        card = store.insert_flashcard(args.file, question, answer, args.revisit_in)
    except StoreError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_store(store)

    print_success(f"Added flashcard {card.id} to {card.file}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entrypoint.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="voidcards",
        description="Timed flashcard reviews in the terminal",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Force plain terminal mode (no TUI)",
    )
    parser.add_argument(
        "--data-dir",
        help="Directory holding the flashcard database",
    )
    parser.add_argument(
        "--log-file",
        help="Write debug logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command")

    # review command
    review_parser = subparsers.add_parser(
        "review",
        help="Review due flashcards (default)",
    )
    review_parser.add_argument(
        "--plain",
        action="store_true",
        default=argparse.SUPPRESS,
        help="Force plain terminal mode (no TUI)",
    )
    review_parser.set_defaults(func=_cmd_review)

    # files command
    files_parser = subparsers.add_parser(
        "files",
        help="List source files and how many cards are due",
    )
    files_parser.set_defaults(func=_cmd_files)

    # add command
    add_parser = subparsers.add_parser(
        "add",
        help="Add a flashcard",
    )
    add_parser.add_argument("file", help="Source file tag for the card")
    add_parser.add_argument("question", help="Question text")
    add_parser.add_argument("answer", help="Answer text")
    add_parser.add_argument(
        "--revisit-in",
        type=int,
        default=0,
        help="Days until the card is due (default: 0, due now)",
    )
    add_parser.set_defaults(func=_cmd_add)

    args = parser.parse_args(argv)

    # Route to appropriate handler
    if args.command is None:
        return _cmd_review(args)

    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
