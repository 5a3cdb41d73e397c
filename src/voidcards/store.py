"""SQLite-backed flashcard storage.

The store is opened once by the CLI and passed explicitly to whatever
needs it; there is no module-level handle.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS flashcards (
    id         INTEGER PRIMARY KEY AUTOINCREMENT,
    file       TEXT NOT NULL,
    question   TEXT NOT NULL,
    answer     TEXT NOT NULL,
    revisit_in INTEGER NOT NULL DEFAULT 0
);
CREATE INDEX IF NOT EXISTS idx_flashcards_file ON flashcards(file);
"""


class StoreError(Exception):
    """Raised when a flashcard store operation fails."""


class StoreOpenError(StoreError):
    """Raised when the database cannot be opened or initialised."""


@dataclass(frozen=True)
class Flashcard:
    """A question/answer pair with its spaced repetition interval."""

    id: int
    file: str
    question: str
    answer: str
    revisit_in: int = 0  # days until due; <= 0 means due now

    @property
    def is_due(self) -> bool:
        return self.revisit_in <= 0


def _row_to_flashcard(row: sqlite3.Row) -> Flashcard:
    return Flashcard(
        id=row["id"],
        file=row["file"],
        question=row["question"],
        answer=row["answer"],
        revisit_in=row["revisit_in"],
    )


class FlashcardStore:
    """Access to the flashcards table."""

    def __init__(self, conn: sqlite3.Connection, path: Path | None = None) -> None:
        conn.row_factory = sqlite3.Row
        self._conn: sqlite3.Connection | None = conn
        self.path = path

    @property
    def closed(self) -> bool:
        return self._conn is None

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("store is closed")
        return self._conn

    def close(self) -> None:
        """Close the underlying connection. Safe to call twice."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed flashcard store at %s", self.path)

    def get_unique_files(self) -> list[str]:
        """Return every distinct source file, sorted."""
        conn = self._require_conn()
        try:
            rows = conn.execute(
                "SELECT DISTINCT file FROM flashcards ORDER BY file"
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"could not list files: {exc}") from exc
        return [row["file"] for row in rows]

    def count_due_by_file(self) -> dict[str, int]:
        """Return the number of due cards per source file."""
        conn = self._require_conn()
        try:
            rows = conn.execute(
                "SELECT file, SUM(CASE WHEN revisit_in <= 0 THEN 1 ELSE 0 END) AS due "
                "FROM flashcards GROUP BY file ORDER BY file"
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"could not count due cards: {exc}") from exc
        return {row["file"]: int(row["due"] or 0) for row in rows}

    def get_due_for_files(self, files: Iterable[str]) -> list[Flashcard]:
        """Return due cards belonging to any of the given files, ordered by id."""
        file_list = list(dict.fromkeys(files))
        if not file_list:
            return []
        conn = self._require_conn()
        placeholders = ", ".join("?" for _ in file_list)
        query = (
            "SELECT id, file, question, answer, revisit_in FROM flashcards "
            f"WHERE revisit_in <= 0 AND file IN ({placeholders}) ORDER BY id"
        )
        try:
            rows = conn.execute(query, file_list).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"could not load due flashcards: {exc}") from exc
        return [_row_to_flashcard(row) for row in rows]

    def get_all_flashcards(self) -> list[Flashcard]:
        conn = self._require_conn()
        try:
            rows = conn.execute(
                "SELECT id, file, question, answer, revisit_in FROM flashcards ORDER BY id"
            ).fetchall()
        except sqlite3.Error as exc:
            raise StoreError(f"could not load flashcards: {exc}") from exc
        return [_row_to_flashcard(row) for row in rows]

    def insert_flashcard(
        self, file: str, question: str, answer: str, revisit_in: int = 0
    ) -> Flashcard:
        """Insert a new card and return it with its assigned id."""
        conn = self._require_conn()
        try:
            with conn:
                cursor = conn.execute(
                    "INSERT INTO flashcards (file, question, answer, revisit_in) "
                    "VALUES (?, ?, ?, ?)",
                    (file, question, answer, revisit_in),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"could not insert flashcard: {exc}") from exc
        card_id = cursor.lastrowid
        assert card_id is not None
        logger.debug("Inserted flashcard %d from %s", card_id, file)
        return Flashcard(
            id=card_id, file=file, question=question, answer=answer, revisit_in=revisit_in
        )

    def update_flashcard(self, card: Flashcard) -> None:
        """Persist the card's revisit interval.

        Raises:
            StoreError: If the update fails or the card no longer exists.
        """
        conn = self._require_conn()
        try:
            with conn:
                cursor = conn.execute(
                    "UPDATE flashcards SET revisit_in = ? WHERE id = ?",
                    (card.revisit_in, card.id),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"could not update flashcard {card.id}: {exc}") from exc
        if cursor.rowcount == 0:
            raise StoreError(f"flashcard {card.id} not found")
        logger.debug("Flashcard %d revisit_in=%d", card.id, card.revisit_in)


def open_store(path: Path | str) -> FlashcardStore:
    """Open (creating if needed) the flashcard database at path.

    Raises:
        StoreOpenError: If the database cannot be opened or initialised.
    """
    db_path = Path(path)
    try:
        conn = sqlite3.connect(str(db_path))
    except sqlite3.Error as exc:
        raise StoreOpenError(f"cannot open database {db_path}: {exc}") from exc
    try:
        conn.executescript(SCHEMA_SQL)
    except sqlite3.Error as exc:
        conn.close()
        raise StoreOpenError(f"cannot initialise database {db_path}: {exc}") from exc
    logger.debug("Opened flashcard store at %s", db_path)
    return FlashcardStore(conn, db_path)


def close_store(store: FlashcardStore) -> None:
    """Close the store."""
    store.close()
