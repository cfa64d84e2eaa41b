"""SQLite-backed document store for players, teams and matches."""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Generic, Iterable, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel

from tournament.models import Match, Player, Team


logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)

PLAYERS_SEQUENCE = "players_sequence"
TEAMS_SEQUENCE = "teams_sequence"
MATCHES_SEQUENCE = "matches_sequence"


def normalize_name(value: str) -> str:
    """Comparison key for names: surrounding whitespace dropped, full Unicode case folding."""

    return value.strip().casefold()


class DocumentCollection(Generic[DocumentT]):
    """One collection of JSON documents keyed by integer id.

    The normalized name and ``team_id`` are copied out of the document into
    indexed columns so lookups do not need to decode every body.
    """

    def __init__(
        self,
        store: "TournamentStore",
        table: str,
        model: Type[DocumentT],
        *,
        name_field: str | None = None,
    ):
        self._store = store
        self.table = table
        self.model = model
        self.name_field = name_field

    def create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                id INTEGER PRIMARY KEY,
                name_key TEXT,
                team_id INTEGER,
                body_json TEXT NOT NULL
            )
            """
        )
        conn.execute(f"CREATE INDEX IF NOT EXISTS idx_{self.table}_name ON {self.table} (name_key)")
        conn.execute(f"CREATE INDEX IF NOT EXISTS idx_{self.table}_team ON {self.table} (team_id)")

    def get(self, doc_id: int) -> Optional[DocumentT]:
        with self._store.connection() as conn:
            row = conn.execute(f"SELECT body_json FROM {self.table} WHERE id = ?", (doc_id,)).fetchone()
        if row is None:
            return None
        return self._decode(row)

    def get_all_by_ids(self, ids: Iterable[int]) -> List[DocumentT]:
        wanted = sorted(set(ids))
        if not wanted:
            return []
        placeholders = ", ".join("?" for _ in wanted)
        with self._store.connection() as conn:
            rows = conn.execute(
                f"SELECT body_json FROM {self.table} WHERE id IN ({placeholders}) ORDER BY id",
                wanted,
            ).fetchall()
        return [self._decode(row) for row in rows]

    def find_by_name(self, name: str) -> Optional[DocumentT]:
        """Return the lowest-id document whose name matches, ignoring case."""

        matches = self.find_all_by_name(name)
        return matches[0] if matches else None

    def find_all_by_name(self, name: str) -> List[DocumentT]:
        if self.name_field is None:
            raise TypeError(f"Collection {self.table!r} has no name field")
        with self._store.connection() as conn:
            rows = conn.execute(
                f"SELECT body_json FROM {self.table} WHERE name_key = ? ORDER BY id",
                (normalize_name(name),),
            ).fetchall()
        return [self._decode(row) for row in rows]

    def find_by_team(self, team_id: int) -> List[DocumentT]:
        with self._store.connection() as conn:
            rows = conn.execute(
                f"SELECT body_json FROM {self.table} WHERE team_id = ? ORDER BY id",
                (team_id,),
            ).fetchall()
        return [self._decode(row) for row in rows]

    def list_all(self) -> List[DocumentT]:
        with self._store.connection() as conn:
            rows = conn.execute(f"SELECT body_json FROM {self.table} ORDER BY id").fetchall()
        return [self._decode(row) for row in rows]

    def save(self, document: DocumentT) -> DocumentT:
        doc_id = getattr(document, "id")
        name_key = normalize_name(getattr(document, self.name_field)) if self.name_field else None
        team_id = getattr(document, "team_id", None)
        with self._store.connection() as conn:
            conn.execute(
                f"""
                INSERT INTO {self.table} (id, name_key, team_id, body_json)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name_key = excluded.name_key,
                    team_id = excluded.team_id,
                    body_json = excluded.body_json
                """,
                (doc_id, name_key, team_id, document.model_dump_json()),
            )
        return document

    def delete(self, doc_id: int) -> None:
        with self._store.connection() as conn:
            conn.execute(f"DELETE FROM {self.table} WHERE id = ?", (doc_id,))

    def _decode(self, row: sqlite3.Row) -> DocumentT:
        return self.model.model_validate_json(row["body_json"])


class SequenceAllocator:
    """Hands out increasing integers per named counter, starting at 1."""

    def __init__(self, store: "TournamentStore"):
        self._store = store

    def create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS sequences (
                name TEXT PRIMARY KEY,
                seq INTEGER NOT NULL
            )
            """
        )

    def next(self, name: str) -> int:
        with self._store.transaction() as conn:
            conn.execute(
                """
                INSERT INTO sequences (name, seq) VALUES (?, 1)
                ON CONFLICT(name) DO UPDATE SET seq = seq + 1
                """,
                (name,),
            )
            row = conn.execute("SELECT seq FROM sequences WHERE name = ?", (name,)).fetchone()
        return int(row["seq"])


class TournamentStore:
    """Owns the SQLite file and the collections stored in it.

    Outside a transaction every call opens its own autocommit connection.
    Inside ``transaction()`` all collections on the current thread share one
    connection and one ``BEGIN IMMEDIATE`` transaction, so a multi-document
    operation either lands completely or not at all.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._local = threading.local()
        self.players: DocumentCollection[Player] = DocumentCollection(self, "players", Player, name_field="name")
        self.teams: DocumentCollection[Team] = DocumentCollection(self, "teams", Team, name_field="team_name")
        self.matches: DocumentCollection[Match] = DocumentCollection(self, "matches", Match)
        self.sequences = SequenceAllocator(self)
        self._ensure_schema()

    def _open(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path, isolation_level=None, timeout=30.0)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            for collection in (self.players, self.teams, self.matches):
                collection.create_schema(conn)
            self.sequences.create_schema(conn)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return
        conn = self._open()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        active = getattr(self._local, "conn", None)
        if active is not None:
            yield active
            return
        conn = self._open()
        conn.execute("BEGIN IMMEDIATE")
        self._local.conn = conn
        try:
            yield conn
        except BaseException:
            conn.execute("ROLLBACK")
            logger.debug("Rolled back transaction on %s", self.db_path)
            raise
        else:
            conn.execute("COMMIT")
        finally:
            self._local.conn = None
            conn.close()

    @property
    def in_transaction(self) -> bool:
        return getattr(self._local, "conn", None) is not None


__all__ = [
    "DocumentCollection",
    "MATCHES_SEQUENCE",
    "PLAYERS_SEQUENCE",
    "SequenceAllocator",
    "TEAMS_SEQUENCE",
    "TournamentStore",
    "normalize_name",
]
