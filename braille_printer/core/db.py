from __future__ import annotations

"""
SQLite-backed document store for the Braille Printer queue.

Features:
- Per-request connection lifecycle (cached on Flask `g`); explicit connections via `connect()` otherwise
- PRAGMAs for reliability: WAL, synchronous=NORMAL
- Schema bootstrap (schema_version = 1)
- Keyed-entity operations shaped like a datastore: incomplete-key put, get by id,
  and query runs with equality filters, one sort key, and a limit
"""

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple

from flask import current_app, g, has_app_context

from braille_printer.core.config import default_db_path

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

KIND = "PrintQ"
CATEGORY_LABEL = "label"
CATEGORY_PAPER = "paper"
CATEGORIES = (CATEGORY_LABEL, CATEGORY_PAPER)

# Entity field -> column. Only these may appear in filters or sort orders.
_COLUMNS = {
    "category": "category",
    "owner_key": "owner_key",
    "status": "status",
    "created_at": "created_at",
}

class StoreError(Exception):
    """Any failure talking to the document store."""


class RecordNotFound(StoreError):
    """No entity exists for the requested identifier."""

    def __init__(self, qid: int):
        super().__init__("datastore: no such entity")
        self.qid = qid


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def category_for(text: str) -> str:
    """Multi-line input prints on paper; everything else is a label."""
    return CATEGORY_PAPER if "\n" in text else CATEGORY_LABEL


@dataclass
class QueueRecord:
    category: str
    owner_key: str
    original_text: str
    encoded_text: str
    rendered_image: bytes
    status: int = 0
    created_at: str = field(default_factory=_iso_now)
    qid: Optional[int] = None


@dataclass(frozen=True)
class Query:
    """
    Immutable query description. Builder methods return a new Query:

        Query(KIND).filter("owner_key", key).order("created_at").limit(100)
    """

    kind: str
    filters: Tuple[Tuple[str, Any], ...] = ()
    order_by: Optional[str] = None
    max_results: Optional[int] = None

    def filter(self, name: str, value: Any) -> "Query":
        if name not in _COLUMNS:
            raise ValueError(f"cannot filter on {name!r}")
        return Query(self.kind, self.filters + ((name, value),), self.order_by, self.max_results)

    def order(self, name: str) -> "Query":
        if name not in _COLUMNS:
            raise ValueError(f"cannot order by {name!r}")
        return Query(self.kind, self.filters, name, self.max_results)

    def limit(self, n: int) -> "Query":
        if n < 1:
            raise ValueError("limit must be positive")
        return Query(self.kind, self.filters, self.order_by, n)

    def to_sql(self) -> Tuple[str, Tuple[Any, ...]]:
        if self.kind != KIND:
            raise StoreError(f"datastore: unknown kind {self.kind!r}")
        sql = "SELECT * FROM printq"
        params: Tuple[Any, ...] = ()
        if self.filters:
            sql += " WHERE " + " AND ".join(f"{_COLUMNS[n]} = ?" for n, _ in self.filters)
            params = tuple(v for _, v in self.filters)
        if self.order_by:
            # id breaks ties between records created in the same microsecond
            sql += f" ORDER BY {_COLUMNS[self.order_by]} ASC, id ASC"
        if self.max_results is not None:
            sql += " LIMIT ?"
            params += (self.max_results,)
        return sql, params


# ----- Connection management -------------------------------------------------


def _apply_pragmas(db: sqlite3.Connection) -> None:
    try:
        db.execute("PRAGMA journal_mode = WAL")
    except sqlite3.DatabaseError:
        pass
    db.execute("PRAGMA synchronous = NORMAL")


def connect(path: str) -> sqlite3.Connection:
    """Open the store at `path`, creating the file and schema if needed."""
    try:
        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        _apply_pragmas(conn)
        _ensure_schema(conn)
    except (sqlite3.Error, OSError) as e:
        raise StoreError(f"cannot open store at {path}: {e}") from e
    return conn


def get_db(path: Optional[str] = None) -> sqlite3.Connection:
    """
    Return the per-request sqlite3 connection of the active Flask app context.

    Outside an app context pass a connection from `connect()` to the store
    functions instead.
    """
    if not has_app_context():
        raise StoreError("no application context; pass an explicit connection")
    if "db" not in g:
        g.db = connect(path or current_app.config.get("PRINTQ_DB_PATH") or default_db_path())
    return g.db


def close_db(e: Optional[BaseException] = None) -> None:
    """
    Close the active DB connection, if any.
    """
    db = g.pop("db", None)
    if db is not None:
        db.close()


def init_app(app) -> None:
    """
    Register teardown hook on a Flask app.
    """
    app.teardown_appcontext(close_db)


# ----- Schema ----------------------------------------------------------------


def _ensure_schema(db: sqlite3.Connection) -> None:
    """
    Create tables if not present and ensure schema_version is initialized.
    """
    with db:
        db.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
              version INTEGER NOT NULL
            )
            """,
        )
        # AUTOINCREMENT guarantees ids are never reused
        db.execute(
            """
            CREATE TABLE IF NOT EXISTS printq (
              id              INTEGER PRIMARY KEY AUTOINCREMENT,
              category        TEXT NOT NULL,
              owner_key       TEXT NOT NULL,
              original_text   TEXT NOT NULL,
              encoded_text    TEXT NOT NULL,
              rendered_image  BLOB,
              status          INTEGER NOT NULL DEFAULT 0,
              created_at      TEXT NOT NULL
            )
            """,
        )
        db.execute("CREATE INDEX IF NOT EXISTS idx_printq_owner ON printq(owner_key, category, created_at)")

        row = db.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1").fetchone()
        if row is None:
            db.execute("INSERT INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))


def _row_to_record(row: sqlite3.Row) -> QueueRecord:
    image = row["rendered_image"]
    return QueueRecord(
        qid=int(row["id"]),
        category=row["category"],
        owner_key=row["owner_key"],
        original_text=row["original_text"],
        encoded_text=row["encoded_text"],
        rendered_image=bytes(image) if image is not None else b"",
        status=int(row["status"]),
        created_at=row["created_at"],
    )


# ----- Entity operations -----------------------------------------------------


def put(record: QueueRecord, db: Optional[sqlite3.Connection] = None) -> int:
    """
    Insert a new record with an incomplete key; the store assigns the id.
    Sets record.qid and returns it.
    """
    if record.qid is not None:
        raise StoreError("datastore: records are immutable once stored")
    db = db or get_db()
    try:
        with db:
            cur = db.execute(
                """
                INSERT INTO printq (category, owner_key, original_text, encoded_text, rendered_image, status, created_at)
                VALUES (?,?,?,?,?,?,?)
                """,
                (
                    record.category,
                    record.owner_key,
                    record.original_text,
                    record.encoded_text,
                    sqlite3.Binary(record.rendered_image),
                    record.status,
                    record.created_at,
                ),
            )
    except sqlite3.Error as e:
        raise StoreError(str(e)) from e
    record.qid = int(cur.lastrowid)
    return record.qid


def get(qid: int, db: Optional[sqlite3.Connection] = None) -> QueueRecord:
    """
    Fetch a record by id. Raises RecordNotFound if absent, StoreError on failure.
    """
    db = db or get_db()
    try:
        row = db.execute("SELECT * FROM printq WHERE id = ?", (qid,)).fetchone()
    except (sqlite3.Error, OverflowError) as e:
        raise StoreError(str(e)) from e
    if row is None:
        raise RecordNotFound(qid)
    return _row_to_record(row)


def run(query: Query, db: Optional[sqlite3.Connection] = None) -> Iterator[QueueRecord]:
    """
    Execute a query and yield records until the cursor is exhausted.
    Errors raised mid-iteration surface as StoreError.
    """
    sql, params = query.to_sql()
    db = db or get_db()
    try:
        cur = db.execute(sql, params)
        for row in cur:
            yield _row_to_record(row)
    except sqlite3.Error as e:
        raise StoreError(str(e)) from e


def ping(db: Optional[sqlite3.Connection] = None) -> bool:
    """
    Return True if the store answers a trivial query.
    """
    try:
        db = db or get_db()
        db.execute("SELECT 1 FROM printq LIMIT 1").fetchall()
    except (sqlite3.Error, StoreError) as e:
        logger.warning("Store ping failed: %s", e)
        return False
    return True


__all__ = [
    "CATEGORIES",
    "CATEGORY_LABEL",
    "CATEGORY_PAPER",
    "KIND",
    "Query",
    "QueueRecord",
    "RecordNotFound",
    "StoreError",
    "category_for",
    "close_db",
    "connect",
    "get",
    "get_db",
    "init_app",
    "ping",
    "put",
    "run",
]
