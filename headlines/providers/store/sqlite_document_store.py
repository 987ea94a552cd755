"""SQLite-backed document store provider.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IDocumentStore).
# Database: ``data/headlines.db`` by default (``STORE_URL=sqlite:///...``).
#
# Articles are rows; Notes keep their free-form body as a JSON document
# in a single ``content`` column.  ``articles.note`` stores the Note id
# with no foreign key, so deleting either side never cascades.
#
# One aiosqlite connection is opened in ``connect()`` and shared by all
# requests.  aiosqlite funnels every call through a single worker
# thread, and the connection runs in autocommit mode, so each statement
# is its own transaction.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any
from uuid import uuid4

import aiosqlite
import structlog

from headlines.interfaces.document_store import IDocumentStore
from headlines.models.article import Article, ArticleCandidate, Note
from headlines.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/headlines.db")
_MEMORY = ":memory:"

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_ARTICLES_TABLE = """\
CREATE TABLE IF NOT EXISTS articles (
    seq        INTEGER PRIMARY KEY AUTOINCREMENT,
    id         TEXT    NOT NULL UNIQUE,
    title      TEXT    NOT NULL DEFAULT '',
    summary    TEXT    NOT NULL DEFAULT '',
    link       TEXT,
    saved      INTEGER NOT NULL DEFAULT 0,
    note       TEXT,
    created_at TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

_CREATE_NOTES_TABLE = """\
CREATE TABLE IF NOT EXISTS notes (
    seq        INTEGER PRIMARY KEY AUTOINCREMENT,
    id         TEXT    NOT NULL UNIQUE,
    content    TEXT    NOT NULL,
    created_at TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

_CREATE_INDICES = [
    "CREATE INDEX IF NOT EXISTS idx_articles_saved ON articles(saved);",
]

# ── DML ───────────────────────────────────────────────────────────────

_ARTICLE_COLUMNS = "id, title, summary, link, saved, note"

_INSERT_ARTICLE = """\
INSERT INTO articles (id, title, summary, link, saved, note)
VALUES (?, ?, ?, ?, 0, NULL);
"""

_SELECT_ARTICLE = f"SELECT {_ARTICLE_COLUMNS} FROM articles WHERE id = ?;"

_INSERT_NOTE = "INSERT INTO notes (id, content) VALUES (?, ?);"

_SELECT_NOTE = "SELECT id, content FROM notes WHERE id = ?;"


class SQLiteDocumentStore(IDocumentStore):
    """Articles and Notes persisted in a single SQLite database file."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None

    # ── Lifecycle ──────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Open the shared connection and create tables if needed."""
        if self._db is not None:
            return
        if self._db_path != _MEMORY:
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._store_errors("connect"):
            db = await aiosqlite.connect(self._db_path, isolation_level=None)
            db.row_factory = aiosqlite.Row
            if self._db_path != _MEMORY:
                await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_ARTICLES_TABLE)
            await db.execute(_CREATE_NOTES_TABLE)
            for idx_sql in _CREATE_INDICES:
                await db.execute(idx_sql)
        self._db = db
        logger.info("document_store_connected", provider=self.get_provider_name(), path=self._db_path)

    async def close(self) -> None:
        if self._db is None:
            return
        db, self._db = self._db, None
        await db.close()
        logger.info("document_store_closed", provider=self.get_provider_name())

    def get_provider_name(self) -> str:
        return "sqlite_store"

    # ── Articles ───────────────────────────────────────────────────────

    async def create_article(self, candidate: ArticleCandidate) -> Article:
        db = self._connection()
        article = Article(
            id=uuid4().hex,
            title=candidate.title,
            summary=candidate.summary,
            link=candidate.link,
        )
        with self._store_errors("create_article"):
            await db.execute(
                _INSERT_ARTICLE,
                (article.id, article.title, article.summary, article.link),
            )
        return article

    async def find_articles(self, *, saved: bool | None = None) -> list[Article]:
        db = self._connection()
        query = f"SELECT {_ARTICLE_COLUMNS} FROM articles"
        params: tuple[Any, ...] = ()
        if saved is not None:
            query += " WHERE saved = ?"
            params = (int(saved),)
        query += " ORDER BY seq ASC;"

        with self._store_errors("find_articles"):
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
        return [self._row_to_article(row) for row in rows]

    async def get_article(self, article_id: str) -> Article | None:
        db = self._connection()
        with self._store_errors("get_article"):
            async with db.execute(_SELECT_ARTICLE, (article_id,)) as cursor:
                row = await cursor.fetchone()
        return self._row_to_article(row) if row is not None else None

    async def update_article(
        self,
        article_id: str,
        *,
        saved: bool | None = None,
        note: str | None = None,
    ) -> Article | None:
        assignments: list[str] = []
        params: list[Any] = []
        if saved is not None:
            assignments.append("saved = ?")
            params.append(int(saved))
        if note is not None:
            assignments.append("note = ?")
            params.append(note)
        if not assignments:
            return await self.get_article(article_id)

        db = self._connection()
        params.append(article_id)
        query = (
            f"UPDATE articles SET {', '.join(assignments)} "
            f"WHERE id = ? RETURNING {_ARTICLE_COLUMNS};"
        )
        with self._store_errors("update_article"):
            async with db.execute(query, params) as cursor:
                rows = await cursor.fetchall()
        return self._row_to_article(rows[0]) if rows else None

    async def delete_article(self, article_id: str) -> bool:
        db = self._connection()
        with self._store_errors("delete_article"):
            cursor = await db.execute("DELETE FROM articles WHERE id = ?;", (article_id,))
        return cursor.rowcount > 0

    async def delete_all_articles(self) -> int:
        db = self._connection()
        with self._store_errors("delete_all_articles"):
            cursor = await db.execute("DELETE FROM articles;")
        return max(cursor.rowcount, 0)

    # ── Notes ──────────────────────────────────────────────────────────

    async def create_note(self, content: dict[str, Any]) -> Note:
        db = self._connection()
        body = {k: v for k, v in content.items() if k not in ("id", "_id")}
        note_id = uuid4().hex
        with self._store_errors("create_note"):
            await db.execute(_INSERT_NOTE, (note_id, json.dumps(body)))
        return Note.model_validate({"_id": note_id, **body})

    async def get_note(self, note_id: str) -> Note | None:
        db = self._connection()
        with self._store_errors("get_note"):
            async with db.execute(_SELECT_NOTE, (note_id,)) as cursor:
                row = await cursor.fetchone()
        if row is None:
            return None
        return Note.model_validate({"_id": row["id"], **json.loads(row["content"])})

    # ── Private helpers ────────────────────────────────────────────────

    def _connection(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StoreError(
                message="Document store is not connected",
                provider_name=self.get_provider_name(),
            )
        return self._db

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """Re-raise driver errors from *operation* as StoreError."""
        try:
            yield
        except (sqlite3.Error, ValueError) as exc:
            logger.error("document_store_error", operation=operation, error=str(exc))
            raise StoreError(
                message=f"{operation} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    @staticmethod
    def _row_to_article(row: aiosqlite.Row) -> Article:
        return Article(
            id=row["id"],
            title=row["title"],
            summary=row["summary"],
            link=row["link"],
            saved=bool(row["saved"]),
            note=row["note"],
        )
