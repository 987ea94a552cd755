"""MongoDB-backed document store provider.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing IDocumentStore).
# Selected when ``STORE_URL`` starts with ``mongodb://`` or
# ``mongodb+srv://``.  The database name comes from the URL path
# (``mongodb://localhost:27017/mongoHeadlines``).
#
# Collections:
#   articles  {_id, title, summary, link, saved, note}
#   notes     {_id, ...free-form body fields}
#
# ``articles.note`` holds the Note's ObjectId; it is converted to and
# from its hex string at this boundary so the rest of the application
# only ever sees opaque string ids.  A malformed id can never match a
# document, so it is treated as "no match" rather than an error.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, AsyncMongoClient, ReturnDocument
from pymongo.errors import PyMongoError

from headlines.interfaces.document_store import IDocumentStore
from headlines.models.article import Article, ArticleCandidate, Note
from headlines.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DATABASE = "mongoHeadlines"
_ARTICLES = "articles"
_NOTES = "notes"


def _object_id(value: str) -> ObjectId | None:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class MongoDocumentStore(IDocumentStore):
    """Articles and Notes persisted in two MongoDB collections.

    The ``AsyncMongoClient`` is injectable for testing; by default one is
    created from *url* and owned (closed) by this store.
    """

    def __init__(
        self,
        url: str = f"mongodb://localhost:27017/{_DEFAULT_DATABASE}",
        client: AsyncMongoClient | None = None,
    ) -> None:
        self._url = url
        self._owns_client = client is None
        self._client = client
        self._db: Any = None

    # ── Lifecycle ──────────────────────────────────────────────────────

    async def connect(self) -> None:
        """Create the client, verify the server answers, and ensure indexes."""
        if self._db is not None:
            return
        with self._store_errors("connect"):
            if self._client is None:
                self._client = AsyncMongoClient(self._url)
            db = self._client.get_default_database(default=_DEFAULT_DATABASE)
            await db.command("ping")
            await db[_ARTICLES].create_index([("saved", ASCENDING)])
        self._db = db
        logger.info("document_store_connected", provider=self.get_provider_name(), database=db.name)

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        self._db = None
        if self._owns_client:
            await client.close()
        logger.info("document_store_closed", provider=self.get_provider_name())

    def get_provider_name(self) -> str:
        return "mongo_store"

    # ── Articles ───────────────────────────────────────────────────────

    async def create_article(self, candidate: ArticleCandidate) -> Article:
        articles = self._collection(_ARTICLES)
        document = {
            "title": candidate.title,
            "summary": candidate.summary,
            "link": candidate.link,
            "saved": False,
            "note": None,
        }
        with self._store_errors("create_article"):
            result = await articles.insert_one(document)
        return Article(
            id=str(result.inserted_id),
            title=candidate.title,
            summary=candidate.summary,
            link=candidate.link,
        )

    async def find_articles(self, *, saved: bool | None = None) -> list[Article]:
        articles = self._collection(_ARTICLES)
        query: dict[str, Any] = {} if saved is None else {"saved": saved}
        with self._store_errors("find_articles"):
            cursor = articles.find(query).sort("_id", ASCENDING)
            documents = await cursor.to_list(None)
        return [self._document_to_article(doc) for doc in documents]

    async def get_article(self, article_id: str) -> Article | None:
        oid = _object_id(article_id)
        if oid is None:
            return None
        articles = self._collection(_ARTICLES)
        with self._store_errors("get_article"):
            document = await articles.find_one({"_id": oid})
        return self._document_to_article(document) if document else None

    async def update_article(
        self,
        article_id: str,
        *,
        saved: bool | None = None,
        note: str | None = None,
    ) -> Article | None:
        changes: dict[str, Any] = {}
        if saved is not None:
            changes["saved"] = saved
        if note is not None:
            note_oid = _object_id(note)
            changes["note"] = note_oid if note_oid is not None else note
        if not changes:
            return await self.get_article(article_id)

        oid = _object_id(article_id)
        if oid is None:
            return None
        articles = self._collection(_ARTICLES)
        with self._store_errors("update_article"):
            document = await articles.find_one_and_update(
                {"_id": oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        return self._document_to_article(document) if document else None

    async def delete_article(self, article_id: str) -> bool:
        oid = _object_id(article_id)
        if oid is None:
            return False
        articles = self._collection(_ARTICLES)
        with self._store_errors("delete_article"):
            result = await articles.delete_one({"_id": oid})
        return result.deleted_count > 0

    async def delete_all_articles(self) -> int:
        articles = self._collection(_ARTICLES)
        with self._store_errors("delete_all_articles"):
            result = await articles.delete_many({})
        return result.deleted_count

    # ── Notes ──────────────────────────────────────────────────────────

    async def create_note(self, content: dict[str, Any]) -> Note:
        notes = self._collection(_NOTES)
        body = {k: v for k, v in content.items() if k not in ("id", "_id")}
        with self._store_errors("create_note"):
            result = await notes.insert_one(dict(body))
        return Note.model_validate({"_id": str(result.inserted_id), **body})

    async def get_note(self, note_id: str) -> Note | None:
        oid = _object_id(note_id)
        if oid is None:
            return None
        notes = self._collection(_NOTES)
        with self._store_errors("get_note"):
            document = await notes.find_one({"_id": oid})
        if not document:
            return None
        document["_id"] = str(document["_id"])
        return Note.model_validate(document)

    # ── Private helpers ────────────────────────────────────────────────

    def _collection(self, name: str) -> Any:
        if self._db is None:
            raise StoreError(
                message="Document store is not connected",
                provider_name=self.get_provider_name(),
            )
        return self._db[name]

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """Re-raise driver errors from *operation* as StoreError."""
        try:
            yield
        except PyMongoError as exc:
            logger.error("document_store_error", operation=operation, error=str(exc))
            raise StoreError(
                message=f"{operation} failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    @staticmethod
    def _document_to_article(document: dict[str, Any]) -> Article:
        note = document.get("note")
        return Article(
            id=str(document["_id"]),
            title=document.get("title") or "",
            summary=document.get("summary") or "",
            link=document.get("link"),
            saved=bool(document.get("saved", False)),
            note=str(note) if note is not None else None,
        )
