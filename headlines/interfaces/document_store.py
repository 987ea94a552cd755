"""Abstract base class for document-store providers.

# ─── ADAPTER PATTERN ─────────────────────────────────────────────────
#
# IDocumentStore wraps the two persisted collections (articles, notes)
# behind one typed contract.  Concrete implementations:
#
#   SQLiteDocumentStore  (headlines/providers/store/sqlite_document_store.py)
#   MongoDocumentStore   (headlines/providers/store/mongo_document_store.py)
#
# A single instance is created at startup, connected once, and shared by
# every in-flight request.  Each method is one self-contained operation,
# so concurrent callers never observe partial state from each other.
#
# All failures raise ``StoreError``.  A lookup with no match returns
# ``None`` (or ``False`` for deletes), never an exception.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from headlines.models.article import Article, ArticleCandidate, Note


class IDocumentStore(ABC):
    """Contract for the Articles/Notes document store."""

    # ── Lifecycle ──────────────────────────────────────────────────────

    @abstractmethod
    async def connect(self) -> None:
        """Open the long-lived connection and prepare collections/tables.

        Called once at startup, before any request is served.  Must be
        safe to call on an already-prepared store.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the connection.  Safe to call more than once."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    # ── Articles ───────────────────────────────────────────────────────

    @abstractmethod
    async def create_article(self, candidate: ArticleCandidate) -> Article:
        """Persist *candidate* as a new, unsaved Article without a note.

        No deduplication is performed: identical candidates produce
        distinct Articles.
        """

    @abstractmethod
    async def find_articles(self, *, saved: bool | None = None) -> list[Article]:
        """Return Articles, optionally filtered by their ``saved`` flag.

        Results are in insertion order.
        """

    @abstractmethod
    async def get_article(self, article_id: str) -> Article | None:
        """Return the Article with *article_id*, or None."""

    @abstractmethod
    async def update_article(
        self,
        article_id: str,
        *,
        saved: bool | None = None,
        note: str | None = None,
    ) -> Article | None:
        """Apply the given field changes and return the updated Article.

        Arguments left as None are not touched.  Returns None when no
        Article has *article_id*.
        """

    @abstractmethod
    async def delete_article(self, article_id: str) -> bool:
        """Delete one Article.  Returns True if something was deleted.

        Any linked Note is left in place.
        """

    @abstractmethod
    async def delete_all_articles(self) -> int:
        """Delete every Article and return how many were removed."""

    # ── Notes ──────────────────────────────────────────────────────────

    @abstractmethod
    async def create_note(self, content: dict[str, Any]) -> Note:
        """Persist a new Note holding the caller-supplied *content*."""

    @abstractmethod
    async def get_note(self, note_id: str) -> Note | None:
        """Return the Note with *note_id*, or None."""
