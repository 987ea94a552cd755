"""Article/Note service -- the CRUD operations behind the API.

Stateless between calls: every method is one complete read/modify/write
against the injected document store.  Store failures propagate as
``StoreError`` except from ``clear_all``, which logs and swallows them.

Article.saved only ever moves from False to True (``mark_saved``); there
is no way to unsave.  Notes are created on their own and then linked by
writing their id into the article, so the two writes are not atomic: if
the article update fails the Note already exists and is left orphaned.
"""

from __future__ import annotations

from typing import Any

import structlog

from headlines.interfaces.document_store import IDocumentStore
from headlines.models.article import Article, ArticleDetail, DeleteResult
from headlines.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)


class ArticleService:
    """List, annotate, save and delete articles."""

    def __init__(self, store: IDocumentStore) -> None:
        self._store = store

    async def list_saved(self) -> list[Article]:
        return await self._store.find_articles(saved=True)

    async def list_unsaved(self) -> list[Article]:
        return await self._store.find_articles(saved=False)

    async def get_article(self, article_id: str) -> ArticleDetail | None:
        """Return the article with its note populated, or None."""
        article = await self._store.get_article(article_id)
        if article is None:
            return None
        note = None
        if article.note is not None:
            note = await self._store.get_note(article.note)
            if note is None:
                logger.warning("note_reference_dangling", article_id=article_id, note_id=article.note)
        return ArticleDetail.populate(article, note)

    async def add_note(self, article_id: str, content: dict[str, Any]) -> Article | None:
        """Create a Note from *content* and link it to *article_id*.

        Returns the updated article, or None if no article has that id
        (the Note has been created regardless).
        """
        note = await self._store.create_note(content)
        logger.info("note_created", note_id=note.id, article_id=article_id)
        article = await self._store.update_article(article_id, note=note.id)
        if article is None:
            logger.warning("note_target_missing", note_id=note.id, article_id=article_id)
        return article

    async def mark_saved(self, article_id: str) -> Article | None:
        """Set ``saved`` on the article.  Returns None when nothing matched."""
        article = await self._store.update_article(article_id, saved=True)
        if article is None:
            logger.info("mark_saved_no_match", article_id=article_id)
        else:
            logger.info("article_saved", article_id=article_id)
        return article

    async def delete(self, article_id: str) -> DeleteResult:
        """Delete one article.  Deleting an unknown id is a no-op."""
        deleted = await self._store.delete_article(article_id)
        logger.info("article_deleted" if deleted else "delete_no_match", article_id=article_id)
        return DeleteResult(id=article_id, deleted=deleted)

    async def clear_all(self) -> int | None:
        """Delete every article.  Store errors are logged, not raised.

        Returns the number of deleted articles, or None if the store failed.
        """
        try:
            removed = await self._store.delete_all_articles()
        except StoreError as exc:
            logger.error("clear_all_failed", error=str(exc), provider=exc.provider_name)
            return None
        logger.info("articles_cleared", removed=removed)
        return removed
