"""Article and Note domain models.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph -- no imports from upper layers).
#
# All models are frozen Pydantic v2 models.  State transitions (e.g.
# unsaved -> saved) are performed by the document store and come back as
# new instances; nothing mutates a model in place.
#
# Identifiers serialize as ``_id`` so API clients see the same document
# shape regardless of which store backend produced the record.
#
# Article.note is a *weak* reference: it holds the Note's id only.  The
# full Note is resolved at read time into an ``ArticleDetail``.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ArticleCandidate(BaseModel):
    """A parsed, not-yet-persisted article extracted from source markup.

    Every field is independently optional in the markup: missing text
    elements become ``""`` and a missing anchor becomes ``None``.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(default="", description="Heading text, whitespace-normalized.")
    summary: str = Field(default="", description="Summary text, whitespace-normalized.")
    link: str | None = Field(default=None, description="Heading anchor href, if present.")


class Article(BaseModel):
    """A persisted article.

    ``saved`` starts False and only ever moves to True.  ``note`` holds the
    id of the linked Note, if any.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="_id", description="Store-assigned identifier.")
    title: str = ""
    summary: str = ""
    link: str | None = None
    saved: bool = False
    note: str | None = Field(default=None, description="Id of the linked Note.")


class Note(BaseModel):
    """A free-form annotation attached to an article.

    ``title`` and ``body`` are the conventional fields; any additional
    fields supplied by the caller are kept as model extras and persisted
    verbatim.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    id: str = Field(alias="_id", description="Store-assigned identifier.")
    title: str = ""
    body: str = ""

    def content(self) -> dict[str, Any]:
        """Return the caller-supplied fields (everything except the id)."""
        return self.model_dump(exclude={"id"})


class ArticleDetail(BaseModel):
    """An article with its ``note`` reference populated to the full Note.

    ``note`` is None when the article has no note or when the referenced
    Note no longer exists.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(alias="_id")
    title: str = ""
    summary: str = ""
    link: str | None = None
    saved: bool = False
    note: Note | None = None

    @classmethod
    def populate(cls, article: Article, note: Note | None) -> ArticleDetail:
        return cls(
            id=article.id,
            title=article.title,
            summary=article.summary,
            link=article.link,
            saved=article.saved,
            note=note,
        )


class DeleteResult(BaseModel):
    """Outcome of deleting a single article by id."""

    model_config = ConfigDict(frozen=True)

    id: str
    deleted: bool
