"""Domain models for Headlines."""

from headlines.models.article import (
    Article,
    ArticleCandidate,
    ArticleDetail,
    DeleteResult,
    Note,
)

__all__ = [
    "Article",
    "ArticleCandidate",
    "ArticleDetail",
    "DeleteResult",
    "Note",
]
