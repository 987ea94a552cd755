"""Business logic services.

- **record_extractor** -- markup -> ArticleCandidate records (BeautifulSoup).
- **ingestion_service** -- fetch/extract/fan-out orchestration.
- **article_service** -- list, annotate, save, delete and clear articles.
"""

from headlines.services.article_service import ArticleService
from headlines.services.ingestion_service import (
    IngestionOrchestrator,
    IngestionRun,
    WriteOutcome,
)
from headlines.services.record_extractor import (
    ExtractorSelectors,
    RecordExtractor,
    normalize_text,
)

__all__ = [
    "ArticleService",
    "ExtractorSelectors",
    "IngestionOrchestrator",
    "IngestionRun",
    "RecordExtractor",
    "WriteOutcome",
    "normalize_text",
]
