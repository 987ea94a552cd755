"""Shared pytest fixtures for the Headlines test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from headlines.interfaces.markup_fetcher import IMarkupFetcher
from headlines.models.article import ArticleCandidate
from headlines.providers.store.sqlite_document_store import SQLiteDocumentStore
from headlines.utils.errors import TransportError

# ---------------------------------------------------------------------------
# Sample markup
# ---------------------------------------------------------------------------

SAMPLE_MARKUP = """\
<html>
  <body>
    <article>
      <h2><a href="/2024/markets">Markets rally</a></h2>
      <p class="summary">Stocks rose
today</p>
    </article>
  </body>
</html>
"""

THREE_ARTICLE_MARKUP = """\
<html>
  <body>
    <section>
      <article>
        <h2><a href="/one">First story</a></h2>
        <p class="summary">First summary</p>
      </article>
      <article>
        <h2>Second story without a link</h2>
        <p class="summary">Second summary</p>
      </article>
      <article>
        <h2><a href="/three">Third story</a></h2>
      </article>
    </section>
  </body>
</html>
"""

EMPTY_MARKUP = "<html><body><p>No stories today.</p></body></html>"


class FakeMarkupFetcher(IMarkupFetcher):
    """In-memory fetcher returning canned markup (or raising) per call."""

    def __init__(self, markup: str = SAMPLE_MARKUP, error: Exception | None = None) -> None:
        self.markup = markup
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.markup

    async def aclose(self) -> None:
        self.closed = True

    def get_provider_name(self) -> str:
        return "fake_fetcher"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal configuration mapping for testing."""
    return {
        "app": {"host": "127.0.0.1", "port": 4000, "env": "test"},
        "store": {"url": "sqlite:///:memory:"},
        "source": {"url": "https://news.example.test/"},
        "extractor": {
            "container": "article",
            "title": ":scope > h2",
            "summary": ":scope > .summary",
            "link": ":scope > h2 > a",
        },
    }


@pytest.fixture
def sample_candidate() -> ArticleCandidate:
    return ArticleCandidate(title="Markets rally", summary="Stocks rose today", link="/2024/markets")


@pytest.fixture
def fake_fetcher() -> FakeMarkupFetcher:
    return FakeMarkupFetcher()


@pytest.fixture
def failing_fetcher() -> FakeMarkupFetcher:
    return FakeMarkupFetcher(
        error=TransportError(
            message="HTTP 503 for https://news.example.test/",
            provider_name="fake_fetcher",
            url="https://news.example.test/",
            status_code=503,
        )
    )


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> AsyncIterator[SQLiteDocumentStore]:
    """A connected SQLite store backed by a temporary database file."""
    store = SQLiteDocumentStore(db_path=tmp_path / "headlines_test.db")
    await store.connect()
    yield store
    await store.close()
