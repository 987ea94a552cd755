"""Ingestion orchestrator -- fetch, extract, and fan out article writes.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services.
# Depends on: IMarkupFetcher, RecordExtractor, IDocumentStore.
#
# One ingestion run:
#
#   1. FETCH    -- download the source page.  A TransportError ends the
#                  run before anything is written.
#   2. EXTRACT  -- walk the candidate records in document order.
#   3. FAN OUT  -- launch one independent ``create_article`` task per
#                  candidate.  No batching, no shared transaction: one
#                  record failing never affects the others.
#   4. RESPOND  -- once the launch loop is done, yield to the event loop
#                  a single time.  If a write has already failed by then,
#                  the first failure (launch order) becomes the result of
#                  the whole run; other writes may still be in flight.
#                  Otherwise the run is returned while writes may still
#                  be outstanding.
#
# Every write reports its own outcome through a done-callback, which logs
# it and records it on the IngestionRun.  In-flight tasks are held in a
# set so they are not garbage-collected and can be drained on shutdown.
#
# There is no deduplication: running twice over the same page stores
# every record twice.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
import functools
from dataclasses import dataclass, field

import structlog

from headlines.interfaces.document_store import IDocumentStore
from headlines.interfaces.markup_fetcher import IMarkupFetcher
from headlines.models.article import Article, ArticleCandidate
from headlines.services.record_extractor import RecordExtractor
from headlines.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)


@dataclass(frozen=True)
class WriteOutcome:
    """The settled result of persisting one candidate record."""

    index: int
    candidate: ArticleCandidate
    article: Article | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class IngestionRun:
    """Bookkeeping for one fetch -> extract -> persist cycle.

    ``outcomes`` fills in as writes settle, in completion order.
    """

    source_url: str
    tasks: list[asyncio.Task[Article]] = field(default_factory=list)
    outcomes: list[WriteOutcome] = field(default_factory=list)

    @property
    def launched(self) -> int:
        return len(self.tasks)

    @property
    def pending(self) -> int:
        return sum(1 for task in self.tasks if not task.done())

    @property
    def failures(self) -> list[WriteOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def articles(self) -> list[Article]:
        ordered = sorted(self.outcomes, key=lambda o: o.index)
        return [o.article for o in ordered if o.article is not None]

    async def settled(self) -> list[WriteOutcome]:
        """Wait for every write of this run and return outcomes in launch order."""
        if self.tasks:
            await asyncio.gather(*self.tasks, return_exceptions=True)
        return sorted(self.outcomes, key=lambda o: o.index)


class IngestionOrchestrator:
    """Drive a single-source ingestion run against the document store."""

    def __init__(
        self,
        fetcher: IMarkupFetcher,
        extractor: RecordExtractor,
        store: IDocumentStore,
        source_url: str,
    ) -> None:
        self._fetcher = fetcher
        self._extractor = extractor
        self._store = store
        self._source_url = source_url
        self._in_flight: set[asyncio.Task[Article]] = set()

    @property
    def source_url(self) -> str:
        return self._source_url

    @property
    def in_flight(self) -> int:
        """Number of article writes, across all runs, not yet settled."""
        return len(self._in_flight)

    async def run(self, *, wait: bool = False) -> IngestionRun:
        """Execute one ingestion run.

        Parameters
        ----------
        wait:
            When True, wait for every write before returning and raise the
            first failure (launch order) if any write failed.

        Raises
        ------
        TransportError
            The source page could not be fetched.  Nothing was written.
        StoreError
            A write failed before the run was acknowledged.
        """
        run = IngestionRun(source_url=self._source_url)
        logger.info("ingestion_started", url=self._source_url)

        markup = await self._fetcher.fetch(self._source_url)

        for index, candidate in enumerate(self._extractor.extract(markup)):
            task = asyncio.create_task(
                self._store.create_article(candidate),
                name=f"create_article[{index}]",
            )
            self._in_flight.add(task)
            task.add_done_callback(functools.partial(self._record_outcome, run, index, candidate))
            run.tasks.append(task)

        # One pass of the event loop lets writes that fail without
        # suspending report before the run is acknowledged.
        await asyncio.sleep(0)
        self._raise_first_failure(run)

        if wait:
            await run.settled()
            self._raise_first_failure(run)

        logger.info(
            "ingestion_acknowledged",
            url=self._source_url,
            launched=run.launched,
            pending=run.pending,
        )
        return run

    async def drain(self) -> None:
        """Wait until every in-flight write from every run has settled."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    # ── Private helpers ────────────────────────────────────────────────

    def _raise_first_failure(self, run: IngestionRun) -> None:
        for task in run.tasks:
            if not task.done() or task.cancelled():
                continue
            exc = task.exception()
            if exc is None:
                continue
            logger.error(
                "ingestion_failed",
                url=self._source_url,
                task=task.get_name(),
                error=str(exc),
            )
            if isinstance(exc, StoreError):
                raise exc
            raise StoreError(
                message=str(exc),
                provider_name=self._store.get_provider_name(),
            ) from exc

    def _record_outcome(
        self,
        run: IngestionRun,
        index: int,
        candidate: ArticleCandidate,
        task: asyncio.Task[Article],
    ) -> None:
        self._in_flight.discard(task)

        if task.cancelled():
            logger.warning("article_create_cancelled", index=index, title=candidate.title)
            outcome = WriteOutcome(index=index, candidate=candidate, error=asyncio.CancelledError())
        elif task.exception() is not None:
            exc = task.exception()
            logger.error("article_create_failed", index=index, title=candidate.title, error=str(exc))
            outcome = WriteOutcome(index=index, candidate=candidate, error=exc)
        else:
            article = task.result()
            logger.info("article_created", index=index, article_id=article.id, title=article.title)
            outcome = WriteOutcome(index=index, candidate=candidate, article=article)

        run.outcomes.append(outcome)
