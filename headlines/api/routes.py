"""FastAPI routes for the Headlines API.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                        Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/fetch                      GET     Run one ingestion of the source page
# /api/articles/saved             GET     Articles with saved = true
# /api/articles/unsaved           GET     Articles with saved = false
# /api/articles/{id}              GET     One article, note populated (or null)
# /api/clear                      GET     Delete all articles, redirect to /
# /api/notes                      POST    Create a note and link it (_headlineId)
# /api/headlines/{id}             PUT     Mark an article saved
# /api/headlines/{id}             DELETE  Delete an article
# /api/health                     GET     Liveness + configured store
#
# Services are resolved from ``app.state`` (populated in
# headlines/main.py) through Annotated ``Depends`` helpers.  Store and
# fetch failures propagate as HeadlinesError and are rendered by
# ErrorHandlingMiddleware.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse
from pydantic import ValidationError

from headlines import __version__
from headlines.api.schemas import CreateNoteRequest, HealthResponse
from headlines.models.article import Article, ArticleDetail, DeleteResult
from headlines.services.article_service import ArticleService
from headlines.services.ingestion_service import IngestionOrchestrator
from headlines.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ---------------------------------------------------------------------------
# Dependency injection helpers -- resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_article_service(request: Request) -> ArticleService:
    service = getattr(request.app.state, "article_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Article service unavailable")
    return service


def _get_orchestrator(request: Request) -> IngestionOrchestrator:
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Ingestion unavailable")
    return orchestrator


ArticleServiceDep = Annotated[ArticleService, Depends(_get_article_service)]
OrchestratorDep = Annotated[IngestionOrchestrator, Depends(_get_orchestrator)]


async def _read_note_request(request: Request) -> CreateNoteRequest:
    """Parse the note body from either a JSON or an HTML form submission."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_CONTENT_TYPES):
        form = await request.form()
        payload: Any = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HTTPException(status_code=400, detail=f"Malformed JSON body: {exc}") from exc

    try:
        return CreateNoteRequest.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------


@router.get("/fetch", response_class=PlainTextResponse)
async def fetch_articles(request: Request, orchestrator: OrchestratorDep) -> str:
    """Fetch the source page and store every article found on it.

    Responds once all writes have been launched; they may still be
    running.  Repeated calls store duplicates.
    """
    wait = bool(getattr(request.app.state, "ingest_await_writes", False))
    run = await orchestrator.run(wait=wait)
    _logger.info("fetch_complete", launched=run.launched, pending=run.pending)
    return "Scrape Complete"


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------


@router.get("/articles/saved", response_model=list[Article])
async def list_saved_articles(service: ArticleServiceDep) -> list[Article]:
    return await service.list_saved()


@router.get("/articles/unsaved", response_model=list[Article])
async def list_unsaved_articles(service: ArticleServiceDep) -> list[Article]:
    return await service.list_unsaved()


@router.get("/articles/{article_id}", response_model=ArticleDetail | None)
async def get_article(article_id: str, service: ArticleServiceDep) -> ArticleDetail | None:
    """Return one article with its note populated, or ``null``."""
    return await service.get_article(article_id)


@router.get("/clear")
async def clear_articles(service: ArticleServiceDep) -> RedirectResponse:
    """Delete every article and send the browser back to the landing page.

    Store failures are logged only; the redirect happens either way.
    """
    await service.clear_all()
    return RedirectResponse(url="/", status_code=303)


# ---------------------------------------------------------------------------
# Notes and saved state
# ---------------------------------------------------------------------------


@router.post("/notes", response_model=Article | None)
async def create_note(request: Request, service: ArticleServiceDep) -> Article | None:
    """Create a note and link it to the article named by ``_headlineId``."""
    body = await _read_note_request(request)
    return await service.add_note(body.headline_id, body.note_content())


@router.put("/headlines/{article_id}", response_model=Article | None)
async def save_article(article_id: str, service: ArticleServiceDep) -> Article | None:
    """Mark an article saved.  ``null`` when no article has that id."""
    return await service.mark_saved(article_id)


@router.delete("/headlines/{article_id}", response_model=DeleteResult)
async def delete_article(article_id: str, service: ArticleServiceDep) -> DeleteResult:
    return await service.delete(article_id)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, orchestrator: OrchestratorDep) -> HealthResponse:
    store = request.app.state.store
    return HealthResponse(
        status="ok",
        version=__version__,
        store=store.get_provider_name(),
        source_url=orchestrator.source_url,
        in_flight_writes=orchestrator.in_flight,
    )
