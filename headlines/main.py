"""Headlines FastAPI application entry point.

Wires together the document store, markup fetcher, record extractor and
services via dependency injection.  Loads configuration from ``.env`` and
``config/config.yaml``, configures structured logging, and serves the
static frontend for ``/`` and ``/saved``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from headlines import __version__
from headlines.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from headlines.api.routes import router as api_router
from headlines.config.loader import load_config
from headlines.config.settings import Settings
from headlines.interfaces.document_store import IDocumentStore
from headlines.interfaces.markup_fetcher import IMarkupFetcher
from headlines.providers.fetcher.http_fetcher import HttpMarkupFetcher
from headlines.providers.store.mongo_document_store import MongoDocumentStore
from headlines.providers.store.sqlite_document_store import SQLiteDocumentStore
from headlines.services.article_service import ArticleService
from headlines.services.ingestion_service import IngestionOrchestrator
from headlines.services.record_extractor import ExtractorSelectors, RecordExtractor
from headlines.utils.errors import ConfigurationError
from headlines.utils.logging import configure_logging, get_logger

_FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend"

_MONGO_SCHEMES = frozenset({"mongodb", "mongodb+srv"})

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Store selection
# ---------------------------------------------------------------------------


def build_store(app_settings: Settings) -> IDocumentStore:
    """Select the document store adapter from ``STORE_URL``.

    ``sqlite:///relative.db`` and ``sqlite:////absolute.db`` select
    SQLite; ``mongodb://`` and ``mongodb+srv://`` select MongoDB.
    """
    scheme = app_settings.get_store_scheme()
    if scheme == "sqlite":
        _, _, path = app_settings.store_url.partition("://")
        if path.startswith("/"):
            path = path[1:]
        if not path:
            raise ConfigurationError(message=f"No database path in {app_settings.store_url!r}")
        return SQLiteDocumentStore(db_path=path)
    if scheme in _MONGO_SCHEMES:
        return MongoDocumentStore(url=app_settings.store_url)
    raise ConfigurationError(message=f"Unsupported store URL scheme {scheme!r}")


# ---------------------------------------------------------------------------
# Full DI assembly
# ---------------------------------------------------------------------------


def build_components(app_settings: Settings, config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    The store is returned unconnected.
    """
    if config is None:
        config = load_config(settings=app_settings)

    store = build_store(app_settings)
    fetcher = HttpMarkupFetcher(
        timeout=app_settings.fetch_timeout,
        user_agent=app_settings.user_agent,
    )
    extractor = RecordExtractor(ExtractorSelectors.from_config(config))

    orchestrator = IngestionOrchestrator(
        fetcher=fetcher,
        extractor=extractor,
        store=store,
        source_url=app_settings.source_url,
    )
    article_service = ArticleService(store=store)

    return {
        "store": store,
        "fetcher": fetcher,
        "extractor": extractor,
        "orchestrator": orchestrator,
        "article_service": article_service,
        "ingest_await_writes": app_settings.ingest_await_writes,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Connect the store before serving; drain writes and disconnect on shutdown."""
    components = getattr(application.state, "components", None)
    if components is None:
        components = build_components(application.state.settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    store: IDocumentStore = components["store"]
    await store.connect()

    _logger.info(
        "app_startup",
        version=__version__,
        environment=application.state.settings.app_env,
        store=store.get_provider_name(),
        source_url=components["orchestrator"].source_url,
    )

    yield

    orchestrator: IngestionOrchestrator = components["orchestrator"]
    await orchestrator.drain()
    await store.close()
    fetcher: IMarkupFetcher = components["fetcher"]
    await fetcher.aclose()
    _logger.info("app_shutdown", message="store and fetcher closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to use.  Defaults to the module-level ``settings``.
    components:
        Pre-built DI components (see ``build_components``).  When omitted
        they are built from *app_settings* at startup.
    """
    application = FastAPI(
        title="Headlines API",
        version=__version__,
        description=(
            "Scrape article headlines from a news page, keep the ones worth "
            "reading, and attach notes to them."
        ),
        lifespan=_lifespan,
    )
    application.state.settings = app_settings or settings
    if components is not None:
        application.state.components = components

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)

    # -- API routes --
    application.include_router(api_router)

    # -- Frontend views and static files --
    if _FRONTEND_DIR.exists():
        if (_FRONTEND_DIR / "css").exists():
            application.mount("/css", StaticFiles(directory=str(_FRONTEND_DIR / "css")), name="css")
        if (_FRONTEND_DIR / "js").exists():
            application.mount("/js", StaticFiles(directory=str(_FRONTEND_DIR / "js")), name="js")

        @application.get("/", include_in_schema=False)
        async def serve_index() -> FileResponse:
            return FileResponse(str(_FRONTEND_DIR / "index.html"))

        @application.get("/saved", include_in_schema=False)
        async def serve_saved() -> FileResponse:
            return FileResponse(str(_FRONTEND_DIR / "saved.html"))

    return application


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    uvicorn.run(
        "headlines.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


if __name__ == "__main__":
    run()
