"""
Main entrypoint for the technical books API.

``create_app`` wires the repositories and services, configures logging
and CORS and mounts the routers.  Collaborators can be injected, which
is how the tests swap in in-memory repositories, a fake catalogue
client and a fixed clock.  Run with::

    uvicorn techbooks.main:app --reload
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog.googlebooks_service import GoogleBooksClient
from .catalog.router import router as catalog_router
from .catalog.service import BookSearchService
from .config import Settings, settings as default_settings
from .favorites.repository import FavoritesRepository, FileFavoritesRepository
from .favorites.router import router as favorites_router
from .favorites.service import FavoritesService
from .logging_config import setup_logging
from .tsundoku.filestore import FileQueueRepository
from .tsundoku.repository import QueueRepository
from .tsundoku.router import router as tsundoku_router
from .tsundoku.service import QueueService


logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    tsundoku_repo: Optional[QueueRepository] = None,
    favorites_repo: Optional[FavoritesRepository] = None,
    catalog_client: Optional[GoogleBooksClient] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration; defaults to the environment-derived ``settings``.
    tsundoku_repo, favorites_repo : optional repositories
        When omitted, JSON file repositories are opened at the paths
        from ``settings``.
    catalog_client : Optional[GoogleBooksClient]
        Anything with a ``search(params)`` method.
    now : Optional[Callable[[], datetime]]
        Clock shared by both services.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    if tsundoku_repo is None:
        tsundoku_repo = FileQueueRepository(settings.tsundoku_file)
    if favorites_repo is None:
        favorites_repo = FileFavoritesRepository(settings.favorites_file)
    if catalog_client is None:
        catalog_client = GoogleBooksClient(
            base_url=settings.books_base_url,
            api_key=settings.books_api_key,
            timeout=settings.books_timeout,
        )

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.queue_service = QueueService(tsundoku_repo, now=now)
    app.state.favorites_service = FavoritesService(favorites_repo, now=now)
    app.state.search_service = BookSearchService(catalog_client)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration = time.perf_counter() - start
            logger.exception(
                "Request failed: %s %s (%.3fs)", request.method, request.url.path, duration
            )
            return JSONResponse(status_code=500, content={"detail": "internal error"})
        duration = time.perf_counter() - start
        logger.info(
            "%s %s -> %s (%.3fs)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(catalog_router)
    app.include_router(tsundoku_router)
    app.include_router(favorites_router)

    logger.info(
        "Started %s (tsundoku: %s, favorites: %s)",
        settings.project_name,
        type(tsundoku_repo).__name__,
        type(favorites_repo).__name__,
    )
    return app


def __getattr__(name: str):
    # The default app is built on first access; importing the module
    # opens no data files.
    if name == "app":
        global app
        app = create_app()
        return app
    raise AttributeError(name)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("techbooks.main:app", host="0.0.0.0", port=8080)
