"""Entry points for running the FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .api.routes import NO_CACHE, router as api_router, static_router
from .config import Settings, get_settings
from .content import ContentStore
from .monitoring.metrics import metrics_router
from .tour.errors import NotFound, Unauthorized
from .tour.service import TourService

logger = logging.getLogger(__name__)


def _error_page(content: ContentStore, status_code: int, detail: str) -> Response:
    try:
        page = content.read_text("html", f"error{status_code}.html")
    except NotFound:
        return JSONResponse({"detail": detail}, status_code=status_code, headers=NO_CACHE)
    return HTMLResponse(page, status_code=status_code, headers=NO_CACHE)


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[TourService] = None,
    content: Optional[ContentStore] = None,
) -> FastAPI:
    settings = settings or get_settings()
    service = service or TourService.from_settings(settings)
    content = content or ContentStore(settings.resources_dir, excluded=(settings.data_dir,))

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        logger.info(
            "Stamp tour service started",
            extra={"environment": settings.environment, "checkpoints": len(service.catalog)},
        )
        yield
        logger.info("Stamp tour service stopped")

    app = FastAPI(title="Stamp Tour Service", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.tour_service = service
    app.state.content = content

    @app.exception_handler(Unauthorized)
    async def _unauthorized(request: Request, exc: Unauthorized) -> Response:
        return _error_page(content, 401, str(exc))

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound) -> Response:
        return _error_page(content, 404, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _unmatched(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == 404:
            return _error_page(content, 404, str(exc.detail))
        return await http_exception_handler(request, exc)

    app.include_router(api_router)
    if settings.enable_metrics:
        app.include_router(metrics_router)
    # Catch-all static paths go last
    app.include_router(static_router)

    return app


__all__ = ["create_app"]
