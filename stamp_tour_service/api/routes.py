"""FastAPI routes for the stamp tour service."""

from __future__ import annotations

import mimetypes
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from pydantic import AliasChoices, BaseModel, Field

from ..content import ContentStore
from ..security.loopback import require_loopback
from ..tour.errors import NotFound
from ..tour.service import TourService

router = APIRouter()
static_router = APIRouter()

NO_CACHE = {"Cache-Control": "no-cache"}


def get_tour_service(request: Request) -> TourService:
    return request.app.state.tour_service


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content


def get_session_id(request: Request) -> Optional[str]:
    return request.cookies.get(request.app.state.settings.session_cookie)


class LoginRequest(BaseModel):
    user_name: str = Field(..., validation_alias=AliasChoices("user_name", "display_name"))


class ParticipantResponse(BaseModel):
    user_id: str
    user_name: str


@router.post("/login", response_model=ParticipantResponse)
def login(payload: LoginRequest, service: TourService = Depends(get_tour_service)) -> ParticipantResponse:
    participant = service.register(payload.user_name)
    return ParticipantResponse(**participant.to_dict())


@router.get("/check")
def check(
    checkpoint: Optional[str] = Query(None, description="Checkpoint identifier"),
    s: Optional[str] = Query(None, include_in_schema=False),
    session_id: Optional[str] = Depends(get_session_id),
    service: TourService = Depends(get_tour_service),
) -> RedirectResponse:
    receipt = service.check(session_id, checkpoint if checkpoint is not None else s)
    return RedirectResponse(receipt.location, status_code=307)


@router.get("/redeem")
@router.get("/stamp", include_in_schema=False)
@router.get("/stamp/", include_in_schema=False)
def redeem(
    session_id: Optional[str] = Depends(get_session_id),
    service: TourService = Depends(get_tour_service),
    content: ContentStore = Depends(get_content_store),
) -> Response:
    redemption = service.redeem(session_id)
    try:
        page = content.render("check.html", {"STAMP_ID": redemption.checkpoint_id})
    except NotFound:
        return JSONResponse(redemption.to_dict(), headers=NO_CACHE)
    return HTMLResponse(page, headers=NO_CACHE)


class AdminRequest(BaseModel):
    command: str


class AdminResponse(BaseModel):
    command: str
    output: Any
    ok: bool = True


@router.post("/admin", response_model=AdminResponse)
def admin(
    payload: AdminRequest,
    _: str = Depends(require_loopback),
    service: TourService = Depends(get_tour_service),
) -> AdminResponse:
    result = service.admin(payload.command)
    return AdminResponse(**result.to_dict())


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc))


def _content_response(content: ContentStore, category: str, name: str) -> Response:
    body = content.read(category, name)
    media_type, _ = mimetypes.guess_type(name)
    return Response(body, media_type=media_type or "application/octet-stream")


@static_router.get("/", include_in_schema=False)
def index(content: ContentStore = Depends(get_content_store)) -> Response:
    return _content_response(content, "html", "index.html")


@static_router.get("/{file}", include_in_schema=False)
def page(file: str, content: ContentStore = Depends(get_content_store)) -> Response:
    if "." not in file:
        file = f"{file}.html"
    return _content_response(content, "html", file)


@static_router.get("/{folder}/{file}", include_in_schema=False)
def asset(folder: str, file: str, content: ContentStore = Depends(get_content_store)) -> Response:
    return _content_response(content, folder, file)


__all__ = ["router", "static_router", "get_tour_service", "get_content_store", "get_session_id"]
