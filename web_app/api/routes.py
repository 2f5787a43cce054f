"""API routes implementation."""

import secrets
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, Security, status
from fastapi.security import APIKeyHeader

from .errors import error_response, exception_response
from .schemas import (
    DeleteResponse,
    DomainStatusResponse,
    ErrorResponse,
    HealthResponse,
    LinkCreateRequest,
    LinkListResponse,
    LinkResponse,
    ShortenRequest,
    ShortenResponse,
    StatisticsResponse,
)
from shortlinks.common.headers import build_base_url, get_forwarded_path_prefix
from shortlinks.common.url_builder import build_short_url
from shortlinks.database.base import resolve_ordering
from shortlinks.database.models import Link
from shortlinks.errors import NotFound, ShortLinkError

router = APIRouter()

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    409: {"model": ErrorResponse, "description": "Short code already exists"},
    500: {"model": ErrorResponse, "description": "Storage failure"},
}


class AdminKeyRequired(Exception):
    """Raised when an admin endpoint is called without a valid API key."""


async def require_admin_key(request: Request, api_key: Optional[str] = Security(api_key_header)):
    """Check X-API-Key when an admin key is configured."""
    expected = request.app.state.config.admin_api_key
    if not expected:
        return
    if not api_key or not secrets.compare_digest(api_key, expected):
        raise AdminKeyRequired()


def _public_base_url(request: Request) -> str:
    config = request.app.state.config
    return build_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
        short_domain=config.short_domain,
    )


def _public_path_prefix(request: Request) -> str:
    # A proxy mounting the app under X-Forwarded-Prefix adds to the configured prefix
    forwarded = get_forwarded_path_prefix(request.headers)
    return f"{forwarded}/{request.app.state.config.path_prefix.strip('/')}".rstrip("/")


def _link_response(request: Request, link: Link) -> LinkResponse:
    short_url = build_short_url(
        short_code=link.short_code,
        base_url=_public_base_url(request),
        path_prefix=_public_path_prefix(request),
    )
    return LinkResponse(short_url=short_url, **link.to_dict())


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses=ERROR_RESPONSES,
    summary="Create short URL",
    description="Create a short link. Optionally provide a title and a custom alias.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Programmatic creation endpoint."""
    admin = request.app.state.admin

    try:
        result = await admin.shorten(
            url=body.url,
            title=body.title,
            alias=body.alias,
            base_url=_public_base_url(request),
            path_prefix=_public_path_prefix(request),
        )
    except ShortLinkError as e:
        return exception_response(e)

    return ShortenResponse(
        short_url=result["short_url"],
        qr_code_url=result["qr_code_url"],
        short_code=result["link"].short_code,
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_admin_key)],
    summary="Create link",
)
async def create_link(request: Request, body: LinkCreateRequest):
    """Create a link with an explicit or generated short code."""
    admin = request.app.state.admin

    try:
        link = await admin.create(title=body.title, url=body.url, slug=body.slug)
    except ShortLinkError as e:
        return exception_response(e)

    return _link_response(request, link)


@router.get(
    "/links",
    response_model=LinkListResponse,
    responses={500: ERROR_RESPONSES[500]},
    dependencies=[Depends(require_admin_key)],
    summary="List links",
    description="order_by: title, short_code, target_url, clicks, created_at. "
                "Anything else sorts by created_at DESC.",
)
async def list_links(request: Request, order_by: Optional[str] = None, direction: Optional[str] = None):
    """List all links."""
    admin = request.app.state.admin

    try:
        links = await admin.list(order_by, direction)
    except ShortLinkError as e:
        return exception_response(e)

    column, dir_ = resolve_ordering(order_by, direction)
    return LinkListResponse(
        count=len(links),
        order_by=column,
        direction=dir_,
        links=[_link_response(request, link) for link in links],
    )


@router.get(
    "/links/{short_code}",
    response_model=LinkResponse,
    responses={404: {"model": ErrorResponse}, 500: ERROR_RESPONSES[500]},
    dependencies=[Depends(require_admin_key)],
    summary="Get link",
)
async def get_link(request: Request, short_code: str):
    """Get a link and its click count."""
    admin = request.app.state.admin

    try:
        link = await admin.get(short_code)
    except ShortLinkError as e:
        return exception_response(e)

    if link is None:
        return exception_response(NotFound(f"Short code '{short_code}' not found"))
    return _link_response(request, link)


@router.delete(
    "/links/{link_id}",
    response_model=DeleteResponse,
    responses={500: ERROR_RESPONSES[500]},
    dependencies=[Depends(require_admin_key)],
    summary="Delete link",
)
async def delete_link(request: Request, link_id: int):
    """Delete a link. Deleting a missing id reports deleted=false."""
    admin = request.app.state.admin

    try:
        deleted = await admin.delete(link_id)
    except ShortLinkError as e:
        return exception_response(e)

    return DeleteResponse(id=link_id, deleted=deleted)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    responses={500: ERROR_RESPONSES[500]},
    summary="Get statistics",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    admin = request.app.state.admin

    try:
        stats = await admin.statistics()
    except ShortLinkError as e:
        return exception_response(e)

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    health = await request.app.state.admin.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/domain/status",
    response_model=DomainStatusResponse,
    summary="Short domain DNS status",
)
async def domain_status(request: Request):
    """Latest result of the periodic DNS check."""
    checker = getattr(request.app.state, "domain_checker", None)
    if checker is None:
        return DomainStatusResponse(enabled=False)
    return DomainStatusResponse(enabled=True, **checker.status.to_dict())


async def admin_key_error_handler(request: Request, exc: AdminKeyRequired):
    return error_response(status.HTTP_401_UNAUTHORIZED, "unauthorized", "Missing or invalid API key")
