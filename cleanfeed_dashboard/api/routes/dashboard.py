"""
Dashboard endpoints.

Three routes, all behind the operator's Basic auth (applied to the
whole app in create_app):

- GET /         render config form and recent recordings
- POST /save    persist forwarding settings, redirect back
- GET /presign  redirect to a fresh signed link for one object

A final catch-all turns any other path into a 404, so unknown paths still
go through the auth check first.
"""

import logging
from pathlib import Path
from typing import Annotated, Optional

from fastapi import APIRouter, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ...core.errors import BackendUnavailable, InvalidArgument, PersistenceFailure
from ..dependencies import DashboardServiceDep, SettingsDep

logger = logging.getLogger(__name__)

router = APIRouter()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, summary="Dashboard")
async def view_dashboard(
    request: Request,
    service: DashboardServiceDep,
    settings: SettingsDep,
) -> HTMLResponse:
    """Current forwarding config plus the most recent recordings."""
    view = await service.view_dashboard()

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "cfg": view.config,
            "items": view.entries,
            "catalog_degraded": view.catalog_degraded,
            "bucket": settings.spaces_bucket,
            "prefix": settings.catalog_prefix,
        },
    )


@router.post("/save", summary="Save forwarding config")
async def save_config(
    service: DashboardServiceDep,
    rtmp_url: Annotated[Optional[str], Form(alias="rtmpUrl")] = None,
    stream_key: Annotated[Optional[str], Form(alias="streamKey")] = None,
) -> RedirectResponse:
    """
    Persist RTMP URL and stream key, then go back to the dashboard.

    A failed write is reported instead of redirecting, so the operator
    doesn't assume the new settings are live.
    """
    try:
        service.save_config(rtmp_url, stream_key)
    except InvalidArgument as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except PersistenceFailure as e:
        logger.error("Save failed", extra={"error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save configuration",
        )

    return RedirectResponse(url="/", status_code=status.HTTP_302_FOUND)


@router.get("/presign", summary="Redirect to a signed download link")
async def presign(
    service: DashboardServiceDep,
    key: Annotated[Optional[str], Query()] = None,
) -> RedirectResponse:
    """
    Sign a link for any key and redirect to it.

    Unlike the listing, there is no fallback when signing fails, so a
    backend error is a 502 rather than an empty result.
    """
    try:
        url = service.presign_redirect(key)
    except InvalidArgument:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing key")
    except BackendUnavailable as e:
        logger.error("Presign failed", extra={"key": key, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not sign download link",
        )

    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def not_found(path: str) -> None:
    """Unknown path. Registered last so it never shadows a real route."""
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
