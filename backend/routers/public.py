"""
Public site routes: home, about, site settings, contact and maintenance
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from typing import AsyncGenerator, Optional
import asyncio
import json
import logging

from config import SITE_URL, APP_VERSION
from countdown import CountdownTicker, compute_countdown, now_millis
from i18n import LocaleContext
from models import (
    ContactMessageCreate, HomeResponse, HomeStats, AboutResponse,
    MaintenanceStatus, CountdownResponse
)
from routers.locale import get_locale_context, service_http_error
from services.content_service import content_service
from services.errors import ServiceError
from services.message_service import message_service
from services.settings_service import default_site_settings
from utils import serialize_mongo_doc, to_millis

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["public"])

PUBLIC_SETTINGS_FIELDS = (
    "siteName", "siteDescription", "logoUrl", "faviconUrl", "primaryColor",
    "secondaryColor", "theme", "socialLinks", "seoMeta", "maintenanceMode",
)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _sse_event(data: dict) -> str:
    return f"data: {json.dumps(data)}\n\n"


# =============================================================================
# Content
# =============================================================================

@router.get("/home", response_model=HomeResponse)
async def get_home(locale: LocaleContext = Depends(get_locale_context)):
    apps, fallback = await content_service.featured_apps()
    stats = content_service.home_stats(apps)
    return HomeResponse(
        apps=serialize_mongo_doc(apps),
        stats=HomeStats(
            total_downloads=stats["totalDownloads"],
            total_apps=stats["totalApps"],
            last_updated=stats["lastUpdated"].isoformat(),
        ),
        fallback=fallback,
        notice=locale.t("home.loadError") if fallback else None,
    )


@router.get("/about", response_model=AboutResponse)
async def get_about(locale: LocaleContext = Depends(get_locale_context)):
    about = await content_service.about_content(locale.locale)
    return AboutResponse(
        id=about["id"],
        title=about["title"],
        content=about["content"],
        images=about["images"],
        is_published=about["isPublished"],
        updated_at=_iso(about["updatedAt"]),
        is_default=about["isDefault"],
    )


@router.get("/site")
async def get_site():
    """Public theming and SEO settings, with defaults for anything not stored."""
    stored = await content_service.maintenance_settings() or {}
    merged = {**default_site_settings(), **stored}
    site = {field: merged.get(field) for field in PUBLIC_SETTINGS_FIELDS}
    site.update({"siteUrl": SITE_URL, "version": APP_VERSION})
    return serialize_mongo_doc(site)


# =============================================================================
# Contact
# =============================================================================

@router.post("/contact")
async def submit_contact(
    data: ContactMessageCreate,
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        message = await message_service.submit(data.name, data.email, data.message)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return {"success": True, "id": str(message["_id"]), "message": locale.t("contact.success")}


# =============================================================================
# Maintenance
# =============================================================================

@router.get("/maintenance", response_model=MaintenanceStatus)
async def get_maintenance(locale: LocaleContext = Depends(get_locale_context)):
    settings = await content_service.maintenance_settings() or {}
    return MaintenanceStatus(
        maintenance_mode=settings.get("maintenanceMode", False),
        maintenance_start=_iso(settings.get("maintenanceStart")),
        maintenance_end=_iso(settings.get("maintenanceEnd")),
        message=settings.get("maintenanceMessage") or locale.t("maintenance.subtitle"),
    )


async def _maintenance_window():
    settings = await content_service.maintenance_settings() or {}
    start_ms = to_millis(settings.get("maintenanceStart"))
    end_ms = to_millis(settings.get("maintenanceEnd"))
    return start_ms, end_ms, bool(settings.get("maintenanceMode", False))


@router.get("/maintenance/countdown", response_model=CountdownResponse)
async def get_countdown():
    """Countdown snapshot; a window without an end reports as elapsed."""
    start_ms, end_ms, mode = await _maintenance_window()
    now = now_millis()
    state = compute_countdown(start_ms, end_ms if end_ms is not None else now, now)
    return CountdownResponse(**state.to_dict(), maintenance_mode=mode)


@router.get("/maintenance/countdown/stream")
async def stream_countdown(request: Request):
    """
    Countdown as Server-Sent Events, one event per second.

    The last event has `elapsed: true`. The ticker is cancelled as soon as
    the client goes away.
    """
    start_ms, end_ms, mode = await _maintenance_window()
    if end_ms is None:
        end_ms = now_millis()

    async def countdown_events() -> AsyncGenerator[str, None]:
        states: asyncio.Queue = asyncio.Queue()
        ticker = CountdownTicker(start_ms, end_ms, states.put_nowait)
        ticker.start()
        try:
            while True:
                state = await states.get()
                if await request.is_disconnected():
                    logger.debug("Countdown stream client disconnected")
                    break
                yield _sse_event({**state.to_dict(), "maintenance_mode": mode})
                if state.elapsed:
                    break
        finally:
            await ticker.cancel()

    return StreamingResponse(
        countdown_events(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no"
        }
    )
