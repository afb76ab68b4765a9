"""
Admin routes for the App Store site API

Every route requires a user whose stored role is admin.
"""
from fastapi import APIRouter, Depends
from typing import Optional
import logging

from auth import require_admin
from i18n import LocaleContext
from models import (
    AppCreate, AppUpdate, AppActiveUpdate, MessageReadUpdate, MessageReply,
    MaintenanceToggle, MaintenanceUpdate, SiteSettingsUpdate, DashboardResponse
)
from routers.auth import build_user_response
from routers.locale import get_locale_context, service_http_error
from services.app_service import app_service
from services.content_service import content_service
from services.dashboard_service import dashboard_service
from services.errors import ServiceError
from services.message_service import message_service
from services.settings_service import settings_service
from utils import serialize_mongo_doc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _ok(locale: LocaleContext, message_key: str, **payload) -> dict:
    return {"success": True, "message": locale.t(message_key), **serialize_mongo_doc(payload)}


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(admin: dict = Depends(require_admin)):
    return DashboardResponse(**serialize_mongo_doc(await dashboard_service.build()))


@router.get("/activity-logs")
async def list_activity_logs(
    limit: int = 100,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        logs = await content_service.list_activity_logs(min(max(limit, 1), 500))
    except ServiceError as e:
        raise service_http_error(e, locale)
    return serialize_mongo_doc(logs)


@router.get("/users")
async def list_users(
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        users = await content_service.list_users()
    except ServiceError as e:
        raise service_http_error(e, locale)
    return [build_user_response(user) for user in users]


# =============================================================================
# Apps
# =============================================================================

@router.get("/apps")
async def list_apps(
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        apps = await content_service.list_apps()
    except ServiceError as e:
        raise service_http_error(e, locale)
    return serialize_mongo_doc(apps)


@router.post("/apps")
async def create_app(
    data: AppCreate,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        app = await app_service.create(data, admin)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.appSaved", app=app)


@router.put("/apps/{app_id}")
async def update_app(
    app_id: str,
    data: AppUpdate,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        app = await app_service.update(app_id, data, admin)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.appSaved", app=app)


@router.put("/apps/{app_id}/active")
async def set_app_active(
    app_id: str,
    data: AppActiveUpdate,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        app = await app_service.set_active(app_id, data.is_active, admin)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.appSaved", app=app)


# =============================================================================
# Messages
# =============================================================================

@router.get("/messages")
async def list_messages(
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        messages = await content_service.list_messages()
    except ServiceError as e:
        raise service_http_error(e, locale)
    return serialize_mongo_doc(messages)


@router.put("/messages/{message_id}/read")
async def mark_message_read(
    message_id: str,
    data: Optional[MessageReadUpdate] = None,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    is_read = data.is_read if data is not None else True
    try:
        message = await message_service.mark_read(message_id, admin, is_read)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.messageUpdated", data=message)


@router.post("/messages/{message_id}/reply")
async def reply_to_message(
    message_id: str,
    data: MessageReply,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        message = await message_service.reply(message_id, data.message, admin)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.messageUpdated", data=message)


# =============================================================================
# Maintenance & site settings
# =============================================================================

@router.post("/maintenance/toggle")
async def toggle_maintenance(
    data: Optional[MaintenanceToggle] = None,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    data = data or MaintenanceToggle()
    try:
        settings = await settings_service.toggle_maintenance(admin, end=data.end, message=data.message)
    except ServiceError as e:
        raise service_http_error(e, locale)
    key = "notify.maintenanceEnabled" if settings.get("maintenanceMode") else "notify.maintenanceDisabled"
    return _ok(locale, key, settings=settings)


@router.put("/maintenance")
async def save_maintenance_settings(
    data: MaintenanceUpdate,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        settings = await settings_service.save_maintenance_settings(
            admin, data.enabled, start=data.start, end=data.end, message=data.message
        )
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.maintenanceSaved", settings=settings)


@router.get("/settings")
async def get_site_settings(
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        settings = await content_service.site_settings()
    except ServiceError as e:
        raise service_http_error(e, locale)
    return serialize_mongo_doc(settings)


@router.put("/settings")
async def update_site_settings(
    data: SiteSettingsUpdate,
    admin: dict = Depends(require_admin),
    locale: LocaleContext = Depends(get_locale_context)
):
    try:
        settings = await settings_service.update_site_settings(admin, data)
    except ServiceError as e:
        raise service_http_error(e, locale)
    return _ok(locale, "notify.settingsSaved", settings=settings)
