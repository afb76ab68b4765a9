"""
Site settings and maintenance-mode writes.

All writes target the well-known `siteSettings/main` document. When it does
not exist yet it is created with the default site settings merged with the
fields being written. Concurrent admins race with last-write-wins.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from config import SITE_SETTINGS_ID, SITE_NAME, SITE_DESCRIPTION, MAINTENANCE_DEFAULT_HOURS
from models import SiteSettingsUpdate
from services.errors import StoreError, ValidationError
from utils import to_naive_utc, utcnow

logger = logging.getLogger(__name__)


def default_site_settings() -> dict:
    return {
        "siteName": SITE_NAME,
        "siteDescription": SITE_DESCRIPTION,
        "logoUrl": "",
        "faviconUrl": "",
        "primaryColor": "#3b82f6",
        "secondaryColor": "#6b7280",
        "theme": "light",
        "maintenanceMode": False,
        "socialLinks": {},
        "seoMeta": {"keywords": [], "author": "", "ogImage": ""},
    }


NESTED_SETTINGS_FIELDS = ("socialLinks", "seoMeta")


def flatten_nested_fields(fields: dict) -> dict:
    """Turn partial subdocuments into dotted paths so `$set` merges them."""
    flat = {}
    for key, value in fields.items():
        if key in NESTED_SETTINGS_FIELDS and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                flat[f"{key}.{sub_key}"] = sub_value
        else:
            flat[key] = value
    return flat


def insert_defaults(fields: dict) -> dict:
    """
    Default values for everything `fields` does not set.

    A subdocument written through dotted paths gets its remaining default
    keys as dotted paths too, so the insert never conflicts with the `$set`.
    """
    defaults = {}
    for key, value in default_site_settings().items():
        if key in fields:
            continue
        prefix = f"{key}."
        if not any(field.startswith(prefix) for field in fields):
            defaults[key] = value
        elif isinstance(value, dict):
            for sub_key, sub_value in value.items():
                if f"{prefix}{sub_key}" not in fields:
                    defaults[f"{prefix}{sub_key}"] = sub_value
    return defaults


def validate_window(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start is not None and end is not None and end <= start:
        raise ValidationError(
            "maintenance end must be after start",
            message_key="errors.invalidWindow",
            details={"start": start.isoformat(), "end": end.isoformat()}
        )


class SettingsService:
    """Service for the site settings document."""

    def __init__(self, site_settings_collection=None, activity=None):
        if site_settings_collection is None:
            from database import site_settings_collection as default_settings
            site_settings_collection = default_settings
        if activity is None:
            from services.activity_service import activity_service
            activity = activity_service
        self.settings = site_settings_collection
        self.activity = activity

    async def get(self) -> Optional[dict]:
        return await self.settings.find_one({"_id": SITE_SETTINGS_ID})

    async def _write(self, fields: dict, error_key: str) -> dict:
        """
        Set `fields` on the main document, creating it with defaults if absent.

        Returns:
            The document after the write
        """
        fields = {**fields, "updatedAt": utcnow()}
        defaults = insert_defaults(fields)
        try:
            result = await self.settings.update_one(
                {"_id": SITE_SETTINGS_ID},
                {"$set": fields, "$setOnInsert": defaults},
                upsert=True
            )
            if result.upserted_id is not None:
                logger.info("Created site settings document with defaults")
            return await self.get()
        except Exception as e:
            logger.error(f"Error writing site settings: {e}")
            raise StoreError(str(e), message_key=error_key)

    # =========================================================================
    # Maintenance mode
    # =========================================================================

    async def toggle_maintenance(
        self,
        admin: dict,
        end: Optional[datetime] = None,
        message: Optional[str] = None
    ) -> dict:
        """
        Flip maintenance mode.

        Enabling starts the window now and ends it at `end`, or after the
        default duration. Disabling clears both bounds.
        """
        try:
            current = await self.get()
        except Exception as e:
            logger.error(f"Error reading site settings: {e}")
            raise StoreError(str(e), message_key="notify.maintenanceError")
        enable = not (current or {}).get("maintenanceMode", False)

        if enable:
            start = utcnow()
            end = to_naive_utc(end) or start + timedelta(hours=MAINTENANCE_DEFAULT_HOURS)
            validate_window(start, end)
            fields = {"maintenanceMode": True, "maintenanceStart": start, "maintenanceEnd": end}
        else:
            fields = {"maintenanceMode": False, "maintenanceStart": None, "maintenanceEnd": None}
        if message is not None:
            fields["maintenanceMessage"] = message

        doc = await self._write(fields, "notify.maintenanceError")

        logger.info(f"Maintenance mode {'enabled' if enable else 'disabled'} by {admin.get('email')}")
        self.activity.record_in_background(
            admin,
            "enable_maintenance" if enable else "disable_maintenance",
            "maintenance",
            f"Maintenance mode {'enabled' if enable else 'disabled'}"
        )
        return doc

    async def save_maintenance_settings(
        self,
        admin: dict,
        enabled: bool,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        message: Optional[str] = None
    ) -> dict:
        start = to_naive_utc(start)
        end = to_naive_utc(end)
        if enabled:
            start = start or utcnow()
            end = end or start + timedelta(hours=MAINTENANCE_DEFAULT_HOURS)
        validate_window(start, end)

        fields = {"maintenanceMode": enabled, "maintenanceStart": start, "maintenanceEnd": end}
        if message is not None:
            fields["maintenanceMessage"] = message

        doc = await self._write(fields, "notify.maintenanceError")
        self.activity.record_in_background(
            admin, "update_maintenance_settings", "maintenance", "Maintenance settings updated"
        )
        return doc

    # =========================================================================
    # Site settings
    # =========================================================================

    async def update_site_settings(self, admin: dict, update: SiteSettingsUpdate) -> dict:
        fields = flatten_nested_fields(update.model_dump(by_alias=True, exclude_none=True, exclude_unset=True))
        if not fields:
            raise ValidationError("no settings fields given")
        if "siteName" in fields and not fields["siteName"].strip():
            raise ValidationError("siteName is required", details={"field": "siteName"})

        doc = await self._write(fields, "notify.settingsError")
        self.activity.record_in_background(
            admin, "update_site_settings", "settings", f"Updated {', '.join(sorted(fields))}"
        )
        return doc


# Singleton instance for production use
settings_service = SettingsService()
