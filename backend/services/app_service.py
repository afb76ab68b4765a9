"""
App catalogue management for the App Store site API.

Admin-only create/update operations on the `apps` collection. Apps are
never deleted; `set_active(False)` hides an app from the public listing.
"""
import logging

from models import AppCreate, AppUpdate
from services.errors import NotFoundError, StoreError, ValidationError
from utils import to_object_id, utcnow

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "version", "downloadUrl")
MIN_RATING = 0.0
MAX_RATING = 5.0


class AppService:
    """Service for app catalogue writes."""

    def __init__(self, apps_collection=None, activity=None):
        if apps_collection is None:
            from database import apps_collection as default_apps
            apps_collection = default_apps
        if activity is None:
            from services.activity_service import activity_service
            activity = activity_service
        self.apps = apps_collection
        self.activity = activity

    # =========================================================================
    # Validation
    # =========================================================================

    @staticmethod
    def validate_fields(fields: dict, partial: bool = False) -> None:
        """
        Check app fields before writing.

        With partial=True only the fields present are checked, so an update
        may omit required fields but cannot blank them.
        """
        for field in REQUIRED_FIELDS:
            if partial and field not in fields:
                continue
            value = fields.get(field)
            if value is None or not str(value).strip():
                raise ValidationError(f"{field} is required", details={"field": field})

        downloads = fields.get("downloads")
        if downloads is not None and downloads < 0:
            raise ValidationError(
                "downloads must be non-negative",
                message_key="errors.invalidValue",
                details={"field": "downloads"}
            )

        rating = fields.get("rating")
        if rating is not None and not (MIN_RATING <= rating <= MAX_RATING):
            raise ValidationError(
                f"rating must be between {MIN_RATING} and {MAX_RATING}",
                message_key="errors.invalidValue",
                details={"field": "rating"}
            )

    async def get(self, app_id: str) -> dict:
        oid = to_object_id(app_id)
        try:
            app = await self.apps.find_one({"_id": oid}) if oid else None
        except Exception as e:
            logger.error(f"Error loading app {app_id}: {e}")
            raise StoreError(str(e), message_key="notify.appError")
        if not app:
            raise NotFoundError("app", app_id)
        return app

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create(self, app_data: AppCreate, admin: dict) -> dict:
        fields = app_data.model_dump(by_alias=True)
        self.validate_fields(fields)

        now = utcnow()
        doc = {**fields, "createdAt": now, "updatedAt": now, "lastUpdated": now}
        try:
            result = await self.apps.insert_one(doc)
        except Exception as e:
            logger.error(f"Error creating app {fields['name']}: {e}")
            raise StoreError(str(e), message_key="notify.appError")
        doc["_id"] = result.inserted_id

        logger.info(f"App created: {doc['name']} ({doc['_id']}) by {admin.get('email')}")
        self.activity.record_in_background(
            admin, "create_app", "apps", f"Created app {doc['name']}", resource_id=str(doc["_id"])
        )
        return doc

    async def update(self, app_id: str, app_data: AppUpdate, admin: dict) -> dict:
        fields = app_data.model_dump(by_alias=True, exclude_none=True)
        self.validate_fields(fields, partial=True)
        app = await self.get(app_id)

        now = utcnow()
        fields["updatedAt"] = now
        if "version" in fields and fields["version"] != app.get("version"):
            fields["lastUpdated"] = now

        try:
            await self.apps.update_one({"_id": app["_id"]}, {"$set": fields})
        except Exception as e:
            logger.error(f"Error updating app {app_id}: {e}")
            raise StoreError(str(e), message_key="notify.appError")

        app.update(fields)
        self.activity.record_in_background(
            admin, "update_app", "apps", f"Updated app {app.get('name')}", resource_id=app_id
        )
        return app

    async def set_active(self, app_id: str, is_active: bool, admin: dict) -> dict:
        app = await self.get(app_id)
        update = {"isActive": is_active, "updatedAt": utcnow()}
        try:
            await self.apps.update_one({"_id": app["_id"]}, {"$set": update})
        except Exception as e:
            logger.error(f"Error changing active flag of app {app_id}: {e}")
            raise StoreError(str(e), message_key="notify.appError")

        app.update(update)
        self.activity.record_in_background(
            admin,
            "activate_app" if is_active else "deactivate_app",
            "apps",
            f"App {app.get('name')} {'activated' if is_active else 'deactivated'}",
            resource_id=app_id
        )
        return app


# Singleton instance for production use
app_service = AppService()
