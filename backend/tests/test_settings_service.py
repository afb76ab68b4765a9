"""
Tests for maintenance mode and site settings writes
"""
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from models import SeoMeta, SiteSettingsUpdate, SocialLinks
from services.activity_service import ActivityService
from services.errors import StoreError, ValidationError
from services.settings_service import SettingsService
from utils import utcnow


@pytest.fixture
def service(mongo_db, activity):
    return SettingsService(mongo_db["siteSettings"], activity=activity)


class TestToggleMaintenance:
    async def test_enable_without_settings_creates_defaults(self, service, mongo_db, admin_user, drain_background):
        end = utcnow().replace(microsecond=0) + timedelta(hours=5)
        started = utcnow()

        doc = await service.toggle_maintenance(admin_user, end=end)
        await drain_background()

        assert doc["_id"] == "main"
        assert doc["maintenanceMode"] is True
        assert abs(doc["maintenanceStart"] - started) < timedelta(seconds=5)
        assert doc["maintenanceEnd"] == end
        assert doc["theme"] == "light"
        assert doc["socialLinks"] == {}
        assert doc["seoMeta"] == {"keywords": [], "author": "", "ogImage": ""}
        assert doc["siteName"] == "App Store Platform"

        log = await mongo_db["activityLogs"].find_one({})
        assert log["action"] == "enable_maintenance"
        assert log["resource"] == "maintenance"

    async def test_default_end_is_three_hours(self, service, admin_user):
        doc = await service.toggle_maintenance(admin_user)
        window = doc["maintenanceEnd"] - doc["maintenanceStart"]
        assert window == timedelta(hours=3)

    async def test_aware_end_is_stored_as_utc(self, service, admin_user):
        end = datetime.now(timezone(timedelta(hours=2))).replace(microsecond=0) + timedelta(hours=1)
        doc = await service.toggle_maintenance(admin_user, end=end)
        assert doc["maintenanceEnd"].tzinfo is None
        assert doc["maintenanceEnd"] == end.astimezone(timezone.utc).replace(tzinfo=None)

    async def test_disable_clears_window(self, service, admin_user, mongo_db, drain_background):
        await service.toggle_maintenance(admin_user, message="Upgrading")
        doc = await service.toggle_maintenance(admin_user)
        await drain_background()

        assert doc["maintenanceMode"] is False
        assert doc["maintenanceStart"] is None
        assert doc["maintenanceEnd"] is None
        assert doc["maintenanceMessage"] == "Upgrading"
        actions = [log["action"] for log in await mongo_db["activityLogs"].find().to_list(None)]
        assert sorted(actions) == ["disable_maintenance", "enable_maintenance"]

    async def test_existing_settings_keep_their_fields(self, service, mongo_db, admin_user):
        await mongo_db["siteSettings"].insert_one({"_id": "main", "siteName": "Custom", "theme": "dark"})

        doc = await service.toggle_maintenance(admin_user)

        assert doc["siteName"] == "Custom"
        assert doc["theme"] == "dark"
        assert doc["maintenanceMode"] is True

    async def test_end_in_the_past_rejected(self, service, mongo_db, admin_user):
        with pytest.raises(ValidationError) as exc:
            await service.toggle_maintenance(admin_user, end=utcnow() - timedelta(minutes=1))
        assert exc.value.message_key == "errors.invalidWindow"
        assert await mongo_db["siteSettings"].count_documents({}) == 0


class TestSaveMaintenanceSettings:
    async def test_saves_explicit_window(self, service, admin_user, mongo_db, drain_background):
        start = datetime(2030, 1, 1, 8)
        end = datetime(2030, 1, 1, 12)

        doc = await service.save_maintenance_settings(admin_user, True, start=start, end=end, message="Soon")
        await drain_background()

        assert (doc["maintenanceStart"], doc["maintenanceEnd"]) == (start, end)
        assert doc["maintenanceMessage"] == "Soon"
        assert doc["theme"] == "light"
        assert await mongo_db["activityLogs"].count_documents({"action": "update_maintenance_settings"}) == 1

    async def test_end_before_start_rejected(self, service, admin_user):
        with pytest.raises(ValidationError):
            await service.save_maintenance_settings(
                admin_user, True, start=datetime(2030, 1, 2), end=datetime(2030, 1, 1)
            )


class TestUpdateSiteSettings:
    async def test_partial_update(self, service, admin_user):
        update = SiteSettingsUpdate(site_name="My Store", seo_meta=SeoMeta(keywords=["apps"], og_image="/og.png"))

        doc = await service.update_site_settings(admin_user, update)

        assert doc["siteName"] == "My Store"
        assert doc["seoMeta"] == {"keywords": ["apps"], "author": "", "ogImage": "/og.png"}
        assert doc["primaryColor"] == "#3b82f6"
        assert doc["maintenanceMode"] is False

    async def test_empty_update_rejected(self, service, admin_user):
        with pytest.raises(ValidationError):
            await service.update_site_settings(admin_user, SiteSettingsUpdate())

    async def test_blank_site_name_rejected(self, service, admin_user):
        with pytest.raises(ValidationError):
            await service.update_site_settings(admin_user, SiteSettingsUpdate(site_name="  "))

    async def test_partial_subdocuments_are_merged(self, service, admin_user):
        await service.update_site_settings(admin_user, SiteSettingsUpdate(
            seo_meta=SeoMeta(keywords=["apps"], og_image="/og.png"),
            social_links=SocialLinks(facebook="https://facebook.com/store"),
        ))

        doc = await service.update_site_settings(admin_user, SiteSettingsUpdate.model_validate({
            "seoMeta": {"author": "Store Team"},
            "socialLinks": {"youtube": "https://youtube.com/store"},
        }))

        assert doc["seoMeta"] == {"keywords": ["apps"], "author": "Store Team", "ogImage": "/og.png"}
        assert doc["socialLinks"] == {
            "facebook": "https://facebook.com/store",
            "youtube": "https://youtube.com/store",
        }


class TestStoreFailures:
    async def test_read_failure_before_toggle_is_store_error(self, activity, admin_user):
        settings = MagicMock()
        settings.find_one = AsyncMock(side_effect=RuntimeError("store down"))
        service = SettingsService(settings, activity=activity)

        with pytest.raises(StoreError) as exc:
            await service.toggle_maintenance(admin_user)
        assert exc.value.message_key == "notify.maintenanceError"
        settings.update_one.assert_not_called()

    async def test_activity_failure_does_not_fail_toggle(self, mongo_db, admin_user, drain_background):
        logs = MagicMock()
        logs.insert_one = AsyncMock(side_effect=RuntimeError("store down"))
        service = SettingsService(mongo_db["siteSettings"], activity=ActivityService(logs))

        doc = await service.toggle_maintenance(admin_user)
        await drain_background()

        assert doc["maintenanceMode"] is True
        stored = await mongo_db["siteSettings"].find_one({"_id": "main"})
        assert stored["maintenanceMode"] is True
        logs.insert_one.assert_awaited_once()
