"""
Tests for app catalogue writes
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from models import AppCreate, AppUpdate
from services.activity_service import ActivityService
from services.app_service import AppService
from services.errors import NotFoundError, StoreError, ValidationError


@pytest.fixture
def service(mongo_db, activity):
    return AppService(mongo_db["apps"], activity=activity)


def new_app(**overrides) -> AppCreate:
    fields = {
        "name": "ILYASS TV",
        "version": "2.1.0",
        "download_url": "https://example.com/ilyass-tv.apk",
        "category": "Entertainment",
        "downloads": 10,
        "rating": 4.5,
    }
    fields.update(overrides)
    return AppCreate(**fields)


class TestCreate:
    async def test_create_stores_camel_case_fields(self, service, mongo_db, admin_user, drain_background):
        app = await service.create(new_app(), admin_user)
        await drain_background()

        stored = await mongo_db["apps"].find_one({"_id": app["_id"]})
        assert stored["downloadUrl"] == "https://example.com/ilyass-tv.apk"
        assert stored["isActive"] is True
        assert stored["createdAt"] == stored["updatedAt"] == stored["lastUpdated"]

        log = await mongo_db["activityLogs"].find_one({"action": "create_app"})
        assert log["resourceId"] == str(app["_id"])

    @pytest.mark.parametrize("overrides", [
        {"name": ""},
        {"version": " "},
        {"download_url": ""},
        {"downloads": -1},
        {"rating": 5.5},
        {"rating": -0.1},
    ])
    async def test_invalid_fields_rejected(self, service, mongo_db, admin_user, overrides):
        with pytest.raises(ValidationError):
            await service.create(new_app(**overrides), admin_user)
        assert await mongo_db["apps"].count_documents({}) == 0


class TestUpdate:
    async def test_partial_update(self, service, mongo_db, admin_user):
        created = await service.create(new_app(), admin_user)
        app = await mongo_db["apps"].find_one({"_id": created["_id"]})

        updated = await service.update(str(app["_id"]), AppUpdate(downloads=500), admin_user)

        assert updated["downloads"] == 500
        assert updated["name"] == "ILYASS TV"
        assert updated["lastUpdated"] == app["lastUpdated"]

    async def test_new_version_bumps_last_updated(self, service, admin_user):
        app = await service.create(new_app(), admin_user)

        updated = await service.update(str(app["_id"]), AppUpdate(version="2.2.0"), admin_user)

        assert updated["lastUpdated"] == updated["updatedAt"]

    async def test_cannot_blank_required_field(self, service, admin_user):
        app = await service.create(new_app(), admin_user)
        with pytest.raises(ValidationError):
            await service.update(str(app["_id"]), AppUpdate(name=""), admin_user)

    async def test_unknown_app(self, service, admin_user):
        with pytest.raises(NotFoundError):
            await service.update("64b000000000000000000000", AppUpdate(name="x"), admin_user)


class TestSetActive:
    async def test_deactivate_is_soft(self, service, mongo_db, admin_user, drain_background):
        app = await service.create(new_app(), admin_user)

        await service.set_active(str(app["_id"]), False, admin_user)
        await drain_background()

        stored = await mongo_db["apps"].find_one({"_id": app["_id"]})
        assert stored is not None
        assert stored["isActive"] is False
        assert await mongo_db["activityLogs"].count_documents({"action": "deactivate_app"}) == 1


class TestStoreFailures:
    async def test_lookup_failure_is_store_error(self, activity, admin_user):
        apps = MagicMock()
        apps.find_one = AsyncMock(side_effect=RuntimeError("store down"))
        service = AppService(apps, activity=activity)

        with pytest.raises(StoreError) as exc:
            await service.set_active("64b000000000000000000000", False, admin_user)
        assert exc.value.message_key == "notify.appError"
        apps.update_one.assert_not_called()

    async def test_activity_failure_does_not_fail_write(self, mongo_db, admin_user, drain_background):
        logs = MagicMock()
        logs.insert_one = AsyncMock(side_effect=RuntimeError("store down"))
        service = AppService(mongo_db["apps"], activity=ActivityService(logs))

        app = await service.create(new_app(), admin_user)
        await drain_background()

        assert app["name"] == "ILYASS TV"
        assert await mongo_db["apps"].find_one({"_id": app["_id"]}) is not None
        logs.insert_one.assert_awaited_once()
