"""
Pytest fixtures for the App Store site API tests

Every test gets a fresh in-memory Motor-compatible database; services are
built with its collections injected.
"""
import asyncio

import pytest
from mongomock_motor import AsyncMongoMockClient

import utils
from services.activity_service import ActivityService


@pytest.fixture
def mongo_db():
    """Fresh in-memory database per test"""
    return AsyncMongoMockClient()["app_store_test"]


@pytest.fixture
def activity(mongo_db):
    return ActivityService(mongo_db["activityLogs"])


@pytest.fixture
def admin_user():
    return {"_id": "admin-uid", "email": "admin@example.com", "displayName": "Admin", "role": "admin"}


@pytest.fixture
def drain_background():
    """Await the fire-and-forget tasks scheduled so far"""
    async def drain():
        while utils._background_tasks:
            await asyncio.gather(*list(utils._background_tasks), return_exceptions=True)
    return drain
