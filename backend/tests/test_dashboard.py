"""
Tests for dashboard aggregation
"""
import random
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from services.content_service import ContentService
from services.dashboard_service import DashboardService, chart_labels, compute_stats


@pytest.fixture
def content(mongo_db):
    return ContentService(
        apps_collection=mongo_db["apps"],
        messages_collection=mongo_db["messages"],
        activity_logs_collection=mongo_db["activityLogs"],
        site_settings_collection=mongo_db["siteSettings"],
        content_collection=mongo_db["content"],
        users_collection=mongo_db["users"],
    )


@pytest.fixture
async def seeded(mongo_db):
    await mongo_db["apps"].insert_many([
        {"name": "A", "downloads": 1000, "createdAt": datetime(2024, 1, 1)},
        {"name": "B", "downloads": 2000, "createdAt": datetime(2024, 2, 1)},
    ])
    await mongo_db["messages"].insert_many([
        {"name": "x", "email": "x@example.com", "message": "hi", "isRead": False, "createdAt": datetime(2024, 3, 1)},
        {"name": "y", "email": "y@example.com", "message": "yo", "isRead": True, "createdAt": datetime(2024, 3, 2)},
        {"name": "z", "email": "z@example.com", "message": "hey", "isRead": False, "createdAt": datetime(2024, 3, 3)},
    ])
    await mongo_db["activityLogs"].insert_one({"action": "create_app", "createdAt": datetime(2024, 1, 1)})
    await mongo_db["siteSettings"].insert_one({"_id": "main", "siteName": "Store"})


class TestComputeStats:
    def test_heuristic_figures(self):
        stats = compute_stats([{"downloads": 1000}, {"downloads": 2000}, {}], 3, 2)
        assert stats == {
            "total_downloads": 3000,
            "total_visitors": 900,
            "total_messages": 3,
            "total_apps": 3,
            "recent_downloads": 300,
            "recent_visitors": 135,
            "recent_messages": 2,
        }

    def test_floors_fractions(self):
        stats = compute_stats([{"downloads": 7}], 0, 0)
        assert stats["total_visitors"] == 2
        assert stats["recent_downloads"] == 0

    def test_chart_labels_end_today(self):
        labels = chart_labels(datetime(2024, 3, 10))
        assert labels == ["04 Mar", "05 Mar", "06 Mar", "07 Mar", "08 Mar", "09 Mar", "10 Mar"]


class TestDashboardService:
    async def test_full_aggregation(self, content, seeded):
        result = await DashboardService(content, rng=random.Random(7)).build()

        assert result["errors"] == []
        assert [app["name"] for app in result["apps"]] == ["B", "A"]
        assert [m["name"] for m in result["messages"]] == ["z", "y", "x"]
        assert result["unread_count"] == 2
        assert result["site_settings"]["siteName"] == "Store"
        assert len(result["activity_logs"]) == 1

        stats = result["stats"]
        assert stats["total_downloads"] == 3000
        assert stats["total_messages"] == 3
        assert stats["recent_messages"] == 2

        chart = stats["chart_data"]
        assert len(chart["labels"]) == 7
        assert all(200 <= v < 1200 for v in chart["downloads"])
        assert all(100 <= v < 600 for v in chart["visitors"])

    async def test_messages_failure_keeps_apps(self, content, seeded):
        content.list_messages = AsyncMock(side_effect=RuntimeError("messages down"))

        result = await DashboardService(content).build()

        assert result["errors"] == ["messages"]
        assert len(result["apps"]) == 2
        assert result["messages"] == []
        assert result["unread_count"] == 0
        assert result["stats"]["total_downloads"] == 3000
        assert result["stats"]["total_messages"] == 0

    async def test_message_counts_all_settle_before_section_fails(self, content, seeded):
        messages = MagicMock()
        messages.find = MagicMock(side_effect=RuntimeError("messages down"))
        messages.count_documents = AsyncMock(side_effect=RuntimeError("messages down"))
        content.messages = messages

        result = await DashboardService(content).build()

        assert result["errors"] == ["messages"]
        assert messages.count_documents.await_count == 2
        assert result["stats"]["total_messages"] == 0

    async def test_apps_failure_drops_stats_only(self, content, seeded):
        content.list_apps = AsyncMock(side_effect=RuntimeError("apps down"))

        result = await DashboardService(content).build()

        assert result["errors"] == ["apps"]
        assert result["stats"] is None
        assert result["apps"] == []
        assert len(result["messages"]) == 3
        assert result["unread_count"] == 2

    async def test_everything_failing_still_returns(self, content):
        failing = AsyncMock(side_effect=RuntimeError("store down"))
        content.list_apps = failing
        content.list_messages = failing
        content.list_activity_logs = failing
        content.site_settings = failing

        result = await DashboardService(content).build()

        assert sorted(result["errors"]) == ["activityLogs", "apps", "messages", "siteSettings"]
        assert result["site_settings"] is None

    async def test_empty_store(self, content):
        result = await DashboardService(content).build()
        assert result["errors"] == []
        assert result["stats"]["total_apps"] == 0
        assert result["site_settings"] is None
