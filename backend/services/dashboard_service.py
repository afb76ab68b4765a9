"""
Dashboard aggregation for the admin API.

Runs the apps, messages, activity-log and settings reads concurrently and
combines them into one summary. Each section degrades on its own: a failed
read leaves that section empty and is named in `errors`, the rest of the
dashboard is still returned.
"""
import asyncio
import logging
import random
from datetime import timedelta
from typing import List, Optional

from utils import utcnow

logger = logging.getLogger(__name__)

CHART_DAYS = 7
CHART_DOWNLOADS_RANGE = (200, 1200)
CHART_VISITORS_RANGE = (100, 600)

SECTION_APPS = "apps"
SECTION_MESSAGES = "messages"
SECTION_ACTIVITY_LOGS = "activityLogs"
SECTION_SITE_SETTINGS = "siteSettings"


def compute_stats(apps: List[dict], total_messages: int, unread_messages: int) -> dict:
    """
    Summary counters for the stats cards.

    Visitor and recent figures are fixed-ratio estimates derived from
    downloads, not measured traffic.
    """
    total_downloads = sum(int(app.get("downloads") or 0) for app in apps)
    total_visitors = int(total_downloads * 0.3)
    return {
        "total_downloads": total_downloads,
        "total_visitors": total_visitors,
        "total_messages": total_messages,
        "total_apps": len(apps),
        "recent_downloads": int(total_downloads * 0.1),
        "recent_visitors": int(total_visitors * 0.15),
        "recent_messages": unread_messages,
    }


def chart_labels(today=None, days: int = CHART_DAYS) -> List[str]:
    """Labels for the trailing `days` days, oldest first, ending today."""
    today = today or utcnow()
    return [(today - timedelta(days=days - 1 - i)).strftime("%d %b") for i in range(days)]


def placeholder_chart(rng: random.Random, today=None) -> dict:
    # TODO: replace with per-day download/visit counts once analytics events are recorded
    return {
        "labels": chart_labels(today),
        "downloads": [rng.randrange(*CHART_DOWNLOADS_RANGE) for _ in range(CHART_DAYS)],
        "visitors": [rng.randrange(*CHART_VISITORS_RANGE) for _ in range(CHART_DAYS)],
    }


class DashboardService:
    """Builds the admin dashboard from independent reads."""

    def __init__(self, content=None, rng: Optional[random.Random] = None):
        if content is None:
            from services.content_service import content_service
            content = content_service
        self.content = content
        self.rng = rng or random.Random()

    async def _messages_section(self) -> dict:
        messages_col = self.content.messages
        results = await asyncio.gather(
            self.content.list_messages(50),
            messages_col.count_documents({}),
            messages_col.count_documents({"isRead": False}),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, Exception):
                raise result
        recent, total, unread = results
        return {"items": recent, "total": total, "unread": unread}

    async def build(self) -> dict:
        """
        Aggregate the dashboard.

        Never raises for a failed section; see `errors` in the result.
        """
        sections = [SECTION_APPS, SECTION_MESSAGES, SECTION_ACTIVITY_LOGS, SECTION_SITE_SETTINGS]
        results = await asyncio.gather(
            self.content.list_apps(),
            self._messages_section(),
            self.content.list_activity_logs(100),
            self.content.site_settings(),
            return_exceptions=True,
        )

        errors = []
        data = {}
        for section, result in zip(sections, results):
            if isinstance(result, Exception):
                logger.error(f"Dashboard section {section} failed: {result}")
                errors.append(section)
                data[section] = None
            else:
                data[section] = result

        apps = data[SECTION_APPS]
        messages = data[SECTION_MESSAGES] or {"items": [], "total": 0, "unread": 0}

        stats = None
        if apps is not None:
            stats = compute_stats(apps, messages["total"], messages["unread"])
            stats["chart_data"] = placeholder_chart(self.rng)

        return {
            "stats": stats,
            "apps": apps or [],
            "messages": messages["items"],
            "activity_logs": data[SECTION_ACTIVITY_LOGS] or [],
            "site_settings": data[SECTION_SITE_SETTINGS],
            "unread_count": messages["unread"],
            "errors": errors,
        }


# Singleton instance for production use
dashboard_service = DashboardService()
