"""
Activity log service for the App Store site API.

Every admin mutation appends one entry here after its write succeeds. The
append runs in the background and its failures only reach the log, so the
primary operation never depends on it.
"""
import logging
from typing import Optional

from utils import spawn_background, utcnow

logger = logging.getLogger(__name__)


class ActivityService:
    """Append-only audit trail of admin actions."""

    def __init__(self, activity_logs_collection=None):
        if activity_logs_collection is None:
            from database import activity_logs_collection as default_logs
            activity_logs_collection = default_logs
        self.logs = activity_logs_collection

    @staticmethod
    def build_entry(
        actor: dict,
        action: str,
        resource: str,
        details: str,
        resource_id: Optional[str] = None
    ) -> dict:
        entry = {
            "userId": actor.get("_id"),
            "userEmail": actor.get("email"),
            "action": action,
            "resource": resource,
            "details": details,
            "createdAt": utcnow(),
        }
        if resource_id is not None:
            entry["resourceId"] = resource_id
        return entry

    async def record(
        self,
        actor: dict,
        action: str,
        resource: str,
        details: str,
        resource_id: Optional[str] = None
    ) -> bool:
        """Write one entry; returns False instead of raising on failure."""
        try:
            await self.logs.insert_one(self.build_entry(actor, action, resource, details, resource_id))
            return True
        except Exception as e:
            logger.error(f"Error logging activity {action} on {resource}: {e}")
            return False

    def record_in_background(
        self,
        actor: dict,
        action: str,
        resource: str,
        details: str,
        resource_id: Optional[str] = None
    ):
        """Schedule `record` without waiting for it."""
        return spawn_background(
            self.record(actor, action, resource, details, resource_id),
            name=f"activity-{action}"
        )


# Singleton instance for production use
activity_service = ActivityService()
