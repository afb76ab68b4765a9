"""
Utility functions for the App Store site API
Shared helpers for error payloads, serialization, time and background work
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Optional, Set

from bson import ObjectId, Decimal128

logger = logging.getLogger(__name__)

# Strong references to fire-and-forget tasks so they are not garbage collected
_background_tasks: Set[asyncio.Task] = set()


def error_payload(code: str, message: str, details: Optional[dict] = None) -> dict:
    """Create a standardized error response payload"""
    return {
        "code": code,
        "message": message,
        "details": details
    }


def utcnow() -> datetime:
    """Naive UTC now, matching the datetimes the Mongo driver returns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_millis(value: Optional[datetime]) -> Optional[int]:
    """Epoch milliseconds for a datetime; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse an ObjectId, returning None for malformed ids."""
    try:
        return ObjectId(value)
    except Exception:
        return None


def serialize_mongo_doc(doc: Any) -> Any:
    """
    Recursively convert a MongoDB document to a JSON-serializable dict.

    Handles: ObjectId -> str, datetime -> ISO str, Decimal128 -> str,
    and nested dicts/lists. The document `_id` is exposed as `id`.
    """
    if isinstance(doc, dict):
        out = {}
        for k, v in doc.items():
            out["id" if k == "_id" else k] = serialize_mongo_doc(v)
        return out
    if isinstance(doc, list):
        return [serialize_mongo_doc(item) for item in doc]
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, datetime):
        return doc.isoformat()
    if isinstance(doc, Decimal128):
        return str(doc)
    return doc


def _log_task_result(task: asyncio.Task) -> None:
    _background_tasks.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Background task {task.get_name()} failed: {exc}")


def spawn_background(coro: Awaitable, name: str) -> asyncio.Task:
    """
    Schedule a coroutine without awaiting it.

    Failures are reported on this module's logger only and never reach
    the caller that scheduled the work.
    """
    task = asyncio.ensure_future(coro)
    task.set_name(name)
    _background_tasks.add(task)
    task.add_done_callback(_log_task_result)
    return task


async def cancel_background_tasks() -> None:
    """Cancel outstanding fire-and-forget tasks (used on shutdown)."""
    tasks = list(_background_tasks)
    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception:
            # Already reported by the done-callback
            pass


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
