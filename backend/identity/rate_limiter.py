"""
Rate limiting for password sign-in.
Uses a sliding window of failed attempts per email, persisted in MongoDB.
"""
from datetime import timedelta
from typing import Optional, Tuple

from config import LOGIN_RATE_LIMIT_PER_MINUTE, LOGIN_RATE_LIMIT_PER_HOUR
from utils import utcnow


class LoginRateLimiter:
    """Sliding-window limiter over failed sign-in attempts."""

    def __init__(self, attempts_collection=None, per_minute: int = 5, per_hour: int = 20):
        if attempts_collection is None:
            from database import login_attempts_collection
            attempts_collection = login_attempts_collection
        self.attempts = attempts_collection
        self.per_minute = per_minute
        self.per_hour = per_hour

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    async def check(self, email: str) -> Tuple[bool, Optional[str]]:
        """
        Check whether another attempt is allowed.

        Returns:
            Tuple of (allowed, error_message)
        """
        now = utcnow()
        minute_ago = now - timedelta(minutes=1)
        hour_ago = now - timedelta(hours=1)

        doc = await self.attempts.find_one({"key": self._key(email)})
        if not doc:
            return True, None

        timestamps = doc.get("failed_at", [])
        minute_count = sum(1 for ts in timestamps if ts > minute_ago)
        hour_count = sum(1 for ts in timestamps if ts > hour_ago)

        if minute_count >= self.per_minute:
            return False, f"Too many attempts ({self.per_minute}/minute)"
        if hour_count >= self.per_hour:
            return False, f"Too many attempts ({self.per_hour}/hour)"
        return True, None

    async def record_failure(self, email: str):
        """Record a failed attempt and prune entries older than an hour."""
        now = utcnow()
        hour_ago = now - timedelta(hours=1)
        key = self._key(email)

        await self.attempts.update_one(
            {"key": key},
            {
                "$push": {"failed_at": now},
                "$set": {"updated_at": now}
            },
            upsert=True
        )
        await self.attempts.update_one(
            {"key": key},
            {"$pull": {"failed_at": {"$lt": hour_ago}}}
        )

    async def reset(self, email: str):
        await self.attempts.delete_one({"key": self._key(email)})


def default_rate_limiter() -> LoginRateLimiter:
    return LoginRateLimiter(
        per_minute=LOGIN_RATE_LIMIT_PER_MINUTE,
        per_hour=LOGIN_RATE_LIMIT_PER_HOUR
    )
