"""
Read-side content fetchers for the public site and the admin dashboard.

Public reads never raise: when the store is unavailable they fall back to
bundled sample data or defaults and flag the result so the caller can show
a notice. Admin list reads raise StoreError; the dashboard aggregator
decides how to degrade.
"""
import logging
from datetime import datetime
from typing import List, Optional, Tuple

from config import ABOUT_CONTENT_ID, SITE_SETTINGS_ID, DEFAULT_LOCALE
from i18n.translations import localized_value
from services.errors import StoreError
from utils import utcnow

logger = logging.getLogger(__name__)


# =============================================================================
# Bundled defaults
# =============================================================================

def sample_apps() -> List[dict]:
    """Apps shown on the home page when the store cannot be read."""
    return [
        {
            "_id": "1",
            "name": "ILYASS TV",
            "description": "تطبيق مشاهدة القنوات التلفزيونية المباشرة مع جودة عالية وواجهة سهلة الاستخدام",
            "shortDescription": "مشاهدة القنوات المباشرة",
            "version": "2.1.0",
            "downloadUrl": "https://example.com/download/ilyass-tv.apk",
            "imageUrl": "/images/apps/ilyass-tv.jpg",
            "iconUrl": "/images/apps/ilyass-tv-icon.png",
            "category": "Entertainment",
            "downloads": 85000,
            "rating": 4.5,
            "size": "25 MB",
            "screenshots": [],
            "features": ["مشاهدة مباشرة", "جودة عالية", "واجهة سهلة"],
            "requirements": ["Android 5.0+"],
            "isActive": True,
            "createdAt": datetime(2024, 1, 1),
            "updatedAt": datetime(2024, 1, 15),
            "lastUpdated": datetime(2024, 1, 15),
        },
        {
            "_id": "2",
            "name": "Video Player Pro",
            "description": "مشغل فيديو متقدم يدعم جميع صيغ الفيديو مع ميزات متطورة",
            "shortDescription": "مشغل فيديو قوي",
            "version": "1.8.5",
            "downloadUrl": "https://example.com/download/video-player.apk",
            "imageUrl": "/images/apps/video-player.jpg",
            "iconUrl": "/images/apps/video-player-icon.png",
            "category": "Media",
            "downloads": 42000,
            "rating": 4.2,
            "size": "18 MB",
            "screenshots": [],
            "features": ["دعم جميع الصيغ", "تحكم متقدم", "ترجمة تلقائية"],
            "requirements": ["Android 4.4+"],
            "isActive": True,
            "createdAt": datetime(2023, 12, 1),
            "updatedAt": datetime(2024, 1, 10),
            "lastUpdated": datetime(2024, 1, 10),
        },
    ]


def default_about_content() -> dict:
    return {
        "_id": ABOUT_CONTENT_ID,
        "title": {
            "ar": "حول متجر التطبيقات",
            "en": "About App Store",
            "fr": "À propos du magasin d'applications",
        },
        "content": {
            "ar": "نحن منصة حديثة لتوزيع التطبيقات المحمولة مع التركيز على الجودة وتجربة المستخدم الممتازة. "
                  "هدفنا هو توفير أفضل التطبيقات للمستخدمين العرب مع ضمان الأمان والسهولة في الاستخدام.",
            "en": "We are a modern platform for mobile app distribution focusing on quality and excellent "
                  "user experience. Our goal is to provide the best applications for Arab users while "
                  "ensuring security and ease of use.",
            "fr": "Nous sommes une plateforme moderne de distribution d'applications mobiles axée sur la "
                  "qualité et l'excellence de l'expérience utilisateur. Notre objectif est de fournir les "
                  "meilleures applications aux utilisateurs arabes tout en garantissant la sécurité et la "
                  "facilité d'utilisation.",
        },
        "images": [
            "/images/about/team.jpg",
            "/images/about/office.jpg",
            "/images/about/technology.jpg",
        ],
        "isPublished": True,
        "updatedAt": utcnow(),
    }


class ContentService:
    """Queries that produce the site's read models."""

    def __init__(
        self,
        apps_collection=None,
        messages_collection=None,
        activity_logs_collection=None,
        site_settings_collection=None,
        content_collection=None,
        users_collection=None,
    ):
        import database

        def pick(injected, default):
            return injected if injected is not None else default

        self.apps = pick(apps_collection, database.apps_collection)
        self.messages = pick(messages_collection, database.messages_collection)
        self.activity_logs = pick(activity_logs_collection, database.activity_logs_collection)
        self.site_settings_col = pick(site_settings_collection, database.site_settings_collection)
        self.content = pick(content_collection, database.content_collection)
        self.users = pick(users_collection, database.users_collection)

    # =========================================================================
    # Public reads
    # =========================================================================

    async def featured_apps(self, limit: int = 6) -> Tuple[List[dict], bool]:
        """
        Top active apps by downloads.

        Returns:
            (apps, fallback) where fallback is True when the bundled sample
            apps were returned because the store read failed
        """
        try:
            cursor = self.apps.find({"isActive": {"$ne": False}}).sort("downloads", -1).limit(limit)
            return await cursor.to_list(limit), False
        except Exception as e:
            logger.error(f"Error fetching featured apps: {e}")
            return sample_apps(), True

    @staticmethod
    def home_stats(apps: List[dict]) -> dict:
        return {
            "totalDownloads": sum(int(app.get("downloads") or 0) for app in apps),
            "totalApps": len(apps),
            "lastUpdated": utcnow(),
        }

    async def about_content(self, locale: str = DEFAULT_LOCALE) -> dict:
        """
        About page content resolved for a locale.

        Missing locale keys fall back to the default locale, then English.
        """
        doc = None
        try:
            doc = await self.content.find_one({"_id": ABOUT_CONTENT_ID})
        except Exception as e:
            logger.error(f"Error fetching about content: {e}")

        is_default = doc is None
        if is_default:
            doc = default_about_content()

        return {
            "id": str(doc.get("_id", ABOUT_CONTENT_ID)),
            "title": localized_value(doc.get("title"), locale, DEFAULT_LOCALE),
            "content": localized_value(doc.get("content"), locale, DEFAULT_LOCALE),
            "images": list(doc.get("images") or []),
            "isPublished": doc.get("isPublished", True),
            "updatedAt": doc.get("updatedAt"),
            "isDefault": is_default,
        }

    async def maintenance_settings(self) -> Optional[dict]:
        """The `siteSettings/main` document, or None when absent or unreadable."""
        try:
            return await self.site_settings_col.find_one({"_id": SITE_SETTINGS_ID})
        except Exception as e:
            logger.error(f"Error fetching maintenance settings: {e}")
            return None

    # =========================================================================
    # Admin reads
    # =========================================================================

    async def list_apps(self) -> List[dict]:
        try:
            return await self.apps.find().sort("createdAt", -1).to_list(None)
        except Exception as e:
            raise self._read_error("apps", e)

    async def list_messages(self, limit: int = 50) -> List[dict]:
        try:
            return await self.messages.find().sort("createdAt", -1).limit(limit).to_list(limit)
        except Exception as e:
            raise self._read_error("messages", e)

    async def list_activity_logs(self, limit: int = 100) -> List[dict]:
        try:
            return await self.activity_logs.find().sort("createdAt", -1).limit(limit).to_list(limit)
        except Exception as e:
            raise self._read_error("activity logs", e)

    async def site_settings(self) -> Optional[dict]:
        """The main settings document, else the first one stored."""
        try:
            doc = await self.site_settings_col.find_one({"_id": SITE_SETTINGS_ID})
            if doc is None:
                doc = await self.site_settings_col.find_one({})
        except Exception as e:
            raise self._read_error("site settings", e)
        return doc

    async def list_users(self, limit: int = 200) -> List[dict]:
        try:
            return await self.users.find().sort("createdAt", -1).limit(limit).to_list(limit)
        except Exception as e:
            raise self._read_error("users", e)

    @staticmethod
    def _read_error(what: str, error: Exception) -> StoreError:
        logger.error(f"Error loading {what}: {error}")
        return StoreError(str(error), message_key="dashboard.loadError")


# Singleton instance for production use
content_service = ContentService()
