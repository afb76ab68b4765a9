"""
Database module for the App Store site API
Handles MongoDB client initialization and collection exports
"""
import logging
from motor.motor_asyncio import AsyncIOMotorClient
from config import MONGO_URI, MONGO_DB_NAME

logger = logging.getLogger(__name__)

# MongoDB client initialization
client = AsyncIOMotorClient(MONGO_URI)
db = client[MONGO_DB_NAME]

# Site collections
apps_collection = db["apps"]
users_collection = db["users"]
messages_collection = db["messages"]
site_settings_collection = db["siteSettings"]
activity_logs_collection = db["activityLogs"]
content_collection = db["content"]

# Auth provider collections
accounts_collection = db["accounts"]
login_attempts_collection = db["loginAttempts"]


async def setup_indexes():
    """
    Create the indexes the read paths sort and filter on.
    Login attempt windows expire after one hour (3600 seconds).
    """
    try:
        await apps_collection.create_index([("downloads", -1)], background=True)
        await apps_collection.create_index([("createdAt", -1)], background=True)
        await messages_collection.create_index([("createdAt", -1)], background=True)
        await messages_collection.create_index("isRead", background=True)
        await activity_logs_collection.create_index([("createdAt", -1)], background=True)
        logger.info("Created sort indexes on apps, messages and activityLogs")

        await accounts_collection.create_index("email", unique=True, background=True)
        await login_attempts_collection.create_index(
            "updated_at",
            expireAfterSeconds=3600,
            background=True
        )
        logger.info("Created auth provider indexes")
    except Exception as e:
        logger.error(f"Error setting up indexes: {e}")
