"""
Configuration module for the App Store site API
Centralizes environment variables; every value has a usable default
"""
import os
import secrets
import logging

logger = logging.getLogger(__name__)

# Database
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "app_store_db")

# JWT settings
SECRET_KEY = os.getenv("SECRET_KEY", secrets.token_urlsafe(32))
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))  # 1 day

# Site identity
SITE_NAME = os.getenv("SITE_NAME", "App Store Platform")
SITE_DESCRIPTION = os.getenv("SITE_DESCRIPTION", "Modern app store platform")
SITE_URL = os.getenv("SITE_URL", "http://localhost:3000")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Locale
DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "ar")
LOCALE_COOKIE_NAME = "locale"
LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365  # 1 year

# Outbound email relay (EmailJS). Empty identifiers disable sending.
EMAILJS_API_URL = os.getenv("EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send")
EMAILJS_SERVICE_ID = os.getenv("EMAILJS_SERVICE_ID", "")
EMAILJS_TEMPLATE_ID = os.getenv("EMAILJS_TEMPLATE_ID", "")
EMAILJS_USER_ID = os.getenv("EMAILJS_USER_ID", "")
SUPPORT_MAILBOX_NAME = os.getenv("SUPPORT_MAILBOX_NAME", "فريق الدعم")
EMAIL_TIMEOUT_SECONDS = float(os.getenv("EMAIL_TIMEOUT_SECONDS", "10"))

# Login rate limiting
LOGIN_RATE_LIMIT_PER_MINUTE = int(os.getenv("LOGIN_RATE_LIMIT_PER_MINUTE", "5"))
LOGIN_RATE_LIMIT_PER_HOUR = int(os.getenv("LOGIN_RATE_LIMIT_PER_HOUR", "20"))

# Maintenance
MAINTENANCE_DEFAULT_HOURS = int(os.getenv("MAINTENANCE_DEFAULT_HOURS", "3"))
SITE_SETTINGS_ID = "main"
ABOUT_CONTENT_ID = "about"

if not os.getenv("SECRET_KEY"):
    logger.warning("SECRET_KEY not set; using a random key, tokens will not survive a restart")
