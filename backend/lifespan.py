"""
Lifespan module for the App Store site API
Handles application startup and shutdown lifecycle
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

from database import setup_indexes
from services.email_service import email_relay
from utils import cancel_background_tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    startup_logger = logging.getLogger("uvicorn")

    # Startup: indexes for sorted reads, unique accounts and login-attempt TTL
    try:
        startup_logger.info("Setting up indexes...")
        await setup_indexes()
        startup_logger.info("Index setup completed")
    except Exception as e:
        startup_logger.error(f"Warning: Index setup failed: {e}")
        import traceback
        startup_logger.error(traceback.format_exc())

    if not email_relay.enabled:
        startup_logger.info("EmailJS not configured; contact messages are stored without email relay")

    yield

    # Shutdown: cancel pending activity-log/email/lastLogin writes
    shutdown_logger = logging.getLogger("uvicorn")
    shutdown_logger.info("Shutting down background tasks...")
    await cancel_background_tasks()
    await email_relay.aclose()
    shutdown_logger.info("Background tasks shutdown complete")
