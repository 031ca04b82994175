# /memora/utils/lifecycle.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI

from memora.utils.logging import setup_logging
from memora.services.conversation_service import conversation_service
from memora.services.history_service import history_service
from memora.config.settings import settings

# Startup configures logging; shutdown drains pending history saves before
# the Redis connection is closed.

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    setup_logging()

    logger.info(f"Assistant starting up ({settings.environment})...")
    if not await history_service.ping():
        logger.warning("History store unreachable at startup; conversations will not be saved until it recovers.")
    logger.info("Application startup complete. Ready to accept requests.")

    yield  # Application is now running

    logger.info("Application shutting down...")
    await conversation_service.flush()
    await history_service.close()
