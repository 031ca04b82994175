# /memora/utils/logging.py

import logging
import sys
import structlog
from memora.config.settings import settings

# Raised to WARNING whatever the environment.
QUIET_LOGGERS = ("uvicorn.access",)


def setup_logging():
    """
    Route both `logging.getLogger(__name__)` records and bound structlog
    loggers (conversation_id, action, confidence...) through one handler.
    Development gets coloured console lines; every other environment gets one
    JSON object per line.
    """
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    development = settings.environment == "development"
    renderer = structlog.dev.ConsoleRenderer() if development else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain))
    handler._memora_handler = True

    root_logger = logging.getLogger()
    # The lifespan runs once per TestClient, so replace our handler instead of stacking it.
    root_logger.handlers = [h for h in root_logger.handlers if not getattr(h, "_memora_handler", False)]
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if development else logging.INFO)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
