import sys

from loguru import logger

from app.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """Route loguru output to stderr (and optionally a rotating file) at the configured level."""
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL.upper(), backtrace=False, diagnose=False)
    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            level=settings.LOG_LEVEL.upper(),
            rotation="10 MB",
            retention=5,
            enqueue=True,
        )
    logger.debug(f"Logging configured at {settings.LOG_LEVEL.upper()}")
