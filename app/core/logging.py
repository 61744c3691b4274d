"""
Logging setup.

Configures the loguru logger once for the whole process.
"""

import sys

from loguru import logger

from app.core.config import settings

_FORMAT = ("<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
           "<cyan>{name}</cyan>:<cyan>{line}</cyan> | {message}")

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with a stderr sink at the configured level."""
    global _configured
    if _configured:
        return
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.LOG_LEVEL).upper(), format=_FORMAT, backtrace=False,
               diagnose=settings.DEBUG)
    _configured = True
