"""
Logging configuration
"""
from loguru import logger
import sys
from app.config import get_settings

settings = get_settings()


def setup_logger(sink=sys.stdout):
    """
    Configure logger with appropriate settings

    Args:
        sink: Console stream. The CLI passes stderr so stdout carries
            only the report JSON.
    """
    logger.remove()  # Remove default handler

    # Console logging
    logger.add(
        sink,
        colorize=sink in (sys.stdout, sys.stderr),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level=settings.log_level
    )

    if not settings.log_to_file:
        return logger

    # File logging, same threshold as the console so a DEBUG run keeps
    # the per-window GA4 request traces on disk
    logger.add(
        f"{settings.log_dir}/kpi_dashboard_{{time:YYYY-MM-DD}}.log",
        rotation="00:00",
        retention="14 days",
        compression="zip",
        level=settings.log_level
    )

    # Error file: failed GA4 fetches and endpoint errors
    logger.add(
        f"{settings.log_dir}/errors_{{time:YYYY-MM-DD}}.log",
        rotation="00:00",
        retention="30 days",
        level="ERROR"
    )

    return logger


# Initialize logger
log = setup_logger()
