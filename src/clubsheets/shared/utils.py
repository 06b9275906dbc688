"""Shared utility functions"""
import logging
import time

logger = logging.getLogger(__name__)


def sleep_for(delay: float, message: str = "") -> None:
    """Sleep with optional log message"""
    logger.info(message or f"Sleep for {delay} seconds")
    time.sleep(delay)
