"""
Logging setup for the menu publisher.

Usage:
    from menu_publisher.core.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Fetching website...")
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once. Safe to call multiple times."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger().setLevel(level.upper())
    # Client libraries log every request at INFO
    for noisy in ("httpx", "botocore", "urllib3", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def preview(text: str, limit: int = 500) -> str:
    """Shorten long text for log lines."""
    if text is None:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "... [truncated]"
