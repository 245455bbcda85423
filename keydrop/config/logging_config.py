"""
Logging Configuration

Root logger setup shared by the web process and Celery workers.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = None) -> None:
    """
    Configure the root logger once per process.

    Args:
        level: Log level name, defaults to LOG_LEVEL or INFO
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("keydrop").setLevel(level)
