"""
Application Configuration

Reads every tunable of the service from the environment. A ``.env`` file
in the working directory is loaded first, without overriding variables
that are already set.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from keydrop.domain.file_storage.services import DEFAULT_MAX_AGE_SECONDS

load_dotenv()

DEFAULT_SWEEP_INTERVAL_SECONDS = 5 * 60
SWEEP_SCHEDULERS = ("thread", "celery", "none")


class AppConfig:
    """Application configuration."""

    def __init__(self):
        self.api_prefix = os.getenv("API_PREFIX", "/api")
        self.flask_env = os.getenv("FLASK_ENV", "development")
        self.is_production = self.flask_env == "production"

        # Storage directory, relative paths resolve against the working directory
        self.storage_dir = str(Path(os.getenv("FOLDER", "uploads")).resolve())

        # Retention and sweep
        self.max_age_seconds = float(os.getenv("FILE_MAX_AGE_SECONDS", DEFAULT_MAX_AGE_SECONDS))
        self.sweep_interval_seconds = float(
            os.getenv("SWEEP_INTERVAL_SECONDS", DEFAULT_SWEEP_INTERVAL_SECONDS)
        )
        self.sweep_scheduler = os.getenv("SWEEP_SCHEDULER", "thread").lower()
        if self.sweep_scheduler not in SWEEP_SCHEDULERS:
            raise ValueError(
                f"SWEEP_SCHEDULER must be one of {', '.join(SWEEP_SCHEDULERS)}, "
                f"got {self.sweep_scheduler!r}"
            )

        # Rate limiting needs Redis; tests and single-node dev setups can turn it off
        self.redis_enabled = os.getenv("REDIS_ENABLED", "true").lower() == "true"
