"""
Celery Configuration

Builds the Celery app bound to a Flask app. Celery beat drives the
expired-file sweep when SWEEP_SCHEDULER is ``celery``.
"""

import os

from celery import Celery

SWEEP_TASK_NAME = "tasks.sweep_expired_files"


def celery_settings(sweep_interval_seconds: float, with_beat: bool = False) -> dict:
    """
    Celery settings; broker and result backend default to the local Redis.

    The beat entry is only added with ``with_beat``, so a beat process started
    outside ``celery`` mode schedules nothing.
    """
    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    settings = {
        "broker_url": broker_url,
        "result_backend": os.getenv("CELERY_RESULT_BACKEND", broker_url),
        "task_serializer": "json",
        "result_serializer": "json",
        "accept_content": ["json"],
        "timezone": "UTC",
        "enable_utc": True,
        "worker_prefetch_multiplier": 1,
        "task_acks_late": True,
        "result_expires": 60 * 60,
        # A sweep still running at the next tick is stuck
        "task_soft_time_limit": max(1, int(sweep_interval_seconds * 0.8)),
        "task_time_limit": max(2, int(sweep_interval_seconds * 0.9)),
    }
    if with_beat:
        settings["beat_schedule"] = {
            "sweep-expired-files": {
                "task": SWEEP_TASK_NAME,
                "schedule": sweep_interval_seconds,
            },
        }
    return settings


def make_celery(app, sweep_interval_seconds: float, with_beat: bool = False) -> Celery:
    """
    Create a Celery app whose tasks run inside ``app``'s application context.
    """
    celery = Celery(app.import_name)
    celery.conf.update(celery_settings(sweep_interval_seconds, with_beat))

    class FlaskContextTask(celery.Task):
        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = FlaskContextTask
    return celery
