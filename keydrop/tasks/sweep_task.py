"""
Sweep Task

Celery beat task for periodic eviction of expired uploads.
Thin wrapper that delegates to FileLifecycleManager.
"""

import logging

from keydrop.celery_app import celery_app
from keydrop.config.celery_config import SWEEP_TASK_NAME

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, name=SWEEP_TASK_NAME)
def sweep_expired_files(self):
    """
    Periodic task that deletes every upload older than the retention window.

    Runs on the ``sweep-expired-files`` beat entry. The manager is resolved
    from the DependencyContainer of the worker's Flask app.

    Returns:
        dict: Sweep statistics (deleted, failed, errors, skipped)
    """
    logger.info("Starting sweep task")

    try:
        from keydrop.celery_app import flask_app
        from keydrop.domain.file_storage import FileLifecycleManager

        lifecycle_manager = flask_app.container.resolve(FileLifecycleManager)
        stats = lifecycle_manager.sweep_expired().to_dict()

        logger.info(
            f"Sweep completed - Deleted: {stats['deleted']}, "
            f"Failed: {stats['failed']}, Skipped: {stats['skipped']}"
        )
        if stats["errors"]:
            logger.warning(f"Sweep errors: {stats['errors']}")

        return stats

    except Exception as e:
        error_msg = f"Sweep task failed: {e}"
        logger.error(error_msg, exc_info=True)
        return {
            "deleted": 0,
            "failed": 0,
            "errors": [error_msg],
            "skipped": False,
        }
