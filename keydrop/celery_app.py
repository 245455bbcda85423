"""
Celery Application Instance

Creates the Celery app instance for use by workers and beat scheduler.
Uses the app factory to ensure all services are properly initialized.

    SWEEP_SCHEDULER=celery celery -A keydrop.celery_app worker --beat

The in-process sweep thread is never started here; in ``thread`` mode the
web process owns the sweep and workers only run tasks sent to them.
"""

from keydrop.app_factory import create_app

# Create Flask app with all services initialized (including dependency container)
flask_app = create_app(start_scheduler=False)

celery_app = flask_app.celery

# Task modules are imported by name when the worker starts, after
# celery_app exists for their decorators
celery_app.conf.imports = ("keydrop.tasks.sweep_task",)
