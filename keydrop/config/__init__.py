"""Process configuration: environment settings, Redis, Celery and logging."""
