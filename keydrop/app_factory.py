"""
Application Factory

Builds the Flask app: logging, Redis, Celery, the service container,
the sweep scheduler and the HTTP routes.
"""

import atexit
import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from keydrop.application.dependency_container import DependencyContainer
from keydrop.application.rate_limit_service import RateLimitService
from keydrop.application.sweep_scheduler import SweepScheduler
from keydrop.application.upload_service import UploadService
from keydrop.config.app_config import AppConfig
from keydrop.config.celery_config import make_celery
from keydrop.config.logging_config import configure_logging
from keydrop.config.redis_config import RedisSettings
from keydrop.domain.file_storage import FileLifecycleManager, IFileStorageRepository
from keydrop.domain.rate_limiting import RateLimitManager
from keydrop.infrastructure.local_file_storage_repository import LocalFileStorageRepository
from keydrop.infrastructure.rate_limit_config import RateLimitConfig
from keydrop.infrastructure.redis_connection import RedisConnectionManager
from keydrop.infrastructure.redis_rate_limit_repository import RedisRateLimitRepository

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None, start_scheduler: bool = True) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Application configuration, uses default if None
        start_scheduler: Start the in-process sweep thread in ``thread`` mode;
            Celery processes pass False

    Returns:
        Configured Flask application
    """
    configure_logging()

    if config is None:
        config = AppConfig()

    app = Flask(__name__)
    app.keydrop_config = config

    # Any origin may upload and download
    CORS(app)

    _initialize_infrastructure(app, config)
    _initialize_services(app, config)
    _initialize_scheduler(app, config, start_scheduler)
    _register_blueprints(app, config)
    _register_root_endpoint(app)
    _register_health_endpoint(app)

    return app


def _initialize_infrastructure(app: Flask, config: AppConfig) -> None:
    """
    Attach the Redis connection manager and the Celery app.

    Neither step may stop startup: without Redis the app runs without
    rate limits, without Celery only the ``celery`` sweep mode is lost.
    """
    app.redis = None
    app.redis_enabled = False
    if config.redis_enabled:
        try:
            app.redis = RedisConnectionManager(RedisSettings.from_env())
            app.redis_enabled = True
            logger.info(f"Redis configured, pool of {app.redis.settings.max_connections} connections")
        except Exception as e:
            logger.warning(f"Could not configure Redis, rate limiting disabled: {e}")

    try:
        app.celery = make_celery(
            app,
            config.sweep_interval_seconds,
            with_beat=config.sweep_scheduler == "celery",
        )
    except Exception as e:
        logger.warning(f"Could not initialize Celery: {e}")
        app.celery = None


def _initialize_services(app: Flask, config: AppConfig) -> None:
    """
    Register every service in a DependencyContainer attached to the app.

    API routes and Celery tasks resolve services from ``app.container``
    and never build them directly.
    """
    container = DependencyContainer()

    storage_repository = LocalFileStorageRepository(config.storage_dir)
    container.register_singleton(IFileStorageRepository, storage_repository)

    lifecycle_manager = FileLifecycleManager(storage_repository, max_age_seconds=config.max_age_seconds)
    container.register_singleton(FileLifecycleManager, lifecycle_manager)

    upload_service = UploadService(lifecycle_manager, storage_repository)
    container.register_singleton(UploadService, upload_service)

    if app.redis_enabled:
        rate_limit_repository = RedisRateLimitRepository(app.redis.client)
        rate_limit_service = RateLimitService(
            RateLimitManager(rate_limit_repository),
            RateLimitConfig.from_env(),
        )
        container.register_singleton(RateLimitService, rate_limit_service)

    app.container = container
    logger.info(
        f"Application services initialized ({len(container)} registrations), "
        f"storage at {config.storage_dir}"
    )


def _initialize_scheduler(app: Flask, config: AppConfig, start_scheduler: bool) -> None:
    """
    Start the in-process sweep scheduler when SWEEP_SCHEDULER is ``thread``.

    With ``celery`` the beat entry drives the sweep; with ``none`` nothing does.
    """
    app.sweep_scheduler = None
    if config.sweep_scheduler != "thread":
        logger.info(f"In-process sweep scheduler disabled (SWEEP_SCHEDULER={config.sweep_scheduler})")
        return
    if not start_scheduler:
        logger.info("In-process sweep scheduler left to the web process")
        return

    scheduler = SweepScheduler(
        app.container.resolve(FileLifecycleManager),
        interval_seconds=config.sweep_interval_seconds,
    )
    scheduler.start()
    atexit.register(scheduler.stop)
    app.sweep_scheduler = scheduler


def _register_blueprints(app: Flask, config: AppConfig) -> None:
    from keydrop.api.v1 import api_v1_bp

    app.register_blueprint(api_v1_bp, url_prefix=config.api_prefix)
    logger.info(f"API registered at {config.api_prefix} with Swagger UI at {config.api_prefix}/docs")


def _register_root_endpoint(app: Flask) -> None:
    @app.get("/")
    def index():
        return "Hello World"


def _storage_status(app: Flask) -> tuple[str, bool]:
    # The directory appears with the first upload
    storage_repository = app.container.resolve(IFileStorageRepository)
    return ("available" if storage_repository.storage_exists() else "not_created"), True


def _redis_status(app: Flask) -> tuple[str, bool]:
    if not app.redis_enabled:
        return "disabled", True
    try:
        healthy = app.redis.health_check()
    except Exception as e:
        return f"error: {e}", False
    return ("connected", True) if healthy else ("disconnected", False)


def _scheduler_status(app: Flask) -> tuple[str, bool]:
    mode = app.keydrop_config.sweep_scheduler
    if mode == "thread":
        running = app.sweep_scheduler is not None and app.sweep_scheduler.is_running
        return ("running", True) if running else ("stopped", False)
    if mode == "celery":
        return ("celery", True) if app.celery is not None else ("unavailable", False)
    return "disabled", True


def _get_health_status(app: Flask) -> tuple[dict, int]:
    """
    Report storage, Redis and sweep scheduler state.

    Any unhealthy component marks the service ``degraded`` with a 503.
    """
    checks = {
        "storage": _storage_status,
        "redis": _redis_status,
        "scheduler": _scheduler_status,
    }
    report = {}
    healthy = True
    for component, check in checks.items():
        report[component], ok = check(app)
        healthy = healthy and ok

    report["status"] = "ok" if healthy else "degraded"
    return report, 200 if healthy else 503


def _register_health_endpoint(app: Flask) -> None:
    @app.get("/health")
    def health():
        """Overall health of the service and its dependencies."""
        report, status_code = _get_health_status(app)
        return jsonify(report), status_code
