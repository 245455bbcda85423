"""
Shared pytest fixtures and configuration for the Keydrop test suite.

This module provides:
- Hypothesis configuration for property-based testing
- Process environment that keeps the app factory from starting the sweep
  thread or talking to Redis
- Storage, manager and Flask app fixtures
"""

import os

# Set before any keydrop import; importing the Celery app builds a Flask app
os.environ["SWEEP_SCHEDULER"] = "none"
os.environ["REDIS_ENABLED"] = "false"

from typing import List  # noqa: E402
from unittest.mock import Mock  # noqa: E402

import pytest  # noqa: E402
from hypothesis import HealthCheck, Phase, settings  # noqa: E402

from keydrop.domain.file_storage import FileLifecycleManager, IFileStorageRepository  # noqa: E402
from keydrop.infrastructure.local_file_storage_repository import LocalFileStorageRepository  # noqa: E402

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Keys and names
# =============================================================================

PUBLIC_KEY = "3f9a1c0b7d2e4a68"
PRIVATE_KEY = "b41e09c27f6d3a85"


@pytest.fixture
def public_key() -> str:
    return PUBLIC_KEY


@pytest.fixture
def private_key() -> str:
    return PRIVATE_KEY


@pytest.fixture
def sample_listing() -> List[str]:
    """Two stored names with short keys, as seen in a directory listing."""
    return ["aaa_bbb_x.txt", "ccc_ddd_y.pdf"]


# =============================================================================
# Storage fixtures
# =============================================================================

@pytest.fixture
def mock_storage_repo() -> Mock:
    """IFileStorageRepository mock with an existing, empty directory."""
    repo = Mock(spec=IFileStorageRepository)
    repo.storage_exists.return_value = True
    repo.list_names.return_value = []
    repo.get_size.return_value = 0
    repo.delete_if_exists.return_value = True
    return repo


@pytest.fixture
def storage_dir(tmp_path):
    """Storage directory path; not created until the first save."""
    return tmp_path / "uploads"


@pytest.fixture
def storage_repo(storage_dir) -> LocalFileStorageRepository:
    return LocalFileStorageRepository(str(storage_dir))


@pytest.fixture
def lifecycle_manager(storage_repo) -> FileLifecycleManager:
    return FileLifecycleManager(storage_repo, max_age_seconds=3600)


# =============================================================================
# Flask fixtures
# =============================================================================

@pytest.fixture
def app(storage_dir, monkeypatch):
    """Flask app built by the factory, storing files under tmp_path."""
    monkeypatch.setenv("FOLDER", str(storage_dir))
    monkeypatch.setenv("SWEEP_SCHEDULER", "none")
    monkeypatch.setenv("REDIS_ENABLED", "false")

    from keydrop.app_factory import create_app

    flask_app = create_app()
    flask_app.config["TESTING"] = True
    yield flask_app
    flask_app.container.clear_overrides()


@pytest.fixture
def client(app):
    return app.test_client()
