"""
Unit tests for RateLimitService
"""

import ipaddress
from unittest.mock import Mock

import pytest

from keydrop.application.rate_limit_service import RateLimitService
from keydrop.domain.errors import RateLimitExceededError
from keydrop.domain.rate_limiting import ClientIP, RateLimit
from keydrop.infrastructure.rate_limit_config import RateLimitConfig


@pytest.fixture
def manager():
    return Mock()


def _service(manager, **config):
    return RateLimitService(manager, RateLimitConfig(**config))


class TestCheckLimit:
    """Limits only apply in production with the feature flag on."""

    def test_not_enforced_outside_production(self, manager):
        service = _service(manager, enabled=True, is_production=False)

        assert service.check_limit("203.0.113.7", "upload") is None
        manager.consume.assert_not_called()

    def test_not_enforced_when_disabled(self, manager):
        service = _service(manager, enabled=False, is_production=True)

        assert service.check_limit("203.0.113.7", "upload") is None
        manager.consume.assert_not_called()

    def test_consumes_configured_budget(self, manager):
        whitelist = [ipaddress.ip_network("10.0.0.0/8")]
        service = _service(manager, enabled=True, is_production=True, whitelist=whitelist)
        manager.consume.return_value = "state"

        assert service.check_limit("203.0.113.7", "download") == "state"
        manager.consume.assert_called_once_with(
            ClientIP("203.0.113.7"),
            RateLimit(limit_type="download", limit=10, window_seconds=300),
            whitelist,
        )

    def test_exceeded_limit_propagates(self, manager):
        service = _service(manager, enabled=True, is_production=True)
        manager.consume.side_effect = RateLimitExceededError(context={"limit": 5})

        with pytest.raises(RateLimitExceededError):
            service.check_limit("203.0.113.7", "upload")

    def test_invalid_address_raises_value_error(self, manager):
        service = _service(manager, enabled=True, is_production=True)

        with pytest.raises(ValueError):
            service.check_limit("nope", "upload")
        manager.consume.assert_not_called()
