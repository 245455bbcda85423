"""
Rate Limit Application Service
"""

from typing import Optional

from keydrop.domain.rate_limiting import ClientIP, RateLimitManager, RateLimitState
from keydrop.infrastructure.rate_limit_config import RateLimitConfig


class RateLimitService:
    """Applies the configured upload and download budgets to a client address."""

    def __init__(self, rate_limit_manager: RateLimitManager, config: RateLimitConfig):
        self.manager = rate_limit_manager
        self.config = config

    def check_limit(self, client_ip: str, limit_type: str) -> Optional[RateLimitState]:
        """
        Spend one ``limit_type`` request for ``client_ip``.

        Returns:
            The counter state, or None when limits are not enforced

        Raises:
            RateLimitExceededError: If the budget is exhausted
            ValueError: If the address or the limit type is invalid
        """
        if not self.config.should_enforce():
            return None

        return self.manager.consume(
            ClientIP.parse(client_ip),
            self.config.rate_limit_for(limit_type),
            self.config.whitelist,
        )
