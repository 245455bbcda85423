"""
Rate Limiting Entities
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from .value_objects import ClientIP, RateLimit


@dataclass
class RateLimitState:
    """
    Counter of one client against one rate limit, after counting the
    current request.
    """
    client_ip: ClientIP
    rate_limit: RateLimit
    count: int
    reset_at: datetime

    @classmethod
    def unlimited(
        cls,
        client_ip: ClientIP,
        rate_limit: RateLimit,
        now: Optional[datetime] = None,
    ) -> "RateLimitState":
        """State for a request that is not counted (whitelisted, or the store is down)."""
        now = now or datetime.now(timezone.utc)
        return cls(
            client_ip=client_ip,
            rate_limit=rate_limit,
            count=0,
            reset_at=now + timedelta(seconds=rate_limit.window_seconds),
        )

    @property
    def exceeded(self) -> bool:
        return self.count > self.rate_limit.limit

    @property
    def remaining(self) -> int:
        return max(0, self.rate_limit.limit - self.count)

    def headers(self) -> Dict[str, str]:
        """X-RateLimit-* response headers."""
        return {
            "X-RateLimit-Limit": str(self.rate_limit.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at.timestamp())),
        }
