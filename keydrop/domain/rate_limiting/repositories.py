"""
Rate Limiting Repositories

Counter storage interface; the Redis implementation lives in infrastructure.
"""

from abc import ABC, abstractmethod

from .entities import RateLimitState
from .value_objects import ClientIP, RateLimit


class IRateLimitRepository(ABC):
    """Stores one fixed-window counter per client and limit type."""

    @abstractmethod
    def hit(self, client_ip: ClientIP, rate_limit: RateLimit) -> RateLimitState:
        """
        Count one request and return the resulting state.

        The first request of a window opens the window. Implementations that
        cannot reach their store return RateLimitState.unlimited().
        """
        ...
