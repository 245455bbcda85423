"""
Rate Limiting Domain Services
"""

from typing import Iterable

from ..errors import RateLimitExceededError
from .entities import RateLimitState
from .repositories import IRateLimitRepository
from .value_objects import ClientIP, IPNetwork, RateLimit


class RateLimitManager:
    """Spends client budgets and rejects clients that have none left."""

    def __init__(self, repository: IRateLimitRepository):
        self.repository = repository

    def consume(
        self,
        client_ip: ClientIP,
        rate_limit: RateLimit,
        whitelist: Iterable[IPNetwork] = (),
    ) -> RateLimitState:
        """
        Spend one request of the client's budget.

        The request is counted before the comparison, so concurrent requests
        cannot slip past the limit between a read and a write.

        Args:
            client_ip: Requesting client
            rate_limit: Budget for the endpoint kind
            whitelist: Networks that are never limited

        Returns:
            RateLimitState including this request

        Raises:
            RateLimitExceededError: If this request goes over the limit
        """
        if client_ip.within(whitelist):
            return RateLimitState.unlimited(client_ip, rate_limit)

        state = self.repository.hit(client_ip, rate_limit)
        if state.exceeded:
            raise RateLimitExceededError(
                context={
                    "limit_type": rate_limit.limit_type,
                    "limit": rate_limit.limit,
                    "reset_at": state.reset_at.isoformat(),
                }
            )
        return state
