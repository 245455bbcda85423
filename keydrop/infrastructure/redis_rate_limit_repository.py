"""
Redis Rate Limit Repository

Fixed-window request counters kept in Redis.
"""

import logging
from datetime import datetime, timedelta, timezone

import redis

from keydrop.domain.rate_limiting.entities import RateLimitState
from keydrop.domain.rate_limiting.repositories import IRateLimitRepository
from keydrop.domain.rate_limiting.value_objects import ClientIP, RateLimit

logger = logging.getLogger(__name__)


class RedisRateLimitRepository(IRateLimitRepository):
    """
    One counter key per client and limit type.

    Each hit runs ``SET key 0 NX EX window``, ``INCR`` and ``TTL`` in a
    single MULTI/EXEC block: the first request of a window creates the key
    with its expiry and later requests only increment it. When Redis cannot
    be reached the request is let through.
    """

    def __init__(self, redis_client: redis.Redis, namespace: str = "ratelimit"):
        self.redis = redis_client
        self.namespace = namespace

    def key_for(self, client_ip: ClientIP, limit_type: str) -> str:
        """e.g. ``ratelimit:upload:a1b2c3d4e5f6a7b8``"""
        return f"{self.namespace}:{limit_type}:{client_ip.bucket()}"

    def hit(self, client_ip: ClientIP, rate_limit: RateLimit) -> RateLimitState:
        key = self.key_for(client_ip, rate_limit.limit_type)
        try:
            with self.redis.pipeline(transaction=True) as pipe:
                pipe.set(key, 0, ex=rate_limit.window_seconds, nx=True)
                pipe.incr(key)
                pipe.ttl(key)
                _, count, ttl = pipe.execute()

            if ttl is None or ttl < 0:
                # Counter left without an expiry would never reset
                self.redis.expire(key, rate_limit.window_seconds)
                ttl = rate_limit.window_seconds
        except redis.RedisError as e:
            logger.warning(f"Rate limit store unavailable, allowing request: {e}")
            return RateLimitState.unlimited(client_ip, rate_limit)

        return RateLimitState(
            client_ip=client_ip,
            rate_limit=rate_limit,
            count=int(count),
            reset_at=datetime.now(timezone.utc) + timedelta(seconds=ttl),
        )
