"""
Redis Connection

Connection pool shared by every Redis consumer of one application.
"""

import logging

import redis

from keydrop.config.redis_config import RedisSettings

logger = logging.getLogger(__name__)


class RedisConnectionManager:
    """
    Lazily connected client over a bounded pool.

    Building the manager never touches the network; the first command does.
    Short socket timeouts keep a dead Redis from stalling requests.
    """

    def __init__(self, settings: RedisSettings):
        self.settings = settings
        self.pool = redis.ConnectionPool.from_url(
            settings.url,
            max_connections=settings.max_connections,
            socket_timeout=settings.socket_timeout,
            socket_connect_timeout=settings.socket_timeout,
        )
        self.client = redis.Redis(connection_pool=self.pool)

    def health_check(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.debug(f"Redis ping failed: {e}")
            return False
