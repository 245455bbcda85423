"""
Redis Configuration

Connection settings for the Redis instance that holds rate-limit counters.
``REDIS_URL`` wins over the individual host/port/db/password variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import quote


@dataclass(frozen=True)
class RedisSettings:
    url: str = "redis://localhost:6379/0"
    max_connections: int = 20
    socket_timeout: float = 1.0

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RedisSettings":
        env = os.environ if environ is None else environ

        url = env.get("REDIS_URL")
        if not url:
            password = env.get("REDIS_PASSWORD")
            auth = f":{quote(password, safe='')}@" if password else ""
            url = (
                f"redis://{auth}{env.get('REDIS_HOST', 'localhost')}:"
                f"{env.get('REDIS_PORT', '6379')}/{env.get('REDIS_DB', '0')}"
            )

        return cls(
            url=url,
            max_connections=int(env.get("REDIS_MAX_CONNECTIONS", "20")),
            socket_timeout=float(env.get("REDIS_SOCKET_TIMEOUT", "1.0")),
        )
