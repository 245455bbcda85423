"""
Rate Limit Configuration

Per-endpoint budgets and the whitelist, read from the environment.
"""

import ipaddress
import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional

from keydrop.domain.rate_limiting.value_objects import IPNetwork, RateLimit

logger = logging.getLogger(__name__)

UPLOAD = "upload"
DOWNLOAD = "download"


@dataclass
class RateLimitConfig:
    """
    Uploads and downloads each get a per-IP budget over a shared window.
    Deletes are never limited.
    """

    enabled: bool = True
    is_production: bool = False
    upload_limit: int = 5
    download_limit: int = 10
    window_seconds: int = 5 * 60
    whitelist: List[IPNetwork] = field(default_factory=list)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RateLimitConfig":
        env = os.environ if environ is None else environ
        return cls(
            enabled=env.get("RATE_LIMIT_ENABLED", "true").lower() == "true",
            is_production=env.get("FLASK_ENV") == "production",
            upload_limit=int(env.get("RATE_LIMIT_UPLOAD", "5")),
            download_limit=int(env.get("RATE_LIMIT_DOWNLOAD", "10")),
            window_seconds=int(env.get("RATE_LIMIT_WINDOW_SECONDS", "300")),
            whitelist=parse_whitelist(env.get("RATE_LIMIT_WHITELIST", "")),
        )

    def should_enforce(self) -> bool:
        """Limits apply only in production with RATE_LIMIT_ENABLED set."""
        return self.enabled and self.is_production

    def rate_limit_for(self, limit_type: str) -> RateLimit:
        """
        Raises:
            ValueError: If the limit type is neither ``upload`` nor ``download``
        """
        if limit_type == UPLOAD:
            limit = self.upload_limit
        elif limit_type == DOWNLOAD:
            limit = self.download_limit
        else:
            raise ValueError(f"Unknown limit type: {limit_type}")
        return RateLimit(limit_type=limit_type, limit=limit, window_seconds=self.window_seconds)


def parse_whitelist(value: str) -> List[IPNetwork]:
    """
    Parse a comma-separated list of addresses and CIDR networks.

    "127.0.0.1, 10.0.0.0/8" -> [127.0.0.1/32, 10.0.0.0/8]. Entries that are
    not valid are logged and dropped.
    """
    networks = []
    for entry in (value or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        try:
            networks.append(ipaddress.ip_network(entry, strict=False))
        except ValueError:
            logger.warning(f"Ignoring invalid RATE_LIMIT_WHITELIST entry: {entry!r}")
    return networks
