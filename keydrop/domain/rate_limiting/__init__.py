"""
Rate Limiting Domain

Per-IP fixed-window limits for the upload and download endpoints.
"""

from .entities import RateLimitState
from .repositories import IRateLimitRepository
from .services import RateLimitManager
from .value_objects import ClientIP, IPNetwork, RateLimit

__all__ = [
    "ClientIP",
    "IPNetwork",
    "IRateLimitRepository",
    "RateLimit",
    "RateLimitManager",
    "RateLimitState",
]
