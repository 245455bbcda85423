"""
Rate Limiting Value Objects

Client addresses and the per-endpoint request budgets applied to them.
"""

import hashlib
import ipaddress
from dataclasses import dataclass
from typing import Iterable, Union

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class ClientIP:
    """A validated client address."""
    address: str

    def __post_init__(self):
        try:
            ipaddress.ip_address(self.address)
        except ValueError as e:
            raise ValueError(f"Invalid client address: {self.address!r}") from e

    @classmethod
    def parse(cls, raw: str) -> "ClientIP":
        """
        Build a ClientIP from a header or socket value.

        Surrounding whitespace is dropped and IPv4-mapped IPv6 addresses
        collapse to plain IPv4, so both spellings share one counter.

        Raises:
            ValueError: If the value is not an IP address
        """
        try:
            ip = ipaddress.ip_address((raw or "").strip())
        except ValueError as e:
            raise ValueError(f"Invalid client address: {raw!r}") from e

        mapped = getattr(ip, "ipv4_mapped", None)
        return cls(str(mapped or ip))

    def within(self, networks: Iterable[IPNetwork]) -> bool:
        """True if the address falls inside any of the networks."""
        ip = ipaddress.ip_address(self.address)
        return any(ip in network for network in networks)

    def bucket(self) -> str:
        """Stable 16-character digest used in counter keys instead of the raw address."""
        return hashlib.sha256(self.address.encode()).hexdigest()[:16]


@dataclass(frozen=True)
class RateLimit:
    """At most ``limit`` requests of one kind per fixed window of ``window_seconds``."""
    limit_type: str
    limit: int
    window_seconds: int

    def __post_init__(self):
        if not self.limit_type:
            raise ValueError("RateLimit needs a limit type")
        if self.limit <= 0:
            raise ValueError(f"limit must be > 0: {self.limit}")
        if self.window_seconds <= 0:
            raise ValueError(f"window_seconds must be > 0: {self.window_seconds}")
