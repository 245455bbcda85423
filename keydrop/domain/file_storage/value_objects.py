"""
File Storage Value Objects

Immutable value objects for the key pair issued per upload and for the
physical filename that binds both keys to one stored file.
"""

import secrets
import string
from dataclasses import dataclass

# 8 random bytes rendered as lowercase hex
KEY_BYTES = 8
KEY_LENGTH = KEY_BYTES * 2
SEPARATOR = "_"
EXTENSION_SEPARATOR = "."

_HEX_DIGITS = frozenset(string.hexdigits.lower())


def is_valid_key(value: str) -> bool:
    """Check that a value has the shape of a generated key."""
    return (
        isinstance(value, str)
        and len(value) == KEY_LENGTH
        and all(c in _HEX_DIGITS for c in value)
    )


@dataclass(frozen=True)
class KeyPair:
    """
    Public/private capability tokens issued for one uploaded file.

    The public key grants download, the private key grants deletion.
    Both are sampled independently, so neither can be derived from the other.
    """
    public_key: str
    private_key: str

    def __post_init__(self):
        for name, value in (("public_key", self.public_key), ("private_key", self.private_key)):
            if not is_valid_key(value):
                raise ValueError(f"Invalid {name}: expected {KEY_LENGTH} hex characters")


def generate_key_pair() -> KeyPair:
    """
    Generate a fresh public/private key pair.

    Returns:
        KeyPair with two cryptographically random 16-character hex keys
    """
    return KeyPair(
        public_key=secrets.token_hex(KEY_BYTES),
        private_key=secrets.token_hex(KEY_BYTES),
    )


def split_original_name(original_name: str) -> tuple[str, str]:
    """
    Split a client filename into (base_name, extension) on the last dot.

    A name without a dot is all base name with an empty extension.
    """
    base_name, dot, extension = original_name.rpartition(EXTENSION_SEPARATOR)
    if not dot:
        return original_name, ""
    return base_name, extension


@dataclass(frozen=True)
class StoredFileName:
    """
    Codec for the on-disk filename ``<public>_<private>_<base>.<ext>``.

    The keys are fixed-width and never contain the separator, so the name
    decodes unambiguously even when the base name itself contains ``_``.
    """
    public_key: str
    private_key: str
    base_name: str
    extension: str

    @classmethod
    def encode(cls, public_key: str, private_key: str, original_name: str) -> str:
        """
        Build the physical filename for an upload.

        The extension segment is always emitted, so an extensionless name
        ends with a trailing dot.
        """
        base_name, extension = split_original_name(original_name)
        return (
            f"{public_key}{SEPARATOR}{private_key}{SEPARATOR}"
            f"{base_name}{EXTENSION_SEPARATOR}{extension}"
        )

    @classmethod
    def decode(cls, physical_name: str) -> "StoredFileName":
        """
        Parse a physical filename back into its parts.

        Raises:
            ValueError: If the name does not follow the naming scheme
        """
        public_key = physical_name[:KEY_LENGTH]
        private_key = physical_name[KEY_LENGTH + 1:2 * KEY_LENGTH + 1]
        rest = physical_name[2 * KEY_LENGTH + 2:]

        if (
            len(physical_name) < 2 * KEY_LENGTH + 2
            or physical_name[KEY_LENGTH] != SEPARATOR
            or physical_name[2 * KEY_LENGTH + 1] != SEPARATOR
            or not is_valid_key(public_key)
            or not is_valid_key(private_key)
        ):
            raise ValueError(f"Not a stored filename: {physical_name!r}")

        base_name, dot, extension = rest.rpartition(EXTENSION_SEPARATOR)
        if not dot:
            raise ValueError(f"Stored filename has no extension segment: {physical_name!r}")

        return cls(public_key, private_key, base_name, extension)

    @property
    def original_name(self) -> str:
        """Client-facing name, without the trailing dot of extensionless files."""
        if not self.extension:
            return self.base_name
        return f"{self.base_name}{EXTENSION_SEPARATOR}{self.extension}"

    @property
    def physical_name(self) -> str:
        return (
            f"{self.public_key}{SEPARATOR}{self.private_key}{SEPARATOR}"
            f"{self.base_name}{EXTENSION_SEPARATOR}{self.extension}"
        )


def matches_public_key(physical_name: str, public_key: str) -> bool:
    """True if the physical name starts with ``<public_key>_``."""
    return physical_name.startswith(f"{public_key}{SEPARATOR}")


def matches_private_key(physical_name: str, private_key: str) -> bool:
    """True if the physical name contains ``_<private_key>_``."""
    return f"{SEPARATOR}{private_key}{SEPARATOR}" in physical_name


def redact(value: str) -> str:
    """Shorten a key or physical name for log output."""
    return f"{value[:8]}..."
