"""
File Storage Domain

Handles key-scoped access to stored files, their naming scheme, and
age-based eviction.
"""

from .entities import StoredFile
from .locks import PathLockRegistry
from .services import DEFAULT_MAX_AGE_SECONDS, FileLifecycleManager, SweepResult
from .storage_repository import IFileStorageRepository
from .value_objects import (
    KEY_LENGTH,
    KeyPair,
    StoredFileName,
    generate_key_pair,
    matches_private_key,
    matches_public_key,
)

__all__ = [
    "DEFAULT_MAX_AGE_SECONDS",
    "FileLifecycleManager",
    "IFileStorageRepository",
    "KEY_LENGTH",
    "KeyPair",
    "PathLockRegistry",
    "StoredFile",
    "StoredFileName",
    "SweepResult",
    "generate_key_pair",
    "matches_private_key",
    "matches_public_key",
]
