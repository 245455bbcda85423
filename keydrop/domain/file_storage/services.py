"""
File Storage Services

Domain service for the key-scoped lifecycle of stored files: resolving a
public key for download, resolving a private key for deletion, and the
age-based sweep that evicts expired files.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Dict, List, Optional, Tuple

from ..errors import (
    DeleteFailedError,
    InvalidKeyError,
    StorageAccessError,
    StoredFileNotFoundError,
    is_classified,
)
from .entities import StoredFile
from .locks import PathLockRegistry
from .storage_repository import IFileStorageRepository
from .value_objects import KeyPair, matches_private_key, matches_public_key, redact

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 60 * 60  # 1 hour


@dataclass
class SweepResult:
    """Outcome of one sweep over the storage directory."""
    deleted: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: bool = False

    @property
    def deleted_count(self) -> int:
        return len(self.deleted)

    def to_dict(self) -> dict:
        return {
            "deleted": self.deleted_count,
            "failed": len(self.failed),
            "errors": [f"{name}: {error}" for name, error in self.failed.items()],
            "skipped": self.skipped,
        }


class FileLifecycleManager:
    """
    Domain service for managing stored files by key.

    The storage directory is the single source of truth: every lookup scans
    the listing, and the first name in listing order that matches wins.
    """

    def __init__(
        self,
        storage_repository: IFileStorageRepository,
        max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize FileLifecycleManager.

        Args:
            storage_repository: Repository for the storage directory
            max_age_seconds: Default retention window used by the sweep
            clock: Source of the current POSIX time
        """
        self.storage_repo = storage_repository
        self.max_age_seconds = max_age_seconds
        self._clock = clock
        self._path_locks = PathLockRegistry()
        self._sweep_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def find_file_by_public_key(self, public_key: Optional[str]) -> str:
        """
        Resolve a public key to the physical name of its file.

        Args:
            public_key: Download capability token

        Returns:
            Physical filename in the storage directory

        Raises:
            InvalidKeyError: If the key is missing or empty
            StoredFileNotFoundError: If no stored file carries this key
            StorageAccessError: If the directory listing fails
        """
        if not public_key:
            raise InvalidKeyError("Public key is required")

        try:
            names = self.storage_repo.list_names()
        except Exception as e:
            if is_classified(e):
                raise
            logger.error(f"Failed to list storage directory: {e}")
            raise StorageAccessError(original_error=e) from e

        for name in names:
            if matches_public_key(name, public_key):
                return name

        raise StoredFileNotFoundError("File not found")

    def get_file_by_public_key(self, public_key: Optional[str]) -> StoredFile:
        """
        Resolve a public key to a StoredFile entity.

        Raises:
            Same as find_file_by_public_key()
        """
        name = self.find_file_by_public_key(public_key)
        size = self.storage_repo.get_size(name)
        try:
            return StoredFile.from_physical_name(name, size=size)
        except ValueError:
            # Foreign file that happens to share the prefix: serve it under its own name
            return StoredFile(
                physical_name=name,
                public_key=public_key,
                private_key="",
                original_name=name,
                size=size,
            )

    def open_file_by_public_key(self, public_key: Optional[str]) -> Tuple[StoredFile, BinaryIO]:
        """
        Resolve a public key and open the file for streaming.

        Returns:
            Tuple of (StoredFile, open binary stream); the caller closes the stream

        Raises:
            StoredFileNotFoundError: If no match, or the file vanished after lookup
            StorageAccessError: If the file cannot be read
        """
        stored_file = self.get_file_by_public_key(public_key)
        try:
            stream = self.storage_repo.open(stored_file.physical_name)
        except FileNotFoundError as e:
            raise StoredFileNotFoundError("File not found or has been removed.", original_error=e) from e
        except Exception as e:
            if is_classified(e):
                raise
            logger.error(f"Failed to open {redact(stored_file.physical_name)}: {e}")
            raise StorageAccessError("Could not download the file.", original_error=e) from e

        return stored_file, stream

    def is_key_pair_available(self, key_pair: KeyPair) -> bool:
        """
        Check that neither key of a pair resolves to a stored file.

        Raises:
            StorageAccessError: If the directory listing fails
        """
        try:
            names = self.storage_repo.list_names()
        except Exception as e:
            if is_classified(e):
                raise
            raise StorageAccessError(original_error=e) from e

        return not any(
            matches_public_key(name, key_pair.public_key)
            or matches_private_key(name, key_pair.private_key)
            for name in names
        )

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    def delete_file_by_private_key(self, private_key: Optional[str]) -> str:
        """
        Delete the stored file carrying a private key.

        A match that disappears before the unlink (a concurrent delete or
        sweep got there first) counts as deleted.

        Args:
            private_key: Deletion capability token

        Returns:
            Physical filename that was deleted

        Raises:
            InvalidKeyError: If the key is missing or empty
            StoredFileNotFoundError: If no stored file carries this key
            DeleteFailedError: If listing or unlinking fails
        """
        if not private_key:
            raise InvalidKeyError("Private key is required")

        try:
            names = self.storage_repo.list_names()
            match = next((name for name in names if matches_private_key(name, private_key)), None)

            if match is None:
                raise StoredFileNotFoundError("File not found or private key is invalid")

            with self._path_locks.hold(match):
                removed = self.storage_repo.delete_if_exists(match)

            if removed:
                logger.info(f"Deleted file by private key {redact(private_key)}")
            else:
                logger.info(f"File for private key {redact(private_key)} was already removed")
            return match

        except Exception as e:
            if is_classified(e):
                raise
            logger.error(f"Failed to delete file for private key {redact(private_key)}: {e}")
            raise DeleteFailedError(original_error=e) from e

    # ------------------------------------------------------------------
    # Sweep
    # ------------------------------------------------------------------

    def sweep_expired(
        self,
        now: Optional[float] = None,
        max_age_seconds: Optional[float] = None,
    ) -> SweepResult:
        """
        Delete every stored file older than the retention window.

        Runs synchronously. An invocation that overlaps a sweep already in
        progress returns immediately with ``skipped=True``. Per-file failures
        are logged and recorded without aborting the sweep.

        Args:
            now: Current POSIX time, defaults to the manager's clock
            max_age_seconds: Retention window, defaults to the manager's setting

        Returns:
            SweepResult describing what was deleted and what failed
        """
        if not self._sweep_lock.acquire(blocking=False):
            logger.warning("Sweep already in progress, skipping this run")
            return SweepResult(skipped=True)

        try:
            return self._sweep(
                self._clock() if now is None else now,
                self.max_age_seconds if max_age_seconds is None else max_age_seconds,
            )
        finally:
            self._sweep_lock.release()

    def _sweep(self, now: float, max_age_seconds: float) -> SweepResult:
        result = SweepResult()

        if not self.storage_repo.storage_exists():
            return result

        try:
            names = self.storage_repo.list_names()
        except Exception as e:
            logger.error(f"Sweep could not list storage directory: {e}", exc_info=True)
            result.failed["<listing>"] = str(e)
            return result

        for name in names:
            try:
                modified_at = self.storage_repo.get_modified_time(name)
            except FileNotFoundError:
                continue
            except Exception as e:
                logger.error(f"Failed to stat {redact(name)}: {e}")
                result.failed[name] = str(e)
                continue

            if now - modified_at <= max_age_seconds:
                continue

            try:
                with self._path_locks.hold(name):
                    removed = self.storage_repo.delete_if_exists(name)
            except Exception as e:
                logger.error(f"Failed to delete {redact(name)}: {e}")
                result.failed[name] = str(e)
                continue

            if removed:
                logger.info(f"Deleted old file: {redact(name)}")
                result.deleted.append(name)

        return result
