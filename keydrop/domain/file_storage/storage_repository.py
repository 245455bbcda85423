"""
File Storage Repository Interface

Abstract interface for the flat storage directory that holds every live
upload. The directory listing is the only index of stored files, so the
interface exposes listing, stat, streaming and delete primitives and
nothing resembling a metadata store.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, List, Optional


class IFileStorageRepository(ABC):
    """
    Contract for physical file storage.

    Contract Guarantees:
    - Names are bare filenames relative to the storage root (no subdirectories)
    - list_names() returns names in a stable, sorted order
    - delete_if_exists() treats an already-missing file as a no-op
    - Errors other than "not found" propagate to the caller unchanged
    """

    @abstractmethod
    def storage_exists(self) -> bool:
        """
        Check whether the storage directory exists.

        Returns:
            True if the directory is present
        """
        pass  # pragma: no cover

    @abstractmethod
    def ensure_storage(self) -> None:
        """
        Create the storage directory if it is missing.

        Raises:
            OSError: If the directory cannot be created
        """
        pass  # pragma: no cover

    @abstractmethod
    def list_names(self) -> List[str]:
        """
        List every regular file in the storage directory.

        Returns:
            Sorted list of filenames

        Raises:
            OSError: If the directory cannot be read
        """
        pass  # pragma: no cover

    @abstractmethod
    def get_modified_time(self, name: str) -> float:
        """
        Get a file's modification time.

        Args:
            name: Filename in the storage directory

        Returns:
            Modification time as POSIX timestamp (seconds)

        Raises:
            FileNotFoundError: If the file no longer exists
        """
        pass  # pragma: no cover

    @abstractmethod
    def save(self, name: str, content: BinaryIO) -> int:
        """
        Stream content into a new file.

        Args:
            name: Filename in the storage directory
            content: Binary stream positioned at the start of the data

        Returns:
            Number of bytes written
        """
        pass  # pragma: no cover

    @abstractmethod
    def open(self, name: str) -> BinaryIO:
        """
        Open a stored file for reading.

        Raises:
            FileNotFoundError: If the file no longer exists
        """
        pass  # pragma: no cover

    @abstractmethod
    def delete_if_exists(self, name: str) -> bool:
        """
        Remove a stored file.

        Returns:
            True if this call removed the file, False if it was already gone
        """
        pass  # pragma: no cover

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if a file with this name is currently stored."""
        pass  # pragma: no cover

    @abstractmethod
    def get_size(self, name: str) -> Optional[int]:
        """Size in bytes, or None if the file does not exist."""
        pass  # pragma: no cover
