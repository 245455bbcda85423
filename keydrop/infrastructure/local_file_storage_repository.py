"""
Local File Storage Repository Implementation

Concrete implementation of IFileStorageRepository for a flat directory on
the local filesystem. Uses pathlib and os for all filesystem operations.
"""

import os
import tempfile
from pathlib import Path
from typing import BinaryIO, List, Optional

from keydrop.domain.file_storage.storage_repository import IFileStorageRepository

CHUNK_SIZE = 64 * 1024


class LocalFileStorageRepository(IFileStorageRepository):
    """
    Local filesystem implementation of IFileStorageRepository.

    The directory is created lazily on the first write, so a fresh
    deployment with no uploads has no directory at all.

    Thread Safety:
        Writes land in a temporary file and are moved into place with
        os.replace(), so a reader never observes a partially written file
        under its final name.

    Attributes:
        base_path: Absolute path of the storage directory
    """

    def __init__(self, base_path: str = "uploads"):
        """
        Initialize the local file storage repository.

        Args:
            base_path: Storage directory, resolved against the working directory
        """
        self.base_path = Path(base_path).resolve()

    def _path_for(self, name: str) -> Path:
        """
        Resolve a bare filename inside the storage directory.

        Raises:
            ValueError: If the name is empty or points outside the directory
        """
        if not name or not name.strip():
            raise ValueError("name cannot be empty")
        if name in (".", "..") or "/" in name or os.sep in name or "\x00" in name:
            raise ValueError(f"Invalid file name: {name!r}")
        return self.base_path / name

    # IFileStorageRepository interface methods

    def storage_exists(self) -> bool:
        return self.base_path.is_dir()

    def ensure_storage(self) -> None:
        """
        Ensure the storage directory exists.

        Raises:
            PermissionError: If insufficient permissions to create directory
            OSError: If directory creation fails for other reasons
        """
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
        except PermissionError as e:
            raise PermissionError(
                f"Insufficient permissions to create storage directory: {self.base_path}"
            ) from e
        except OSError as e:
            raise OSError(f"Failed to create storage directory: {self.base_path}") from e

    def list_names(self) -> List[str]:
        """
        List regular files in the storage directory.

        A missing directory simply holds no files.
        """
        if not self.base_path.exists():
            return []
        return sorted(entry.name for entry in os.scandir(self.base_path) if entry.is_file())

    def get_modified_time(self, name: str) -> float:
        return self._path_for(name).stat().st_mtime

    def save(self, name: str, content: BinaryIO) -> int:
        """
        Stream content into the storage directory under ``name``.

        Args:
            name: Target filename
            content: Binary stream to copy

        Returns:
            Number of bytes written

        Raises:
            ValueError: If the name is invalid
            OSError: If the write fails
        """
        target = self._path_for(name)
        self.ensure_storage()

        fd, tmp_name = tempfile.mkstemp(dir=self.base_path, prefix=".incoming-")
        written = 0
        try:
            with os.fdopen(fd, "wb") as f:
                while True:
                    chunk = content.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
                    written += len(chunk)
            os.replace(tmp_name, target)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

        return written

    def open(self, name: str) -> BinaryIO:
        return open(self._path_for(name), "rb")

    def delete_if_exists(self, name: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if the file was removed by this call, False if it was already gone

        Raises:
            PermissionError: If there are insufficient permissions to delete
            OSError: If the unlink fails for any other reason
        """
        try:
            self._path_for(name).unlink()
        except FileNotFoundError:
            return False
        return True

    def exists(self, name: str) -> bool:
        """Check if a file exists. Never raises for invalid names."""
        try:
            return self._path_for(name).is_file()
        except (OSError, ValueError):
            return False

    def get_size(self, name: str) -> Optional[int]:
        """File size in bytes, or None if the file does not exist."""
        try:
            path = self._path_for(name)
            if not path.is_file():
                return None
            return path.stat().st_size
        except (OSError, ValueError):
            return None
