"""
Upload Service

Application service that stores uploaded files under freshly minted key
pairs, and shapes the upload response.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from werkzeug.datastructures import FileStorage

from keydrop.domain.errors import StorageAccessError, is_classified
from keydrop.domain.file_storage import (
    FileLifecycleManager,
    IFileStorageRepository,
    KeyPair,
    StoredFileName,
    generate_key_pair,
)
from keydrop.domain.file_storage.value_objects import KEY_LENGTH, redact, split_original_name

logger = logging.getLogger(__name__)

MAX_KEY_ATTEMPTS = 5
FALLBACK_FILENAME = "file"

# Longest client name that fits NAME_MAX with "<pub>_<priv>_" and a trailing "." added
MAX_NAME_BYTES = 255 - (2 * KEY_LENGTH + 3)


def storable_name(client_name: str) -> str:
    """
    The client filename as it is encoded on disk.

    Only directory components and NUL bytes are removed; spaces, punctuation
    and non-ASCII characters are kept so the name survives the round trip to
    download. An over-long name is shortened at the end of its base name,
    keeping the extension.
    """
    name = client_name.replace("\\", "/").rsplit("/", 1)[-1].replace("\x00", "")
    if name in ("", ".", ".."):
        return FALLBACK_FILENAME

    if len(name.encode()) <= MAX_NAME_BYTES:
        return name

    base_name, extension = split_original_name(name)
    room = MAX_NAME_BYTES - len(extension.encode()) - 1
    if room <= 0:
        return name.encode()[:MAX_NAME_BYTES].decode("utf-8", "ignore") or FALLBACK_FILENAME
    base_name = base_name.encode()[:room].decode("utf-8", "ignore") or FALLBACK_FILENAME
    return f"{base_name}.{extension}" if extension else base_name


@dataclass(frozen=True)
class UploadedFile:
    """One stored upload and the keys issued for it."""
    original_name: str
    physical_name: str
    key_pair: KeyPair
    size: int

    @property
    def public_key(self) -> str:
        return self.key_pair.public_key

    @property
    def private_key(self) -> str:
        return self.key_pair.private_key


def build_file_info(uploaded_files: Optional[Iterable[UploadedFile]]) -> List[dict]:
    """
    Map uploaded files to the client-facing response entries.

    Args:
        uploaded_files: Stored uploads, may be None or empty

    Returns:
        List of {filename, publicKey, privateKey} dicts
    """
    if not uploaded_files:
        return []

    return [
        {
            "filename": uploaded.original_name,
            "publicKey": uploaded.public_key,
            "privateKey": uploaded.private_key,
        }
        for uploaded in uploaded_files
    ]


class UploadService:
    """
    Stores multipart uploads in the storage directory.

    The client filename is kept for the response and, minus any directory
    part, in the physical name on disk.
    """

    def __init__(
        self,
        lifecycle_manager: FileLifecycleManager,
        storage_repository: IFileStorageRepository,
    ):
        self.lifecycle_manager = lifecycle_manager
        self.storage_repo = storage_repository

    def store_uploads(self, files: Iterable[FileStorage]) -> List[UploadedFile]:
        """
        Store every non-empty upload.

        Parts without a filename (an empty file input) are ignored. If any
        file fails, the files already written by this call are removed.

        Args:
            files: Uploaded parts from request.files

        Returns:
            Stored uploads in request order

        Raises:
            StorageAccessError: If a file cannot be written
        """
        stored: List[UploadedFile] = []
        try:
            for upload in files:
                if not upload or not upload.filename:
                    continue
                stored.append(self._store_one(upload))
        except Exception as e:
            self._rollback(stored)
            if is_classified(e):
                raise
            logger.error(f"Failed to store upload: {e}", exc_info=True)
            raise StorageAccessError("Failed to store uploaded file", original_error=e) from e

        return stored

    def _store_one(self, upload: FileStorage) -> UploadedFile:
        original_name = upload.filename
        key_pair = self._mint_key_pair()
        physical_name = StoredFileName.encode(
            key_pair.public_key,
            key_pair.private_key,
            storable_name(original_name),
        )

        size = self.storage_repo.save(physical_name, upload.stream)
        logger.info(f"Stored upload {redact(key_pair.public_key)} ({size} bytes)")

        return UploadedFile(
            original_name=original_name,
            physical_name=physical_name,
            key_pair=key_pair,
            size=size,
        )

    def _mint_key_pair(self) -> KeyPair:
        """
        Generate a key pair that collides with no stored file.

        Raises:
            StorageAccessError: If every attempt collided
        """
        for _ in range(MAX_KEY_ATTEMPTS):
            key_pair = generate_key_pair()
            if self.lifecycle_manager.is_key_pair_available(key_pair):
                return key_pair
            logger.warning("Generated key pair collides with a stored file, regenerating")

        raise StorageAccessError("Could not generate unique file keys")

    def _rollback(self, stored: List[UploadedFile]) -> None:
        for uploaded in stored:
            try:
                self.storage_repo.delete_if_exists(uploaded.physical_name)
            except OSError as e:
                logger.error(f"Failed to roll back upload {redact(uploaded.public_key)}: {e}")
