"""
File Storage Entities

Domain entities for files held in the storage directory.
"""

from dataclasses import dataclass
from typing import Optional

from .value_objects import StoredFileName


@dataclass
class StoredFile:
    """
    View over one entry of the storage directory.

    Nothing about a stored file is persisted besides its physical name, so
    this entity is always derived from a directory entry and never saved.
    """
    physical_name: str
    public_key: str
    private_key: str
    original_name: str
    modified_at: Optional[float] = None
    size: Optional[int] = None

    @classmethod
    def from_physical_name(
        cls,
        physical_name: str,
        modified_at: Optional[float] = None,
        size: Optional[int] = None,
    ) -> "StoredFile":
        """
        Build the entity from an on-disk filename.

        Raises:
            ValueError: If the name does not follow the naming scheme
        """
        parts = StoredFileName.decode(physical_name)
        return cls(
            physical_name=physical_name,
            public_key=parts.public_key,
            private_key=parts.private_key,
            original_name=parts.original_name,
            modified_at=modified_at,
            size=size,
        )
