"""BackupStore Protocol."""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

from dayplug.core.layout import BackupLocation


@runtime_checkable
class BackupStore(Protocol):
    """Contract for the hierarchical byte store backups are written to.

    Methods raise ``StoreError`` with a message naming the failed step.
    """

    @property
    def name(self) -> str:
        """Unique store ID: 'local', etc."""
        ...

    @property
    def root(self) -> Path:
        """Root under which day buckets are created."""
        ...

    def prepare(self, location: BackupLocation) -> Path:
        """Create the item directory of ``location`` with missing ancestors."""
        ...

    def open_read(self, location: BackupLocation) -> BinaryIO:
        """Open the stored file for reading."""
        ...

    def open_write(self, location: BackupLocation) -> BinaryIO:
        """Create or truncate the stored file for writing."""
        ...

    def remove(self, location: BackupLocation) -> None:
        """Recursively delete the item directory of ``location``."""
        ...
