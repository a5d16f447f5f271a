"""Transfer engine: verbatim byte copies between local paths and the store."""

from __future__ import annotations

import logging
from typing import BinaryIO

from dayplug.core.config import PluginSettings
from dayplug.core.errors import ArgumentError, StoreError
from dayplug.core.faults import FaultInjector
from dayplug.core.fileutil import DEFAULT_CHUNK_SIZE, copy_stream
from dayplug.core.layout import locate_bucket, locate_dir, locate_file
from dayplug.providers.backup.base import BackupStore
from dayplug.providers.backup.local import LocalBackupStore

log = logging.getLogger(__name__)


def _require(value: str | None, message: str) -> str:
    if not value:
        raise ArgumentError(message)
    return value


class TransferEngine:
    """Carries out one plugin command against a backup store.

    Nothing is retried; every failure is raised to the caller as a
    ``PluginError``.
    """

    def __init__(
        self,
        store: BackupStore,
        faults: FaultInjector | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.store = store
        self.faults = faults or FaultInjector()
        self.chunk_size = chunk_size

    @classmethod
    def from_settings(cls, settings: PluginSettings) -> TransferEngine:
        """Build an engine on a local store from ``PluginSettings``."""
        return cls(
            LocalBackupStore(settings.root),
            FaultInjector.from_settings(settings),
            settings.chunk_size,
        )

    # --- lifecycle hooks ---

    def setup_for_backup(self, local_dir: str | None) -> None:
        """Ensure the store directory for ``local_dir`` exists."""
        location = locate_dir(_require(local_dir, "no local path provided"))
        self.store.prepare(location)

    def setup_for_restore(self, local_dir: str | None = None) -> None:
        log.debug("setup for restore: nothing to do")

    def cleanup_for_backup(self, local_dir: str | None = None) -> None:
        log.debug("cleanup for backup: nothing to do")

    def cleanup_for_restore(self, local_dir: str | None = None) -> None:
        log.debug("cleanup for restore: nothing to do")

    # --- file transfers ---

    def backup_file(self, local_path: str | None) -> int:
        """Copy a local file into the store. Returns bytes copied."""
        self.faults.check()
        local_path = _require(local_path, "no local path provided")
        location = locate_file(local_path)
        try:
            local_file = open(local_path, "rb")
        except OSError as e:
            raise StoreError(f"could not open local file: {e}") from e
        with local_file, self.store.open_write(location) as backup_file:
            copied = copy_stream(
                local_file, backup_file, "local file", "backup file", self.chunk_size,
            )
        log.info("backed up %s (%d bytes)", local_path, copied)
        return copied

    def restore_file(self, local_path: str | None) -> int:
        """Copy a stored file back to ``local_path``, overwriting it."""
        self.faults.check()
        local_path = _require(local_path, "no local path provided")
        location = locate_file(local_path)
        with self.store.open_read(location) as backup_file:
            try:
                local_file = open(local_path, "wb")
            except OSError as e:
                raise StoreError(f"could not create local file: {e}") from e
            with local_file:
                copied = copy_stream(
                    backup_file, local_file, "backup file", "local file", self.chunk_size,
                )
        log.info("restored %s (%d bytes)", local_path, copied)
        return copied

    # --- stream transfers ---

    def backup_data(self, local_path: str | None, stream: BinaryIO) -> int:
        """Copy ``stream`` (the process's stdin) into the store file."""
        self.faults.check()
        location = locate_file(_require(local_path, "no local path provided"))
        with self.store.open_write(location) as backup_file:
            copied = copy_stream(stream, backup_file, "stdin", "backup file", self.chunk_size)
        log.info("backed up %d bytes of data to %s", copied, location.file_name)
        return copied

    def restore_data(self, local_path: str | None, stream: BinaryIO) -> int:
        """Copy the store file to ``stream`` (the process's stdout)."""
        self.faults.check()
        location = locate_file(_require(local_path, "no local path provided"))
        with self.store.open_read(location) as backup_file:
            copied = copy_stream(backup_file, stream, "backup file", "stdout", self.chunk_size)
        log.info("restored %d bytes of data from %s", copied, location.file_name)
        return copied

    # --- deletion ---

    def delete_backup(self, bucket: str | None) -> None:
        """Remove ``<root>/<bucket[:8]>/<bucket>`` and everything under it."""
        location = locate_bucket(_require(bucket, "no timestamp provided"))
        self.store.remove(location)
