"""Local backup store: day-bucketed directory tree on the local filesystem."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from dayplug.core.errors import StoreError
from dayplug.core.fileutil import ensure_dir
from dayplug.core.layout import BackupLocation

log = logging.getLogger(__name__)


class LocalBackupStore:
    """Store backups under ``<root>/<day_bucket>/<item_bucket>/``."""

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).expanduser()

    @property
    def name(self) -> str:
        return "local"

    @property
    def root(self) -> Path:
        return self._root

    def prepare(self, location: BackupLocation) -> Path:
        directory = location.directory(self._root)
        try:
            ensure_dir(directory)
        except OSError as e:
            raise StoreError(f"could not create backup directory: {e}") from e
        log.debug("prepared backup directory %s", directory)
        return directory

    def open_read(self, location: BackupLocation) -> BinaryIO:
        try:
            return open(location.path(self._root), "rb")
        except OSError as e:
            raise StoreError(f"could not open backup file: {e}") from e

    def open_write(self, location: BackupLocation) -> BinaryIO:
        # Directories are created by setup, not here
        try:
            return open(location.path(self._root), "wb")
        except OSError as e:
            raise StoreError(f"could not create backup file: {e}") from e

    def remove(self, location: BackupLocation) -> None:
        directory = location.directory(self._root)
        try:
            shutil.rmtree(directory)
        except OSError as e:
            raise StoreError(f"could not delete backup: {e}") from e
        log.info("deleted backup %s", directory)
