"""Backup store layout: map local paths to <root>/<day>/<item>/<file>.

The day bucket is the first eight characters of a directory name. It is a
naming convention only; names are sliced, never parsed as dates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath

from dayplug.core.errors import LayoutError

log = logging.getLogger(__name__)

DAY_BUCKET_LEN = 8

# Path components that never name a file or directory
_NOT_A_NAME = ("", ".", "..")


@dataclass(frozen=True)
class BackupLocation:
    """Where a local path lives inside the backup store."""

    day_bucket: str
    item_bucket: str
    file_name: str | None = None

    def directory(self, root: Path) -> Path:
        """Return ``<root>/<day_bucket>/<item_bucket>``."""
        return root / self.day_bucket / self.item_bucket

    def path(self, root: Path) -> Path:
        """Return the full store path of the file."""
        if self.file_name is None:
            raise LayoutError("backup location has no file name")
        return self.directory(root) / self.file_name


def day_bucket(name: str) -> str | None:
    """Return the day bucket seeded by ``name``, or None if it is too short."""
    if len(name) < DAY_BUCKET_LEN:
        return None
    return name[:DAY_BUCKET_LEN]


def locate_file(local_path: str) -> BackupLocation:
    """Derive the store location of a single local file.

    The parent directory names the item bucket and seeds the day bucket, so
    ``/data/20240115-snap/report.txt`` maps to
    ``20240115/20240115-snap/report.txt``.
    """
    path = PurePath(local_path)
    file_name = path.name
    if file_name in _NOT_A_NAME:
        raise LayoutError("invalid local path for filename")
    item = path.parent.name
    if item in _NOT_A_NAME:
        raise LayoutError("invalid local path for dirname")
    day = day_bucket(item)
    if day is None:
        raise LayoutError("invalid local path for daydirname")
    log.debug("filename split: %s, %s, %s", day, item, file_name)
    return BackupLocation(day, item, file_name)


def locate_dir(local_dir: str) -> BackupLocation:
    """Derive the store directory of a whole local backup directory.

    The directory itself names the item bucket; its parent seeds the day
    bucket.
    """
    path = PurePath(local_dir)
    item = path.name
    if item in _NOT_A_NAME:
        raise LayoutError("invalid local path for dirname")
    seed = path.parent.name
    if seed in _NOT_A_NAME:
        raise LayoutError("invalid local path for daydirname")
    day = day_bucket(seed)
    if day is None:
        raise LayoutError("invalid local path for daydirname")
    log.debug("dir split: %s, %s", day, item)
    return BackupLocation(day, item)


def locate_bucket(bucket: str) -> BackupLocation:
    """Derive the store directory of a bucket name given for deletion."""
    if PurePath(bucket).name != bucket or bucket in _NOT_A_NAME:
        raise LayoutError("invalid dirname")
    day = day_bucket(bucket)
    if day is None:
        raise LayoutError("invalid dirname")
    return BackupLocation(day, bucket)
