"""File system utilities: directory creation and chunked stream copies."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from dayplug.core.errors import StoreError

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024


def ensure_dir(path: Path) -> Path:
    """Create directory and all missing ancestors if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def copy_stream(
    src: BinaryIO,
    dst: BinaryIO,
    src_label: str,
    dst_label: str,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Copy ``src`` into ``dst`` chunk by chunk until EOF, then flush once.

    Each failing step raises ``StoreError`` naming the step and the side it
    happened on. Returns the number of bytes copied.
    """
    total = 0
    while True:
        try:
            chunk = src.read(chunk_size)
        except OSError as e:
            raise StoreError(f"could not read from {src_label}: {e}") from e
        if not chunk:
            break
        try:
            dst.write(chunk)
        except OSError as e:
            raise StoreError(f"could not write to {dst_label}: {e}") from e
        total += len(chunk)
    try:
        dst.flush()
    except OSError as e:
        raise StoreError(f"could not flush {dst_label}: {e}") from e
    log.debug("copied %d bytes from %s to %s", total, src_label, dst_label)
    return total
