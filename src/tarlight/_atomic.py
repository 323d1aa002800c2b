"""Atomic payload writes and archive fingerprinting for extraction."""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "TEMP_MARKER",
    "compute_archive_hash",
    "write_entry_atomic",
)

import contextlib
import hashlib
import os
import random
from pathlib import Path

# Infix of the temporary sibling written before the final rename.
TEMP_MARKER = ".tarlight_tmp_"


def write_entry_atomic(data: bytes, dest_path: Path) -> None:
    """Write *data* to *dest_path* via a temporary sibling and a rename.

    The destination either keeps its previous content or receives the
    complete payload; a failed write never leaves a partial file or a
    stray temporary behind.
    """
    suffix = f"{TEMP_MARKER}{os.getpid()}_{random.randint(0, 999999):06d}"
    temp_path = dest_path.with_name(dest_path.name + suffix)

    try:
        temp_path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "wb") as out:
            out.write(data)
        temp_path.replace(dest_path)
    except Exception:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        raise


def compute_archive_hash(data: bytes) -> str:
    """Return the first 16 hex chars of the SHA-256 of *data*."""
    return hashlib.sha256(data).hexdigest()[:16]
