"""Gzip filter and archive file I/O.

Whether an archive is gzip-wrapped is decided purely by its filename
suffix (``.tar.gz`` or ``.tgz``).  The codec always sees the
decompressed byte form.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "GZIP_SUFFIXES",
    "compress_for",
    "decompress_for",
    "is_gzip_name",
    "read_archive_bytes",
    "write_archive_bytes",
)

import gzip
import logging
import os
import zlib
from pathlib import Path
from typing import BinaryIO

from tarlight._exceptions import MalformedArchiveError

log = logging.getLogger("tarlight")

GZIP_SUFFIXES = (".tar.gz", ".tgz")


def is_gzip_name(filename: str | os.PathLike[str] | None) -> bool:
    """Return ``True`` if *filename* ends in a gzip tar suffix."""
    if not filename:
        return False
    return os.fspath(filename).lower().endswith(GZIP_SUFFIXES)


def compress_for(data: bytes, filename: str | os.PathLike[str] | None) -> bytes:
    """Gzip *data* if *filename* calls for it, otherwise return it as-is."""
    if not is_gzip_name(filename):
        return data
    return gzip.compress(data)


def decompress_for(data: bytes, filename: str | os.PathLike[str] | None) -> bytes:
    """Gunzip *data* if *filename* calls for it, otherwise return it as-is.

    :raises MalformedArchiveError: If the gzip stream is corrupt or
        truncated.
    """
    if not is_gzip_name(filename):
        return data
    try:
        return gzip.decompress(data)
    except (gzip.BadGzipFile, EOFError, zlib.error) as exc:
        # EOFError is raised directly by the decompressor when the
        # stream ends before its trailer.
        raise MalformedArchiveError(f"Cannot decompress archive: {exc}") from exc


def read_archive_bytes(
    source: str | os.PathLike[str] | bytes | bytearray | BinaryIO,
    *,
    filename: str | os.PathLike[str] | None = None,
) -> bytes:
    """Return the decompressed archive bytes held by *source*.

    *source* may be a filesystem path, an in-memory buffer, or a binary
    file object.  The compression decision uses *filename* when given,
    else the path (or the file object's ``name``).  Buffers without a
    *filename* are taken to be uncompressed.

    :raises OSError: If the file cannot be read.
    :raises MalformedArchiveError: If decompression fails.
    """
    if isinstance(source, (str, os.PathLike)):
        raw = Path(source).read_bytes()
        name = filename if filename is not None else source
    elif isinstance(source, (bytes, bytearray, memoryview)):
        raw = bytes(source)
        name = filename
    else:
        raw = source.read()
        name = filename if filename is not None else getattr(source, "name", None)
        if not isinstance(name, (str, os.PathLike)):
            name = None
    log.debug("Read %d archive bytes from %r", len(raw), name)
    return decompress_for(raw, name)


def write_archive_bytes(data: bytes, path: str | os.PathLike[str]) -> int:
    """Write archive *data* to *path*, compressing by suffix.

    Returns the number of bytes written to disk.

    :raises OSError: If the file cannot be written.
    """
    payload = compress_for(data, path)
    Path(path).write_bytes(payload)
    log.debug("Wrote %d bytes to %s", len(payload), os.fspath(path))
    return len(payload)
