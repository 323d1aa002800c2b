"""Archive codec: whole USTAR byte streams to and from entry sequences.

Decoding favours partial results over errors.  A declared payload that
runs past the end of the input ends the scan and returns what has been
decoded so far; only regular files are returned, but every other entry
is still consumed so the block cursor stays aligned.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "TarEntry",
    "is_zero_block",
    "padding_for",
    "read_tar",
    "write_tar",
)

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tarlight._checksum import compute_checksum
from tarlight._constants import BLOCK_SIZE, END_OF_ARCHIVE, REGULAR_TYPES
from tarlight._header import TarHeader, encode_header

log = logging.getLogger("tarlight")


@dataclass(slots=True)
class TarEntry:
    """One archive member: header record, payload, and cached raw block."""

    header: TarHeader
    data: bytes = b""
    header_bytes: bytes | None = field(default=None, repr=False)
    """Raw 512-byte block as last read or refreshed; may be stale."""

    @classmethod
    def from_bytes(cls, name: str, data: bytes, *, mode: int = 0o664) -> TarEntry:
        """Build a regular-file entry whose header matches *data*."""
        return cls(header=TarHeader(name=name, mode=mode, size=len(data)), data=data)

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def size(self) -> int:
        return self.header.size

    def is_regular(self) -> bool:
        return self.header.is_regular()

    def text(self) -> str:
        """Payload decoded as UTF-8 with trailing NUL bytes removed."""
        return self.data.decode("utf-8", errors="replace").rstrip("\x00")

    def refresh_header_bytes(self) -> bytes:
        """Re-encode the cached block and stored checksum from the header."""
        block = encode_header(self.header)
        self.header.checksum = compute_checksum(block)
        self.header_bytes = block
        return block

    def verify_checksum(self) -> bool:
        """Check the cached raw block against the header's checksum.

        Returns ``False`` when no block has been cached.
        """
        if self.header_bytes is None:
            return False
        return self.header.verify_checksum(self.header_bytes)


def padding_for(size: int) -> int:
    """Number of zero bytes that pad *size* up to a block boundary."""
    return (BLOCK_SIZE - size % BLOCK_SIZE) % BLOCK_SIZE


def is_zero_block(block: bytes | bytearray | memoryview) -> bool:
    return not any(block)


def read_tar(data: bytes | bytearray | memoryview) -> list[TarEntry]:
    """Decode an uncompressed USTAR archive into its regular-file entries.

    The scan stops at the first all-zero block.  If a header declares
    more payload than remains in *data*, the scan stops and the entries
    decoded so far are returned.  Payloads and header blocks are copied,
    so the result holds no reference to *data*.
    """
    entries: list[TarEntry] = []
    with memoryview(data) as view:
        total = len(view)
        offset = 0
        while offset + BLOCK_SIZE <= total:
            block = view[offset : offset + BLOCK_SIZE]
            if is_zero_block(block):
                break

            header = TarHeader.from_bytes(block)
            data_start = offset + BLOCK_SIZE
            data_end = data_start + header.size
            if data_end > total:
                log.debug(
                    "Archive truncated: entry at offset %d declares %d bytes, "
                    "%d available",
                    offset,
                    header.size,
                    total - data_start,
                )
                break

            if header.typeflag in REGULAR_TYPES:
                entries.append(
                    TarEntry(
                        header=header,
                        data=bytes(view[data_start:data_end]),
                        header_bytes=bytes(block),
                    )
                )
            else:
                log.debug(
                    "Skipping non-regular entry (type %r) at offset %d",
                    header.typeflag,
                    offset,
                )

            offset = data_end + padding_for(header.size)
    return entries


def write_tar(entries: Iterable[TarEntry]) -> bytes:
    """Encode *entries* as an uncompressed USTAR archive.

    Every header block is encoded fresh from its record, so edits to
    ``name`` or ``size`` always produce a matching checksum.  Only the
    bytes actually present in ``entry.data`` are written, whatever the
    header's ``size`` claims.  Two zero blocks terminate the archive.
    """
    out = bytearray()
    for entry in entries:
        out += encode_header(entry.header)
        out += entry.data
        out += bytes(padding_for(len(entry.data)))
    out += END_OF_ARCHIVE
    return bytes(out)
