"""USTAR header codec.

A header is a fixed 512-byte block.  Every field lives at a fixed offset
and is one of three kinds: raw text, octal ASCII digits, or a single raw
byte.  ``HEADER_FIELDS`` records that layout once; encoding and decoding
are loops over it.

The codec is permissive on purpose.  Oversized values are truncated to
their field width on encode, and numeric fields that are empty or not
valid octal decode to ``0``.  Neither direction raises for any input.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "FieldKind",
    "HEADER_FIELDS",
    "HeaderField",
    "TarHeader",
    "decode_header",
    "decode_text",
    "encode_header",
    "format_octal",
    "parse_octal_or_zero",
    "truncate_to_width",
)

import logging
import re
import tarfile
from dataclasses import dataclass
from enum import Enum

from tarlight._checksum import compute_checksum
from tarlight._constants import (
    BLOCK_SIZE,
    CHECKSUM_OFFSET,
    CHECKSUM_WIDTH,
    REGULAR_TYPES,
    USTAR_MAGIC,
    USTAR_VERSION,
)

log = logging.getLogger("tarlight")

_OCTAL_RE = re.compile(rb"[0-7]+")


class FieldKind(Enum):
    """How a header field is represented on disk."""

    TEXT = "text"
    OCTAL = "octal"
    BYTE = "byte"


@dataclass(frozen=True, slots=True)
class HeaderField:
    """One row of the USTAR layout table."""

    name: str
    offset: int
    length: int
    kind: FieldKind
    bits: int = 0
    """Semantic width of an ``OCTAL`` field (32 or 64); unused otherwise."""

    @property
    def end(self) -> int:
        return self.offset + self.length


HEADER_FIELDS: tuple[HeaderField, ...] = (
    HeaderField("name", 0, 100, FieldKind.TEXT),
    HeaderField("mode", 100, 8, FieldKind.OCTAL, 32),
    HeaderField("uid", 108, 8, FieldKind.OCTAL, 32),
    HeaderField("gid", 116, 8, FieldKind.OCTAL, 32),
    HeaderField("size", 124, 12, FieldKind.OCTAL, 64),
    HeaderField("mtime", 136, 12, FieldKind.OCTAL, 64),
    HeaderField("checksum", CHECKSUM_OFFSET, CHECKSUM_WIDTH, FieldKind.OCTAL, 32),
    HeaderField("typeflag", 156, 1, FieldKind.BYTE),
    HeaderField("linkname", 157, 100, FieldKind.TEXT),
    HeaderField("magic", 257, 6, FieldKind.TEXT),
    HeaderField("version", 263, 2, FieldKind.TEXT),
    HeaderField("uname", 265, 32, FieldKind.TEXT),
    HeaderField("gname", 297, 32, FieldKind.TEXT),
    HeaderField("devmajor", 329, 8, FieldKind.OCTAL, 32),
    HeaderField("devminor", 337, 8, FieldKind.OCTAL, 32),
    HeaderField("prefix", 345, 155, FieldKind.TEXT),
)

# Written by encode_header regardless of the record's own values.
_FIXED_TEXT = {"magic": USTAR_MAGIC, "version": USTAR_VERSION}


# ---- policy functions ------------------------------------------------------


def truncate_to_width(raw: bytes, width: int) -> bytes:
    """Cut *raw* to at most *width* bytes.  Never raises."""
    return raw[:width]


def format_octal(value: int, width: int, bits: int) -> bytes:
    """Render *value* as unpadded octal ASCII that fits *width* bytes.

    The value is first reduced to its unsigned *bits*-wide form, then
    any digits beyond *width* are dropped.
    """
    value &= (1 << bits) - 1
    return truncate_to_width(b"%o" % value, width)


def decode_text(raw: bytes) -> str:
    """Trim trailing NULs, decode as UTF-8, strip surrounding whitespace."""
    return raw.rstrip(b"\x00").decode("utf-8", errors="replace").strip()


def parse_octal_or_zero(raw: bytes, bits: int = 64) -> int:
    """Parse an octal numeric field, defaulting to ``0``.

    Empty fields, non-octal text, and values wider than *bits* all
    decode to zero.  Legacy archives frequently leave numeric fields
    partially populated, so this never raises.  The checksum field's
    ``"NNNNNN\\0 "`` terminator is trimmed like any other padding.
    """
    text = raw.rstrip(b"\x00").strip().rstrip(b"\x00").strip()
    if not _OCTAL_RE.fullmatch(text):
        return 0
    value = int(text, 8)
    if value >> bits:
        return 0
    return value


def _flag_bytes(typeflag: bytes | int) -> bytes:
    # tarfile constants are one-byte ``bytes``; accept a plain int as well.
    if isinstance(typeflag, int):
        return bytes((typeflag & 0xFF,))
    return bytes(typeflag)


# ---- header record ---------------------------------------------------------


@dataclass(slots=True)
class TarHeader:
    """Structured form of one USTAR header block.

    The record is the single source of truth; raw blocks are derived from
    it with :meth:`to_bytes`.
    """

    name: str = ""
    mode: int = 0o644
    uid: int = 0
    gid: int = 0
    size: int = 0
    mtime: int = 0
    checksum: int = 0
    typeflag: bytes = tarfile.REGTYPE
    linkname: str = ""
    magic: str = USTAR_MAGIC
    version: str = USTAR_VERSION
    uname: str = ""
    gname: str = ""
    devmajor: int = 0
    devminor: int = 0
    prefix: str = ""

    @classmethod
    def from_bytes(cls, block: bytes | bytearray | memoryview) -> TarHeader:
        return decode_header(block)

    def to_bytes(self) -> bytes:
        return encode_header(self)

    def is_regular(self) -> bool:
        return self.typeflag in REGULAR_TYPES

    def verify_checksum(self, block: bytes | bytearray | memoryview) -> bool:
        """Return ``True`` if *block* checksums to the stored ``checksum``.

        Decoding never calls this; callers that care about header
        integrity invoke it explicitly with the original block.
        """
        calculated = compute_checksum(block)
        log.debug(
            "Calculated checksum %d, header checksum %d", calculated, self.checksum
        )
        return calculated == self.checksum


# ---- codec -----------------------------------------------------------------


def encode_header(header: TarHeader) -> bytes:
    """Encode *header* into a 512-byte USTAR block.

    ``magic`` and ``version`` are always written as ``"ustar"`` and
    ``"00"``.  The stored ``checksum`` attribute is ignored; the checksum
    written is computed from the populated block.
    """
    block = bytearray(BLOCK_SIZE)
    for field in HEADER_FIELDS:
        if field.name == "checksum":
            continue
        if field.kind is FieldKind.TEXT:
            text = _FIXED_TEXT.get(field.name, getattr(header, field.name))
            raw = truncate_to_width(text.encode("utf-8"), field.length)
        elif field.kind is FieldKind.OCTAL:
            raw = format_octal(getattr(header, field.name), field.length, field.bits)
        else:
            raw = truncate_to_width(_flag_bytes(header.typeflag), field.length)
        block[field.offset : field.offset + len(raw)] = raw

    checksum = compute_checksum(block)
    block[CHECKSUM_OFFSET : CHECKSUM_OFFSET + CHECKSUM_WIDTH] = b"%06o\x00 " % checksum
    return bytes(block)


def decode_header(block: bytes | bytearray | memoryview) -> TarHeader:
    """Decode a 512-byte block into a :class:`TarHeader`.

    Short input is zero-padded; anything past 512 bytes is ignored.
    """
    raw = bytes(block[:BLOCK_SIZE]).ljust(BLOCK_SIZE, b"\x00")
    values: dict[str, object] = {}
    for field in HEADER_FIELDS:
        chunk = raw[field.offset : field.end]
        if field.kind is FieldKind.TEXT:
            values[field.name] = decode_text(chunk)
        elif field.kind is FieldKind.OCTAL:
            values[field.name] = parse_octal_or_zero(chunk, field.bits)
        else:
            values[field.name] = chunk
    return TarHeader(**values)  # type: ignore[arg-type]
