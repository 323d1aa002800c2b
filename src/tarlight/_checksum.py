"""USTAR header checksum."""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = ("compute_checksum",)

from tarlight._constants import BLOCK_SIZE, CHECKSUM_OFFSET, CHECKSUM_WIDTH

_SPACE = ord(" ")
_CHECKSUM_END = CHECKSUM_OFFSET + CHECKSUM_WIDTH


def compute_checksum(block: bytes | bytearray | memoryview) -> int:
    """Return the unsigned USTAR checksum of the first 512 bytes of *block*.

    The eight bytes of the checksum field are counted as ASCII spaces
    whatever they actually contain, so the same function serves both
    when building a header and when verifying an existing one.  A block
    shorter than 512 bytes has a checksum of ``0``.
    """
    if len(block) < BLOCK_SIZE:
        return 0
    return (
        sum(block[:CHECKSUM_OFFSET])
        + _SPACE * CHECKSUM_WIDTH
        + sum(block[_CHECKSUM_END:BLOCK_SIZE])
    )
