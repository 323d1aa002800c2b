"""USTAR format constants shared by the codec modules."""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "BLOCK_SIZE",
    "CHECKSUM_OFFSET",
    "CHECKSUM_WIDTH",
    "END_OF_ARCHIVE",
    "REGULAR_TYPES",
    "USTAR_MAGIC",
    "USTAR_VERSION",
    "ZERO_BLOCK",
)

import tarfile

BLOCK_SIZE = 512

# The checksum field occupies bytes 148-155 and is summed as eight spaces.
CHECKSUM_OFFSET = 148
CHECKSUM_WIDTH = 8

USTAR_MAGIC = "ustar"
USTAR_VERSION = "00"

# Only these type codes survive decoding; ``AREGTYPE`` is the legacy NUL byte.
REGULAR_TYPES = frozenset({tarfile.REGTYPE, tarfile.AREGTYPE})

ZERO_BLOCK = bytes(BLOCK_SIZE)
END_OF_ARCHIVE = ZERO_BLOCK * 2
