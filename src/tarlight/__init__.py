"""tarlight — a small, exact USTAR codec for Python.

Encodes named byte payloads into USTAR tar blocks and decodes them back.
Best-effort on malformed input.  Zero dependencies.  Python 3.10+.
"""

from __future__ import annotations

__title__ = "tarlight"
__version__ = "0.1"
__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"

from tarlight._archive import TarEntry, is_zero_block, padding_for, read_tar, write_tar
from tarlight._checksum import compute_checksum
from tarlight._container import Tar
from tarlight._core import (
    TarArchive,
    load_archive,
    pack_archive,
    safe_extract,
    save_archive,
)
from tarlight._events import OverwritePolicy, SecurityEvent
from tarlight._exceptions import (
    EntryExistsError,
    MalformedArchiveError,
    TarlightError,
    UnsafeEntryError,
)
from tarlight._header import (
    TarHeader,
    decode_header,
    encode_header,
    parse_octal_or_zero,
    truncate_to_width,
)

__all__ = [
    # Codec
    "TarHeader",
    "TarEntry",
    "encode_header",
    "decode_header",
    "compute_checksum",
    "parse_octal_or_zero",
    "truncate_to_width",
    "read_tar",
    "write_tar",
    "padding_for",
    "is_zero_block",
    # Container
    "Tar",
    # Archive files & extraction
    "TarArchive",
    "load_archive",
    "save_archive",
    "pack_archive",
    "safe_extract",
    # Exceptions
    "TarlightError",
    "UnsafeEntryError",
    "EntryExistsError",
    "MalformedArchiveError",
    # Events & Policies
    "SecurityEvent",
    "OverwritePolicy",
]
