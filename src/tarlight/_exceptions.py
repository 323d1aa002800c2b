"""Exception hierarchy for tarlight.

All exceptions inherit from ``TarlightError`` so callers can catch the
package's entire error surface with a single ``except`` clause.

The codec itself raises none of these: truncated archives, malformed
numeric fields, and oversized values all degrade silently.  Errors come
from the collaborators around it (decompression and extraction).
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"


class TarlightError(Exception):
    """Base exception for all tarlight errors."""


class UnsafeEntryError(TarlightError):
    """An entry's name escapes the extraction root.

    Raised for path traversal (``../``), absolute paths (``/etc/passwd``,
    ``C:/...``), null bytes, empty names, and names that resolve through
    a symlink to somewhere outside the base directory.
    """


class EntryExistsError(TarlightError):
    """The destination file exists and the overwrite policy is ``REJECT``."""


class MalformedArchiveError(TarlightError):
    """A compressed archive stream could not be decoded.

    Raised for corrupt or truncated gzip data.  Truncation inside the
    tar stream itself is not an error; decoding simply stops early.
    """
