"""Policy enums and security event dataclass for tarlight."""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"

from dataclasses import dataclass
from enum import Enum


class OverwritePolicy(Enum):
    """Controls what extraction does when the destination file exists.

    ``OVERWRITE``
        Replace the existing file.  *(default)*
    ``SKIP``
        Leave the existing file untouched and move on.
    ``PROMPT``
        Ask a caller-supplied ``prompt(path) -> bool`` callable; the file
        is replaced only when it returns ``True``.
    ``REJECT``
        Raise ``EntryExistsError``.
    """

    OVERWRITE = "overwrite"
    SKIP = "skip"
    PROMPT = "prompt"
    REJECT = "reject"


@dataclass(frozen=True, slots=True)
class SecurityEvent:
    """Immutable record of a violation detected during extraction.

    Deliberately excludes filenames, paths, and entry names so that
    forwarding an event to a third-party service does not leak
    confidential filesystem information.
    """

    event_type: str
    """Type identifier, e.g. ``"unsafe_path"``, ``"overwrite_rejected"``."""

    archive_hash: str
    """First 16 hex characters of the SHA-256 of the archive."""

    timestamp: float
    """``time.time()`` at the moment of detection."""
