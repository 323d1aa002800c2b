"""A name-indexed entry container backed by the USTAR format.

The container is a thin façade over an ordered list of ``TarEntry``
objects.  Names are not required to be unique; every name-keyed
operation acts on the first match.  Serialisation always re-encodes
headers, so the cached raw blocks only matter to callers that inspect
``TarEntry.header_bytes`` directly.

The container has no internal locking and is meant to be owned by one
caller at a time.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = ("Tar",)

import logging
from collections.abc import Iterable, Iterator

from tarlight._archive import TarEntry, read_tar, write_tar
from tarlight._config import DEFAULT_EAGER_HEADERS

log = logging.getLogger("tarlight")

# Mode given to entries created from strings and byte payloads.
DEFAULT_ENTRY_MODE = 0o664


class Tar:
    """In-memory archive with key-value style access by entry name.

    :param entries: Initial entries, kept in order.
    :param eager_headers: Re-encode an entry's cached header block (and
        its stored checksum) on every mutation.  When ``False`` the cache
        is left stale until the caller refreshes it; :meth:`to_bytes` is
        unaffected either way.
    """

    def __init__(
        self,
        entries: Iterable[TarEntry] | None = None,
        *,
        eager_headers: bool = DEFAULT_EAGER_HEADERS,
    ) -> None:
        self.entries: list[TarEntry] = list(entries) if entries is not None else []
        self.eager_headers = eager_headers

    @classmethod
    def from_bytes(
        cls,
        data: bytes | bytearray | memoryview,
        *,
        eager_headers: bool = DEFAULT_EAGER_HEADERS,
    ) -> Tar:
        """Decode an uncompressed archive into a new container."""
        return cls(read_tar(data), eager_headers=eager_headers)

    # ---- sequence protocol -------------------------------------------------

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[TarEntry]:
        return iter(self.entries)

    def __contains__(self, name: object) -> bool:
        return self.find(name) is not None  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"<Tar entries={len(self.entries)} eager_headers={self.eager_headers}>"

    # ---- mutation ----------------------------------------------------------

    def append(self, entry: TarEntry) -> None:
        self.entries.append(entry)

    def add_bytes(
        self, name: str, data: bytes, *, mode: int = DEFAULT_ENTRY_MODE
    ) -> TarEntry:
        """Append a new regular-file entry holding *data*."""
        entry = TarEntry.from_bytes(name, bytes(data), mode=mode)
        if self.eager_headers:
            entry.refresh_header_bytes()
        self.entries.append(entry)
        return entry

    def add_text(
        self, name: str, text: str, *, mode: int = DEFAULT_ENTRY_MODE
    ) -> TarEntry:
        """Append a new regular-file entry holding UTF-8 encoded *text*."""
        return self.add_bytes(name, text.encode("utf-8"), mode=mode)

    def upsert_bytes(self, name: str, data: bytes) -> TarEntry:
        """Replace the payload of the first entry called *name*.

        The header's ``size`` follows the new payload; every other header
        field is kept.  Appends a new entry when no name matches.
        """
        entry = self.find(name)
        if entry is None:
            log.debug("No entry named %r; appending", name)
            return self.add_bytes(name, data)
        entry.data = bytes(data)
        entry.header.size = len(entry.data)
        if self.eager_headers:
            entry.refresh_header_bytes()
        return entry

    def upsert_text(self, name: str, text: str) -> TarEntry:
        return self.upsert_bytes(name, text.encode("utf-8"))

    # ---- lookup ------------------------------------------------------------

    def find(self, name: str) -> TarEntry | None:
        """Return the first entry called *name*, or ``None``."""
        for entry in self.entries:
            if entry.header.name == name:
                return entry
        return None

    def lookup_bytes(self, name: str) -> bytes | None:
        entry = self.find(name)
        return None if entry is None else entry.data

    def lookup_text(self, name: str) -> str | None:
        """Return the first matching payload as text, trailing NULs trimmed."""
        entry = self.find(name)
        return None if entry is None else entry.text()

    def names(self) -> list[str]:
        return [entry.header.name for entry in self.entries]

    # ---- serialisation -----------------------------------------------------

    def to_bytes(self) -> bytes:
        """Encode the container as an uncompressed USTAR archive."""
        return write_tar(self.entries)
