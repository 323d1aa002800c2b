"""Archive-level API: loading, saving, packing and hardened extraction.

``TarArchive`` decodes a whole archive up front and exposes a read-only
view of its regular-file entries.  Extraction runs every entry through
the Sandbox (name resolution) before a single byte is written, and the
payload itself lands via an atomic rename.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "TarArchive",
    "load_archive",
    "pack_archive",
    "safe_extract",
    "save_archive",
)

import contextlib
import logging
import os
import time
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import BinaryIO, Union

from tarlight._archive import TarEntry, write_tar
from tarlight._atomic import compute_archive_hash, write_entry_atomic
from tarlight._compression import read_archive_bytes, write_archive_bytes
from tarlight._config import (
    DEFAULT_CLAMP_TIMESTAMPS,
    DEFAULT_EAGER_HEADERS,
    DEFAULT_OVERWRITE_POLICY,
    DEFAULT_PRESERVE_METADATA,
    DEFAULT_STRIP_SPECIAL_BITS,
)
from tarlight._container import Tar
from tarlight._events import OverwritePolicy, SecurityEvent
from tarlight._exceptions import EntryExistsError, TarlightError, UnsafeEntryError
from tarlight._sandbox import resolve_member_path, sanitise_mode, sanitise_mtime
from tarlight._walker import collect_entries

log = logging.getLogger("tarlight.security")

ArchiveSource = Union[str, "os.PathLike[str]", bytes, bytearray, BinaryIO]


class TarArchive:
    """Read-only archive view with hardened extraction.

    :param source: Path to the archive, an in-memory buffer, or an open
        binary file object.  ``.tar.gz`` / ``.tgz`` names are gunzipped.
    :param filename: Name used for the compression decision when
        *source* is not a path.
    :param overwrite_policy: What to do when a destination file exists.
    :param prompt: Callable asked ``prompt(path) -> bool`` under
        ``OverwritePolicy.PROMPT``.
    :param preserve_metadata: Apply the archived mode and mtime to
        extracted files.
    :param strip_special_bits: Strip setuid/setgid/sticky bits when
        applying the archived mode.
    :param strip_write_bits: Additionally strip write bits.
    :param clamp_timestamps: Clamp mtime to ``[0, 2**32 - 1]``.
    :param on_security_event: Optional callback invoked on every
        extraction violation.
    :raises ValueError: If ``PROMPT`` is chosen without a *prompt*.
    :raises OSError: If the archive cannot be read.
    :raises MalformedArchiveError: If a gzip stream cannot be decoded.
    """

    def __init__(
        self,
        source: ArchiveSource,
        *,
        filename: str | os.PathLike[str] | None = None,
        overwrite_policy: OverwritePolicy = DEFAULT_OVERWRITE_POLICY,
        prompt: Callable[[Path], bool] | None = None,
        preserve_metadata: bool = DEFAULT_PRESERVE_METADATA,
        strip_special_bits: bool = DEFAULT_STRIP_SPECIAL_BITS,
        strip_write_bits: bool = False,
        clamp_timestamps: bool = DEFAULT_CLAMP_TIMESTAMPS,
        on_security_event: Callable[[SecurityEvent], None] | None = None,
    ) -> None:
        if overwrite_policy is OverwritePolicy.PROMPT and prompt is None:
            raise ValueError("OverwritePolicy.PROMPT requires a prompt callable")

        self._overwrite_policy = overwrite_policy
        self._prompt = prompt
        self._preserve_metadata = preserve_metadata
        self._strip_special_bits = strip_special_bits
        self._strip_write_bits = strip_write_bits
        self._clamp_timestamps = clamp_timestamps
        self._on_security_event = on_security_event

        data = read_archive_bytes(source, filename=filename)
        self._archive_hash = compute_archive_hash(data)
        self._tar = Tar.from_bytes(data)

    # ---- context manager ---------------------------------------------------

    def __enter__(self) -> TarArchive:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the decoded entries."""
        self._tar = Tar()

    # ---- read-only proxies -------------------------------------------------

    @property
    def archive_hash(self) -> str:
        return self._archive_hash

    def getmembers(self) -> list[TarEntry]:
        return list(self._tar)

    def getnames(self) -> list[str]:
        return self._tar.names()

    def getmember(self, name: str) -> TarEntry:
        """Return the first entry called *name*.

        :raises KeyError: If no entry has that name.
        """
        entry = self._tar.find(name)
        if entry is None:
            raise KeyError(f"Entry {name!r} not found")
        return entry

    def namelist(self) -> list[str]:
        """Alias for ``getnames()``."""
        return self._tar.names()

    # ---- extraction --------------------------------------------------------

    def extractall(
        self,
        path: str | os.PathLike[str],
        members: Iterable[str | TarEntry] | None = None,
    ) -> list[Path]:
        """Extract all (or selected) entries to *path*.

        *path* is required and must not be ``None``.  Returns the paths
        actually written, in entry order; skipped entries are omitted.

        Raises ``TypeError`` if *path* is omitted.
        """
        if path is None:
            raise TypeError(
                "TarArchive.extractall() requires an explicit 'path' "
                "argument; extraction to the current working directory "
                "is not permitted"
            )

        base_dir = Path(path).resolve()
        base_dir.mkdir(parents=True, exist_ok=True)

        if members is not None:
            entries = [
                self.getmember(m) if isinstance(m, str) else m for m in members
            ]
        else:
            entries = self.getmembers()

        written: list[Path] = []
        for entry in entries:
            dest = self._extract_one(entry, base_dir)
            if dest is not None:
                written.append(dest)
        return written

    def extract(
        self,
        member: str | TarEntry,
        path: str | os.PathLike[str],
    ) -> Path | None:
        """Extract a single *member* to *path*."""
        written = self.extractall(path, members=[member])
        return written[0] if written else None

    # ---- internal ----------------------------------------------------------

    def _extract_one(self, entry: TarEntry, base_dir: Path) -> Path | None:
        """Run Sandbox → overwrite policy → atomic write for one entry."""
        try:
            return self._extract_one_inner(entry, base_dir)
        except TarlightError as exc:
            log.warning("Extraction refused: %s", exc)
            self._fire_event(exc)
            raise

    def _extract_one_inner(self, entry: TarEntry, base_dir: Path) -> Path | None:
        dest_path = resolve_member_path(base_dir, entry.name)

        if (dest_path.exists() or dest_path.is_symlink()) and not self._may_overwrite(
            entry, dest_path
        ):
            return None

        write_entry_atomic(entry.data, dest_path)
        if self._preserve_metadata:
            self._apply_metadata(entry, dest_path)
        return dest_path

    def _may_overwrite(self, entry: TarEntry, dest_path: Path) -> bool:
        match self._overwrite_policy:
            case OverwritePolicy.OVERWRITE:
                return True
            case OverwritePolicy.SKIP:
                log.info("Skipping existing file for entry %r", entry.name)
                return False
            case OverwritePolicy.REJECT:
                raise EntryExistsError(
                    f"Destination already exists for entry {entry.name!r}"
                )
            case OverwritePolicy.PROMPT:
                accepted = bool(self._prompt(dest_path))  # type: ignore[misc]
                if not accepted:
                    log.info("Overwrite declined for entry %r", entry.name)
                return accepted
        return False

    def _apply_metadata(self, entry: TarEntry, dest_path: Path) -> None:
        """Apply the sanitised archived mode and timestamp."""
        safe_mode = sanitise_mode(
            entry.header.mode,
            strip_special_bits=self._strip_special_bits,
            strip_write_bits=self._strip_write_bits,
        )
        with contextlib.suppress(OSError):
            os.chmod(dest_path, safe_mode)

        mtime = sanitise_mtime(
            entry.header.mtime, clamp_timestamps=self._clamp_timestamps
        )
        with contextlib.suppress(OSError):
            os.utime(dest_path, (mtime, mtime))

    def _fire_event(self, exc: TarlightError) -> None:
        """Invoke the on_security_event callback if configured."""
        if self._on_security_event is None:
            return

        event = SecurityEvent(
            event_type=_event_type_for(exc),
            archive_hash=self._archive_hash,
            timestamp=time.time(),
        )
        try:
            self._on_security_event(event)
        except Exception:
            log.exception("on_security_event callback raised an exception")


def _event_type_for(exc: TarlightError) -> str:
    """Derive a security event type string from the error."""
    if isinstance(exc, UnsafeEntryError):
        return "unsafe_path"
    if isinstance(exc, EntryExistsError):
        return "overwrite_rejected"
    return "security_violation"


# ---- module-level helpers --------------------------------------------------


def load_archive(
    source: ArchiveSource,
    *,
    filename: str | os.PathLike[str] | None = None,
    eager_headers: bool = DEFAULT_EAGER_HEADERS,
) -> Tar:
    """Read and decode an archive into a ``Tar`` container."""
    return Tar.from_bytes(
        read_archive_bytes(source, filename=filename), eager_headers=eager_headers
    )


def save_archive(
    archive: Tar | Iterable[TarEntry],
    path: str | os.PathLike[str],
) -> int:
    """Encode *archive* and write it to *path*, gzipping by suffix.

    Returns the number of bytes written to disk.
    """
    data = archive.to_bytes() if isinstance(archive, Tar) else write_tar(archive)
    return write_archive_bytes(data, path)


def pack_archive(
    sources: Iterable[str | os.PathLike[str]],
    path: str | os.PathLike[str],
) -> Tar:
    """Collect files and directories from *sources* into an archive at *path*."""
    tar = Tar(collect_entries(sources))
    save_archive(tar, path)
    return tar


def safe_extract(
    archive: ArchiveSource,
    destination: str | os.PathLike[str],
    **kwargs: object,
) -> list[Path]:
    """Extract *archive* to *destination* using ``TarArchive`` defaults.

    All keyword arguments are forwarded to the ``TarArchive`` constructor.
    """
    with TarArchive(archive, **kwargs) as ta:  # type: ignore[arg-type]
        return ta.extractall(destination)
