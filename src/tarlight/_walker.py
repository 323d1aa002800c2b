"""Filesystem walker: build regular-file entries from paths on disk.

Only regular files become entries.  Symlinks, sockets, devices and the
like are skipped rather than archived, since the codec drops non-regular
entries on decode anyway.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "collect_entries",
    "entry_from_path",
    "walk_directory",
)

import logging
import os
import stat
from collections.abc import Iterable, Iterator
from pathlib import Path

from tarlight._archive import TarEntry
from tarlight._header import HEADER_FIELDS, TarHeader

try:
    import pwd
except ImportError:  # non-POSIX platforms
    pwd = None  # type: ignore[assignment]

try:
    import grp
except ImportError:
    grp = None  # type: ignore[assignment]

log = logging.getLogger("tarlight")

_NAME_WIDTH = next(f.length for f in HEADER_FIELDS if f.name == "name")


def _owner_name(uid: int) -> str:
    if pwd is None:
        return ""
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return ""


def _group_name(gid: int) -> str:
    if grp is None:
        return ""
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return ""


def entry_from_path(path: str | os.PathLike[str], arcname: str) -> TarEntry:
    """Read the regular file at *path* into an entry named *arcname*.

    Mode bits, ownership and mtime come from ``os.stat``; owner and group
    names are looked up where the platform supports it and left empty
    otherwise.

    :raises OSError: If the file cannot be read.
    """
    st = os.stat(path)
    data = Path(path).read_bytes()
    if len(arcname.encode("utf-8")) > _NAME_WIDTH:
        log.warning(
            "Entry name exceeds %d bytes and will be truncated: %r",
            _NAME_WIDTH,
            arcname,
        )
    header = TarHeader(
        name=arcname,
        mode=stat.S_IMODE(st.st_mode),
        uid=st.st_uid,
        gid=st.st_gid,
        size=len(data),
        mtime=max(int(st.st_mtime), 0),
        uname=_owner_name(st.st_uid),
        gname=_group_name(st.st_gid),
    )
    return TarEntry(header=header, data=data)


def walk_directory(
    root: str | os.PathLike[str],
    *,
    base: str | os.PathLike[str] | None = None,
) -> Iterator[TarEntry]:
    """Yield one entry per regular file under *root*, in sorted order.

    Entry names are relative to *base* (defaults to *root*) and always
    use forward slashes.
    """
    root_path = Path(root).resolve()
    base_path = Path(base).resolve() if base is not None else root_path
    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames.sort()
        for filename in sorted(filenames):
            full = Path(dirpath) / filename
            if not stat.S_ISREG(os.lstat(full).st_mode):
                log.debug("Skipping non-regular file %s", full)
                continue
            arcname = full.relative_to(base_path).as_posix()
            yield entry_from_path(full, arcname)


def collect_entries(paths: Iterable[str | os.PathLike[str]]) -> list[TarEntry]:
    """Build entries for a mixed list of files and directories.

    A file is named by its basename.  A directory is walked recursively
    and its files keep the directory's own name as a prefix
    (``docs/a.txt``).  Missing paths are skipped with a warning.
    """
    entries: list[TarEntry] = []
    for item in paths:
        path = Path(item)
        if path.is_dir():
            resolved = path.resolve()
            entries.extend(walk_directory(resolved, base=resolved.parent))
        elif path.is_file():
            entries.append(entry_from_path(path, path.name))
        else:
            log.warning("File not found: %s", os.fspath(item))
    return entries
