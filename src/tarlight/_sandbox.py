"""The Sandbox: entry-name resolution and metadata sanitisation.

The codec stores entry names verbatim, including ``..`` components and
absolute paths.  Every name is resolved here against a strictly enforced
base directory before anything is written; names that would land outside
it are rejected, never rebased.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = (
    "MAX_PATH",
    "resolve_member_path",
    "sanitise_mode",
    "sanitise_mtime",
)

import os
import stat
import time
import unicodedata
from pathlib import Path

from tarlight._exceptions import UnsafeEntryError

# Maximum resolved path length we accept (conservative cross-platform limit).
MAX_PATH = 4096

# Largest mtime kept as-is when clamping.
_MAX_TIMESTAMP = 2**32 - 1


# ---- path resolution -------------------------------------------------------


def _is_within(path: Path, base: Path) -> bool:
    return path == base or str(path).startswith(str(base) + os.sep)


def resolve_member_path(
    base_dir: str | os.PathLike[str],
    member_name: str,
) -> Path:
    """Resolve *member_name* against *base_dir* and return a safe ``Path``.

    Pipeline (in order):

    1.  Unicode NFC normalisation.
    2.  Reject absolute paths (``/``, ``\\``, drive letter).
    3.  Reject ``..`` components; drop empty and ``.`` components.
    4.  Reject null bytes.
    5.  Reject over-length names.
    6.  Final containment check after resolving existing symlinks.

    Raises ``UnsafeEntryError`` for any violation.
    """
    base = Path(base_dir).resolve()

    normalized = unicodedata.normalize("NFC", member_name)
    _norm = normalized.replace("\\", "/")

    if _norm.startswith("/"):
        raise UnsafeEntryError(
            f"Absolute path detected in entry name: {member_name!r}"
        )

    if len(_norm) >= 3 and _norm[1] == ":" and _norm[2] == "/" and _norm[0].isalpha():
        raise UnsafeEntryError(
            f"Absolute Windows path detected in entry name: {member_name!r}"
        )

    clean_parts: list[str] = []
    for part in _norm.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            raise UnsafeEntryError(
                f"Path traversal component '..' in entry name: {member_name!r}"
            )
        clean_parts.append(part)

    if not clean_parts:
        raise UnsafeEntryError(f"Entry name resolves to empty path: {member_name!r}")

    joined = "/".join(clean_parts)
    if "\x00" in joined:
        raise UnsafeEntryError(f"Null byte in entry name: {member_name!r}")

    resolved = base / joined
    if len(str(resolved)) > MAX_PATH:
        raise UnsafeEntryError(f"Resolved path length exceeds MAX_PATH ({MAX_PATH})")

    # A directory symlink already inside base could still point elsewhere.
    try:
        real = resolved.resolve()
    except OSError:
        real = resolved

    if not _is_within(real, base):
        raise UnsafeEntryError(f"Resolved path escapes base directory: {member_name!r}")

    return resolved


# ---- permission / timestamp sanitisation -----------------------------------


def sanitise_mode(
    mode: int,
    *,
    strip_special_bits: bool = True,
    strip_write_bits: bool = False,
) -> int:
    """Strip dangerous permission bits from *mode*.

    Only permission bits survive.  By default setuid (``04000``), setgid
    (``02000``) and sticky (``01000``) are removed too; write bits can
    optionally be removed as well.
    """
    mode = stat.S_IMODE(mode)
    if strip_special_bits:
        mode &= ~(stat.S_ISUID | stat.S_ISGID | stat.S_ISVTX)
    if strip_write_bits:
        mode &= ~(stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH)
    return mode


def sanitise_mtime(
    mtime: float | int,
    *,
    clamp_timestamps: bool = True,
) -> float:
    """Clamp *mtime* to a safe range.

    When *clamp_timestamps* is ``True``, values outside ``[0, 2**32 - 1]``
    are replaced by the current time.
    """
    if not clamp_timestamps:
        return float(mtime)
    if mtime < 0 or mtime > _MAX_TIMESTAMP:
        return time.time()
    return float(mtime)
