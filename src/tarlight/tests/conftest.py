"""Archive factory fixtures for tarlight tests.

Legitimate archives are generated with Python's ``tarfile`` module in
USTAR format, so decoding is always checked against an independent
encoder.  Hostile archives (traversal names, absolute paths) are built
with tarlight's own encoder, which stores names verbatim.
"""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"

import gzip
import io
import tarfile

import pytest

from tarlight import TarEntry, TarHeader, write_tar

FIXED_MTIME = 1_700_000_000

# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _tar_bytes(callback) -> bytes:
    """Create a USTAR archive in memory via *callback(tf)* and return bytes."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.USTAR_FORMAT) as tf:
        callback(tf)
    return buf.getvalue()


def _write_to_path(tmp_path, name: str, data: bytes) -> str:
    p = tmp_path / name
    p.write_bytes(data)
    return str(p)


def _add_regular(tf, name: str, content: bytes, *, mode: int = 0o644) -> None:
    info = tarfile.TarInfo(name=name)
    info.size = len(content)
    info.mode = mode
    info.mtime = FIXED_MTIME
    tf.addfile(info, io.BytesIO(content))


def _add_directory(tf, name: str) -> None:
    info = tarfile.TarInfo(name=name)
    info.type = tarfile.DIRTYPE
    info.mode = 0o755
    info.mtime = FIXED_MTIME
    tf.addfile(info)


def _add_symlink(tf, name: str, target: str) -> None:
    info = tarfile.TarInfo(name=name)
    info.type = tarfile.SYMTYPE
    info.linkname = target
    tf.addfile(info)


def _crafted_bytes(*names: str, data: bytes = b"pwned") -> bytes:
    """Encode one regular entry per *name*, stored exactly as given."""
    return write_tar(
        TarEntry(header=TarHeader(name=name, size=len(data)), data=data)
        for name in names
    )


def legitimate_bytes() -> bytes:
    def build(tf):
        _add_regular(tf, "readme.txt", b"Hello, world!\n")
        _add_directory(tf, "data")
        _add_regular(tf, "data/report.csv", b"col1,col2\n1,2\n")
        _add_regular(tf, "data/notes.txt", b"Some notes.\n")
        _add_symlink(tf, "data/link", "../readme.txt")

    return _tar_bytes(build)


# ---------------------------------------------------------------------------
# legitimate archives
# ---------------------------------------------------------------------------


@pytest.fixture()
def legitimate_tar_bytes():
    """In-memory form of ``legitimate_archive``."""
    return legitimate_bytes()


@pytest.fixture()
def legitimate_archive(tmp_path):
    """Regular files, a directory and a symlink; three files survive decode."""
    return _write_to_path(tmp_path, "legit.tar", legitimate_bytes())


@pytest.fixture()
def legitimate_gz_archive(tmp_path):
    """Gzip-wrapped archive containing ``hello.txt``."""

    def build(tf):
        _add_regular(tf, "hello.txt", b"Hello from gzip!\n")

    return _write_to_path(tmp_path, "legit.tar.gz", gzip.compress(_tar_bytes(build)))


@pytest.fixture()
def legitimate_tgz_archive(tmp_path):
    """Same as ``legitimate_gz_archive`` but with the ``.tgz`` suffix."""

    def build(tf):
        _add_regular(tf, "hello.txt", b"Hello from tgz!\n")

    return _write_to_path(tmp_path, "legit.tgz", gzip.compress(_tar_bytes(build)))


@pytest.fixture()
def setuid_archive(tmp_path):
    """Regular file carrying setuid, setgid and sticky bits."""

    def build(tf):
        _add_regular(tf, "tool.sh", b"#!/bin/sh\n", mode=0o7755)

    return _write_to_path(tmp_path, "setuid.tar", _tar_bytes(build))


# ---------------------------------------------------------------------------
# hostile archives
# ---------------------------------------------------------------------------


@pytest.fixture()
def traversal_archive(tmp_path):
    """Archive with a relative path traversal entry ``../../evil.txt``."""
    return _write_to_path(tmp_path, "traversal.tar", _crafted_bytes("../../evil.txt"))


@pytest.fixture()
def absolute_path_archive(tmp_path):
    """Archive with an absolute entry name ``/etc/passwd``."""
    return _write_to_path(tmp_path, "absolute.tar", _crafted_bytes("/etc/passwd"))


@pytest.fixture()
def windows_path_archive(tmp_path):
    """Archive with a drive-letter entry name."""
    return _write_to_path(
        tmp_path, "windows.tar", _crafted_bytes("C:\\Windows\\evil.dll")
    )


@pytest.fixture()
def mixed_traversal_archive(tmp_path):
    """A safe entry followed by a traversal entry."""
    return _write_to_path(
        tmp_path, "mixed.tar", _crafted_bytes("safe.txt", "sub/../../escape.txt")
    )
