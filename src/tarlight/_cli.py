"""Command-line front end: ``tarlight pack | unpack | list``."""

from __future__ import annotations

__author__ = "Artur Barseghyan <artur.barseghyan@gmail.com>"
__copyright__ = "2026 Artur Barseghyan"
__license__ = "MIT"
__all__ = ("main",)

import argparse
import logging
import sys
from pathlib import Path

from tarlight import __version__
from tarlight._config import DEFAULT_OVERWRITE_POLICY
from tarlight._core import TarArchive, load_archive, pack_archive
from tarlight._events import OverwritePolicy
from tarlight._exceptions import TarlightError


def _confirm_overwrite(path: Path) -> bool:
    """Ask on stdin whether *path* may be replaced."""
    try:
        answer = input(f"Overwrite {path}? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def cmd_pack(tarfile: str, inputs: list[str]) -> int:
    pack_archive(inputs, tarfile)
    print(f"Created tar archive: {tarfile}")
    return 0


def cmd_unpack(
    tarfile: str,
    directory: str,
    *,
    overwrite: OverwritePolicy,
    preserve_metadata: bool,
) -> int:
    prompt = _confirm_overwrite if overwrite is OverwritePolicy.PROMPT else None
    with TarArchive(
        tarfile,
        overwrite_policy=overwrite,
        prompt=prompt,
        preserve_metadata=preserve_metadata,
    ) as ta:
        base = Path(directory).resolve()
        for path in ta.extractall(directory):
            print(f"Extracted: {path.relative_to(base).as_posix()}")
    print(f"Extraction complete to: {directory}")
    return 0


def cmd_list(tarfile: str, *, verify: bool) -> int:
    tar = load_archive(tarfile)
    print(f"Files in {tarfile}:")
    if verify:
        print(f"{'Size':>10}  {'Checksum':<8}  Name")
    else:
        print(f"{'Size':>10}  Name")
    print("-" * 50)
    for entry in tar:
        if verify:
            status = "ok" if entry.verify_checksum() else "BAD"
            print(f"{entry.size:>10}  {status:<8}  {entry.name}")
        else:
            print(f"{entry.size:>10}  {entry.name}")
    print(f"\nTotal: {len(tar)} file(s)")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="tarlight",
        description="Minimal USTAR archive tool (.tar, .tar.gz, .tgz)",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_pack = sub.add_parser("pack", help="Create tar archive")
    ap_pack.add_argument("tarfile", help="Output archive path")
    ap_pack.add_argument("inputs", nargs="+", help="Input files/directories")

    ap_unpack = sub.add_parser("unpack", help="Extract tar archive")
    ap_unpack.add_argument("tarfile", help="Archive path")
    ap_unpack.add_argument("directory", help="Output directory")
    ap_unpack.add_argument(
        "--overwrite",
        choices=[p.value for p in OverwritePolicy],
        default=DEFAULT_OVERWRITE_POLICY.value,
        help=(
            "What to do if a destination file exists: overwrite, skip, "
            "prompt (ask on stdin), or reject (abort). "
            f"Default: {DEFAULT_OVERWRITE_POLICY.value}"
        ),
    )
    ap_unpack.add_argument(
        "--no-metadata",
        action="store_true",
        help="Do not restore archived permissions and timestamps",
    )

    ap_list = sub.add_parser("list", help="List files in tar archive")
    ap_list.add_argument("tarfile", help="Archive path")
    ap_list.add_argument(
        "--verify", action="store_true", help="Show header checksum status"
    )
    return ap


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "pack":
            return cmd_pack(args.tarfile, args.inputs)
        if args.cmd == "unpack":
            return cmd_unpack(
                args.tarfile,
                args.directory,
                overwrite=OverwritePolicy(args.overwrite),
                preserve_metadata=not args.no_metadata,
            )
        return cmd_list(args.tarfile, verify=args.verify)
    except (TarlightError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
