"""Command-line entry points: pack a folder, patch an archive, unpack an archive."""

from __future__ import annotations

import logging
import math
import sys
from collections.abc import Sequence
from pathlib import Path

from .archive import ArchiveInfo, ProgressInfo
from .helper import extract_archive, format_progress, pack_archive, patch_archive


def _setup_logging() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")


def _arguments(argv: Sequence[str] | None) -> list[str]:
    return list(sys.argv[1:] if argv is None else argv)


def report_progress(info: ProgressInfo) -> None:
    """Print one progress line for a file written to an archive."""
    print(format_progress(info))


def _print_summary(info: ArchiveInfo) -> None:
    total = info.compressed_size + info.header_size
    if info.original_size:
        ratio = total * 100 / info.original_size
    else:
        ratio = math.inf if total else math.nan
    print(f"Total Size       : {total}")
    print(f"Compression Ratio: {ratio:.2f}%")


def pack_main(argv: Sequence[str] | None = None) -> int:
    """Pack each directory given on the command line into ``<directory>.pac``."""
    _setup_logging()
    args = _arguments(argv)
    print("PAC Packer")
    if not args:
        print("Usage: pack.exe <directory>")
        return 1

    for arg in args:
        path = Path(arg)
        if path.is_dir():
            _print_summary(pack_archive(path, report_progress))
    return 0


def patch_main(argv: Sequence[str] | None = None) -> int:
    """Patch the archive next to each directory (or named by each ``.pac`` file)."""
    _setup_logging()
    args = _arguments(argv)
    print("PAC Patcher")
    if not args:
        print("Usage: patch.exe <directory or pac file>")
        return 1

    for arg in args:
        path = Path(arg)
        if path.suffix:
            path = path.with_suffix("")
        if not path.is_dir():
            continue
        try:
            info = patch_archive(path, path, report_progress)
        except FileNotFoundError:
            print(f"Unable to find PAC file or Backup: {path.stem}")
            continue
        _print_summary(info)
    return 0


def unpack_main(argv: Sequence[str] | None = None) -> int:
    """Extract each archive given into a folder named after it in the current directory."""
    _setup_logging()
    args = _arguments(argv)
    print("PAC Unpacker")
    if not args:
        print("Usage: unpack.exe <pac file>")
        return 1

    for arg in args:
        path = Path(arg)
        if path.is_file():
            for written in extract_archive(path):
                print(written.as_posix())
    return 0