"""High-level operations on PAC archives: pack a folder, patch an archive, extract."""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePath

from .archive import ArchiveInfo, PacArchive, ProgressCallback, ProgressInfo
from .compressor import decompress, prepare_decompression
from .sources import SystemFileSource

logger = logging.getLogger(__name__)


def make_relative(base: str | os.PathLike[str], target: str | os.PathLike[str]) -> Path:
    """Return ``target`` relative to ``base``, comparing path components lexically."""
    base_parts = PurePath(base).parts
    target_parts = PurePath(target).parts
    common = 0
    for base_part, target_part in zip(base_parts, target_parts):
        if base_part != target_part:
            break
        common += 1
    ups = [".."] * (len(base_parts) - common)
    return Path(*ups, *target_parts[common:])


def _digits(count: int) -> int:
    return math.ceil(math.log10(count)) if count > 0 else 0


def format_progress(info: ProgressInfo) -> str:
    """Render one progress line: position, compression ratio and file name."""
    if info.raw_size:
        ratio = info.compressed_size * 100 / info.raw_size
    else:
        ratio = math.nan if info.compressed_size == 0 else math.inf
    position = str(info.cur_file).rjust(_digits(info.num_files))
    return f"[{position}/{info.num_files}] {ratio:.0f}% - {info.file_name}"


def read_entry(archive: PacArchive, name: str) -> bytes:
    """Return the decompressed contents of the entry ``name``."""
    source = archive.get(name)
    if source is None:
        raise KeyError(name)
    if not source.compressed():
        return source.read_data(0, source.unpacked_size())

    info = prepare_decompression(source.read_data(0, source.data_size()))
    expected = source.unpacked_size()
    if info.output_size != expected:
        logger.warning(
            'Size Mismatch: "%s" - Expected %d got %d', name, expected, info.output_size
        )
    return decompress(info)


def _backup_path(target: Path) -> Path:
    return target.with_name(target.name + ".bak")


def _regular_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            candidate = Path(dirpath) / name
            if candidate.is_file():
                yield candidate


def pack_archive(
    path: str | os.PathLike[str], callback: ProgressCallback | None = None
) -> ArchiveInfo:
    """Pack every file below the directory ``path`` into ``<path>.pac``.

    An existing archive is first moved to ``<name>.pac.bak`` unless a backup
    already exists.
    """
    root = Path(path)
    if not root.is_dir():
        raise NotADirectoryError(f"not a directory: {root}")
    target = root.with_suffix(".pac")

    if target.is_file():
        logger.info("Creating Backup File...")
        backup = _backup_path(target)
        if not backup.is_file():
            target.rename(backup)
            logger.info("Backup File Created")
        else:
            logger.info("Backup File Already Exists")

    logger.info('Creating archive: "%s"', target.stem)
    archive = PacArchive()
    logger.info("Aggregating Files...")
    for file in _regular_files(root):
        archive.insert(str(make_relative(root, file)), SystemFileSource(file))

    logger.info("Found %d Files", len(archive))
    logger.info("Compressing...")
    return archive.save(target, callback)


def patch_archive(
    pac: str | os.PathLike[str],
    folder: str | os.PathLike[str],
    callback: ProgressCallback | None = None,
) -> ArchiveInfo:
    """Rebuild ``pac`` with the files in ``folder`` replacing entries of the same name.

    The original archive is kept as ``<name>.pac.bak`` and always serves as
    the base, so repeated patches start from the unmodified archive. Files that
    have no matching entry are skipped.
    """
    root = Path(folder)
    target = Path(pac).with_suffix(".pac")
    backup = _backup_path(target)

    if not target.is_file() and not backup.is_file():
        raise FileNotFoundError(f"Unable to find PAC file or Backup: {target}")
    if not backup.is_file():
        logger.info("Creating Backup File...")
        target.rename(backup)

    logger.info('Reading archive: "%s"', target.stem)
    archive = PacArchive(backup)
    logger.info("Replacing Files...")

    replaced = 0
    for file in _regular_files(root):
        virt_path = str(make_relative(root, file))
        if archive.get(virt_path) is not None:
            replaced += 1
            archive.insert(virt_path, SystemFileSource(file))
        else:
            logger.info("File '%s' not found in archive", virt_path)

    logger.info("Archive has %d Files", len(archive))
    logger.info("Replacing %d File(s)", replaced)
    logger.info("Compressing...")
    return archive.save(target, callback)


def extract_archive(
    pac: str | os.PathLike[str],
    folder: str | os.PathLike[str] | None = None,
    names: Iterable[str] | None = None,
) -> list[Path]:
    """Extract entries of ``pac`` below ``folder`` and return the written paths.

    ``folder`` defaults to the archive's name without its extension, in the
    current directory. When ``names`` is given only entries whose stored name
    matches one of them exactly are extracted.
    """
    pac_path = Path(pac)
    out_root = Path(folder) if folder is not None else Path(pac_path.stem)
    wanted = None if names is None else set(names)

    logger.info('Extracting Archive: "%s"', pac_path.name)
    archive = PacArchive(pac_path)
    total = len(archive)
    width = _digits(total)

    written: list[Path] = []
    for name in archive:
        if wanted is not None and name not in wanted:
            continue
        logger.info('[%*d/%d] "%s"', width, len(written) + 1, total, name)
        data = read_entry(archive, name)
        destination = out_root / name.replace("\\", "/")
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
        written.append(destination)
    return written