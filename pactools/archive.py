"""PAC archives: a directory of named entries, each stored Huffman-compressed."""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from .compressor import compress, prepare_compression
from .sources import FileSource, PacFileSource
from .structs import (
    ENTRY_SIZE,
    HEADER_SIZE,
    DirectoryEntry,
    InvalidArchiveError,
    PacHeader,
)

DEFAULT_BLOCK_SIZE = 0x20000

_SEPARATORS = re.compile(r"[\\/]")


@dataclass(frozen=True)
class ProgressInfo:
    """Reported after each file is written while saving an archive."""

    cur_file: int
    num_files: int
    file_name: str
    raw_size: int
    compressed_size: int


@dataclass
class ArchiveInfo:
    """Summary of a saved archive."""

    header_size: int = 0
    total_files: int = 0
    original_size: int = 0
    compressed_size: int = 0


ProgressCallback = Callable[[ProgressInfo], None]


def _components(name: str) -> list[str]:
    return [part for part in _SEPARATORS.split(name) if part]


def _extension_start(part: str) -> int:
    """Index of the extension's dot, or -1 when the part has no extension."""
    if part in (".", ".."):
        return -1
    dot = part.rfind(".")
    return dot if dot > 0 else -1


def _has_extension(part: str) -> bool:
    return _extension_start(part) != -1


def _bare_stem(part: str) -> str:
    """The part with every extension removed."""
    while (dot := _extension_start(part)) != -1:
        part = part[:dot]
    return part


def _precedes(a: str, b: str) -> bool:
    parts_a = _components(a)
    parts_b = _components(b)
    for node_a, node_b in zip(parts_a, parts_b):
        if node_a == node_b:
            continue
        if _has_extension(node_a) and _has_extension(node_b):
            return node_a < node_b
        stem_a = _bare_stem(node_a)
        stem_b = _bare_stem(node_b)
        if stem_a == stem_b:
            # A directory sorts before a file of the same base name.
            return not _has_extension(node_a)
        return stem_a < stem_b
    return len(parts_a) < len(parts_b)


class _ArchiveOrder:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __lt__(self, other: _ArchiveOrder) -> bool:
        return _precedes(self.name, other.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _ArchiveOrder):
            return NotImplemented
        return not _precedes(self.name, other.name) and not _precedes(
            other.name, self.name
        )

    __hash__ = None  # type: ignore[assignment]


def archive_sort_key(name: str) -> _ArchiveOrder:
    """Sort key giving the order in which entries are written to an archive."""
    return _ArchiveOrder(name)


class PacArchive:
    """A mapping of virtual paths to file sources, loadable from and savable to disk."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self._entries: dict[str, FileSource] = {}
        if path is not None:
            self._load(Path(path))

    def _load(self, path: Path) -> None:
        with path.open("rb") as stream:
            header = PacHeader.from_bytes(stream.read(HEADER_SIZE))
            base_offset = HEADER_SIZE + header.num_files * ENTRY_SIZE
            for _ in range(header.num_files):
                entry = DirectoryEntry.from_bytes(stream.read(ENTRY_SIZE))
                self._entries[entry.file_name] = PacFileSource(
                    path, base_offset, entry
                )

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def get(self, name: str) -> FileSource | None:
        """Return the source stored under ``name``, also trying backslash separators."""
        source = self._entries.get(name)
        if source is None:
            source = self._entries.get(name.replace("/", "\\"))
        return source

    def insert(self, virt_path: str, source: FileSource) -> None:
        """Store ``source`` under ``virt_path``, replacing any existing entry.

        A path not already present is stored with backslash separators.
        """
        key = virt_path if virt_path in self._entries else virt_path.replace("/", "\\")
        self._entries[key] = source

    def remove(self, name: str) -> bool:
        """Remove the entry named exactly ``name``; return whether it existed."""
        return self._entries.pop(name, None) is not None

    def save(
        self, path: str | os.PathLike[str], callback: ProgressCallback | None = None
    ) -> ArchiveInfo:
        """Write the archive to ``path``, compressing sources that are not yet."""
        ordered = sorted(self._entries.items(), key=lambda item: archive_sort_key(item[0]))
        num_files = len(ordered)
        data_start = HEADER_SIZE + num_files * ENTRY_SIZE
        info = ArchiveInfo(header_size=data_start, total_files=num_files)

        file_offset = 0
        with Path(path).open("wb") as output:
            output.write(PacHeader(num_files=num_files).to_bytes())
            for file_id, (name, source) in enumerate(ordered):
                raw_size = source.unpacked_size()
                if source.compressed():
                    payload = source.read_data(0, source.data_size())
                else:
                    raw = source.read_data(0, raw_size)
                    payload = compress(prepare_compression(raw, DEFAULT_BLOCK_SIZE))

                entry = DirectoryEntry(
                    file_id=file_id,
                    file_name=name,
                    comp_size=len(payload),
                    raw_size=raw_size,
                    compressed=1,
                    offset=file_offset,
                )
                output.seek(HEADER_SIZE + ENTRY_SIZE * file_id)
                output.write(entry.to_bytes())
                output.seek(data_start + file_offset)
                output.write(payload)

                file_offset += len(payload)
                if callback is not None:
                    callback(
                        ProgressInfo(file_id + 1, num_files, name, raw_size, len(payload))
                    )
                info.compressed_size += len(payload)
                info.original_size += raw_size
        return info