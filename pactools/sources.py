"""Sources of file contents: entries of an existing archive or files on disk."""

from __future__ import annotations

import copy as _copy
import os
from abc import ABC, abstractmethod
from pathlib import Path

from .structs import DirectoryEntry


def _read_length(size: int, offset: int, count: int | None) -> int:
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")
    available = max(0, size - offset)
    if count is None:
        return available
    if count < 0:
        raise ValueError(f"count must not be negative, got {count}")
    return min(count, available)


class FileSource(ABC):
    """Something that can supply the stored bytes of one archived file."""

    @abstractmethod
    def compressed(self) -> bool:
        """Whether the stored data is already compressed."""

    @abstractmethod
    def data_size(self) -> int:
        """Size of the stored data in bytes."""

    @abstractmethod
    def unpacked_size(self) -> int:
        """Size of the file once decompressed."""

    @abstractmethod
    def copy(self) -> FileSource:
        """Return an independent source for the same data."""

    @abstractmethod
    def read_data(self, offset: int = 0, count: int | None = None) -> bytes:
        """Read up to ``count`` stored bytes starting at ``offset``."""


class PacFileSource(FileSource):
    """Data of one entry inside a PAC archive on disk."""

    def __init__(
        self, pac_file: str | os.PathLike[str], base_offset: int, entry: DirectoryEntry
    ) -> None:
        self.pac_file = Path(pac_file)
        self.offset = base_offset + entry.offset
        self._unpacked_size = entry.raw_size
        self._data_size = entry.comp_size
        self._compressed = bool(entry.compressed)

    def compressed(self) -> bool:
        return self._compressed

    def data_size(self) -> int:
        return self._data_size

    def unpacked_size(self) -> int:
        return self._unpacked_size

    def copy(self) -> PacFileSource:
        return _copy.copy(self)

    def read_data(self, offset: int = 0, count: int | None = None) -> bytes:
        length = _read_length(self._data_size, offset, count)
        with self.pac_file.open("rb") as stream:
            stream.seek(self.offset + offset)
            return stream.read(length)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({str(self.pac_file)!r}, offset={self.offset}, "
            f"size={self._data_size})"
        )


class SystemFileSource(FileSource):
    """An uncompressed file on the local file system."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._size = self.path.stat().st_size

    def compressed(self) -> bool:
        return False

    def data_size(self) -> int:
        return self._size

    def unpacked_size(self) -> int:
        return self._size

    def copy(self) -> SystemFileSource:
        return _copy.copy(self)

    def read_data(self, offset: int = 0, count: int | None = None) -> bytes:
        length = _read_length(self._size, offset, count)
        with self.path.open("rb") as stream:
            stream.seek(offset)
            return stream.read(length)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"