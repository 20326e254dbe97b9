"""On-disk structures of PAC archives: the file header and directory entries."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

MAGIC = b"DW_PACK\x00"
NAME_SIZE = 260
_UNSET = 0xFFFFFFFF

_HEADER = struct.Struct("<8sIII")
_ENTRY = struct.Struct(f"<II{NAME_SIZE}sIIIII")

HEADER_SIZE = _HEADER.size
ENTRY_SIZE = _ENTRY.size


class InvalidArchiveError(ValueError):
    """Raised when data does not hold a valid PAC structure."""


@dataclass
class PacHeader:
    """Archive header: magic, then the number of directory entries."""

    num_files: int = _UNSET

    SIZE: ClassVar[int] = HEADER_SIZE

    def to_bytes(self) -> bytes:
        return _HEADER.pack(MAGIC, 0, self.num_files, 0)

    @classmethod
    def from_bytes(cls, data: bytes) -> PacHeader:
        if len(data) < HEADER_SIZE:
            raise InvalidArchiveError("truncated PAC header")
        magic, _, num_files, _ = _HEADER.unpack_from(data)
        if magic != MAGIC:
            raise InvalidArchiveError("Invalid PAC Header")
        return cls(num_files=num_files)


@dataclass
class DirectoryEntry:
    """One directory record describing a stored file."""

    file_id: int = _UNSET
    file_name: str = ""
    comp_size: int = _UNSET
    raw_size: int = _UNSET
    compressed: int = _UNSET
    offset: int = _UNSET

    SIZE: ClassVar[int] = ENTRY_SIZE

    def to_bytes(self) -> bytes:
        name = self.file_name.encode("utf-8", "surrogateescape")
        if len(name) >= NAME_SIZE:
            raise ValueError(
                f"file name is {len(name)} bytes long; at most {NAME_SIZE - 1} fit"
            )
        return _ENTRY.pack(
            0,
            self.file_id,
            name,
            0,
            self.comp_size,
            self.raw_size,
            self.compressed,
            self.offset,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> DirectoryEntry:
        if len(data) < ENTRY_SIZE:
            raise InvalidArchiveError("truncated PAC directory entry")
        _, file_id, raw_name, _, comp_size, raw_size, compressed, offset = (
            _ENTRY.unpack_from(data)
        )
        name = raw_name.split(b"\x00", 1)[0].decode("utf-8", "surrogateescape")
        return cls(
            file_id=file_id,
            file_name=name,
            comp_size=comp_size,
            raw_size=raw_size,
            compressed=compressed,
            offset=offset,
        )