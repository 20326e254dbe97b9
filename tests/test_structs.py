import pytest

from pactools.structs import (
    ENTRY_SIZE,
    HEADER_SIZE,
    MAGIC,
    DirectoryEntry,
    InvalidArchiveError,
    PacHeader,
)


def test_header_starts_with_magic():
    raw = PacHeader(num_files=3).to_bytes()
    assert raw.startswith(b"DW_PACK\x00")
    assert len(raw) == 20


def test_header_round_trip():
    header = PacHeader(num_files=42)
    assert PacHeader.from_bytes(header.to_bytes()) == header


def test_header_size_matches_constant():
    assert len(PacHeader().to_bytes()) == HEADER_SIZE == PacHeader.SIZE


def test_header_bad_magic():
    raw = bytearray(PacHeader(num_files=1).to_bytes())
    raw[0:8] = b"NOT_PACK"
    with pytest.raises(InvalidArchiveError):
        PacHeader.from_bytes(bytes(raw))


def test_header_truncated():
    with pytest.raises(InvalidArchiveError):
        PacHeader.from_bytes(MAGIC)


def test_entry_size():
    assert len(DirectoryEntry(file_name="a.txt").to_bytes()) == 288
    assert ENTRY_SIZE == DirectoryEntry.SIZE


def test_entry_round_trip():
    entry = DirectoryEntry(
        file_id=7,
        file_name="data\\sub\\file.bin",
        comp_size=100,
        raw_size=250,
        compressed=1,
        offset=4096,
    )
    assert DirectoryEntry.from_bytes(entry.to_bytes()) == entry


def test_entry_name_is_nul_terminated():
    raw = DirectoryEntry(file_id=0, file_name="name.dat").to_bytes()
    assert b"name.dat\x00" in raw


def test_entry_non_ascii_name_round_trip():
    entry = DirectoryEntry(file_id=1, file_name="mapa/\u00e1rbol.txt")
    assert DirectoryEntry.from_bytes(entry.to_bytes()).file_name == entry.file_name


def test_entry_name_too_long():
    with pytest.raises(ValueError):
        DirectoryEntry(file_name="x" * 260).to_bytes()


def test_entry_truncated():
    raw = DirectoryEntry(file_name="a").to_bytes()
    with pytest.raises(InvalidArchiveError):
        DirectoryEntry.from_bytes(raw[:-1])


def test_invalid_archive_error_is_value_error():
    with pytest.raises(ValueError):
        PacHeader.from_bytes(b"")