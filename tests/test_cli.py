from pathlib import Path

import pytest

from pactools.archive import PacArchive, ProgressInfo
from pactools.cli import pack_main, patch_main, report_progress, unpack_main
from pactools.helper import format_progress, read_entry


def _make_folder(root: Path) -> Path:
    folder = root / "data"
    (folder / "sub").mkdir(parents=True)
    (folder / "a.txt").write_bytes(b"hello hello hello world")
    (folder / "sub" / "b.bin").write_bytes(bytes(range(40)) * 3)
    return folder


def test_report_progress_prints_formatted_line(capsys):
    info = ProgressInfo(1, 1, "a.txt", 200, 100)
    report_progress(info)
    out = capsys.readouterr().out
    assert out == format_progress(info) + "\n"
    assert out == "[1/1] 50% - a.txt\n"


@pytest.mark.parametrize(
    "main, usage",
    [
        (pack_main, "Usage: pack.exe <directory>"),
        (patch_main, "Usage: patch.exe <directory or pac file>"),
        (unpack_main, "Usage: unpack.exe <pac file>"),
    ],
)
def test_no_arguments_prints_usage(main, usage, capsys):
    assert main([]) == 1
    assert usage in capsys.readouterr().out.splitlines()


def test_pack_creates_archive(tmp_path, capsys):
    folder = _make_folder(tmp_path)
    assert pack_main([str(folder)]) == 0

    out = capsys.readouterr().out
    assert out.splitlines()[0] == "PAC Packer"
    assert "Compression Ratio:" in out

    archive = PacArchive(tmp_path / "data.pac")
    assert len(archive) == 2
    assert read_entry(archive, "a.txt") == b"hello hello hello world"
    assert read_entry(archive, "sub/b.bin") == bytes(range(40)) * 3


def test_pack_ignores_non_directories(tmp_path):
    missing = tmp_path / "nothing"
    assert pack_main([str(missing)]) == 0
    assert list(tmp_path.iterdir()) == []


def test_patch_replaces_existing_entry(tmp_path, capsys):
    folder = _make_folder(tmp_path)
    pack_main([str(folder)])
    (folder / "a.txt").write_bytes(b"patched contents")

    assert patch_main([str(tmp_path / "data.pac")]) == 0
    out = capsys.readouterr().out
    assert "PAC Patcher" in out

    assert (tmp_path / "data.pac.bak").is_file()
    patched = PacArchive(tmp_path / "data.pac")
    assert read_entry(patched, "a.txt") == b"patched contents"
    original = PacArchive(tmp_path / "data.pac.bak")
    assert read_entry(original, "a.txt") == b"hello hello hello world"


def test_patch_without_archive_reports(tmp_path, capsys):
    folder = _make_folder(tmp_path)
    assert patch_main([str(folder)]) == 0
    out = capsys.readouterr().out
    assert "Unable to find PAC file or Backup: data" in out
    assert not (tmp_path / "data.pac").exists()


def test_unpack_round_trip(tmp_path, monkeypatch):
    folder = _make_folder(tmp_path)
    pack_main([str(folder)])

    out_dir = tmp_path / "out"
    out_dir.mkdir()
    monkeypatch.chdir(out_dir)
    assert unpack_main([str(tmp_path / "data.pac")]) == 0

    assert (out_dir / "data" / "a.txt").read_bytes() == b"hello hello hello world"
    assert (out_dir / "data" / "sub" / "b.bin").read_bytes() == bytes(range(40)) * 3


def test_unpack_skips_missing_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert unpack_main([str(tmp_path / "absent.pac")]) == 0
    assert list(tmp_path.iterdir()) == []