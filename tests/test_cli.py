# tests/test_cli.py
import os
import sys
import pytest
from pathlib import Path
from unittest.mock import patch

from diskfit.cli import build_options, create_arg_parser, main

# --- Fixtures ---

@pytest.fixture
def album(tmp_path, monkeypatch):
    """Four tracks (4, 4, 4 and 2 bytes) in a folder with one nested disc."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "album" / "disc2").mkdir(parents=True)
    (tmp_path / "album" / "01.flac").write_bytes(b"1" * 4)
    (tmp_path / "album" / "02.flac").write_bytes(b"2" * 4)
    (tmp_path / "album" / "03.flac").write_bytes(b"3" * 4)
    (tmp_path / "album" / "disc2" / "01.flac").write_bytes(b"4" * 2)
    return tmp_path


def run_cli(args):
    with patch.object(sys, "argv", ["diskfit"] + args):
        main()

# --- Argument parsing ---

def test_build_options():
    args = create_arg_parser().parse_args(["-s", "10k", "-r", "-l", "out", "-x", "*.tmp", "a", "b"])
    options = build_options(args)
    assert options.capacity == 10_000
    assert options.paths == ("a", "b")
    assert options.destdir == "out"
    assert options.link_mode
    assert options.recursive
    assert not options.count_only
    assert options.exclude == ("*.tmp",)


@pytest.mark.parametrize("args", [
    ["album"],            # no size
    ["-s", "10"],         # no paths
    ["-s", "10", "-q", "album"],
])
def test_usage_errors(album, args, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run_cli(args)
    assert exc_info.value.code != 0
    assert "usage:" in capsys.readouterr().err

# --- End-to-end runs ---

def test_report(album, capsys):
    run_cli(["-s", "10", "-r", "album"])

    out = capsys.readouterr().out
    assert "Disk #1, 0% (0B) free:" in out
    assert "Disk #2, 60% (6B) free:" in out
    assert "album/disc2/01.flac" in out


def test_count_only(album, capsys):
    run_cli(["-s", "10", "-r", "-n", "album"])
    assert capsys.readouterr().out == "2 disks.\n"


def test_count_single_disk(album, capsys):
    run_cli(["-s", "1k", "-n", "album"])
    assert capsys.readouterr().out == "1 disk.\n"


def test_link(album, capsys):
    run_cli(["-s", "10", "-r", "-l", "out", "album"])

    linked = sorted(
        str(p.relative_to(album / "out")) for p in (album / "out").rglob("*.flac")
    )
    assert len(linked) == 4
    assert "0001/album/disc2/01.flac" in linked
    for rel in linked:
        source = Path(rel).relative_to(Path(rel).parts[0])
        assert (album / "out" / rel).stat().st_ino == (album / source).stat().st_ino

    out = capsys.readouterr().out
    assert out.count(" -> out/0001") == 3
    assert out.count(" -> out/0002") == 1


def test_exclude(album, capsys):
    run_cli(["-s", "10", "-r", "-n", "-x", "disc2/", "album"])
    assert capsys.readouterr().out == "2 disks.\n"

    run_cli(["-s", "10", "-r", "-n", "-x", "0[23].flac", "album"])
    assert capsys.readouterr().out == "1 disk.\n"

# --- Fatal errors ---

def expect_failure(args, capsys):
    with pytest.raises(SystemExit) as exc_info:
        run_cli(args)
    assert exc_info.value.code == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    return captured.err


def test_file_too_large(album, capsys):
    err = expect_failure(["-s", "3", "album"], capsys)
    assert err.startswith("diskfit: can never fit 'album/0")
    assert "(4B)" in err


@pytest.mark.parametrize("size, message", [
    ("0", "too small"),
    ("-10", "too small"),
    ("10q", "unknown unit: 'q'"),
    ("big", "invalid input"),
])
def test_bad_size(album, capsys, size, message):
    assert message in expect_failure(["-s", size, "album"], capsys)


def test_no_files(album, capsys):
    (album / "empty").mkdir()
    assert "no files found." in expect_failure(["-s", "10", "empty"], capsys)


def test_missing_path(album, capsys):
    assert "can't open directory 'missing'" in expect_failure(["-s", "10", "missing"], capsys)


def test_link_conflict_leaves_error_on_stderr(album, capsys):
    (album / "out").write_text("not a directory")
    assert "'out' is not a directory." in expect_failure(["-s", "10", "-l", "out", "album"], capsys)


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs mkfifo")
def test_special_file(album, capsys):
    os.mkfifo(album / "album" / "fifo")
    assert "not a regular file" in expect_failure(["-s", "10", "album"], capsys)


def test_link_refused_path_leaves_no_tree(tmp_path, monkeypatch, capsys):
    work = tmp_path / "work"
    (work / "media").mkdir(parents=True)
    (work / "media" / "a.bin").write_bytes(b"a" * 4)
    (tmp_path / "other").mkdir()
    (tmp_path / "other" / "b.bin").write_bytes(b"b" * 4)
    monkeypatch.chdir(work)

    err = expect_failure(["-s", "10", "-l", "out", "media", "../other"], capsys)

    assert "'../other/b.bin' would be linked outside of 'out/0001'." in err
    assert not (work / "out").exists()
