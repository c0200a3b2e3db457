from __future__ import annotations

from pathlib import Path

import pytest

from literalscan.models import MatchRecord
from literalscan.scanner import FileScanner, ScanReadError, scan_file

LITERALS = ["proc ", "data "]


def test_reports_line_and_column_of_each_match(tmp_path: Path) -> None:
    src = tmp_path / "job.go"
    src.write_text("x := 1\nx = 1; proc options;\n  data flow\n", encoding="utf-8")

    records = scan_file(str(src), LITERALS)

    assert records == [
        MatchRecord(str(src), 2, 7, "proc ", "x = 1; proc options;\n"),
        MatchRecord(str(src), 3, 2, "data ", "  data flow\n"),
    ]
    assert [r.display_column for r in records] == [8, 3]


def test_one_record_per_literal_on_the_same_line(tmp_path: Path) -> None:
    src = tmp_path / "both.go"
    src.write_text("data a; proc b;\n", encoding="utf-8")

    records = scan_file(str(src), LITERALS)

    assert [(r.line_no, r.literal, r.column) for r in records] == [(1, "proc ", 8), (1, "data ", 0)]


def test_commented_literals_are_not_reported(tmp_path: Path) -> None:
    src = tmp_path / "c.go"
    src.write_text("// proc sql; run;\nx /* data step */ y\n", encoding="utf-8")
    assert scan_file(str(src), LITERALS) == []


def test_column_is_measured_on_decommented_line(tmp_path: Path) -> None:
    src = tmp_path / "c.go"
    src.write_text("/* note */ proc sql;\n", encoding="utf-8")

    records = scan_file(str(src), LITERALS)

    assert [(r.column, r.raw_line) for r in records] == [(1, "/* note */ proc sql;\n")]


def test_exclusion_phrase_suppresses_line(tmp_path: Path) -> None:
    src = tmp_path / "doc.go"
    src.write_text("this loads data from disk\ndata flow\n", encoding="utf-8")

    records = scan_file(str(src), LITERALS, ["loads data from"])

    assert [r.line_no for r in records] == [2]


def test_last_line_without_newline_is_scanned(tmp_path: Path) -> None:
    src = tmp_path / "tail.go"
    src.write_bytes(b"nothing here\nproc sql;")

    records = scan_file(str(src), LITERALS)

    assert [(r.line_no, r.raw_line) for r in records] == [(2, "proc sql;")]


def test_only_newline_splits_lines(tmp_path: Path) -> None:
    src = tmp_path / "crlf.go"
    src.write_bytes(b"a\r\ndata x\rproc y\n")

    records = scan_file(str(src), LITERALS)

    assert [(r.line_no, r.literal, r.raw_line) for r in records] == [
        (2, "proc ", "data x\rproc y\n"),
        (2, "data ", "data x\rproc y\n"),
    ]


def test_invalid_utf8_keeps_byte_columns(tmp_path: Path) -> None:
    src = tmp_path / "latin1.go"
    src.write_bytes(b"\xe9\xe9 data x\n")

    records = scan_file(str(src), LITERALS)

    assert [r.column for r in records] == [3]


def test_block_comment_mode_suppresses_multiline_comment(tmp_path: Path) -> None:
    src = tmp_path / "block.go"
    src.write_text("/* start\nproc sql;\nend */ data x\n", encoding="utf-8")

    line_local = scan_file(str(src), LITERALS)
    tracked = scan_file(str(src), LITERALS, block_comments=True)

    assert [(r.line_no, r.literal) for r in line_local] == [(2, "proc "), (3, "data ")]
    assert [(r.line_no, r.literal, r.column) for r in tracked] == [(3, "data ", 1)]


def test_block_comment_state_is_per_file(tmp_path: Path) -> None:
    first = tmp_path / "a.go"
    second = tmp_path / "b.go"
    first.write_text("/* never closed\n", encoding="utf-8")
    second.write_text("proc sql;\n", encoding="utf-8")
    scanner = FileScanner(LITERALS, block_comments=True)

    assert scanner.scan_file(str(first)) == []
    assert len(scanner.scan_file(str(second))) == 1


def test_missing_file_raises_read_error(tmp_path: Path) -> None:
    with pytest.raises(ScanReadError) as excinfo:
        scan_file(str(tmp_path / "gone.go"), LITERALS)
    assert excinfo.value.path == str(tmp_path / "gone.go")
    assert isinstance(excinfo.value.cause, FileNotFoundError)


def test_directory_raises_read_error(tmp_path: Path) -> None:
    with pytest.raises(ScanReadError):
        scan_file(str(tmp_path), LITERALS)


def test_matches_are_mirrored_to_logger(tmp_path: Path, logger, log_buffer) -> None:
    src = tmp_path / "job.go"
    src.write_text("proc sql;\n", encoding="utf-8")

    FileScanner(LITERALS, logger=logger).scan_file(str(src))

    output = log_buffer.getvalue()
    assert "MATCH" in output
    assert "job.go:1:1" in output
