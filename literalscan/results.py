from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, TextIO, Type

from .models import ScanResult
from .text_utils import display_text

CSV_HEADER = ("Filename", "LineNumber", "ColumnNumber", "Match")


class OutputCreateError(Exception):
    pass


def create_output(path: Path | str, fmt: str = "text") -> TextIO:
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        # csv.writer supplies its own line endings.
        newline = "" if fmt == "csv" else None
        return open(out_path, "w", encoding="utf-8", newline=newline)
    except OSError as exc:
        raise OutputCreateError(f"error creating output file {out_path}: {exc}") from exc


class ReportWriter:
    name = ""

    def write(self, result: ScanResult, sink: TextIO) -> None:
        raise NotImplementedError


class TextReportWriter(ReportWriter):
    name = "text"

    def write(self, result: ScanResult, sink: TextIO) -> None:
        files = result.sorted_files()

        sink.write("\nExcluded Files and Directories:\n")
        for item in result.exclusions:
            sink.write(f"Path: {display_text(item.path)}, Reason: {display_text(item.reason)}\n")

        sink.write("\nString Literal Matches:\n")
        for file_path in files:
            sink.write(f"File: {display_text(file_path)}\n")
            for record in result.matches_by_file[file_path]:
                sink.write(f"  Row: {record.line_no}, Column: {record.display_column}\n")
                sink.write(f"  Match: {record.literal}\n")
                sink.write(f"  Line: {display_text(record.raw_line)}\n")
                sink.write("\n")

        sink.write("\nSummary:\n")
        for file_path in files:
            count = len(result.matches_by_file[file_path])
            sink.write(f"File: {display_text(file_path)}, Matches Found: {count}\n")


class CsvReportWriter(ReportWriter):
    name = "csv"

    def write(self, result: ScanResult, sink: TextIO) -> None:
        writer = csv.writer(sink)
        writer.writerow(CSV_HEADER)
        for file_path in result.sorted_files():
            for record in result.matches_by_file[file_path]:
                writer.writerow(
                    [display_text(file_path), record.line_no, record.display_column, record.literal]
                )


REPORT_WRITERS: Dict[str, Type[ReportWriter]] = {
    TextReportWriter.name: TextReportWriter,
    CsvReportWriter.name: CsvReportWriter,
}


def get_writer(fmt: str) -> ReportWriter:
    try:
        return REPORT_WRITERS[fmt]()
    except KeyError:
        raise ValueError(f"Unknown report format: {fmt}") from None


def write_report(result: ScanResult, sink: TextIO, fmt: str = "text") -> None:
    get_writer(fmt).write(result, sink)
