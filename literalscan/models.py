from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set


@dataclass(frozen=True)
class MatchRecord:
    file_path: str
    line_no: int
    column: int
    literal: str
    raw_line: str

    @property
    def display_column(self) -> int:
        return self.column + 1


@dataclass(frozen=True)
class ExclusionRecord:
    path: str
    reason: str


@dataclass(frozen=True)
class ScanIssue:
    path: str
    message: str


@dataclass
class ScanResult:
    matches_by_file: Dict[str, List[MatchRecord]] = field(default_factory=dict)
    exclusions: List[ExclusionRecord] = field(default_factory=list)
    issues: List[ScanIssue] = field(default_factory=list)
    files_scanned: int = 0
    scanned_paths: Set[str] = field(default_factory=set)

    def add_matches(self, path: str, records: List[MatchRecord]) -> None:
        if not records:
            return
        self.matches_by_file[path] = list(records)

    def record_scan(self, path: str, records: List[MatchRecord]) -> None:
        # Overlapping roots reach the same file twice; it still counts once.
        if path not in self.scanned_paths:
            self.scanned_paths.add(path)
            self.files_scanned += 1
        self.add_matches(path, records)

    def sorted_files(self) -> List[str]:
        return sorted(self.matches_by_file)

    def total_matches(self) -> int:
        return sum(len(records) for records in self.matches_by_file.values())
