from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from .console import RichLogger
from .matcher import LiteralMatcher
from .models import MatchRecord
from .text_utils import BlockCommentStripper, decode_line, strip_comments, trim_snippet


class ScanReadError(Exception):
    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"{path}: {cause}")
        self.path = path
        self.cause = cause


class FileScanner:
    def __init__(
        self,
        literals: Sequence[str],
        exclude_phrases: Sequence[str] = (),
        block_comments: bool = False,
        logger: Optional[RichLogger] = None,
    ):
        self.matcher = LiteralMatcher(literals, exclude_phrases)
        self.block_comments = block_comments
        self.logger = logger

    def _stripper(self) -> Callable[[str], str]:
        if self.block_comments:
            return BlockCommentStripper().strip
        return strip_comments

    def scan_file(self, path: str) -> List[MatchRecord]:
        strip = self._stripper()
        records: List[MatchRecord] = []
        try:
            with open(path, "rb") as bf:
                for line_no, raw in enumerate(bf, start=1):
                    line = decode_line(raw)
                    for literal, column in self.matcher.match_line(strip(line)):
                        record = MatchRecord(
                            file_path=path,
                            line_no=line_no,
                            column=column,
                            literal=literal,
                            raw_line=line,
                        )
                        records.append(record)
                        if self.logger is not None:
                            self.logger.match(
                                f"{path}:{line_no}:{record.display_column} {literal!r} {trim_snippet(line)}"
                            )
        except OSError as exc:
            raise ScanReadError(path, exc) from exc
        return records


def scan_file(
    path: str,
    literals: Sequence[str],
    exclude_phrases: Sequence[str] = (),
    block_comments: bool = False,
) -> List[MatchRecord]:
    return FileScanner(literals, exclude_phrases, block_comments=block_comments).scan_file(path)
