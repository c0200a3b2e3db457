from __future__ import annotations

from typing import Iterator, Optional, Sequence

from .patterns import literal_pattern
from .text_utils import byte_offset


def find_match(stripped_line: str, literal: str) -> Optional[int]:
    m = literal_pattern(literal).search(stripped_line)
    if m is None:
        return None
    return byte_offset(stripped_line, m.start())


def contains_exclusion(stripped_line: str, exclude_phrases: Sequence[str]) -> bool:
    return any(phrase in stripped_line for phrase in exclude_phrases)


class LiteralMatcher:
    def __init__(self, literals: Sequence[str], exclude_phrases: Sequence[str] = ()):
        items = [lit for lit in literals if lit]
        if not items:
            raise ValueError("Literals cannot be empty")
        self.literals = tuple(items)
        self.exclude_phrases = tuple(p for p in exclude_phrases if p)

    def match_line(self, stripped_line: str) -> Iterator[tuple[str, int]]:
        hits = []
        for literal in self.literals:
            offset = find_match(stripped_line, literal)
            if offset is not None:
                hits.append((literal, offset))
        if not hits:
            return
        # One exclusion phrase anywhere on the line drops every hit on it.
        if contains_exclusion(stripped_line, self.exclude_phrases):
            return
        yield from hits
