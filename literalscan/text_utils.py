from __future__ import annotations

from .patterns import BLOCK_COMMENT_CLOSE, BLOCK_COMMENT_OPEN, COMMENT_RX, LINE_COMMENT_MARK

LINE_ENCODING = "utf-8"


def decode_line(raw: bytes) -> str:
    return raw.decode(LINE_ENCODING, errors="surrogateescape")


def byte_offset(text: str, index: int) -> int:
    return len(text[:index].encode(LINE_ENCODING, errors="surrogateescape"))


def display_text(text: str) -> str:
    # Undecodable bytes survive scanning as surrogates; show them as U+FFFD.
    return text.encode(LINE_ENCODING, errors="surrogateescape").decode(LINE_ENCODING, errors="replace")


def trim_snippet(text: str, max_len: int = 160) -> str:
    value = display_text(text).strip()
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


def strip_comments(line: str) -> str:
    return COMMENT_RX.sub("", line)


class BlockCommentStripper:
    """Comment stripper that remembers an open /* ... */ across lines.

    One instance per file. Lines that contain no multi-line comment strip
    exactly like strip_comments().
    """

    def __init__(self):
        self.in_block = False

    def strip(self, line: str) -> str:
        out = []
        pos = 0
        end = len(line)
        while pos < end:
            if self.in_block:
                close = line.find(BLOCK_COMMENT_CLOSE, pos)
                if close == -1:
                    pos = end
                    break
                self.in_block = False
                pos = close + len(BLOCK_COMMENT_CLOSE)
                continue

            line_mark = line.find(LINE_COMMENT_MARK, pos)
            block_mark = line.find(BLOCK_COMMENT_OPEN, pos)
            if line_mark == -1 and block_mark == -1:
                out.append(line[pos:])
                break
            if block_mark == -1 or (line_mark != -1 and line_mark < block_mark):
                out.append(line[pos:line_mark])
                out.append(_line_terminator(line))
                break
            out.append(line[pos:block_mark])
            self.in_block = True
            pos = block_mark + len(BLOCK_COMMENT_OPEN)
        return "".join(out)


def _line_terminator(line: str) -> str:
    # "//.*" stops before "\n" but swallows a "\r".
    return "\n" if line.endswith("\n") else ""
