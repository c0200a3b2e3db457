from __future__ import annotations

import re
from functools import lru_cache

LINE_COMMENT_MARK = "//"
BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"

COMMENT_RX = re.compile(r"//.*|/\*.*?\*/")


@lru_cache(maxsize=None)
def literal_pattern(literal: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(literal)}\b", re.ASCII)
