from __future__ import annotations

import io

import pytest
from rich.console import Console

from literalscan.console import RichLogger


@pytest.fixture
def log_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(log_buffer: io.StringIO) -> RichLogger:
    return RichLogger(console=Console(file=log_buffer, width=200), verbose=True)
