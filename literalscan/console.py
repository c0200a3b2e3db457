from __future__ import annotations

import threading
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.text import Text


class RichLogger:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False, quiet: bool = False):
        self.console = console or Console(stderr=True)
        self.verbose = verbose
        self.quiet = quiet
        self._lock = threading.Lock()

    def _emit(self, level: str, msg: str, style: str) -> None:
        with self._lock:
            tag = Text(level.ljust(5), style=style)
            self.console.log(tag, escape(msg))

    def info(self, msg: str) -> None:
        if self.quiet:
            return
        self._emit("INFO", msg, "bold green")

    def warn(self, msg: str) -> None:
        self._emit("WARN", msg, "bold yellow")

    def error(self, msg: str) -> None:
        self._emit("ERROR", msg, "bold red")

    def debug(self, msg: str) -> None:
        if not self.verbose:
            return
        self._emit("DEBUG", msg, "bold blue")

    def skip(self, msg: str) -> None:
        if self.quiet:
            return
        self._emit("SKIP", msg, "bold magenta")

    def match(self, msg: str) -> None:
        if self.quiet:
            return
        self._emit("MATCH", msg, "bold cyan")

    def done(self, msg: str) -> None:
        self._emit("DONE", msg, "bold cyan")
