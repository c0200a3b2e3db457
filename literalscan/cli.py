from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import REPORT_FORMATS, ConfigError, ScanSettings, check_format, load_settings
from .console import RichLogger
from .models import ScanResult
from .policy import ExclusionPolicy
from .results import OutputCreateError, create_output, write_report
from .text_utils import display_text
from .walker import default_thread_count, walk, walk_concurrent


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="literalscan",
        description="Scan source trees for marker literals outside comments and write a grouped report.",
    )
    ap.add_argument(
        "--root",
        action="append",
        default=[],
        help="Root directory to scan (repeat for several roots, scanned in order).",
    )
    ap.add_argument("--output", help="Report file to write.")
    ap.add_argument("--format", choices=REPORT_FORMATS, help="Report format (default: text).")
    ap.add_argument("--config", help="TOML file with scan settings.")
    ap.add_argument(
        "--literal",
        action="append",
        default=[],
        help="Literal to search for (repeat or provide a file with one literal per line).",
    )
    ap.add_argument(
        "--exclude-phrase",
        action="append",
        default=[],
        help="Phrase that suppresses matches on its line (repeat or provide a file).",
    )
    ap.add_argument("--exclude-pattern", action="append", default=[], help="File name glob to skip.")
    ap.add_argument("--exclude-ext", action="append", default=[], help="File extension to skip, e.g. .md")
    ap.add_argument(
        "--exclude-dir",
        action="append",
        default=[],
        help="Directory path prefix to skip (relative entries are joined onto every root).",
    )
    ap.add_argument(
        "--threads",
        type=int,
        help=f"Worker threads for file scanning (default: 1, 0 = auto ({default_thread_count()})).",
    )
    ap.add_argument(
        "--block-comments",
        action="store_true",
        help="Track /* ... */ comments across lines instead of stripping each line on its own.",
    )
    ap.add_argument(
        "--no-defaults",
        action="store_true",
        help="Start from empty literal, phrase and exclusion sets instead of the built-in ones.",
    )
    ap.add_argument("-q", "--quiet", action="store_true", help="Do not mirror matches and exclusions to the console")
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose debug logs")
    return ap


def _read_list_file(path: Path) -> List[str]:
    values: List[str] = []
    with open(path, "r", encoding="utf-8") as handle:
        for line in handle:
            # Only the terminator goes; literals such as "proc " keep their space.
            value = line.rstrip("\r\n")
            if value:
                values.append(value)
    return values


def _read_list_inputs(values: Iterable[str], flag: str) -> List[str]:
    items: List[str] = []
    for raw in values:
        if not raw:
            continue
        path = Path(raw).expanduser()
        if path.is_file():
            try:
                items.extend(_read_list_file(path))
            except (OSError, UnicodeDecodeError) as exc:
                raise ValueError(f"Failed to read {flag} file {path}: {exc}") from exc
            continue
        if path.is_dir():
            raise ValueError(f"{flag} path is a directory, expected file or value: {path}")
        items.append(raw)
    return items


def _collect_values(values: Iterable[str]) -> tuple[str, ...]:
    out: List[str] = []
    seen: set[str] = set()
    for value in values:
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return tuple(out)


def build_settings(args) -> ScanSettings:
    config_path = Path(args.config).expanduser() if args.config else None
    settings = load_settings(config_path, use_defaults=not args.no_defaults)

    literals = _read_list_inputs(args.literal, "--literal")
    phrases = _read_list_inputs(args.exclude_phrase, "--exclude-phrase")
    policy = settings.policy
    updates = {
        "roots": _collect_values([*settings.roots, *args.root]),
        "literals": _collect_values([*settings.literals, *literals]),
        "exclude_phrases": _collect_values([*settings.exclude_phrases, *phrases]),
        "policy": ExclusionPolicy.build(
            file_patterns=[*policy.file_patterns, *args.exclude_pattern],
            extensions=[*policy.extensions, *args.exclude_ext],
            directories=[*policy.directories, *args.exclude_dir],
        ),
        "block_comments": settings.block_comments or args.block_comments,
    }
    if args.output:
        updates["output"] = args.output
    if args.format:
        updates["report_format"] = check_format(args.format)
    if args.threads is not None:
        if args.threads < 0:
            raise ConfigError("--threads must be zero or a positive integer.")
        updates["threads"] = args.threads or default_thread_count()
    settings = replace(settings, **updates)

    if not settings.roots:
        raise ConfigError("No roots to scan. Use --root or set 'roots' in the config file.")
    if not settings.literals:
        raise ConfigError("No literals to search for. Use --literal or set 'literals' in the config file.")
    for ext in settings.policy.extensions:
        if not ext.startswith("."):
            raise ConfigError(f"Extension must begin with '.': {ext}")
    return settings


def scan(settings: ScanSettings, logger: RichLogger, console: Optional[Console] = None) -> ScanResult:
    policy = settings.resolved_policy()
    if settings.threads > 1:
        return walk_concurrent(
            settings.roots,
            policy,
            settings.literals,
            settings.exclude_phrases,
            logger=logger,
            block_comments=settings.block_comments,
            threads=settings.threads,
            console=console,
        )
    return walk(
        settings.roots,
        policy,
        settings.literals,
        settings.exclude_phrases,
        logger=logger,
        block_comments=settings.block_comments,
    )


def _print_summary(console: Console, result: ScanResult) -> None:
    table = Table(title="Scan Summary", header_style="bold")
    table.add_column("File", style="cyan")
    table.add_column("Matches", justify="right")
    for file_path in result.sorted_files():
        table.add_row(escape(display_text(file_path)), str(len(result.matches_by_file[file_path])))
    table.add_section()
    table.add_row("Total matches", str(result.total_matches()))
    table.add_row("Files scanned", str(result.files_scanned))
    table.add_row("Excluded paths", str(len(result.exclusions)))
    table.add_row("Issues", str(len(result.issues)))
    console.print(table)


def run_scan(args) -> int:
    console = Console(stderr=True)
    logger = RichLogger(console=console, verbose=args.verbose, quiet=args.quiet)

    try:
        settings = build_settings(args)
    except ValueError as exc:
        logger.error(str(exc))
        return 2

    logger.info(f"Scanning {len(settings.roots)} root(s) with {settings.threads} thread(s): {', '.join(settings.roots)}")
    logger.debug(f"Literals: {', '.join(repr(lit) for lit in settings.literals)}")
    logger.debug(f"Block comments: {settings.block_comments}, format: {settings.report_format}")

    # Opened before scanning: an unwritable destination aborts the run straight away.
    try:
        sink = create_output(settings.output, settings.report_format)
    except OutputCreateError as exc:
        logger.error(str(exc))
        return 1

    with sink:
        result = scan(settings, logger, console=console)
        write_report(result, sink, settings.report_format)

    _print_summary(console, result)
    logger.done(f"Report written to: {settings.output}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    return run_scan(args)
