from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Iterator, List, Optional, Sequence

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn, TimeElapsedColumn

from .console import RichLogger
from .models import ExclusionRecord, MatchRecord, ScanIssue, ScanResult
from .policy import ExclusionPolicy, classify
from .scanner import FileScanner, ScanReadError


def default_thread_count() -> int:
    return min(32, (os.cpu_count() or 4) + 4)


def _record_exclusion(result: ScanResult, logger: RichLogger, path: str, reason: str, kind: str) -> None:
    logger.skip(f"Skipping {kind}: {path}, Reason: {reason}")
    result.exclusions.append(ExclusionRecord(path=path, reason=reason))


def _record_issue(result: ScanResult, logger: RichLogger, path: str, message: str) -> None:
    logger.warn(f"Error accessing path: {path} ({message})")
    result.issues.append(ScanIssue(path=path, message=message))


def _iter_dir(
    path: str,
    policy: ExclusionPolicy,
    result: ScanResult,
    logger: RichLogger,
) -> Iterator[str]:
    excluded, reason = classify(path, True, policy)
    if excluded:
        _record_exclusion(result, logger, path, reason, "directory")
        return

    try:
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as exc:
        _record_issue(result, logger, path, str(exc))
        return

    for entry in entries:
        child = os.path.join(path, entry.name)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            _record_issue(result, logger, child, str(exc))
            continue
        if is_dir:
            yield from _iter_dir(child, policy, result, logger)
            continue
        excluded, reason = classify(child, False, policy)
        if excluded:
            _record_exclusion(result, logger, child, reason, "file")
            continue
        yield child


def iter_admitted_files(
    roots: Iterable[str],
    policy: ExclusionPolicy,
    result: ScanResult,
    logger: RichLogger,
) -> Iterator[str]:
    for root in roots:
        root = str(root)
        if not os.path.lexists(root):
            _record_issue(result, logger, root, "no such file or directory")
            continue
        if os.path.isdir(root):
            yield from _iter_dir(root, policy, result, logger)
            continue
        excluded, reason = classify(root, False, policy)
        if excluded:
            _record_exclusion(result, logger, root, reason, "file")
            continue
        yield root


def _scan_one(scanner: FileScanner, path: str, result: ScanResult, logger: RichLogger) -> None:
    try:
        records = scanner.scan_file(path)
    except ScanReadError as exc:
        logger.warn(f"Error processing file: {path} ({exc.cause})")
        result.issues.append(ScanIssue(path=path, message=str(exc.cause)))
        return
    result.record_scan(path, records)


def walk(
    roots: Iterable[str],
    policy: ExclusionPolicy,
    literals: Sequence[str],
    exclude_phrases: Sequence[str] = (),
    logger: Optional[RichLogger] = None,
    block_comments: bool = False,
) -> ScanResult:
    logger = logger or RichLogger()
    scanner = FileScanner(literals, exclude_phrases, block_comments=block_comments, logger=logger)
    result = ScanResult()
    for path in iter_admitted_files(roots, policy, result, logger):
        if path in result.scanned_paths:
            continue
        _scan_one(scanner, path, result, logger)
    return result


def walk_concurrent(
    roots: Iterable[str],
    policy: ExclusionPolicy,
    literals: Sequence[str],
    exclude_phrases: Sequence[str] = (),
    logger: Optional[RichLogger] = None,
    block_comments: bool = False,
    threads: int = 0,
    console: Optional[Console] = None,
) -> ScanResult:
    logger = logger or RichLogger()
    scanner = FileScanner(literals, exclude_phrases, block_comments=block_comments, logger=logger)
    result = ScanResult()
    # Exclusion decisions must precede descent, so the walk itself stays on this thread.
    paths = list(dict.fromkeys(iter_admitted_files(roots, policy, result, logger)))
    if not paths:
        return result

    workers = max(1, threads or default_thread_count())
    collected: dict[str, List[MatchRecord]] = {}
    failed: dict[str, str] = {}

    progress = None
    if console is not None:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]Scanning files"),
            BarColumn(bar_width=None),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=console,
        )
        progress.start()
    try:
        task_id = progress.add_task("scan", total=len(paths)) if progress is not None else None
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_map = {executor.submit(scanner.scan_file, path): path for path in paths}
            for future in as_completed(future_map):
                path = future_map[future]
                try:
                    collected[path] = future.result()
                except ScanReadError as exc:
                    logger.warn(f"Error processing file: {path} ({exc.cause})")
                    failed[path] = str(exc.cause)
                if progress is not None:
                    progress.advance(task_id)
    finally:
        if progress is not None:
            progress.stop()

    # Merge in traversal order so the result matches the sequential walk.
    for path in paths:
        if path in failed:
            result.issues.append(ScanIssue(path=path, message=failed[path]))
            continue
        result.record_scan(path, collected.get(path, []))
    return result
