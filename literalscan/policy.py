from __future__ import annotations

import fnmatch
import os
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ExclusionPolicy:
    file_patterns: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()
    directories: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        file_patterns: Iterable[str] = (),
        extensions: Iterable[str] = (),
        directories: Iterable[str] = (),
    ) -> "ExclusionPolicy":
        return cls(
            file_patterns=_dedupe(file_patterns),
            extensions=_dedupe(extensions),
            directories=_dedupe(directories),
        )


def _dedupe(values: Iterable[str]) -> tuple[str, ...]:
    seen: set[str] = set()
    out = []
    for value in values:
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return tuple(out)


def file_extension(name: str) -> str:
    idx = name.rfind(".")
    if idx == -1:
        return ""
    return name[idx:]


def _clean(path: str) -> str:
    return os.path.abspath(path)


def is_directory_excluded(path: str, directories: Iterable[str]) -> tuple[bool, str]:
    cleaned = _clean(path)
    for excluded in directories:
        # Plain string prefix: "/src/build" also covers "/src/build2".
        if cleaned.startswith(_clean(excluded)):
            return True, f"Matched directory: {excluded}"
    return False, ""


def is_file_excluded(path: str, file_patterns: Iterable[str], extensions: Iterable[str]) -> tuple[bool, str]:
    name = os.path.basename(path)
    for pattern in file_patterns:
        if fnmatch.fnmatchcase(name, pattern):
            return True, f"Matched file pattern: {pattern}"
    ext = file_extension(name)
    for candidate in extensions:
        if ext == candidate:
            return True, f"Matched extension: {candidate}"
    return False, ""


def classify(path: str, is_directory: bool, policy: ExclusionPolicy) -> tuple[bool, str]:
    if is_directory:
        return is_directory_excluded(path, policy.directories)
    return is_file_excluded(path, policy.file_patterns, policy.extensions)
