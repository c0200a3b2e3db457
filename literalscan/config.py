from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterable, Optional

from .policy import ExclusionPolicy

REPORT_FORMATS = ("text", "csv")

DEFAULT_OUTPUT = "literal_matches.txt"

DEFAULT_LITERALS = (
    "proc ",
    "data ",
    "filename ",
    "libname ",
)

DEFAULT_EXCLUDE_PHRASES = (
    "loads data from",
    "updates data from",
    "in a data set",
    "for sca proc code execution",
    " data into",
    "in proc python the",
    " using proc ",
    "a data flow",
    "data set options are",
    "data set contains",
    "rows in the data set",
    "data sets only",
    "one or more SAS data",
    "array of SAS data",
    "requires a proc contents",
    "as data step",
    "generates data flow",
    " data action",
    "data flow step",
    "data step in CAS utility",
    "operations in a data flow",
    " proc casutil utility ",
    "set as data set options",
    "different data providers",
    "data flow service uses",
    "(data view)",
    "is data step",
)

DEFAULT_FILE_PATTERNS = ("*_test.go", "*abcd???xyz*.txt", "i18n_messages_*.go")
DEFAULT_EXTENSIONS = (".txt", ".md", ".json", ".yaml", ".exe")

_TOP_LEVEL_KEYS = {
    "roots",
    "output",
    "format",
    "threads",
    "block_comments",
    "literals",
    "exclude_phrases",
    "exclusions",
}
_EXCLUSION_KEYS = {"file_patterns", "extensions", "directories"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ScanSettings:
    roots: tuple[str, ...] = ()
    output: str = DEFAULT_OUTPUT
    report_format: str = "text"
    threads: int = 1
    block_comments: bool = False
    literals: tuple[str, ...] = ()
    exclude_phrases: tuple[str, ...] = ()
    policy: ExclusionPolicy = field(default_factory=ExclusionPolicy)

    def resolved_policy(self) -> ExclusionPolicy:
        return ExclusionPolicy.build(
            file_patterns=self.policy.file_patterns,
            extensions=self.policy.extensions,
            directories=resolve_directories(self.policy.directories, self.roots),
        )


def default_settings(use_defaults: bool = True) -> ScanSettings:
    if not use_defaults:
        return ScanSettings()
    return ScanSettings(
        literals=DEFAULT_LITERALS,
        exclude_phrases=DEFAULT_EXCLUDE_PHRASES,
        policy=ExclusionPolicy(
            file_patterns=DEFAULT_FILE_PATTERNS,
            extensions=DEFAULT_EXTENSIONS,
        ),
    )


def resolve_directories(directories: Iterable[str], roots: Iterable[str]) -> tuple[str, ...]:
    root_list = [str(r) for r in roots]
    resolved = []
    for entry in directories:
        if os.path.isabs(entry) or not root_list:
            resolved.append(entry)
            continue
        for root in root_list:
            resolved.append(os.path.join(root, entry))
    return tuple(resolved)


def load_config_file(path: Path) -> Dict[str, object]:
    try:
        with open(path, "rb") as handle:
            payload = tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    unknown = sorted(set(payload) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return payload


def _strings(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"Config field '{name}' must be a list of strings.")
    return tuple(value)


def _positive_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config field '{name}' must be a positive integer.")
    return value


def check_format(value: object) -> str:
    if value not in REPORT_FORMATS:
        raise ConfigError(f"Report format must be one of: {', '.join(REPORT_FORMATS)}")
    return str(value)


def merge_config(base: ScanSettings, payload: Dict[str, object]) -> ScanSettings:
    updates: Dict[str, object] = {}
    if "roots" in payload:
        updates["roots"] = _strings(payload["roots"], "roots")
    if "output" in payload:
        output = payload["output"]
        if not isinstance(output, str) or not output.strip():
            raise ConfigError("Config field 'output' must be a non-empty string.")
        updates["output"] = output
    if "format" in payload:
        updates["report_format"] = check_format(payload["format"])
    if "threads" in payload:
        updates["threads"] = _positive_int(payload["threads"], "threads")
    if "block_comments" in payload:
        if not isinstance(payload["block_comments"], bool):
            raise ConfigError("Config field 'block_comments' must be a boolean.")
        updates["block_comments"] = payload["block_comments"]
    if "literals" in payload:
        updates["literals"] = _strings(payload["literals"], "literals")
    if "exclude_phrases" in payload:
        updates["exclude_phrases"] = _strings(payload["exclude_phrases"], "exclude_phrases")

    exclusions = payload.get("exclusions", {})
    if not isinstance(exclusions, dict):
        raise ConfigError("Config section 'exclusions' must be a table.")
    unknown = sorted(set(exclusions) - _EXCLUSION_KEYS)
    if unknown:
        raise ConfigError(f"Unknown keys in 'exclusions': {', '.join(unknown)}")
    if exclusions:
        policy = base.policy
        updates["policy"] = ExclusionPolicy(
            file_patterns=_strings(exclusions["file_patterns"], "exclusions.file_patterns")
            if "file_patterns" in exclusions
            else policy.file_patterns,
            extensions=_strings(exclusions["extensions"], "exclusions.extensions")
            if "extensions" in exclusions
            else policy.extensions,
            directories=_strings(exclusions["directories"], "exclusions.directories")
            if "directories" in exclusions
            else policy.directories,
        )
    return replace(base, **updates)


def load_settings(config_path: Optional[Path], use_defaults: bool = True) -> ScanSettings:
    base = default_settings(use_defaults)
    if config_path is None:
        return base
    return merge_config(base, load_config_file(config_path))
