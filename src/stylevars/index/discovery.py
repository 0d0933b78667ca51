"""Deterministic stylesheet discovery and incremental change detection."""

from __future__ import annotations

import fnmatch
import hashlib
import os
from dataclasses import dataclass
from pathlib import Path

from stylevars.config import IndexConfig
from stylevars.index.models import FileRecord, IndexDelta

_BINARY_SNIFF_BYTES = 4096
LIBRARY_DIR_NAME = "node_modules"


@dataclass(slots=True, frozen=True)
class _CandidateFile:
    """Candidate stylesheet found during traversal."""

    relative_path: str
    full_path: Path
    size: int
    mtime_ns: int


def discover_files(
    project_root: Path,
    config: IndexConfig,
    previous_records: dict[str, FileRecord] | None = None,
) -> list[FileRecord]:
    """Discover indexable stylesheets sorted by relative path.

    Files whose size and mtime match ``previous_records`` reuse the stored hash.
    """
    root = project_root.resolve()
    candidates = _discover_candidates(
        root=root,
        include_extensions={extension.lower() for extension in config.include_extensions},
        exclude_globs=config.exclude_globs,
        excluded_dir_names=_excluded_dir_names(config.exclude_globs),
    )
    prior = previous_records or {}
    records: list[FileRecord] = []
    for candidate in sorted(candidates, key=lambda item: item.relative_path):
        previous = prior.get(candidate.relative_path)
        if (
            previous is not None
            and previous.size == candidate.size
            and previous.mtime_ns == candidate.mtime_ns
        ):
            records.append(previous)
            continue
        if is_binary_file(candidate.full_path):
            continue
        records.append(
            FileRecord(
                path=candidate.relative_path,
                size=candidate.size,
                mtime_ns=candidate.mtime_ns,
                content_hash=sha256_file(candidate.full_path),
            )
        )
    return records


def detect_index_delta(
    previous: dict[str, FileRecord],
    current_records: list[FileRecord],
) -> IndexDelta:
    """Compute deterministic added/updated/unchanged/removed sets."""
    current = record_map(current_records)
    previous_paths = set(previous)
    current_paths = set(current)

    updated: list[str] = []
    unchanged: list[str] = []
    for path in sorted(previous_paths & current_paths):
        if previous[path].content_hash == current[path].content_hash:
            unchanged.append(path)
        else:
            updated.append(path)

    return IndexDelta(
        added=tuple(sorted(current_paths - previous_paths)),
        updated=tuple(updated),
        unchanged=tuple(unchanged),
        removed=tuple(sorted(previous_paths - current_paths)),
    )


def record_map(records: list[FileRecord]) -> dict[str, FileRecord]:
    """Map records by file key."""
    return {record.path: record for record in records}


def file_key(project_root: Path, path: Path) -> str:
    """Store key for a file: root-relative POSIX path, absolute when outside the root."""
    resolved = path.resolve()
    root = project_root.resolve()
    if resolved.is_relative_to(root):
        return resolved.relative_to(root).as_posix()
    return resolved.as_posix()


def key_to_path(project_root: Path, key: str) -> Path:
    """Inverse of :func:`file_key`."""
    candidate = Path(key)
    if candidate.is_absolute():
        return candidate
    return project_root.resolve() / candidate


def is_library_file(key: str) -> bool:
    """True for files living inside a package-manager module directory."""
    return LIBRARY_DIR_NAME in key.split("/")


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured ignore globs."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def sha256_file(path: Path) -> str:
    """Compute SHA-256 hash in chunked reads."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(1024 * 128)
            if not chunk:
                break
            digest.update(chunk)
    return digest.hexdigest()


def is_binary_file(path: Path) -> bool:
    """Sniff leading bytes to exclude binary or non-UTF-8 files."""
    with path.open("rb") as handle:
        sample = handle.read(_BINARY_SNIFF_BYTES)
    if b"\x00" in sample:
        return True
    try:
        sample.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


def _excluded_dir_names(exclude_globs: tuple[str, ...]) -> set[str]:
    """Directory names that can be pruned from ``**/name/**`` patterns."""
    output: set[str] = set()
    for pattern in exclude_globs:
        if not pattern.startswith("**/") or not pattern.endswith("/**"):
            continue
        name = pattern[3:-3].strip("/")
        if not name or any(char in name for char in "*?[]{}"):
            continue
        output.add(name)
    return output


def _discover_candidates(
    *,
    root: Path,
    include_extensions: set[str],
    exclude_globs: tuple[str, ...],
    excluded_dir_names: set[str],
) -> list[_CandidateFile]:
    candidates: list[_CandidateFile] = []
    stack: list[Path] = [root]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
        except OSError:
            continue
        for entry in reversed(ordered_entries):
            full_path = Path(entry.path)
            relative = full_path.relative_to(root).as_posix()
            if entry.is_dir(follow_symlinks=False):
                if entry.name in excluded_dir_names and should_exclude(relative, exclude_globs):
                    continue
                stack.append(full_path)
                continue
            if not entry.is_file(follow_symlinks=False):
                continue
            if should_exclude(relative, exclude_globs):
                continue
            if full_path.suffix.lower() not in include_extensions:
                continue
            try:
                stat = entry.stat(follow_symlinks=False)
            except OSError:
                continue
            candidates.append(
                _CandidateFile(
                    relative_path=relative,
                    full_path=full_path,
                    size=stat.st_size,
                    mtime_ns=stat.st_mtime_ns,
                )
            )
    return candidates
