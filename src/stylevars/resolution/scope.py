"""Effective file scope for resolution calls."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass

from stylevars.config import ScopeMode
from stylevars.index.discovery import is_library_file


@dataclass(slots=True, frozen=True)
class Scope:
    """Files visible to one resolution call; ``fingerprint`` is its cache identity.

    ``generation`` is the index store generation the scope was built against.
    """

    mode: ScopeMode
    files: tuple[str, ...]
    fingerprint: str
    generation: int = 0

    def contains(self, file: str) -> bool:
        return file in self.files


def build_scope(
    mode: ScopeMode,
    indexed_files: Iterable[str],
    imported_files: Iterable[str] = (),
    generation: int = 0,
) -> Scope:
    """Select visible files for ``mode`` from indexed and import-reached files."""
    indexed = sorted(set(indexed_files))
    if mode is ScopeMode.GLOBAL:
        files = indexed
    else:
        files = [file for file in indexed if not is_library_file(file)]
        if mode is ScopeMode.PROJECT_WITH_IMPORTS:
            files = sorted(set(files).union(imported_files))
    return Scope(
        mode=mode,
        files=tuple(files),
        fingerprint=scope_fingerprint(mode, files, generation),
        generation=generation,
    )


def scope_fingerprint(mode: ScopeMode, files: Iterable[str], generation: int = 0) -> str:
    digest = hashlib.sha256()
    digest.update(mode.value.encode("utf-8"))
    digest.update(f"\n{generation}".encode("utf-8"))
    for file in files:
        digest.update(b"\n")
        digest.update(file.encode("utf-8"))
    return digest.hexdigest()
