"""Typed models for indexing state."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CONTEXT = "default"


@dataclass(slots=True, frozen=True)
class VariableEntry:
    """One raw declaration of a variable within one context of one file."""

    context: str
    raw_value: str
    comment: str = ""


VariableIndex = dict[str, list[VariableEntry]]
"""Variable name (sigil included) -> entries in first-seen context order."""


@dataclass(slots=True, frozen=True)
class FileRecord:
    """Represents a stylesheet tracked by the index."""

    path: str
    size: int
    mtime_ns: int
    content_hash: str


@dataclass(slots=True, frozen=True)
class IndexDelta:
    """Deterministic change classification for index refresh."""

    added: tuple[str, ...]
    updated: tuple[str, ...]
    unchanged: tuple[str, ...]
    removed: tuple[str, ...]
