"""Filesystem lookups used by import resolution."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class Filesystem(Protocol):
    """Minimal directory-walk interface the import resolver depends on."""

    def find_child(self, directory: Path, name: str) -> Path | None:
        """Return the named entry of ``directory`` when it exists."""

    def parent(self, file: Path) -> Path | None:
        """Return the containing directory, or None at the filesystem root."""

    def read_text(self, file: Path) -> str:
        """Return file text; may raise ``OSError``."""

    def exists(self, file: Path) -> bool:
        """Return True when the path exists."""

    def is_dir(self, file: Path) -> bool:
        """Return True when the path is a directory."""


class LocalFilesystem:
    """Filesystem implementation over :mod:`pathlib`."""

    def find_child(self, directory: Path, name: str) -> Path | None:
        candidate = directory / name
        return candidate if self.exists(candidate) else None

    def parent(self, file: Path) -> Path | None:
        parent = file.parent
        return None if parent == file else parent

    def read_text(self, file: Path) -> str:
        return file.read_text(encoding="utf-8", errors="replace")

    def exists(self, file: Path) -> bool:
        try:
            return file.exists()
        except OSError:
            return False

    def is_dir(self, file: Path) -> bool:
        try:
            return file.is_dir()
        except OSError:
            return False


def find_relative(filesystem: Filesystem, directory: Path, relative: str) -> Path | None:
    """Walk ``relative`` from ``directory`` one segment at a time."""
    current: Path | None = directory
    for part in relative.split("/"):
        if current is None:
            return None
        if part in ("", "."):
            continue
        if part == "..":
            current = filesystem.parent(current)
            continue
        current = filesystem.find_child(current, part)
    return current


def project_relative(project_root: Path, candidate: Path) -> bool:
    """True when ``candidate`` stays inside ``project_root`` after normalization."""
    return candidate.resolve().is_relative_to(project_root.resolve())
