"""Scanner protocol shared by the stylesheet dialect adapters."""

from __future__ import annotations

from typing import Protocol

from stylevars.index.models import VariableIndex


class DeclarationScanner(Protocol):
    """Protocol implemented by declaration scanners."""

    name: str
    index_name: str

    def supports_path(self, path: str) -> bool:
        """Return True when the scanner indexes files with this path."""

    def index(self, text: str) -> VariableIndex:
        """Return every declaration in ``text``; never raises on malformed input."""


def has_extension(path: str, extensions: tuple[str, ...]) -> bool:
    """Case-insensitive suffix check used by scanners."""
    return path.lower().endswith(extensions)
