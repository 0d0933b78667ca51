"""Scanner registry with deterministic selection behavior."""

from __future__ import annotations

from dataclasses import dataclass, field

from stylevars.adapters.base import DeclarationScanner
from stylevars.adapters.custom_properties import CustomPropertyScanner
from stylevars.adapters.preprocessor import PreprocessorScanner
from stylevars.index.codec import encode_entries
from stylevars.index.store import Contributions


@dataclass(slots=True)
class ScannerRegistry:
    """Ordered scanner registry; every supporting scanner runs on a file."""

    _scanners: list[DeclarationScanner] = field(default_factory=list)

    def register(self, scanner: DeclarationScanner) -> None:
        """Register a scanner in deterministic insertion order."""
        self._scanners.append(scanner)

    def select(self, path: str) -> tuple[DeclarationScanner, ...]:
        """Return all scanners that support the path, in registration order."""
        return tuple(scanner for scanner in self._scanners if scanner.supports_path(path))

    def names(self) -> tuple[str, ...]:
        return tuple(scanner.name for scanner in self._scanners)

    def contributions(self, path: str, text: str) -> Contributions:
        """Index one file's text into encoded store contributions."""
        output: Contributions = {}
        for scanner in self.select(path):
            keyed = output.setdefault(scanner.index_name, {})
            for key, entries in scanner.index(text).items():
                keyed[key] = encode_entries(entries)
        return output


def build_scanner_registry() -> ScannerRegistry:
    """Build the default scanner registry."""
    registry = ScannerRegistry()
    registry.register(CustomPropertyScanner())
    registry.register(PreprocessorScanner())
    return registry
