"""In-memory multi-value index store keyed by declaration name."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable

from stylevars.index.codec import decode_entries
from stylevars.index.models import VariableEntry

CUSTOM_PROPERTY_INDEX = "custom_properties"
PREPROCESSOR_INDEX = "preprocessor"
INDEX_NAMES = (CUSTOM_PROPERTY_INDEX, PREPROCESSOR_INDEX)

Contributions = dict[str, dict[str, str]]
"""index name -> declaration key -> encoded entries contributed by one file."""


class IndexStore:
    """Per-file contributions merged on read.

    A file's contribution is always replaced as a whole, so re-indexing one
    file never touches entries owned by another file.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._data: dict[str, dict[str, dict[str, str]]] = {name: {} for name in INDEX_NAMES}
        self._by_file: dict[str, Contributions] = {}
        self._generation = 0
        self._listeners: list[Callable[[], None]] = []

    @property
    def generation(self) -> int:
        """Monotonic counter bumped on every mutation."""
        return self._generation

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback invoked after every mutation."""
        self._listeners.append(callback)

    def replace_file(self, file: str, contributions: Contributions) -> None:
        """Replace everything a file contributes with a fresh contribution."""
        with self._lock:
            self._drop(file)
            kept: Contributions = {}
            for index_name, keyed in contributions.items():
                table = self._data.setdefault(index_name, {})
                for key, encoded in keyed.items():
                    if not encoded:
                        continue
                    table.setdefault(key, {})[file] = encoded
                    kept.setdefault(index_name, {})[key] = encoded
            self._by_file[file] = kept
            self._generation += 1
        self._notify()

    def remove_file(self, file: str) -> bool:
        """Drop a file's contribution; return False when it was never indexed."""
        with self._lock:
            if file not in self._by_file:
                return False
            self._drop(file)
            self._generation += 1
        self._notify()
        return True

    def clear(self) -> None:
        with self._lock:
            self._data = {name: {} for name in INDEX_NAMES}
            self._by_file = {}
            self._generation += 1
        self._notify()

    def files(self) -> tuple[str, ...]:
        """Return indexed file keys in sorted order."""
        with self._lock:
            return tuple(sorted(self._by_file))

    def contributions(self, file: str) -> Contributions:
        """Return a copy of one file's encoded contribution."""
        with self._lock:
            stored = self._by_file.get(file, {})
            return {index_name: dict(keyed) for index_name, keyed in stored.items()}

    def values(
        self, index_name: str, key: str, files: Iterable[str] | None = None
    ) -> list[str]:
        """Return encoded values for a key, in file order, restricted to ``files``."""
        with self._lock:
            per_file = self._data.get(index_name, {}).get(key)
            if not per_file:
                return []
            ordered = sorted(per_file) if files is None else files
            return [per_file[file] for file in ordered if file in per_file]

    def entries(
        self, index_name: str, key: str, files: Iterable[str] | None = None
    ) -> list[VariableEntry]:
        """Return decoded entries for a key across the given files."""
        output: list[VariableEntry] = []
        for blob in self.values(index_name, key, files):
            output.extend(decode_entries(blob))
        return output

    def keys(self, index_name: str, files: Iterable[str] | None = None) -> list[str]:
        """Return sorted keys that have at least one value in ``files``."""
        with self._lock:
            table = self._data.get(index_name, {})
            if files is None:
                return sorted(table)
            wanted = set(files)
            return sorted(key for key, per_file in table.items() if wanted.intersection(per_file))

    def _drop(self, file: str) -> None:
        previous = self._by_file.pop(file, None)
        if previous is None:
            return
        for index_name, keyed in previous.items():
            table = self._data.get(index_name, {})
            for key in keyed:
                per_file = table.get(key)
                if per_file is None:
                    continue
                per_file.pop(file, None)
                if not per_file:
                    del table[key]

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
