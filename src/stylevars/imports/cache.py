"""Set of files pulled into scope through imports."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable


class ImportCache:
    """Thread-safe record of import-reached file keys with change listeners."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files: set[str] = set()
        self._listeners: list[Callable[[], None]] = []

    def add_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    def add(self, files: Iterable[str]) -> bool:
        """Record files; return True and notify listeners when the set grew."""
        with self._lock:
            before = len(self._files)
            self._files.update(files)
            grew = len(self._files) != before
        if grew:
            self._notify()
        return grew

    def get(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._files)

    def clear(self) -> None:
        with self._lock:
            self._files.clear()
        self._notify()

    def __len__(self) -> int:
        with self._lock:
            return len(self._files)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
