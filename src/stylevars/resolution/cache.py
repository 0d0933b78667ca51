"""Scope-keyed memoization shared by resolution calls of one project."""

from __future__ import annotations

import threading
from collections.abc import Callable

from stylevars.resolution.models import ResolutionInfo
from stylevars.resolution.scope import Scope


class ResolutionCache:
    """Preprocessor memo and variable-name cache, both keyed by scope fingerprint.

    Entries only disappear through :meth:`clear` or :meth:`invalidate`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._preprocessor: dict[tuple[str, str], ResolutionInfo] = {}
        self._keys: dict[tuple[str, str], tuple[str, ...]] = {}
        self._listeners: list[Callable[[], None]] = []

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a hook invoked after every clear or invalidation."""
        self._listeners.append(callback)

    def get_preprocessor(self, scope: Scope, name: str) -> ResolutionInfo | None:
        with self._lock:
            return self._preprocessor.get((scope.fingerprint, name))

    def put_preprocessor(self, scope: Scope, name: str, info: ResolutionInfo) -> None:
        with self._lock:
            self._preprocessor[(scope.fingerprint, name)] = info

    def get_keys(self, scope: Scope, index_name: str) -> tuple[str, ...] | None:
        with self._lock:
            return self._keys.get((scope.fingerprint, index_name))

    def put_keys(self, scope: Scope, index_name: str, keys: tuple[str, ...]) -> None:
        with self._lock:
            self._keys[(scope.fingerprint, index_name)] = keys

    def invalidate(self, scope: Scope) -> None:
        """Drop every entry computed for ``scope``."""
        with self._lock:
            for key in [key for key in self._preprocessor if key[0] == scope.fingerprint]:
                del self._preprocessor[key]
            for key in [key for key in self._keys if key[0] == scope.fingerprint]:
                del self._keys[key]
        self._notify()

    def clear(self) -> None:
        with self._lock:
            self._preprocessor.clear()
            self._keys.clear()
        self._notify()

    def size(self) -> int:
        with self._lock:
            return len(self._preprocessor) + len(self._keys)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback()
