"""Cooperative cancellation for resolution calls."""

from __future__ import annotations

import threading


class ResolutionCancelled(Exception):
    """Raised when a host cancels an in-flight resolution; never swallowed."""


class CancellationToken:
    """Thread-safe flag checked before every recursive resolution step."""

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def check(self) -> None:
        """Raise :class:`ResolutionCancelled` once cancellation was requested."""
        if self._event.is_set():
            raise ResolutionCancelled()


class _NeverCancelled(CancellationToken):
    def cancel(self) -> None:
        raise RuntimeError("The shared default token cannot be cancelled.")


NEVER_CANCELLED: CancellationToken = _NeverCancelled()
