"""JSONL audit trail of project operations (refresh, resolve, list, imports)."""

from __future__ import annotations

import json
import threading
from collections.abc import Iterator
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

# Variable names, file keys and scope settings are recorded verbatim.
_VERBATIM_TEXT = frozenset({"name", "file", "path", "prefix", "mode", "scope", "error_type"})


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """Outcome of one service operation; ``metadata`` is already sanitized."""

    timestamp: str
    request_id: str
    operation: str
    ok: bool
    degraded: bool
    error_code: str | None
    metadata: dict[str, object]

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)


def utc_timestamp() -> str:
    """Millisecond UTC timestamp ending in ``Z``."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: dict[str, object]) -> dict[str, object]:
    """Keep identifiers, flags and depths; summarize free text and collections."""
    sanitized: dict[str, object] = {}
    for key in sorted(arguments):
        sanitized.update(_summarize(key, arguments[key]))
    return sanitized


def _summarize(key: str, value: object) -> dict[str, object]:
    if value is None or isinstance(value, (bool, int, float)):
        return {key: value}
    if isinstance(value, str):
        if key in _VERBATIM_TEXT:
            return {key: value}
        return {f"{key}_present": True, f"{key}_length": len(value)}
    if isinstance(value, dict):
        return {f"{key}_type": "dict", f"{key}_keys": sorted(str(item) for item in value)}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {f"{key}_type": "list", f"{key}_length": len(value)}
    return {f"{key}_type": type(value).__name__}


class JsonlAuditLogger:
    """Appends one event per line to ``<data_dir>/audit.jsonl``."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: AuditEvent) -> None:
        with self._lock, self._path.open("a", encoding="utf-8") as handle:
            handle.write(event.to_json() + "\n")

    def read(self, operation: str | None = None, limit: int = 50) -> list[dict[str, object]]:
        """Return the newest ``limit`` events, optionally only for ``operation``.

        Lines that are not JSON objects are skipped.
        """
        if limit < 1:
            return []
        events = [
            record
            for record in self._records()
            if operation is None or record.get("operation") == operation
        ]
        return events[-limit:]

    def _records(self) -> Iterator[dict[str, object]]:
        if not self._path.exists():
            return
        with self._lock, self._path.open("r", encoding="utf-8") as handle:
            lines = handle.readlines()
        for line in lines:
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(record, dict):
                yield record
