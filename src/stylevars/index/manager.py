"""Persistent index storage and refresh orchestration."""

from __future__ import annotations

import json
import time
from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from stylevars.config import IndexConfig
from stylevars.index.discovery import (
    detect_index_delta,
    discover_files,
    file_key,
    is_binary_file,
    key_to_path,
)
from stylevars.index.models import FileRecord
from stylevars.index.store import Contributions, IndexStore

if TYPE_CHECKING:
    from stylevars.adapters.registry import ScannerRegistry

INDEX_SCHEMA_VERSION = 1


@dataclass(slots=True, frozen=True)
class IndexStatus:
    """Current index status snapshot."""

    index_status: str
    last_refresh_timestamp: str | None
    indexed_file_count: int
    indexed_entry_count: int


@dataclass(slots=True, frozen=True)
class IndexSchemaUnsupportedError(Exception):
    """Raised when stored index schema does not match supported version."""

    found: int
    expected: int


class IndexManager:
    """Keeps the in-memory store in sync with the project tree and its on-disk copy."""

    def __init__(
        self,
        project_root: Path,
        data_dir: Path,
        index_config: IndexConfig,
        store: IndexStore,
        registry: ScannerRegistry,
    ) -> None:
        self._project_root = project_root.resolve()
        self._index_config = index_config
        self._store = store
        self._registry = registry
        self._data_dir = data_dir.resolve()
        self._index_dir = self._data_dir / "index"
        self._manifest_path = self._index_dir / "manifest.json"
        self._files_path = self._index_dir / "files.jsonl"
        self._entries_path = self._index_dir / "entries.jsonl"
        self._data_dir_prefix = self._compute_data_dir_prefix()
        self._extra_files: set[str] = set()

    @property
    def store(self) -> IndexStore:
        return self._store

    def status(self) -> IndexStatus:
        """Return status derived from manifest, if present."""
        manifest = self._read_manifest()
        if manifest is None:
            return IndexStatus(
                index_status="not_indexed",
                last_refresh_timestamp=None,
                indexed_file_count=0,
                indexed_entry_count=0,
            )
        schema = manifest.get("schema_version")
        if not isinstance(schema, int) or schema != INDEX_SCHEMA_VERSION:
            return IndexStatus(
                index_status="schema_mismatch",
                last_refresh_timestamp=None,
                indexed_file_count=0,
                indexed_entry_count=0,
            )
        return IndexStatus(
            index_status="ready",
            last_refresh_timestamp=_as_optional_str(manifest.get("last_refresh_timestamp")),
            indexed_file_count=_as_optional_int(manifest.get("indexed_file_count")) or 0,
            indexed_entry_count=_as_optional_int(manifest.get("indexed_entry_count")) or 0,
        )

    def load(self) -> int:
        """Restore a persisted index into the store; return the number of files loaded."""
        records = self._load_file_records(allow_schema_mismatch=False)
        if not records:
            return 0
        persisted = self._load_contributions()
        for path in sorted(records):
            self._store.replace_file(path, persisted.get(path, {}))
        return len(records)

    def refresh(self, force: bool = False) -> dict[str, object]:
        """Refresh index with incremental behavior by default."""
        start = time.perf_counter()
        previous_records: dict[str, FileRecord] = {}
        if self._manifest_path.exists():
            previous_records = self._load_file_records(allow_schema_mismatch=force)
            if not force and not self._store.files():
                self.load()

        current_records = self._filter_internal_records(
            discover_files(
                self._project_root,
                self._index_config,
                previous_records=None if force else previous_records,
            )
        )

        if force:
            previous_set = set(previous_records)
            current_set = {record.path for record in current_records}
            added = tuple(sorted(current_set - previous_set))
            removed = tuple(sorted(previous_set - current_set))
            updated = tuple(sorted(current_set & previous_set))
        else:
            delta = detect_index_delta(previous=previous_records, current_records=current_records)
            added = delta.added
            updated = delta.updated
            removed = delta.removed

        indexed = set(self._store.files())
        for path in removed:
            self._store.remove_file(path)
        for record in current_records:
            path = record.path
            if path in added or path in updated or path not in indexed:
                self._index_key(path)
            self._extra_files.discard(path)

        entry_count = self._count_entries(record.path for record in current_records)
        timestamp = _utc_now_iso()
        manifest = {
            "schema_version": INDEX_SCHEMA_VERSION,
            "last_refresh_timestamp": timestamp,
            "indexed_file_count": len(current_records),
            "indexed_entry_count": entry_count,
        }
        self._write_all(manifest, current_records)
        return {
            "added": len(added),
            "updated": len(updated),
            "removed": len(removed),
            "indexed_entries": entry_count,
            "duration_ms": int((time.perf_counter() - start) * 1000),
            "timestamp": timestamp,
        }

    def index_file(self, path: Path) -> str | None:
        """Index one file outside the discovered set, such as an imported library file.

        Returns the store key, or None when the file cannot be read as text.
        """
        if not path.is_file():
            return None
        key = file_key(self._project_root, path)
        if key in self._store.files():
            return key
        if self._index_key(key) is None:
            return None
        self._extra_files.add(key)
        return key

    def extra_files(self) -> tuple[str, ...]:
        """Files indexed on demand, not through discovery."""
        return tuple(sorted(self._extra_files))

    def _index_key(self, key: str) -> Contributions | None:
        path = key_to_path(self._project_root, key)
        try:
            if is_binary_file(path):
                return None
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None
        contributions = self._registry.contributions(key, text)
        self._store.replace_file(key, contributions)
        return contributions

    def _count_entries(self, paths: Iterable[str]) -> int:
        total = 0
        for path in paths:
            for keyed in self._store.contributions(path).values():
                total += len(keyed)
        return total

    def _filter_internal_records(self, records: list[FileRecord]) -> list[FileRecord]:
        if self._data_dir_prefix is None:
            return records
        filtered: list[FileRecord] = []
        for record in records:
            if record.path == self._data_dir_prefix:
                continue
            if record.path.startswith(f"{self._data_dir_prefix}/"):
                continue
            filtered.append(record)
        return filtered

    def _compute_data_dir_prefix(self) -> str | None:
        if not self._data_dir.is_relative_to(self._project_root):
            return None
        return self._data_dir.relative_to(self._project_root).as_posix()

    def _load_file_records(self, allow_schema_mismatch: bool) -> dict[str, FileRecord]:
        manifest = self._read_manifest()
        if manifest is None:
            return {}

        schema = manifest.get("schema_version")
        if not isinstance(schema, int):
            raise IndexSchemaUnsupportedError(found=-1, expected=INDEX_SCHEMA_VERSION)
        if schema != INDEX_SCHEMA_VERSION and not allow_schema_mismatch:
            raise IndexSchemaUnsupportedError(found=schema, expected=INDEX_SCHEMA_VERSION)

        if not self._files_path.exists():
            return {}
        output: dict[str, FileRecord] = {}
        for obj in self._read_jsonl(self._files_path):
            path = obj.get("path")
            size = obj.get("size")
            mtime_ns = obj.get("mtime_ns")
            content_hash = obj.get("content_hash")
            if not isinstance(path, str):
                continue
            if not isinstance(size, int):
                continue
            if not isinstance(mtime_ns, int):
                continue
            if not isinstance(content_hash, str):
                continue
            output[path] = FileRecord(
                path=path,
                size=size,
                mtime_ns=mtime_ns,
                content_hash=content_hash,
            )
        return output

    def _load_contributions(self) -> dict[str, Contributions]:
        if not self._entries_path.exists():
            return {}
        output: dict[str, Contributions] = {}
        for obj in self._read_jsonl(self._entries_path):
            path = obj.get("path")
            index_name = obj.get("index")
            key = obj.get("key")
            value = obj.get("value")
            if not isinstance(path, str):
                continue
            if not isinstance(index_name, str):
                continue
            if not isinstance(key, str):
                continue
            if not isinstance(value, str):
                continue
            output.setdefault(path, {}).setdefault(index_name, {})[key] = value
        return output

    def _write_all(self, manifest: dict[str, object], records: list[FileRecord]) -> None:
        rows: list[dict[str, object]] = []
        for record in records:
            contributions = self._store.contributions(record.path)
            for index_name in sorted(contributions):
                keyed = contributions[index_name]
                for key in sorted(keyed):
                    rows.append(
                        {
                            "path": record.path,
                            "index": index_name,
                            "key": key,
                            "value": keyed[key],
                        }
                    )
        self._index_dir.mkdir(parents=True, exist_ok=True)
        self._atomic_write_json(self._manifest_path, manifest)
        self._atomic_write_jsonl(self._files_path, [asdict(record) for record in records])
        self._atomic_write_jsonl(self._entries_path, rows)

    def _read_manifest(self) -> dict[str, object] | None:
        if not self._manifest_path.exists():
            return None
        with self._manifest_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            return None
        return payload

    @staticmethod
    def _read_jsonl(path: Path) -> list[dict[str, object]]:
        output: list[dict[str, object]] = []
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                stripped = raw_line.strip()
                if not stripped:
                    continue
                try:
                    obj = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if isinstance(obj, dict):
                    output.append(obj)
        return output

    @staticmethod
    def _atomic_write_json(path: Path, payload: dict[str, object]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, sort_keys=True)
            handle.write("\n")
        tmp.replace(path)

    @staticmethod
    def _atomic_write_jsonl(path: Path, rows: list[dict[str, object]]) -> None:
        tmp = path.with_suffix(path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as handle:
            for row in rows:
                handle.write(json.dumps(row, sort_keys=True))
                handle.write("\n")
        tmp.replace(path)


def _utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _as_optional_int(value: object) -> int | None:
    if isinstance(value, int):
        return value
    return None


def _as_optional_str(value: object) -> str | None:
    if isinstance(value, str):
        return value
    return None
