"""Per-project composition of index, imports, caches and resolution."""

from __future__ import annotations

import threading
from pathlib import Path

from stylevars.adapters import ScannerRegistry, build_scanner_registry
from stylevars.config import ProjectConfig
from stylevars.imports import Filesystem, ImportCache, ImportNode, ImportResolver
from stylevars.index import INDEX_NAMES, IndexManager, IndexStore
from stylevars.logging import AuditEvent, JsonlAuditLogger, sanitize_arguments, utc_timestamp
from stylevars.resolution import (
    NEVER_CANCELLED,
    CancellationToken,
    PreprocessorResolver,
    ResolutionCache,
    ResolutionCancelled,
    ResolutionEngine,
    Scope,
    VariableResolution,
    build_scope,
    describe,
    sort_by_value,
    value_type,
)


class ProjectService:
    """Owns every stateful component for one project and audits host-facing calls."""

    def __init__(self, config: ProjectConfig, filesystem: Filesystem | None = None) -> None:
        self._config = config
        self._filesystem = filesystem
        self._store = IndexStore()
        self._registry: ScannerRegistry = build_scanner_registry()
        self._cache = ResolutionCache()
        self._import_cache = ImportCache()
        self._audit_logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
        self._index_manager = self._build_index_manager(config)
        self._import_resolver = ImportResolver(config.project_root, filesystem)
        self._preprocessor = PreprocessorResolver(self._store, self._cache)
        self._engine = self._build_engine(config)
        self._store.add_listener(self._cache.clear)
        self._import_cache.add_listener(self._cache.clear)
        self._lock = threading.Lock()
        self._request_counter = 0
        self._fault_count = 0

    @property
    def config(self) -> ProjectConfig:
        return self._config

    @property
    def store(self) -> IndexStore:
        return self._store

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def import_cache(self) -> ImportCache:
        return self._import_cache

    @property
    def audit_logger(self) -> JsonlAuditLogger:
        return self._audit_logger

    @property
    def index_manager(self) -> IndexManager:
        return self._index_manager

    def refresh_index(self, force: bool = False) -> dict[str, object]:
        """Bring the index up to date with the project tree."""
        result = self._index_manager.refresh(force=force)
        self._log("refresh_index", {"force": force}, ok=True)
        return result

    def load_index(self) -> int:
        """Restore the persisted index without touching the project tree."""
        loaded = self._index_manager.load()
        self._log("load_index", {"files": loaded}, ok=True)
        return loaded

    def register_imports(self, file: Path) -> list[str]:
        """Index every file ``file`` imports and add them to the import scope."""
        source = self._absolute(file)
        max_depth = self._config.scope.max_import_depth
        keys: list[str] = []
        for target in sorted(self._import_resolver.resolve_imports(source, max_depth)):
            key = self._index_manager.index_file(target)
            if key is not None:
                keys.append(key)
        self._import_cache.add(keys)
        self._log(
            "register_imports",
            {"file": source.as_posix(), "max_import_depth": max_depth, "imported": len(keys)},
            ok=True,
        )
        return sorted(keys)

    def import_tree(self, file: Path) -> ImportNode:
        return self._import_resolver.import_tree(
            self._absolute(file), self._config.scope.max_import_depth
        )

    def effective_scope(self) -> Scope:
        """Scope for the configured mode over the current index and import cache."""
        generation = self._store.generation
        return build_scope(
            self._config.scope.mode,
            self._store.files(),
            self._import_cache.get(),
            generation=generation,
        )

    def resolve(
        self,
        name: str,
        cancellation: CancellationToken = NEVER_CANCELLED,
    ) -> VariableResolution | None:
        """Resolve every context of ``name`` in the effective scope."""
        scope = self.effective_scope()
        faults_before = self._fault_count
        try:
            resolution = self._engine.resolve(name, scope, cancellation)
        except ResolutionCancelled:
            self._log("resolve", {"name": name}, ok=False, error_code="CANCELLED")
            raise
        self._log(
            "resolve",
            {"name": name, "scope": scope.mode.value},
            ok=resolution is not None,
            degraded=self._fault_count != faults_before,
            error_code=None if resolution is not None else "UNKNOWN_VARIABLE",
        )
        return resolution

    def hint(self, name: str, cancellation: CancellationToken = NEVER_CANCELLED) -> str | None:
        """Short resolution summary for the highest-ranked context of ``name``."""
        resolution = self.resolve(name, cancellation)
        if resolution is None:
            return None
        return describe(name, resolution.entries[0].info)

    def list_variables(
        self,
        prefix: str = "",
        cancellation: CancellationToken = NEVER_CANCELLED,
    ) -> list[dict[str, object]]:
        """Known variable names starting with ``prefix``, ordered by value type."""
        scope = self.effective_scope()
        pairs: list[tuple[str, str]] = []
        for name in self._scope_keys(scope):
            if not name.startswith(prefix):
                continue
            resolution = self._engine.resolve(name, scope, cancellation)
            if resolution is None:
                continue
            pairs.append((name, resolution.entries[0].info.resolved))
        self._log("list_variables", {"prefix": prefix, "count": len(pairs)}, ok=True)
        return [
            {"name": name, "value": value, "type": value_type(value).name.lower()}
            for name, value in sort_by_value(pairs)
        ]

    def update_config(self, config: ProjectConfig) -> None:
        """Apply new settings; every cache computed under the old ones is dropped."""
        previous = self._config
        self._config = config
        if (
            config.data_dir != previous.data_dir
            or config.index != previous.index
            or config.project_root != previous.project_root
        ):
            self._index_manager = self._build_index_manager(config)
        if config.project_root != previous.project_root:
            self._import_resolver = ImportResolver(config.project_root, self._filesystem)
        self._engine = self._build_engine(config)
        self.on_invalidate()
        self._log("update_config", {"mode": config.scope.mode.value}, ok=True)

    def on_invalidate(self) -> None:
        """Lifecycle hook: forget imports and every memoized result."""
        self._import_cache.clear()
        self._cache.clear()

    def audit_entries(
        self, operation: str | None = None, limit: int = 50
    ) -> list[dict[str, object]]:
        return self._audit_logger.read(operation=operation, limit=limit)

    def _scope_keys(self, scope: Scope) -> tuple[str, ...]:
        names: list[str] = []
        for index_name in INDEX_NAMES:
            cached = self._cache.get_keys(scope, index_name)
            if cached is None:
                cached = tuple(self._store.keys(index_name, scope.files))
                self._cache.put_keys(scope, index_name, cached)
            names.extend(cached)
        return tuple(sorted(set(names)))

    def _build_index_manager(self, config: ProjectConfig) -> IndexManager:
        return IndexManager(
            project_root=config.project_root,
            data_dir=config.data_dir,
            index_config=config.index,
            store=self._store,
            registry=self._registry,
        )

    def _build_engine(self, config: ProjectConfig) -> ResolutionEngine:
        return ResolutionEngine(
            store=self._store,
            preprocessor=self._preprocessor,
            max_depth=config.resolution.max_depth,
            fault_hook=self._record_fault,
        )

    def _absolute(self, file: Path) -> Path:
        if file.is_absolute():
            return file
        return self._config.project_root / file

    def _record_fault(self, error: Exception, subject: str) -> None:
        with self._lock:
            self._fault_count += 1
        self._log(
            "resolution_fault",
            {"name": subject, "error_type": type(error).__name__},
            ok=False,
            degraded=True,
            error_code="INTERNAL_FAULT",
        )

    def _next_request_id(self) -> str:
        with self._lock:
            self._request_counter += 1
            return f"req-{self._request_counter:06d}"

    def _log(
        self,
        operation: str,
        arguments: dict[str, object],
        ok: bool,
        degraded: bool = False,
        error_code: str | None = None,
    ) -> None:
        event = AuditEvent(
            timestamp=utc_timestamp(),
            request_id=self._next_request_id(),
            operation=operation,
            ok=ok,
            degraded=degraded,
            error_code=error_code,
            metadata=sanitize_arguments(arguments),
        )
        self._audit_logger.append(event)
