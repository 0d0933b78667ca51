"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

MAX_IMPORT_DEPTH_CAP = 20
MAX_RESOLUTION_DEPTH_CAP = 64
DEFAULT_MAX_IMPORT_DEPTH = 20
DEFAULT_MAX_RESOLUTION_DEPTH = 20
CONFIG_FILE_NAME = "stylevars.toml"

DEFAULT_INCLUDE_EXTENSIONS = (".css", ".scss", ".sass", ".less")
DEFAULT_EXCLUDE_GLOBS = ("**/.git/**",)


class ScopeMode(str, Enum):
    """Which indexed files are visible to a resolution call."""

    PROJECT_ONLY = "project_only"
    GLOBAL = "global"
    PROJECT_WITH_IMPORTS = "project_with_imports"

    @classmethod
    def parse(cls, value: str) -> ScopeMode:
        normalized = value.strip().lower().replace("-", "_")
        for mode in cls:
            if mode.value == normalized:
                return mode
        allowed = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Config field 'scope.mode' must be one of {allowed}.")


@dataclass(slots=True, frozen=True)
class IndexConfig:
    """Deterministic indexing settings."""

    include_extensions: tuple[str, ...]
    exclude_globs: tuple[str, ...]


@dataclass(slots=True, frozen=True)
class ScopeConfig:
    """Scope selection and import expansion settings."""

    mode: ScopeMode
    max_import_depth: int


@dataclass(slots=True, frozen=True)
class ResolutionConfig:
    """Value resolution bounds."""

    max_depth: int


@dataclass(slots=True, frozen=True)
class ProjectConfig:
    """Fully merged project configuration."""

    project_root: Path
    data_dir: Path
    index: IndexConfig
    scope: ScopeConfig
    resolution: ResolutionConfig

    def to_public_dict(self) -> dict[str, object]:
        """Return serializable config snapshot."""
        return {
            "project_root": str(self.project_root),
            "data_dir": str(self.data_dir),
            "index": {
                "include_extensions": list(self.index.include_extensions),
                "exclude_globs": list(self.index.exclude_globs),
            },
            "scope": {
                "mode": self.scope.mode.value,
                "max_import_depth": self.scope.max_import_depth,
            },
            "resolution": {
                "max_depth": self.resolution.max_depth,
            },
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional startup overrides applied at highest precedence."""

    data_dir: Path | None = None
    scope_mode: ScopeMode | None = None
    max_import_depth: int | None = None
    max_resolution_depth: int | None = None


def default_config(project_root: Path) -> ProjectConfig:
    """Build default config for a given project root."""
    resolved_root = project_root.resolve()
    return ProjectConfig(
        project_root=resolved_root,
        data_dir=resolved_root / ".stylevars",
        index=IndexConfig(
            include_extensions=DEFAULT_INCLUDE_EXTENSIONS,
            exclude_globs=DEFAULT_EXCLUDE_GLOBS,
        ),
        scope=ScopeConfig(
            mode=ScopeMode.PROJECT_WITH_IMPORTS,
            max_import_depth=DEFAULT_MAX_IMPORT_DEPTH,
        ),
        resolution=ResolutionConfig(max_depth=DEFAULT_MAX_RESOLUTION_DEPTH),
    )


def load_project_config_file(project_root: Path) -> dict[str, object]:
    """Load optional stylevars.toml from the project root."""
    config_path = project_root / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    with config_path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{CONFIG_FILE_NAME} must contain a top-level table.")
    return payload


def merge_config(
    base: ProjectConfig, payload: dict[str, object], overrides: CliOverrides
) -> ProjectConfig:
    """Merge defaults, project config file, then CLI/startup overrides."""
    index_payload = _get_table(payload, "index")
    scope_payload = _get_table(payload, "scope")
    resolution_payload = _get_table(payload, "resolution")

    include_extensions = base.index.include_extensions
    if "include_extensions" in index_payload:
        include_extensions = tuple(
            _normalize_extension(item)
            for item in _tuple_of_strings(
                index_payload["include_extensions"], "index", "include_extensions"
            )
        )
    exclude_globs = base.index.exclude_globs
    if "exclude_globs" in index_payload:
        exclude_globs = _tuple_of_strings(index_payload["exclude_globs"], "index", "exclude_globs")

    mode = base.scope.mode
    if "mode" in scope_payload:
        raw_mode = scope_payload["mode"]
        if not isinstance(raw_mode, str):
            raise ValueError("Config field 'scope.mode' must be a string.")
        mode = ScopeMode.parse(raw_mode)

    max_import_depth = _optional_positive_int_with_cap(
        scope_payload.get("max_import_depth"),
        "scope.max_import_depth",
        base.scope.max_import_depth,
        MAX_IMPORT_DEPTH_CAP,
    )
    max_depth = _optional_positive_int_with_cap(
        resolution_payload.get("max_depth"),
        "resolution.max_depth",
        base.resolution.max_depth,
        MAX_RESOLUTION_DEPTH_CAP,
    )

    merged = ProjectConfig(
        project_root=base.project_root,
        data_dir=base.data_dir,
        index=IndexConfig(include_extensions=include_extensions, exclude_globs=exclude_globs),
        scope=ScopeConfig(mode=mode, max_import_depth=max_import_depth),
        resolution=ResolutionConfig(max_depth=max_depth),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: ProjectConfig, overrides: CliOverrides) -> ProjectConfig:
    """Apply startup overrides at highest precedence."""
    max_import_depth = _optional_positive_int_with_cap(
        overrides.max_import_depth,
        "overrides.max_import_depth",
        config.scope.max_import_depth,
        MAX_IMPORT_DEPTH_CAP,
    )
    max_depth = _optional_positive_int_with_cap(
        overrides.max_resolution_depth,
        "overrides.max_resolution_depth",
        config.resolution.max_depth,
        MAX_RESOLUTION_DEPTH_CAP,
    )
    data_dir = overrides.data_dir or config.data_dir
    return replace(
        config,
        data_dir=data_dir.resolve(),
        scope=ScopeConfig(
            mode=overrides.scope_mode or config.scope.mode,
            max_import_depth=max_import_depth,
        ),
        resolution=ResolutionConfig(max_depth=max_depth),
    )


def load_effective_config(
    project_root: Path, overrides: CliOverrides | None = None
) -> ProjectConfig:
    """Load effective config using merge order defaults -> project file -> overrides."""
    resolved_root = project_root.resolve()
    base = default_config(resolved_root)
    payload = load_project_config_file(resolved_root)
    return merge_config(base, payload, overrides or CliOverrides())


def _get_table(payload: dict[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _tuple_of_strings(value: object, section: str, field: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ValueError(f"Config field '{section}.{field}' must be a list of strings.")
    output: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"Config field '{section}.{field}' must contain only strings.")
        output.append(item)
    return tuple(output)


def _normalize_extension(extension: str) -> str:
    lowered = extension.strip().lower()
    if lowered and not lowered.startswith("."):
        return f".{lowered}"
    return lowered


def _optional_positive_int_with_cap(
    value: object,
    name: str,
    default: int,
    cap: int | None,
) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if cap is not None and value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value
