"""Transitive @import expansion across relative, root and module paths."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from stylevars.adapters.lexical import extract_import_paths
from stylevars.imports.filesystem import (
    Filesystem,
    LocalFilesystem,
    find_relative,
    project_relative,
)

MODULES_DIR_NAME = "node_modules"

_EXTENSION_PRIORITY: dict[str, tuple[str, ...]] = {
    "scss": ("scss", "css", "sass", "less"),
    "sass": ("sass", "scss", "css", "less"),
    "less": ("less", "css", "scss", "sass"),
}
_DEFAULT_EXTENSION_PRIORITY = ("css", "scss", "sass", "less")


@dataclass(slots=True, frozen=True)
class ImportNode:
    """One file in an import tree with the files it pulls in."""

    path: Path
    children: tuple[ImportNode, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "path": self.path.as_posix(),
            "imports": [child.to_dict() for child in self.children],
        }


def extension_priority(importing_file: Path) -> tuple[str, ...]:
    """Candidate extensions for an extensionless import, by importing file type."""
    suffix = importing_file.suffix.lower().lstrip(".")
    return _EXTENSION_PRIORITY.get(suffix, _DEFAULT_EXTENSION_PRIORITY)


def has_explicit_extension(token: str) -> bool:
    """True when the last path segment of an import token carries an extension."""
    return PurePosixPath(token).suffix != ""


class ImportResolver:
    """Expands the set of stylesheets reachable from a file through imports.

    Unresolvable imports and unreadable files are skipped.
    """

    def __init__(self, project_root: Path, filesystem: Filesystem | None = None) -> None:
        self._project_root = project_root.resolve()
        self._fs: Filesystem = filesystem or LocalFilesystem()

    @property
    def project_root(self) -> Path:
        return self._project_root

    def resolve_imports(self, file: Path, max_depth: int) -> set[Path]:
        """Return every file reachable within ``max_depth`` import hops."""
        output: set[Path] = set()
        self._collect(file, max_depth, set(), 0, output)
        return output

    def import_tree(self, file: Path, max_depth: int) -> ImportNode:
        """Return the import graph from ``file`` as a tree; each file expands once."""
        return self._tree(file, max_depth, set(), 0)

    def resolve_import_path(self, file: Path, token: str) -> Path | None:
        """Resolve one import token written inside ``file``."""
        if token.startswith(("./", "../")):
            return self._resolve_relative(file, token)
        if token.startswith("/"):
            return self._resolve_from_root(file, token)
        if token.startswith("@"):
            return self._resolve_module(file, token)
        local = self._resolve_relative(file, token)
        if local is not None:
            return local
        return self._resolve_module(file, token)

    def _collect(
        self,
        file: Path,
        max_depth: int,
        visited: set[str],
        depth: int,
        output: set[Path],
    ) -> None:
        for target in self._expand(file, max_depth, visited, depth):
            output.add(target)
            self._collect(target, max_depth, visited, depth + 1, output)

    def _tree(self, file: Path, max_depth: int, visited: set[str], depth: int) -> ImportNode:
        children = tuple(
            self._tree(target, max_depth, visited, depth + 1)
            for target in self._expand(file, max_depth, visited, depth)
        )
        return ImportNode(path=file, children=children)

    def _expand(self, file: Path, max_depth: int, visited: set[str], depth: int) -> list[Path]:
        if depth >= max_depth:
            return []
        key = file.as_posix()
        if key in visited:
            return []
        visited.add(key)
        try:
            text = self._fs.read_text(file)
        except (OSError, UnicodeDecodeError):
            return []
        targets: list[Path] = []
        for token in extract_import_paths(text):
            try:
                target = self.resolve_import_path(file, token)
            except OSError:
                continue
            if target is not None and target not in targets:
                targets.append(target)
        return targets

    def _resolve_relative(self, file: Path, token: str) -> Path | None:
        directory = self._fs.parent(file)
        if directory is None:
            return None
        return self._find_with_extensions(directory, token, file)

    def _resolve_from_root(self, file: Path, token: str) -> Path | None:
        resolved = self._find_with_extensions(self._project_root, token.lstrip("/"), file)
        if resolved is None or not project_relative(self._project_root, resolved):
            return None
        return resolved

    def _resolve_module(self, file: Path, token: str) -> Path | None:
        search = self._fs.parent(file)
        while search is not None:
            modules = self._fs.find_child(search, MODULES_DIR_NAME)
            if modules is not None and self._fs.is_dir(modules):
                resolved = self._find_with_extensions(modules, token, file)
                if resolved is not None:
                    return resolved
            search = self._fs.parent(search)
        modules = self._fs.find_child(self._project_root, MODULES_DIR_NAME)
        if modules is not None and self._fs.is_dir(modules):
            return self._find_with_extensions(modules, token, file)
        return None

    def _find_with_extensions(self, base: Path, relative: str, importing_file: Path) -> Path | None:
        if has_explicit_extension(relative):
            return self._regular_file(find_relative(self._fs, base, relative))
        for extension in extension_priority(importing_file):
            found = self._regular_file(find_relative(self._fs, base, f"{relative}.{extension}"))
            if found is not None:
                return found
        return None

    def _regular_file(self, candidate: Path | None) -> Path | None:
        if candidate is None or not self._fs.exists(candidate) or self._fs.is_dir(candidate):
            return None
        return candidate
