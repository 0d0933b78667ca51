"""Variable resolution: gather, collapse, resolve, rank and document."""

from __future__ import annotations

import re
from collections.abc import Callable

from stylevars.index.models import DEFAULT_CONTEXT, VariableEntry
from stylevars.index.store import CUSTOM_PROPERTY_INDEX, PREPROCESSOR_INDEX, IndexStore
from stylevars.resolution.cancellation import (
    NEVER_CANCELLED,
    CancellationToken,
    ResolutionCancelled,
)
from stylevars.resolution.docs import parse_doc_comment
from stylevars.resolution.models import ResolutionInfo, ResolvedEntry, VariableResolution
from stylevars.resolution.preprocessor import PreprocessorResolver
from stylevars.resolution.ranking import rank
from stylevars.resolution.scope import Scope

DEFAULT_MAX_DEPTH = 20

_VAR_RE = re.compile(r"^var\(\s*(--[\w-]+)\s*(?:,\s*(.*?))?\s*\)$", re.DOTALL)
_PREPROCESSOR_TOKEN_RE = re.compile(r"^\s*([@$][\w-]+)\s*$")

FaultHook = Callable[[Exception, str], None]


def is_preprocessor_name(name: str) -> bool:
    return name.startswith(("@", "$"))


class ResolutionEngine:
    """Resolves variables across a scope.

    Only :class:`ResolutionCancelled` escapes; any other failure is reported to
    ``fault_hook`` and degrades to the unresolved value.
    """

    def __init__(
        self,
        store: IndexStore,
        preprocessor: PreprocessorResolver,
        max_depth: int = DEFAULT_MAX_DEPTH,
        fault_hook: FaultHook | None = None,
    ) -> None:
        self._store = store
        self._preprocessor = preprocessor
        self._max_depth = max_depth
        self._fault_hook = fault_hook

    @property
    def max_depth(self) -> int:
        return self._max_depth

    def resolve(
        self,
        name: str,
        scope: Scope,
        cancellation: CancellationToken = NEVER_CANCELLED,
    ) -> VariableResolution | None:
        """Return every context of ``name`` ranked, or None when it is not declared."""
        cancellation.check()
        try:
            raw_entries = self._declarations(name, scope)
        except ResolutionCancelled:
            raise
        except Exception as exc:
            self._report_fault(exc, name)
            return None
        if not raw_entries:
            return None

        collapsed: dict[str, VariableEntry] = {}
        for entry in raw_entries:
            collapsed[entry.context] = entry

        resolved: list[ResolvedEntry] = []
        for entry in collapsed.values():
            info = self.resolve_value(entry.raw_value, scope, cancellation, origin=name)
            resolved.append(ResolvedEntry(context=entry.context, info=info, comment=entry.comment))
        resolved.sort(key=lambda item: rank(item.context).sort_key())

        doc_entry = _pick_doc_entry(resolved)
        return VariableResolution(
            name=name,
            entries=tuple(resolved),
            doc_entry=doc_entry,
            doc=parse_doc_comment(doc_entry.comment, doc_entry.info.resolved),
        )

    def resolve_value(
        self,
        raw: str,
        scope: Scope,
        cancellation: CancellationToken = NEVER_CANCELLED,
        origin: str | None = None,
    ) -> ResolutionInfo:
        """Follow references from one raw value to its terminal value."""
        try:
            return self._follow(raw, scope, cancellation, origin)
        except ResolutionCancelled:
            raise
        except Exception as exc:
            self._report_fault(exc, raw)
            return ResolutionInfo(original=raw, resolved=raw)

    def _declarations(self, name: str, scope: Scope) -> list[VariableEntry]:
        index_name = PREPROCESSOR_INDEX if is_preprocessor_name(name) else CUSTOM_PROPERTY_INDEX
        return self._store.entries(index_name, name, scope.files)

    def _follow(
        self,
        raw: str,
        scope: Scope,
        cancellation: CancellationToken,
        origin: str | None,
    ) -> ResolutionInfo:
        visited: set[str] = set()
        if origin is not None:
            visited.add(origin)
        chain: list[str] = []
        current = raw
        depth = 0
        while depth < self._max_depth:
            cancellation.check()
            text = current.strip()
            var_match = _VAR_RE.match(text)
            if var_match is not None:
                reference, fallback = var_match.groups()
                if reference in visited:
                    break
                target = self._default_entry(reference, scope)
                if target is not None:
                    visited.add(reference)
                    chain.append(text)
                    current = target.raw_value
                elif fallback:
                    chain.append(text)
                    current = fallback
                else:
                    break
                depth += 1
                continue

            token = _PREPROCESSOR_TOKEN_RE.match(text)
            if token is None:
                computed = self._preprocessor.evaluate_expression(
                    text, scope, frozenset(visited), cancellation
                )
                if computed is None:
                    break
                chain.append(text)
                chain.extend(computed.steps)
                current = computed.resolved
                depth += 1
                continue
            variable = token.group(1)
            if variable in visited:
                break
            info = self._preprocessor.resolve_with_steps(
                variable, scope, frozenset(visited), cancellation
            )
            if info is None:
                break
            visited.update(info.steps)
            chain.extend(info.steps)
            current = info.resolved
            depth += 1

        resolved = current.strip()
        if resolved == raw:
            return ResolutionInfo(original=raw, resolved=raw)
        return ResolutionInfo(original=raw, resolved=resolved, steps=(*chain, resolved))

    def _default_entry(self, name: str, scope: Scope) -> VariableEntry | None:
        entries = self._store.entries(CUSTOM_PROPERTY_INDEX, name, scope.files)
        for entry in entries:
            if entry.context == DEFAULT_CONTEXT:
                return entry
        return entries[0] if entries else None

    def _report_fault(self, exc: Exception, subject: str) -> None:
        if self._fault_hook is not None:
            self._fault_hook(exc, subject)


def describe(name: str, info: ResolutionInfo) -> str:
    """One-line human summary of a resolution chain."""
    if not info.steps:
        return f"{name} -> {info.resolved}"
    return "Resolution: " + " -> ".join(info.steps)


def _pick_doc_entry(entries: list[ResolvedEntry]) -> ResolvedEntry:
    for entry in entries:
        if entry.comment:
            return entry
    for entry in entries:
        if entry.context == DEFAULT_CONTEXT:
            return entry
    return entries[0]
