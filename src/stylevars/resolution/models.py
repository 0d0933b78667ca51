"""Typed results of value resolution."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class ResolutionInfo:
    """One raw value, its terminal value and the references followed to get there.

    ``steps`` is empty exactly when ``original == resolved``.
    """

    original: str
    resolved: str
    steps: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return self.original != self.resolved

    def to_dict(self) -> dict[str, object]:
        return {"original": self.original, "resolved": self.resolved, "steps": list(self.steps)}


@dataclass(slots=True, frozen=True)
class DocComment:
    """Structured documentation parsed from a declaration comment."""

    name: str = ""
    description: str = ""
    value: str = ""
    examples: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "value": self.value,
            "examples": list(self.examples),
        }


@dataclass(slots=True, frozen=True)
class ResolvedEntry:
    """A declaration context with its resolved value and attached comment."""

    context: str
    info: ResolutionInfo
    comment: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"context": self.context, "comment": self.comment, **self.info.to_dict()}


@dataclass(slots=True, frozen=True)
class VariableResolution:
    """Every context of one variable in rank order, plus its headline documentation."""

    name: str
    entries: tuple[ResolvedEntry, ...]
    doc_entry: ResolvedEntry
    doc: DocComment

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "entries": [entry.to_dict() for entry in self.entries],
            "doc_context": self.doc_entry.context,
            "doc": self.doc.to_dict(),
        }
