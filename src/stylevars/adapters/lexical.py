"""Line-oriented lexical scanning shared by the stylesheet scanners."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from stylevars.index.models import DEFAULT_CONTEXT, VariableEntry, VariableIndex

_BLOCK_HEADER_RE = re.compile(r"@(?:media|supports|container)\b\s*([^{]*)\{", re.IGNORECASE)
_SINGLE_GROUP_RE = re.compile(r"^\(([^()]*)\)$")
_LINE_COMMENT_RE = re.compile(r"^\s*//")
_IMPORT_RE = re.compile(
    r"""@import\s+(?:"([^"]+)"|'([^']+)'|\burl\(\s*(?:"([^"]+)"|'([^']+)'|([^)]+))\s*\))"""
)


@dataclass(slots=True)
class _ScanState:
    """Mutable scanner state threaded through one pass over a file."""

    contexts: list[str] = field(default_factory=list)
    pending_comment: str = ""
    comment_parts: list[str] | None = None

    @property
    def context(self) -> str:
        return self.contexts[-1] if self.contexts else DEFAULT_CONTEXT


def scan_declarations(
    text: str,
    pattern: re.Pattern[str],
    *,
    normalize_value: Callable[[str], str] | None = None,
) -> VariableIndex:
    """Extract declarations matching ``pattern`` with their context and doc comment.

    ``pattern`` must expose ``name`` and ``value`` groups. Within one context the
    last declaration of a name replaces the earlier one in place.
    """
    index: VariableIndex = {}
    state = _ScanState()
    for line in text.splitlines():
        code = _scan_line(line, state, pattern, index, normalize_value)
        if code.strip() == "}" and state.contexts:
            state.contexts.pop()
    return index


def header_context(header: str) -> str:
    """Normalize a block header into the context string stored with entries."""
    compact = " ".join(header.split())
    single = _SINGLE_GROUP_RE.match(compact)
    if single is not None:
        compact = single.group(1).strip()
    return compact or DEFAULT_CONTEXT


def clean_comment(parts: list[str]) -> str:
    """Strip comment gutters and blank edges from raw block comment text."""
    lines: list[str] = []
    for raw in "\n".join(parts).splitlines():
        lines.append(raw.strip().lstrip("*").strip())
    while lines and not lines[0]:
        lines.pop(0)
    while lines and not lines[-1]:
        lines.pop()
    return "\n".join(lines)


def mask_comments(text: str) -> str:
    """Blank out block comments, keeping strings, line count and offsets intact."""
    chars = list(text)
    length = len(text)
    index = 0
    quote: str | None = None
    in_comment = False
    while index < length:
        char = text[index]
        if in_comment:
            if text.startswith("*/", index):
                chars[index] = chars[index + 1] = " "
                in_comment = False
                index += 2
                continue
            if char != "\n":
                chars[index] = " "
            index += 1
            continue
        if quote is not None:
            if char == "\\":
                index += 2
                continue
            if char == quote or char == "\n":
                quote = None
            index += 1
            continue
        if char in "\"'":
            quote = char
        elif text.startswith("/*", index):
            chars[index] = chars[index + 1] = " "
            in_comment = True
            index += 2
            continue
        index += 1
    return "".join(chars)


def extract_import_paths(text: str) -> list[str]:
    """Return @import targets in source order, ignoring commented-out imports."""
    imports: list[str] = []
    for match in _IMPORT_RE.finditer(mask_comments(text)):
        token = next((group for group in match.groups() if group and group.strip()), None)
        if token is not None:
            imports.append(token.strip())
    return imports


def _scan_line(
    line: str,
    state: _ScanState,
    pattern: re.Pattern[str],
    index: VariableIndex,
    normalize_value: Callable[[str], str] | None,
) -> str:
    code_parts: list[str] = []
    cursor = 0
    length = len(line)
    while cursor < length:
        if state.comment_parts is not None:
            end = line.find("*/", cursor)
            if end == -1:
                state.comment_parts.append(line[cursor:])
                break
            state.comment_parts.append(line[cursor:end])
            state.pending_comment = clean_comment(state.comment_parts)
            state.comment_parts = None
            cursor = end + 2
            continue
        start = line.find("/*", cursor)
        segment = line[cursor:] if start == -1 else line[cursor:start]
        if not _LINE_COMMENT_RE.match(segment):
            _scan_code(segment, state, pattern, index, normalize_value)
            code_parts.append(segment)
        if start == -1:
            break
        state.comment_parts = []
        cursor = start + 2
    return "".join(code_parts)


def _scan_code(
    segment: str,
    state: _ScanState,
    pattern: re.Pattern[str],
    index: VariableIndex,
    normalize_value: Callable[[str], str] | None,
) -> None:
    header = _BLOCK_HEADER_RE.search(segment)
    if header is None:
        _record_declarations(segment, state, pattern, index, normalize_value)
        return
    _record_declarations(segment[: header.start()], state, pattern, index, normalize_value)
    state.contexts.append(header_context(header.group(1)))
    _record_declarations(segment[header.end() :], state, pattern, index, normalize_value)


def _record_declarations(
    code: str,
    state: _ScanState,
    pattern: re.Pattern[str],
    index: VariableIndex,
    normalize_value: Callable[[str], str] | None,
) -> None:
    if not code.strip():
        return
    for match in pattern.finditer(code):
        name = match.group("name")
        value = match.group("value").strip()
        if normalize_value is not None:
            value = normalize_value(value)
        if not value:
            continue
        entry = VariableEntry(
            context=state.context,
            raw_value=value,
            comment=state.pending_comment,
        )
        state.pending_comment = ""
        entries = index.setdefault(name, [])
        for position, existing in enumerate(entries):
            if existing.context == entry.context:
                entries[position] = entry
                break
        else:
            entries.append(entry)
