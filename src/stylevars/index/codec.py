"""Private string encoding for index store values."""

from __future__ import annotations

from stylevars.index.models import VariableEntry

FIELD_SEP = "\x1f"
ENTRY_SEP = "\x1e"


def encode_entry(entry: VariableEntry) -> str:
    """Encode one entry as context, value and comment joined by the field separator."""
    return FIELD_SEP.join(
        (_scrub(entry.context), _scrub(entry.raw_value), _scrub(entry.comment))
    )


def encode_entries(entries: list[VariableEntry]) -> str:
    """Encode all entries one file contributes for one key."""
    return ENTRY_SEP.join(encode_entry(entry) for entry in entries)


def decode_entries(blob: str) -> list[VariableEntry]:
    """Decode an encoded blob, skipping pieces without a context and value."""
    output: list[VariableEntry] = []
    for piece in blob.split(ENTRY_SEP):
        if not piece.strip():
            continue
        parts = piece.split(FIELD_SEP, 2)
        if len(parts) < 2:
            continue
        comment = parts[2] if len(parts) == 3 else ""
        output.append(VariableEntry(context=parts[0], raw_value=parts[1], comment=comment))
    return output


def _scrub(text: str) -> str:
    return text.replace(FIELD_SEP, " ").replace(ENTRY_SEP, " ")
