from __future__ import annotations

from stylevars.index.codec import ENTRY_SEP, FIELD_SEP, decode_entries, encode_entries
from stylevars.index.models import VariableEntry


def test_entries_for_one_key_share_a_single_blob() -> None:
    entries = [
        VariableEntry(context="default", raw_value="4px", comment="Gap"),
        VariableEntry(context="min-width: 768px", raw_value="8px"),
    ]

    blob = encode_entries(entries)

    assert blob.count(ENTRY_SEP) == 1
    assert decode_entries(blob) == entries


def test_separator_characters_in_text_are_scrubbed() -> None:
    entry = VariableEntry(context="default", raw_value=f"a{FIELD_SEP}b", comment=f"x{ENTRY_SEP}y")

    decoded = decode_entries(encode_entries([entry]))

    assert decoded == [VariableEntry(context="default", raw_value="a b", comment="x y")]


def test_malformed_pieces_are_skipped() -> None:
    blob = ENTRY_SEP.join(["context-only", "", f"default{FIELD_SEP}1px"])

    assert decode_entries(blob) == [VariableEntry(context="default", raw_value="1px")]
