from __future__ import annotations

from stylevars.index.codec import encode_entries
from stylevars.index.models import VariableEntry
from stylevars.index.store import CUSTOM_PROPERTY_INDEX, IndexStore


def _contribution(key: str, value: str, context: str = "default") -> dict[str, dict[str, str]]:
    blob = encode_entries([VariableEntry(context=context, raw_value=value)])
    return {CUSTOM_PROPERTY_INDEX: {key: blob}}


def test_replacing_a_file_drops_its_previous_keys() -> None:
    store = IndexStore()
    store.replace_file("a.css", _contribution("--old", "1px"))

    store.replace_file("a.css", _contribution("--new", "2px"))

    assert store.keys(CUSTOM_PROPERTY_INDEX) == ["--new"]
    assert store.entries(CUSTOM_PROPERTY_INDEX, "--old") == []


def test_reindexing_one_file_keeps_other_files_entries() -> None:
    store = IndexStore()
    store.replace_file("a.css", _contribution("--gap", "1px"))
    store.replace_file("b.css", _contribution("--gap", "2px", "min-width: 768px"))

    store.replace_file("a.css", _contribution("--gap", "3px"))

    values = [entry.raw_value for entry in store.entries(CUSTOM_PROPERTY_INDEX, "--gap")]
    assert values == ["3px", "2px"]


def test_reads_are_restricted_to_the_requested_files_in_that_order() -> None:
    store = IndexStore()
    store.replace_file("a.css", _contribution("--gap", "1px"))
    store.replace_file("b.css", _contribution("--gap", "2px"))
    store.replace_file("c.css", _contribution("--pad", "3px"))

    entries = store.entries(CUSTOM_PROPERTY_INDEX, "--gap", files=("b.css", "a.css"))

    assert [entry.raw_value for entry in entries] == ["2px", "1px"]
    assert store.keys(CUSTOM_PROPERTY_INDEX, files=("c.css",)) == ["--pad"]
    assert store.entries(CUSTOM_PROPERTY_INDEX, "--gap", files=("c.css",)) == []


def test_mutations_bump_generation_and_notify_listeners() -> None:
    store = IndexStore()
    calls: list[int] = []
    store.add_listener(lambda: calls.append(store.generation))

    store.replace_file("a.css", _contribution("--gap", "1px"))
    assert store.remove_file("a.css") is True
    assert store.remove_file("a.css") is False
    store.clear()

    assert calls == [1, 2, 3]
    assert store.files() == ()


def test_contributions_returns_a_copy() -> None:
    store = IndexStore()
    store.replace_file("a.css", _contribution("--gap", "1px"))

    copy = store.contributions("a.css")
    copy[CUSTOM_PROPERTY_INDEX].clear()

    assert store.keys(CUSTOM_PROPERTY_INDEX) == ["--gap"]
