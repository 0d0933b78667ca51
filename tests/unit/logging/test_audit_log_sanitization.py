from __future__ import annotations

import json

from stylevars.logging import sanitize_arguments


def test_identifiers_and_bounds_are_kept() -> None:
    sanitized = sanitize_arguments(
        {"name": "--primary", "file": "src/main.scss", "max_import_depth": 5, "force": True}
    )

    assert sanitized == {
        "file": "src/main.scss",
        "force": True,
        "max_import_depth": 5,
        "name": "--primary",
    }


def test_free_text_is_reduced_to_presence_and_length() -> None:
    sanitized = sanitize_arguments({"comment": "token=abc123"})

    assert sanitized == {"comment_present": True, "comment_length": len("token=abc123")}
    assert "abc123" not in json.dumps(sanitized)


def test_collections_are_summarized() -> None:
    sanitized = sanitize_arguments({"files": ["a.css", "b.css"], "options": {"b": 1, "a": 2}})

    assert sanitized == {
        "files_type": "list",
        "files_length": 2,
        "options_type": "dict",
        "options_keys": ["a", "b"],
    }
