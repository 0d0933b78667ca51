from __future__ import annotations

from stylevars.adapters import PreprocessorScanner, strip_flags
from stylevars.index.models import VariableEntry


def test_less_and_scss_sigils_are_indexed_with_their_sigil() -> None:
    text = "@base: 8px;\n$brand: #3498db;\n"

    index = PreprocessorScanner().index(text)

    assert index == {
        "@base": [VariableEntry(context="default", raw_value="8px")],
        "$brand": [VariableEntry(context="default", raw_value="#3498db")],
    }


def test_scss_flags_are_dropped_from_values() -> None:
    index = PreprocessorScanner().index("$gap: 4px !default;\n$pad: 2px !global !default;\n")

    assert index["$gap"][0].raw_value == "4px"
    assert index["$pad"][0].raw_value == "2px"


def test_at_rules_are_not_mistaken_for_variables() -> None:
    text = "\n".join(
        [
            '@import "theme";',
            "@media (min-width: 768px) {",
            "  @gap: 16px;",
            "}",
            "@charset 'utf-8';",
        ]
    )

    index = PreprocessorScanner().index(text)

    assert list(index) == ["@gap"]
    assert index["@gap"][0].context == "min-width: 768px"


def test_arithmetic_values_are_stored_raw() -> None:
    index = PreprocessorScanner().index("@double: (@base * 2);\n")

    assert index["@double"][0].raw_value == "(@base * 2)"


def test_plain_css_is_not_scanned_for_preprocessor_variables() -> None:
    scanner = PreprocessorScanner()

    assert not scanner.supports_path("theme.css")
    assert scanner.supports_path("theme.sass")


def test_strip_flags_leaves_plain_values_untouched() -> None:
    assert strip_flags("1px solid red") == "1px solid red"
