from __future__ import annotations

from stylevars.adapters import build_scanner_registry
from stylevars.config import ScopeMode
from stylevars.index import IndexStore
from stylevars.resolution import (
    PreprocessorResolver,
    ResolutionCache,
    Scope,
    build_scope,
    format_number,
    parse_quantity,
    swap_sigil,
)


def _build(files: dict[str, str]) -> tuple[PreprocessorResolver, ResolutionCache, Scope]:
    store = IndexStore()
    registry = build_scanner_registry()
    for path, text in files.items():
        store.replace_file(path, registry.contributions(path, text))
    cache = ResolutionCache()
    scope = build_scope(ScopeMode.GLOBAL, store.files())
    return PreprocessorResolver(store, cache), cache, scope


def test_multiplication_keeps_the_base_unit() -> None:
    resolver, _, scope = _build({"vars.less": "@base: 8px;\n@double: (@base * 2);\n"})

    info = resolver.resolve_with_steps("@double", scope)

    assert info is not None
    assert info.resolved == "16px"
    assert info.steps == ("@double", "@base")


def test_unary_rounding_operators() -> None:
    resolver, _, scope = _build(
        {
            "vars.less": (
                "@w: 8.5px;\n"
                "@down: (@w floor);\n"
                "@up: (@w ceil);\n"
                "@near: (@w round);\n"
            )
        }
    )

    assert resolver.resolve_variable("@down", scope) == "8px"
    assert resolver.resolve_variable("@up", scope) == "9px"
    assert resolver.resolve_variable("@near", scope) == "9px"


def test_right_hand_operand_may_be_a_variable_and_supply_the_unit() -> None:
    resolver, _, scope = _build(
        {
            "vars.less": (
                "@base: 8px;\n"
                "@pad: 2px;\n"
                "@sum: (@base + @pad);\n"
                "@count: 3;\n"
                "@scaled: (@count * 2rem);\n"
                "@third: (@count / 9);\n"
            )
        }
    )

    assert resolver.resolve_variable("@sum", scope) == "10px"
    assert resolver.resolve_variable("@scaled", scope) == "6rem"
    assert resolver.resolve_variable("@third", scope) == "0.333"


def test_division_by_zero_is_unresolvable() -> None:
    resolver, _, scope = _build({"vars.less": "@base: 8px;\n@bad: (@base / 0);\n"})

    assert resolver.resolve_variable("@bad", scope) is None


def test_non_numeric_base_is_unresolvable() -> None:
    resolver, _, scope = _build({"vars.less": "@font: serif;\n@bad: (@font * 2);\n"})

    assert resolver.resolve_variable("@bad", scope) is None


def test_sigils_are_interchangeable() -> None:
    resolver, _, scope = _build({"_vars.scss": "$gap: 4px !default;\n"})

    assert resolver.resolve_variable("$gap", scope) == "4px"
    assert resolver.resolve_variable("@gap", scope) == "4px"
    assert swap_sigil("@gap") == "$gap"
    assert swap_sigil("$gap") == "@gap"
    assert swap_sigil("gap") == "gap"


def test_reference_chains_are_followed() -> None:
    resolver, _, scope = _build({"vars.less": "@a: @b;\n@b: @c;\n@c: 1.5em;\n"})

    info = resolver.resolve_with_steps("@a", scope)

    assert info is not None
    assert info.resolved == "1.5em"
    assert info.steps == ("@a", "@b", "@c")


def test_cycles_stop_at_the_repeated_reference_and_are_not_memoized() -> None:
    resolver, cache, scope = _build({"vars.less": "@a: @b;\n@b: @a;\n"})

    assert resolver.resolve_variable("@a", scope) == "@a"
    assert cache.size() == 0


def test_undefined_variable() -> None:
    resolver, _, scope = _build({"vars.less": "@a: 1px;\n"})

    assert resolver.resolve_variable("@missing", scope) is None


def test_default_context_wins_over_media_blocks() -> None:
    resolver, _, scope = _build(
        {"vars.less": "@media (min-width: 10px) {\n  @m: 2px;\n}\n@m: 1px;\n"}
    )

    assert resolver.resolve_variable("@m", scope) == "1px"
    assert [entry.raw_value for entry in resolver.lookup("@m", scope)] == ["1px", "2px"]


def test_memo_is_keyed_by_scope() -> None:
    resolver, cache, _ = _build({"a.less": "@c: 1px;\n", "b.less": "@c: 2px;\n"})
    scope_a = build_scope(ScopeMode.GLOBAL, ["a.less"])
    scope_b = build_scope(ScopeMode.GLOBAL, ["b.less"])

    assert resolver.resolve_variable("@c", scope_a) == "1px"
    assert resolver.resolve_variable("@c", scope_b) == "2px"
    assert cache.size() == 2
    cached = cache.get_preprocessor(scope_a, "@c")
    assert cached is not None
    assert cached.resolved == "1px"


def test_evaluate_expression_only_accepts_arithmetic_forms() -> None:
    resolver, _, scope = _build({"vars.less": "@base: 4px;\n"})

    computed = resolver.evaluate_expression("(@base - 1)", scope)

    assert computed is not None
    assert computed.resolved == "3px"
    assert computed.steps == ("@base",)
    assert resolver.evaluate_expression("4px", scope) is None


def test_format_number_and_parse_quantity() -> None:
    assert format_number(16.0) == "16"
    assert format_number(2.5) == "2.5"
    assert format_number(-0.0001) == "0"
    quantity = parse_quantity(" 8.5px ")
    assert quantity is not None
    assert (quantity.magnitude, quantity.unit) == (8.5, "px")
    assert parse_quantity("auto") is None


def test_overflowing_magnitudes_are_not_computed() -> None:
    resolver, _, scope = _build(
        {"vars.less": "@big: 1e400px;\n@f: (@big floor);\n@twice: (@big * 2);\n"}
    )

    assert parse_quantity("1e400px") is None
    assert resolver.resolve_variable("@f", scope) is None
    assert resolver.resolve_variable("@twice", scope) is None
    assert resolver.resolve_variable("@big", scope) == "1e400px"
