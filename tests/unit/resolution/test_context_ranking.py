from __future__ import annotations

import sys

from stylevars.resolution import RankKey, media_pixels, rank, sort_contexts


def test_documented_band_order() -> None:
    ordered = [
        "default",
        "prefers-color-scheme: dark",
        "min-width: 1200px",
        "min-width: 768px",
    ]

    keys = [rank(context).sort_key() for context in ordered]

    assert keys == sorted(keys)


def test_max_width_sorts_larger_viewports_first() -> None:
    assert rank("max-width: 768px").sort_key() < rank("max-width: 350px").sort_key()


def test_light_scheme_shares_the_default_band() -> None:
    assert rank("prefers-color-scheme: light").major == 0
    assert rank("").major == 0
    assert rank("  DEFAULT ").major == 0


def test_unit_conversion_for_secondary_keys() -> None:
    assert rank("max-width: 48rem") == RankKey(3, -768, "max-width: 48rem")
    assert rank("min-width: 2em") == RankKey(2, -32, "min-width: 2em")
    assert rank("max-height: 50vh") == RankKey(5, -384, "max-height: 50vh")
    assert rank("min-width: 800.5px") == RankKey(2, -800, "min-width: 800.5px")
    assert rank("max-width: 100%") == RankKey(3, -1000, "max-width: 100%")
    assert rank("max-width: 0px") == RankKey(3, 0, "max-width: 0px")
    assert rank("min-height: 10in") == RankKey(4, -960, "min-height: 10in")


def test_negative_sizes_floor_at_zero() -> None:
    assert media_pixels("min-width: -20px", "min-width") == 0


def test_feature_without_a_number_is_unrecognized() -> None:
    key = rank("max-width: invalid")

    assert key.major == 9
    assert key.secondary is None
    assert key.sort_key() == (9, sys.maxsize, "max-width: invalid")


def test_fixed_sub_orders_for_preference_interaction_and_media_type() -> None:
    contexts = [
        "screen",
        "print",
        "active",
        "focus",
        "hover",
        "hover: none",
        "orientation: landscape",
        "orientation: portrait",
        "prefers-contrast: more",
        "prefers-reduced-motion: reduce",
    ]

    assert sort_contexts(contexts) == list(reversed(contexts))
    assert rank("hover: none") == RankKey(6, 4, "hover: none")
    assert rank("hover: hover") == RankKey(7, 0, "hover: hover")


def test_unrecognized_contexts_tie_break_on_text() -> None:
    assert sort_contexts(["supports (display: grid)", "aspect-ratio: 16/9"]) == [
        "aspect-ratio: 16/9",
        "supports (display: grid)",
    ]


def test_ranking_is_case_insensitive() -> None:
    assert rank("MIN-WIDTH: 768PX") == RankKey(2, -768, "min-width: 768px")
