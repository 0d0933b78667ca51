from __future__ import annotations

import pytest

from stylevars.resolution import (
    ValueType,
    compare_colors,
    compare_numbers,
    compare_sizes,
    convert_to_pixels,
    is_numeric,
    is_size,
    sort_by_value,
    value_type,
)


@pytest.mark.parametrize("text", ["16px", "1.5rem", "2em", "50%", "10vh", "10vw", "12pt", " 4PX "])
def test_recognized_units_are_sizes(text: str) -> None:
    assert is_size(text)


@pytest.mark.parametrize("text", ["16px extra", "16", "", "px", "-4px", "1.px"])
def test_other_text_is_not_a_size(text: str) -> None:
    assert not is_size(text)


def test_convert_to_pixels() -> None:
    assert convert_to_pixels("1rem") == 16.0
    assert convert_to_pixels("2em") == 32.0
    assert convert_to_pixels("10px") == 10.0
    assert convert_to_pixels("3pt") == pytest.approx(3.99)
    assert convert_to_pixels("50%") == 50.0
    assert convert_to_pixels("2vh") == 20.0
    assert convert_to_pixels("7") == 7.0


def test_compare_sizes_follows_pixel_magnitude() -> None:
    assert compare_sizes("1rem", "17px") < 0
    assert compare_sizes("2em", "32px") == 0
    assert compare_sizes("10vw", "99px") > 0


def test_compare_numbers_and_numeric_detection() -> None:
    assert is_numeric("1.5")
    assert is_numeric("-2")
    assert is_numeric("1e3")
    assert not is_numeric("1.5px")
    assert compare_numbers("2", "10") < 0


def test_compare_colors_orders_by_hue_then_saturation_then_brightness() -> None:
    assert compare_colors("#ff0000", "#00ff00") < 0
    assert compare_colors("#ff8080", "#ff0000") < 0
    assert compare_colors("#800000", "#ff0000") < 0
    assert compare_colors("#ff0000", "rgb(255 0 0)") == 0
    assert compare_colors("apple", "Banana") < 0


def test_value_type_precedence() -> None:
    assert value_type("16px") is ValueType.SIZE
    assert value_type("#fff") is ValueType.COLOR
    assert value_type("1.5") is ValueType.NUMBER
    assert value_type("bold") is ValueType.OTHER


def test_sort_by_value_groups_types_then_magnitude() -> None:
    pairs = [
        ("--weight", "bold"),
        ("--ratio", "1.5"),
        ("--brand", "#3498db"),
        ("--lg", "2rem"),
        ("--sm", "4px"),
    ]

    ordered = [name for name, _ in sort_by_value(pairs)]

    assert ordered == ["--sm", "--lg", "--brand", "--ratio", "--weight"]
