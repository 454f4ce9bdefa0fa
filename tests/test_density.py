from __future__ import annotations

import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck.density import (  # noqa: E402
    BAND_UNITS,
    DensityUnits,
    root_font_px,
    scale_density,
    viewport_pixel_units,
)


def test_exact_threshold_does_not_scale() -> None:
    units = DensityUnits("test", 100.0, 100.0, 17.0)
    items = ["x" * 30] * 5

    result = scale_density(items, has_title=True, units=units)

    assert result.density_factor == 0.85
    assert result.requires_scaling is False
    assert result.font_scale == 1.0
    assert result.style_overrides("#slide-1", "list-content", "list-item") == ""


def test_long_items_with_title_scale_down() -> None:
    items = ["y" * 60] * 8

    result = scale_density(items, has_title=True)

    assert result.is_multi_column is True
    assert result.max_items_per_column == 4
    assert result.density_factor == pytest.approx(55 / 45)
    assert result.requires_scaling is True
    assert result.scale_factor == pytest.approx(0.95 * 45 / 55)
    assert result.font_scale == pytest.approx(0.7773, abs=1e-4)
    assert result.line_height_scale == pytest.approx(0.7886, abs=1e-4)
    assert result.margin_scale == pytest.approx(0.5441, abs=1e-4)
    assert result.gap_scale == pytest.approx(0.6218, abs=1e-4)


def test_short_list_without_title_is_left_alone() -> None:
    result = scale_density(["Item"] * 5, has_title=False)

    assert result.is_multi_column is False
    assert result.max_items_per_column == 5
    assert result.density_factor < 0.85
    assert result.requires_scaling is False
    assert result.gap_rem == 0.0


def test_very_dense_list_hits_every_floor() -> None:
    result = scale_density(["z" * 200] * 20, has_title=True)

    assert result.requires_scaling is True
    assert result.font_scale == 0.65
    assert result.line_height_scale == 0.75
    assert result.margin_scale == 0.4
    assert result.gap_scale == 0.5


def test_more_items_never_lowers_density_within_a_column_mode() -> None:
    single = [scale_density(["w" * 40] * n, has_title=True).density_factor for n in range(1, 6)]
    double = [scale_density(["w" * 40] * n, has_title=True).density_factor for n in range(6, 16)]
    assert single == sorted(single)
    assert double == sorted(double)


def test_longer_items_never_lower_density() -> None:
    factors = [scale_density(["w" * length] * 4, has_title=False).density_factor for length in range(0, 400, 20)]
    assert factors == sorted(factors)


def test_pixel_units_match_the_band_on_height_limited_viewports() -> None:
    items = ["v" * 60] * 8
    band = scale_density(items, has_title=True, units=BAND_UNITS)
    pixels = scale_density(items, has_title=True, units=viewport_pixel_units(1920, 1080))

    assert root_font_px(1920, 1080) == 18.0
    assert pixels.density_factor == pytest.approx(band.density_factor)
    assert pixels.requires_scaling is True


def test_narrow_viewports_lower_the_density() -> None:
    items = ["v" * 60] * 8
    results = [scale_density(items, has_title=True, units=viewport_pixel_units(w, 1080)) for w in (600, 1200, 1920)]
    factors = [r.density_factor for r in results]

    assert factors[0] == pytest.approx(4 * 36 * 1.375 / 486)
    assert factors == sorted(factors)
    assert len(set(round(f, 6) for f in factors)) == 3
    assert [r.requires_scaling for r in results] == [False, False, True]


def test_style_overrides_are_scoped_to_one_slide() -> None:
    result = scale_density(["y" * 60] * 8, has_title=True)

    css = result.style_overrides("#slide-4", "list-content", "list-item", bullet=True)

    assert "#slide-4 .list-content.dynamic-scaled .list-item {" in css
    assert f"font-size: {result.font_size_rem:.2f}rem !important;" in css
    assert "#slide-4 .list-content.dynamic-scaled .list-item::before {" in css
    assert "#slide-4 .list-content.dynamic-scaled.two-column {" in css
    assert "#slide-4 .content {" in css
    assert "#slide-1" not in css
