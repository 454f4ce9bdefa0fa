"""Content-density heuristic for text-dense list layouts.

One pure function decides whether a list slide must shrink its typography.
It is parameterized by a unit system so the same formula serves the compiler
(percent of the viewport band) and the view-time resize handler (viewport
pixels); the parameters are serialized into the document for the latter.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Sequence


@dataclass(frozen=True)
class DensityUnits:
    """Available content height and per-item height, in one unit system."""

    name: str
    available_with_title: float
    available_without_title: float
    item_height: float

    def available_height(self, has_title: bool) -> float:
        return self.available_with_title if has_title else self.available_without_title


# Percent of the viewport height reserved for the content band.
BAND_UNITS = DensityUnits("viewport-band", 45.0, 55.0, 10.0)

# The page sets its root font to min(width / 100, height / 60) px.
ROOT_FONT_DIVISORS = (100.0, 60.0)

# One list item, in rem. On a height-limited viewport this equals the band's
# item height; on a width-limited one the root font shrinks and so do items.
ITEM_HEIGHT_REM = BAND_UNITS.item_height * ROOT_FONT_DIVISORS[1] / 100.0


def root_font_px(width_px: float, height_px: float) -> float:
    return min(width_px / ROOT_FONT_DIVISORS[0], height_px / ROOT_FONT_DIVISORS[1])


def viewport_pixel_units(
    width_px: float,
    height_px: float,
    band: DensityUnits = BAND_UNITS,
    item_height_rem: float = ITEM_HEIGHT_REM,
) -> DensityUnits:
    """Pixel units for a live viewport.

    The available height is the band's share of ``height_px``; the item height
    follows the root font, which depends on both dimensions.
    """
    ratio = height_px / 100.0
    return DensityUnits(
        "viewport-px",
        band.available_with_title * ratio,
        band.available_without_title * ratio,
        item_height_rem * root_font_px(width_px, height_px),
    )


@dataclass(frozen=True)
class DensityParameters:
    multi_column_threshold: int = 6
    baseline_length: float = 30.0
    length_span: float = 80.0
    max_length_multiplier: float = 3.0
    scaling_threshold: float = 0.85
    target_density: float = 0.95
    font_floor: float = 0.65
    line_height_floor: float = 0.75
    line_height_baseline: float = 0.8
    line_height_blend: float = 0.5
    margin_floor: float = 0.4
    margin_ratio: float = 0.7
    gap_floor: float = 0.5
    gap_ratio: float = 0.8
    # Unscaled list metrics (rem / unitless line height).
    font_size_rem: float = 1.4
    line_height: float = 1.6
    margin_rem: float = 1.5
    gap_rem: float = 2.0
    bullet_rem: float = 1.8

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_PARAMETERS = DensityParameters()


@dataclass(frozen=True)
class DensityResult:
    item_count: int
    average_length: float
    longest_item: int
    max_items_per_column: int
    is_multi_column: bool
    density_factor: float
    requires_scaling: bool
    scale_factor: float = 1.0
    font_scale: float = 1.0
    line_height_scale: float = 1.0
    margin_scale: float = 1.0
    gap_scale: float = 1.0
    params: DensityParameters = field(default=DEFAULT_PARAMETERS, repr=False)

    @property
    def font_size_rem(self) -> float:
        return self.params.font_size_rem * self.font_scale

    @property
    def line_height(self) -> float:
        return self.params.line_height * self.line_height_scale

    @property
    def margin_rem(self) -> float:
        return self.params.margin_rem * self.margin_scale

    @property
    def gap_rem(self) -> float:
        return self.params.gap_rem * self.gap_scale if self.is_multi_column else 0.0

    @property
    def bullet_rem(self) -> float:
        return self.params.bullet_rem * self.font_scale

    def style_overrides(self, scope: str, list_class: str, item_class: str, *, bullet: bool = False) -> str:
        """CSS rules for one slide; empty when no scaling is needed."""
        if not self.requires_scaling:
            return ""
        rules = [
            f"{scope} .{list_class}.dynamic-scaled .{item_class} {{\n"
            f"    font-size: {self.font_size_rem:.2f}rem !important;\n"
            f"    line-height: {self.line_height:.2f} !important;\n"
            f"    margin-bottom: {self.margin_rem:.2f}rem !important;\n"
            f"}}",
            f"{scope} .{list_class}.dynamic-scaled.two-column {{\n"
            f"    gap: {self.gap_rem:.2f}rem !important;\n"
            f"}}",
            f"{scope} .content {{\n    padding: 0 !important;\n}}",
        ]
        if bullet:
            rules.insert(
                2,
                f"{scope} .{list_class}.dynamic-scaled .{item_class}::before {{\n"
                f"    font-size: {self.bullet_rem:.2f}rem !important;\n"
                f"    line-height: {self.line_height:.2f} !important;\n"
                f"}}",
            )
        return "\n".join(rules)


def exceeds_threshold(density_factor: float, params: DensityParameters = DEFAULT_PARAMETERS) -> bool:
    return density_factor > params.scaling_threshold


def scale_density(
    items: Sequence[str],
    has_title: bool,
    units: DensityUnits = BAND_UNITS,
    params: DensityParameters = DEFAULT_PARAMETERS,
) -> DensityResult:
    """Estimate how dense a list is and the typography factors that make it fit."""
    item_count = len(items)
    is_multi_column = item_count >= params.multi_column_threshold
    max_per_column = math.ceil(item_count / 2) if is_multi_column else item_count

    lengths = [len(item) for item in items]
    average_length = sum(lengths) / item_count if item_count else 0.0
    longest_item = max(lengths, default=0)

    available = units.available_height(has_title)
    length_multiplier = min(
        1 + (average_length - params.baseline_length) / params.length_span,
        params.max_length_multiplier,
    )
    required = max_per_column * units.item_height * length_multiplier
    density_factor = required / available if available > 0 else math.inf

    result = DensityResult(
        item_count=item_count,
        average_length=average_length,
        longest_item=longest_item,
        max_items_per_column=max_per_column,
        is_multi_column=is_multi_column,
        density_factor=density_factor,
        requires_scaling=exceeds_threshold(density_factor, params),
        params=params,
    )
    if not result.requires_scaling:
        return result

    scale_factor = min(params.target_density / density_factor, 1.0)
    return DensityResult(
        item_count=item_count,
        average_length=average_length,
        longest_item=longest_item,
        max_items_per_column=max_per_column,
        is_multi_column=is_multi_column,
        density_factor=density_factor,
        requires_scaling=True,
        scale_factor=scale_factor,
        font_scale=max(params.font_floor, scale_factor),
        line_height_scale=max(
            params.line_height_floor,
            params.line_height_baseline + (scale_factor - params.line_height_baseline) * params.line_height_blend,
        ),
        margin_scale=max(params.margin_floor, scale_factor * params.margin_ratio),
        gap_scale=max(params.gap_floor, scale_factor * params.gap_ratio) if is_multi_column else 1.0,
        params=params,
    )
