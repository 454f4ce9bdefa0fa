"""Layout variants and their content contracts.

The contract table is built once at import time and exposed as a read-only
mapping. The validator and the renderer receive it by reference; nothing
writes to it afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple


class LayoutType(str, Enum):
    TITLE_SLIDE = "title-slide"
    SECTION_BREAK = "section-break"
    TEXT_LEFT = "text-left"
    TEXT_CENTER = "text-center"
    IMAGE_FULL = "image-full"
    IMAGE_1 = "image-1"
    IMAGE_HORIZONTAL_2 = "image-horizontal-2"
    IMAGE_2X2 = "image-2x2"
    IMAGE_TEXT_HORIZONTAL = "image-text-horizontal"
    IMAGE_TEXT_VERTICAL = "image-text-vertical"
    LIST = "list"
    NUM_LIST = "num-list"
    CARD_2 = "card-2"
    CARD_3 = "card-3"
    TIMELINE = "timeline"


class SlideStyle(str, Enum):
    BLACK = "black"
    WHITE = "white"


LAYOUT_TAGS: Tuple[str, ...] = tuple(layout.value for layout in LayoutType)
STYLE_TAGS: Tuple[str, ...] = tuple(style.value for style in SlideStyle)

SAMPLE_IMAGE = "assets/sample.jpg"


@dataclass(frozen=True)
class LayoutContract:
    """Required-content contract and rendering traits of one layout variant."""

    layout: LayoutType
    css_class: str
    default_style: SlideStyle = SlideStyle.WHITE
    required_text: Tuple[str, ...] = ()
    image_fields: Tuple[str, ...] = ()
    item_field: Optional[str] = None
    record_field: Optional[str] = None
    record_required: Tuple[str, ...] = ()
    record_optional: Tuple[str, ...] = ()
    exact_count: Optional[int] = None
    density_scaled: bool = False


def _contracts() -> Mapping[LayoutType, LayoutContract]:
    table = [
        LayoutContract(LayoutType.TITLE_SLIDE, "title-slide"),
        LayoutContract(
            LayoutType.SECTION_BREAK,
            "section-break",
            default_style=SlideStyle.BLACK,
            required_text=("number", "title"),
        ),
        LayoutContract(LayoutType.TEXT_LEFT, "text-left", required_text=("text",)),
        LayoutContract(LayoutType.TEXT_CENTER, "text-center", required_text=("text",)),
        LayoutContract(LayoutType.IMAGE_FULL, "image-full", image_fields=("image",)),
        LayoutContract(LayoutType.IMAGE_1, "image-single", image_fields=("image",)),
        LayoutContract(
            LayoutType.IMAGE_HORIZONTAL_2,
            "image-horizontal-2",
            image_fields=("image1", "image2"),
        ),
        LayoutContract(
            LayoutType.IMAGE_2X2,
            "image-2x2",
            image_fields=("image1", "image2", "image3", "image4"),
        ),
        LayoutContract(
            LayoutType.IMAGE_TEXT_HORIZONTAL,
            "image-text-horizontal",
            required_text=("image", "text"),
            image_fields=("image",),
        ),
        LayoutContract(
            LayoutType.IMAGE_TEXT_VERTICAL,
            "image-text-vertical",
            required_text=("image", "text"),
            image_fields=("image",),
        ),
        LayoutContract(LayoutType.LIST, "list-layout", item_field="items", density_scaled=True),
        LayoutContract(LayoutType.NUM_LIST, "num-list-layout", item_field="items", density_scaled=True),
        LayoutContract(
            LayoutType.CARD_2,
            "card-2-layout",
            record_field="cards",
            record_required=("title", "description"),
            record_optional=("image",),
            exact_count=2,
        ),
        LayoutContract(
            LayoutType.CARD_3,
            "card-3-layout",
            record_field="cards",
            record_required=("title", "description"),
            record_optional=("image",),
            exact_count=3,
        ),
        LayoutContract(
            LayoutType.TIMELINE,
            "timeline-layout",
            record_field="events",
            record_required=("title", "description"),
            record_optional=("time",),
        ),
    ]
    by_layout = {contract.layout: contract for contract in table}
    missing = [layout.value for layout in LayoutType if layout not in by_layout]
    if missing:
        raise RuntimeError(f"Layout contracts missing for: {', '.join(missing)}")
    return MappingProxyType(by_layout)


CONTRACTS: Mapping[LayoutType, LayoutContract] = _contracts()
