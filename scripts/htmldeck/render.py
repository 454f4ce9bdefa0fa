"""Slide renderers: one markup rule per layout variant."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, cast

import markdown

from .density import BAND_UNITS, DensityUnits, scale_density
from .layouts import CONTRACTS, SAMPLE_IMAGE, LayoutContract, LayoutType, SlideStyle
from .models import (
    Card,
    CardsContent,
    ImageContent,
    ImageTextContent,
    ListContent,
    SectionContent,
    Slide,
    TextContent,
    TimelineContent,
    TitleContent,
)

ImageResolver = Callable[[str], str]

LIST_DELAY_MS = (300, 150)
TIMELINE_DELAY_MS = (500, 200)
_CARD_POSITIONS = {2: ("left", "right"), 3: ("left", "center", "right")}


@dataclass(frozen=True)
class RenderedFragment:
    index: int
    layout: LayoutType
    style: SlideStyle
    markup: str
    style_overrides: str = ""


def _esc(value: Optional[str]) -> str:
    return html.escape(value or "", quote=True)


def render_text_block(text: str) -> str:
    """Markdown for free-text blocks; raw HTML inside the source is kept as-is."""
    return markdown.markdown(text, extensions=["extra", "sane_lists"])


def _identity(ref: str) -> str:
    return ref


def slide_scope(slide: Slide) -> str:
    return f"#slide-{slide.index}"


class SlideRenderer:
    """Render validated slides to ``<section>`` fragments.

    The dispatch table is built once from ``LayoutType`` and must cover every
    variant; a gap fails construction rather than a build.
    """

    def __init__(
        self,
        contracts: Mapping[LayoutType, LayoutContract] = CONTRACTS,
        resolve_image: Optional[ImageResolver] = None,
        density_units: DensityUnits = BAND_UNITS,
    ):
        self.contracts = contracts
        self.resolve_image = resolve_image or _identity
        self.density_units = density_units
        self._rules: Dict[LayoutType, Callable[[Slide], str]] = {
            LayoutType.TITLE_SLIDE: self._title_slide,
            LayoutType.SECTION_BREAK: self._section_break,
            LayoutType.TEXT_LEFT: self._text_block,
            LayoutType.TEXT_CENTER: self._text_block,
            LayoutType.IMAGE_FULL: self._image_full,
            LayoutType.IMAGE_1: self._image_single,
            LayoutType.IMAGE_HORIZONTAL_2: self._image_horizontal_2,
            LayoutType.IMAGE_2X2: self._image_2x2,
            LayoutType.IMAGE_TEXT_HORIZONTAL: self._image_text,
            LayoutType.IMAGE_TEXT_VERTICAL: self._image_text,
            LayoutType.LIST: self._list,
            LayoutType.NUM_LIST: self._list,
            LayoutType.CARD_2: self._cards,
            LayoutType.CARD_3: self._cards,
            LayoutType.TIMELINE: self._timeline,
        }
        missing = [layout.value for layout in LayoutType if layout not in self._rules or layout not in contracts]
        if missing:
            raise RuntimeError(f"No renderer for layout(s): {', '.join(missing)}")

    # -- public -------------------------------------------------------------

    def render(self, slide: Slide) -> RenderedFragment:
        inner = self._rules[slide.layout](slide)
        overrides = self._density_overrides(slide)
        markup = (
            f'<section class="slide-section" id="slide-{slide.index}" '
            f'data-slide-index="{slide.index - 1}" data-slide-type="{slide.layout.value}">\n'
            f"{inner}\n</section>"
        )
        return RenderedFragment(slide.index, slide.layout, slide.style, markup, overrides)

    def render_all(self, slides) -> List[RenderedFragment]:
        return [self.render(slide) for slide in slides]

    # -- helpers ------------------------------------------------------------

    def _image(self, ref: Optional[str]) -> str:
        return _esc(self.resolve_image(ref or SAMPLE_IMAGE))

    def _container(self, slide: Slide, body: str, *, heading: bool = True) -> str:
        css = self.contracts[slide.layout].css_class
        title = slide.visible_title if heading else ""
        head = f'  <h1 class="slide-title">{_esc(title)}</h1>\n' if title else ""
        return f'<div class="slide-container {slide.style.value} {css}">\n{head}{body}\n</div>'

    def _density_overrides(self, slide: Slide) -> str:
        if not self.contracts[slide.layout].density_scaled or not isinstance(slide.content, ListContent):
            return ""
        result = scale_density(slide.content.items, bool(slide.visible_title), self.density_units)
        prefix = "num-list" if slide.layout is LayoutType.NUM_LIST else "list"
        return result.style_overrides(
            slide_scope(slide),
            f"{prefix}-content",
            f"{prefix}-item",
            bullet=slide.layout is LayoutType.LIST,
        )

    # -- variants -----------------------------------------------------------

    def _title_slide(self, slide: Slide) -> str:
        content = cast(TitleContent, slide.content)
        parts = []
        if slide.visible_title:
            parts.append(f'<h1 class="title">{_esc(slide.visible_title)}</h1>')
        if slide.visible_subtitle:
            parts.append(f'<h2 class="subtitle">{_esc(slide.visible_subtitle)}</h2>')
        if content.author and content.author.shown:
            parts.append(f'<p class="author">{_esc(content.author.shown)}</p>')
        if content.date and content.date.shown:
            parts.append(f'<p class="date">{_esc(content.date.shown)}</p>')
        body = '  <div class="content">\n    ' + "\n    ".join(parts) + "\n  </div>"
        return self._container(slide, body, heading=False)

    def _section_break(self, slide: Slide) -> str:
        content = cast(SectionContent, slide.content)
        body = (
            '  <div class="content">\n'
            f'    <div class="section-number">{_esc(content.number)}</div>\n'
            f'    <div class="section-title">{_esc(content.title)}</div>\n'
            "  </div>"
        )
        return self._container(slide, body, heading=False)

    def _text_block(self, slide: Slide) -> str:
        content = cast(TextContent, slide.content)
        body = (
            '  <div class="content">\n'
            f'    <div class="text-content fade-in">{render_text_block(content.text)}</div>\n'
            "  </div>"
        )
        return self._container(slide, body)

    def _image_full(self, slide: Slide) -> str:
        content = cast(ImageContent, slide.content)
        body = (
            '  <div class="image-container">\n'
            f'    <img src="{self._image(content.images[0])}" alt="Full screen image" class="full-image">\n'
            "  </div>"
        )
        return self._container(slide, body)

    def _image_single(self, slide: Slide) -> str:
        content = cast(ImageContent, slide.content)
        body = (
            '  <div class="content">\n'
            f'    <img src="{self._image(content.images[0])}" alt="Single image" class="single-image">\n'
            "  </div>"
        )
        return self._container(slide, body)

    def _image_horizontal_2(self, slide: Slide) -> str:
        content = cast(ImageContent, slide.content)
        left, right = content.images
        body = (
            '  <div class="image-container-left">\n'
            f'    <img src="{self._image(left)}" alt="Image 1" class="horizontal-image fade-in-left">\n'
            "  </div>\n"
            '  <div class="image-container-right">\n'
            f'    <img src="{self._image(right)}" alt="Image 2" class="horizontal-image fade-in-right">\n'
            "  </div>"
        )
        return self._container(slide, body)

    def _image_2x2(self, slide: Slide) -> str:
        content = cast(ImageContent, slide.content)
        cells = []
        for n, (pos, ref) in enumerate(zip(("top-left", "top-right", "bottom-left", "bottom-right"), content.images), 1):
            cells.append(
                f'    <div class="grid-item {pos}">\n'
                f'      <img src="{self._image(ref)}" alt="Image {n}" class="grid-image fade-in-{n}">\n'
                "    </div>"
            )
        body = '  <div class="grid-container">\n' + "\n".join(cells) + "\n  </div>"
        return self._container(slide, body)

    def _image_text(self, slide: Slide) -> str:
        content = cast(ImageTextContent, slide.content)
        vertical = slide.layout is LayoutType.IMAGE_TEXT_VERTICAL
        image_box = "image-container-top" if vertical else "image-container-left"
        text_box = "text-container-bottom" if vertical else "text-container-right"
        body = (
            f'  <div class="{image_box}">\n'
            f'    <img src="{self._image(content.image)}" alt="Image" class="image-text-image">\n'
            "  </div>\n"
            f'  <div class="{text_box}">\n'
            f'    <div class="text-content fade-in-after">{render_text_block(content.text)}</div>\n'
            "  </div>"
        )
        return self._container(slide, body)

    def _list(self, slide: Slide) -> str:
        content = cast(ListContent, slide.content)
        numbered = slide.layout is LayoutType.NUM_LIST
        prefix = "num-list" if numbered else "list"
        tag = "ol" if numbered else "ul"

        density = scale_density(content.items, bool(slide.visible_title), self.density_units)
        classes = [f"{prefix}-content", "two-column" if density.is_multi_column else "single-column"]
        if density.requires_scaling:
            classes.append("dynamic-scaled")
        grid = ""
        if density.is_multi_column:
            grid = f' style="grid-template-rows: repeat({density.max_items_per_column}, 1fr);"'

        base, step = LIST_DELAY_MS
        items = "\n".join(
            f'      <li class="{prefix}-item" data-anim-delay="{base + i * step}">{_esc(item)}</li>'
            for i, item in enumerate(content.items)
        )
        body = (
            '  <div class="content">\n'
            f'    <{tag} class="{" ".join(classes)}"{grid}>\n{items}\n    </{tag}>\n'
            "  </div>"
        )
        return self._container(slide, body)

    def _card(self, card: Card, position: str, n: int) -> str:
        parts = []
        if card.image:
            parts.append(f'<img src="{self._image(card.image)}" alt="{_esc(card.title)}" class="card-image">')
        if card.title:
            parts.append(f'<h3 class="card-title">{_esc(card.title)}</h3>')
        if card.description:
            parts.append(f'<p class="card-description">{_esc(card.description)}</p>')
        inner = "".join(f"\n      {p}" for p in parts)
        return f'    <div class="card card-{position} fade-in-card-{n}">{inner}\n    </div>'

    def _cards(self, slide: Slide) -> str:
        content = cast(CardsContent, slide.content)
        count = self.contracts[slide.layout].exact_count or len(content.cards)
        positions = _CARD_POSITIONS.get(count) or tuple("center" for _ in range(count))
        cards = list(content.cards[:count])
        cards.extend(Card() for _ in range(count - len(cards)))
        body = (
            '  <div class="card-container">\n'
            + "\n".join(self._card(card, pos, n) for n, (card, pos) in enumerate(zip(cards, positions), 1))
            + "\n  </div>"
        )
        return self._container(slide, body)

    def _timeline(self, slide: Slide) -> str:
        content = cast(TimelineContent, slide.content)
        base, step = TIMELINE_DELAY_MS
        items = []
        for i, event in enumerate(content.events):
            items.append(
                f'        <div class="timeline-item fade-in-timeline" data-anim-delay="{base + i * step}">\n'
                '          <div class="timeline-node"></div>\n'
                f'          <div class="timeline-time">{_esc(event.time)}</div>\n'
                '          <div class="timeline-content">\n'
                f'            <h4 class="timeline-event-title">{_esc(event.title)}</h4>\n'
                f'            <p class="timeline-description">{_esc(event.description)}</p>\n'
                "          </div>\n"
                "        </div>"
            )
        body = (
            '  <div class="timeline-scroll-container">\n'
            '    <div class="timeline-wrapper">\n'
            '      <div class="timeline-line"></div>\n'
            '      <div class="timeline-items">\n' + "\n".join(items) + "\n      </div>\n"
            "    </div>\n"
            "  </div>\n"
            '  <div class="timeline-navigation">\n'
            '    <div class="timeline-nav-hint">&larr; &rarr; Arrow keys to navigate timeline | &darr; Next slide</div>\n'
            "  </div>"
        )
        return self._container(slide, body)
