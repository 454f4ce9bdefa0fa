"""Typed presentation model produced by the validator."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type, Union

from .layouts import LayoutType, SlideStyle


@dataclass(frozen=True)
class TextField:
    visible: bool
    text: str

    @property
    def shown(self) -> str:
        return self.text if self.visible else ""


@dataclass(frozen=True)
class TitleContent:
    author: Optional[TextField] = None
    date: Optional[TextField] = None


@dataclass(frozen=True)
class SectionContent:
    number: str
    title: str


@dataclass(frozen=True)
class TextContent:
    text: str


@dataclass(frozen=True)
class ImageContent:
    # One entry per image slot; None means "use the sample image".
    images: Tuple[Optional[str], ...]


@dataclass(frozen=True)
class ImageTextContent:
    image: str
    text: str


@dataclass(frozen=True)
class ListContent:
    items: Tuple[str, ...]


@dataclass(frozen=True)
class Card:
    title: str = ""
    description: str = ""
    image: Optional[str] = None


@dataclass(frozen=True)
class CardsContent:
    cards: Tuple[Card, ...]


@dataclass(frozen=True)
class TimelineEvent:
    title: str
    description: str
    time: Optional[str] = None


@dataclass(frozen=True)
class TimelineContent:
    events: Tuple[TimelineEvent, ...]


SlideContent = Union[
    TitleContent,
    SectionContent,
    TextContent,
    ImageContent,
    ImageTextContent,
    ListContent,
    CardsContent,
    TimelineContent,
]

# Payload class each layout carries.
PAYLOAD_TYPES: Mapping[LayoutType, Type[Any]] = MappingProxyType(
    {
        LayoutType.TITLE_SLIDE: TitleContent,
        LayoutType.SECTION_BREAK: SectionContent,
        LayoutType.TEXT_LEFT: TextContent,
        LayoutType.TEXT_CENTER: TextContent,
        LayoutType.IMAGE_FULL: ImageContent,
        LayoutType.IMAGE_1: ImageContent,
        LayoutType.IMAGE_HORIZONTAL_2: ImageContent,
        LayoutType.IMAGE_2X2: ImageContent,
        LayoutType.IMAGE_TEXT_HORIZONTAL: ImageTextContent,
        LayoutType.IMAGE_TEXT_VERTICAL: ImageTextContent,
        LayoutType.LIST: ListContent,
        LayoutType.NUM_LIST: ListContent,
        LayoutType.CARD_2: CardsContent,
        LayoutType.CARD_3: CardsContent,
        LayoutType.TIMELINE: TimelineContent,
    }
)


@dataclass(frozen=True)
class Slide:
    """One validated slide. ``index`` is 1-based, matching diagnostics."""

    index: int
    layout: LayoutType
    style: SlideStyle
    content: SlideContent
    title: Optional[TextField] = None
    subtitle: Optional[TextField] = None

    def __post_init__(self) -> None:
        # Coercion raises ValueError for tags outside the closed enumerations.
        object.__setattr__(self, "layout", LayoutType(self.layout))
        object.__setattr__(self, "style", SlideStyle(self.style))
        expected = PAYLOAD_TYPES[self.layout]
        if not isinstance(self.content, expected):
            raise TypeError(
                f"Slide {self.index}: type='{self.layout.value}' needs {expected.__name__} content, "
                f"got {type(self.content).__name__}"
            )

    @property
    def visible_title(self) -> str:
        return self.title.shown if self.title else ""

    @property
    def visible_subtitle(self) -> str:
        return self.subtitle.shown if self.subtitle else ""

    def image_references(self) -> List[str]:
        content = self.content
        if isinstance(content, ImageContent):
            return [ref for ref in content.images if ref]
        if isinstance(content, ImageTextContent):
            return [content.image]
        if isinstance(content, CardsContent):
            return [card.image for card in content.cards if card.image]
        return []


@dataclass(frozen=True)
class PresentationSettings:
    show_progress: bool = True
    autoplay: bool = False
    loop: bool = False
    autoplay_interval_ms: int = 5000
    transition_duration_ms: int = 600

    def to_dict(self) -> Dict[str, Any]:
        return {
            "showProgress": self.show_progress,
            "autoplay": self.autoplay,
            "loop": self.loop,
            "autoplayInterval": self.autoplay_interval_ms,
            "transitionDuration": self.transition_duration_ms,
        }


@dataclass(frozen=True)
class Presentation:
    title: str
    slides: Tuple[Slide, ...]
    author: str = ""
    date: str = ""
    settings: PresentationSettings = field(default_factory=PresentationSettings)

    def summary(self) -> List[Dict[str, str]]:
        """Ordered ``{layoutType, style}`` pairs handed to the view-time controller."""
        return [{"layoutType": s.layout.value, "style": s.style.value} for s in self.slides]

    def image_references(self) -> List[str]:
        seen: Dict[str, None] = {}
        for slide in self.slides:
            for ref in slide.image_references():
                seen.setdefault(ref, None)
        return list(seen)
