"""Presentation validation for the YAML deck input."""

from __future__ import annotations

import datetime as dt
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .errors import CONTENT_SHAPE, SLIDE_TYPE, STRUCTURE, Violation, error_for
from .layouts import CONTRACTS, LAYOUT_TAGS, STYLE_TAGS, LayoutContract, LayoutType
from .legacy_adapter import normalize_document
from .models import (
    Card,
    CardsContent,
    ImageContent,
    ImageTextContent,
    ListContent,
    Presentation,
    PresentationSettings,
    SectionContent,
    Slide,
    SlideContent,
    TextContent,
    TextField,
    TimelineContent,
    TimelineEvent,
    TitleContent,
)

Contracts = Mapping[LayoutType, LayoutContract]

# Field aliases accepted inside collection records.
_RECORD_ALIASES = {"description": ("text",)}


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _as_text(value: Any) -> Optional[str]:
    """Scalar YAML values (numbers, dates) are accepted where text is expected."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return None


class _SlideChecker:
    """Collects the violations of one slide and builds its typed model."""

    def __init__(self, index: int, layout: LayoutType, issues: List[Violation]):
        self.index = index
        self.layout = layout
        self.issues = issues

    def fail(self, message: str, kind: str = CONTENT_SHAPE) -> None:
        self.issues.append(Violation(kind, message, slide=self.index))

    def text_field(self, value: Any, name: str) -> Optional[TextField]:
        if value is None:
            return None
        if isinstance(value, str):
            return TextField(visible=True, text=value)
        if not isinstance(value, dict):
            self.fail(f"{name} must be an object with visible + text")
            return None
        visible = value.get("visible", True)
        if not isinstance(visible, bool):
            self.fail(f"{name}.visible must be a boolean")
            visible = False
        text = _as_text(value.get("text", ""))
        if text is None:
            self.fail(f"{name}.text must be a string")
            text = ""
        return TextField(visible=visible, text=text)

    def required_text(self, content: Dict[str, Any], field: str) -> str:
        text = _as_text(content.get(field))
        if text is None or not text.strip():
            self.fail(
                f"content.{field} is required for type='{self.layout.value}' and must be a non-empty string"
            )
            return ""
        return text

    def optional_text(self, content: Dict[str, Any], field: str, prefix: str = "content") -> Optional[str]:
        value = content.get(field)
        if value is None:
            return None
        text = _as_text(value)
        if text is None:
            self.fail(f"{prefix}.{field} must be a string when provided")
            return None
        return text or None

    def string_items(self, content: Dict[str, Any], field: str) -> Tuple[str, ...]:
        items = content.get(field)
        if not isinstance(items, list):
            self.fail(f"content.{field} is required for type='{self.layout.value}' and must be a list of strings")
            return ()
        if not items:
            self.fail(f"content.{field} must contain at least one item")
            return ()
        if not all(_is_non_empty_str(item) for item in items):
            self.fail(f"content.{field} must contain only non-empty strings")
            return ()
        return tuple(items)

    def records(self, content: Dict[str, Any], contract: LayoutContract) -> List[Dict[str, Optional[str]]]:
        field = contract.record_field or ""
        records = content.get(field)
        if not isinstance(records, list):
            self.fail(f"content.{field} is required for type='{self.layout.value}' and must be a list")
            return []
        if contract.exact_count is not None and len(records) != contract.exact_count:
            self.fail(
                f"content.{field} must contain exactly {contract.exact_count} entries for "
                f"type='{self.layout.value}' (found {len(records)})"
            )
        elif not records:
            self.fail(f"content.{field} must contain at least one entry")

        parsed: List[Dict[str, Optional[str]]] = []
        for r_idx, record in enumerate(records):
            rp = f"content.{field}[{r_idx}]"
            if not isinstance(record, dict):
                self.fail(f"{rp} must be an object")
                continue
            values: Dict[str, Optional[str]] = {}
            for name in contract.record_required:
                raw = record.get(name)
                if raw is None:
                    raw = next((record[a] for a in _RECORD_ALIASES.get(name, ()) if a in record), None)
                text = _as_text(raw)
                if text is None or not text.strip():
                    self.fail(f"{rp}.{name} is required and must be a non-empty string")
                values[name] = text or ""
            for name in contract.record_optional:
                values[name] = self.optional_text(record, name, prefix=rp)
            parsed.append(values)
        return parsed


def _title_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    return TitleContent(
        author=check.text_field(content.get("author"), "content.author"),
        date=check.text_field(content.get("date"), "content.date"),
    )


def _section_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    return SectionContent(number=check.required_text(content, "number"), title=check.required_text(content, "title"))


def _text_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    return TextContent(text=check.required_text(content, "text"))


def _image_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    return ImageContent(images=tuple(check.optional_text(content, name) for name in contract.image_fields))


def _image_text_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    return ImageTextContent(image=check.required_text(content, "image"), text=check.required_text(content, "text"))


def _list_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    return ListContent(items=check.string_items(content, contract.item_field or "items"))


def _cards_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    cards = [
        Card(title=r["title"] or "", description=r["description"] or "", image=r.get("image"))
        for r in check.records(content, contract)
    ]
    return CardsContent(cards=tuple(cards))


def _timeline_content(check: _SlideChecker, content: Dict[str, Any], contract: LayoutContract) -> SlideContent:
    events = [
        TimelineEvent(title=r["title"] or "", description=r["description"] or "", time=r.get("time"))
        for r in check.records(content, contract)
    ]
    return TimelineContent(events=tuple(events))


_CONTENT_BUILDERS: Mapping[LayoutType, Callable[[_SlideChecker, Dict[str, Any], LayoutContract], SlideContent]] = {
    LayoutType.TITLE_SLIDE: _title_content,
    LayoutType.SECTION_BREAK: _section_content,
    LayoutType.TEXT_LEFT: _text_content,
    LayoutType.TEXT_CENTER: _text_content,
    LayoutType.IMAGE_FULL: _image_content,
    LayoutType.IMAGE_1: _image_content,
    LayoutType.IMAGE_HORIZONTAL_2: _image_content,
    LayoutType.IMAGE_2X2: _image_content,
    LayoutType.IMAGE_TEXT_HORIZONTAL: _image_text_content,
    LayoutType.IMAGE_TEXT_VERTICAL: _image_text_content,
    LayoutType.LIST: _list_content,
    LayoutType.NUM_LIST: _list_content,
    LayoutType.CARD_2: _cards_content,
    LayoutType.CARD_3: _cards_content,
    LayoutType.TIMELINE: _timeline_content,
}


def _check_slide(slide: Any, index: int, issues: List[Violation], contracts: Contracts) -> Optional[Slide]:
    if not isinstance(slide, dict):
        issues.append(Violation(STRUCTURE, "must be an object", slide=index))
        return None

    tag = slide.get("type", slide.get("layoutType"))
    if not _is_non_empty_str(tag):
        issues.append(Violation(SLIDE_TYPE, 'missing required "type" field', slide=index))
        return None
    if tag not in LAYOUT_TAGS:
        allowed = ", ".join(LAYOUT_TAGS)
        issues.append(Violation(SLIDE_TYPE, f'invalid layout type "{tag}" (valid types: {allowed})', slide=index))
        return None

    layout = LayoutType(tag)
    contract = contracts[layout]
    check = _SlideChecker(index, layout, issues)
    before = len(issues)

    style = slide.get("style")
    if style is None:
        style = contract.default_style.value
    elif style not in STYLE_TAGS:
        check.fail(f'invalid style "{style}" (valid styles: {", ".join(STYLE_TAGS)})', kind=SLIDE_TYPE)

    title = check.text_field(slide.get("title"), "title")
    subtitle = check.text_field(slide.get("subtitle"), "subtitle")

    content = slide.get("content")
    if content is None:
        content = {}
    if not isinstance(content, dict):
        check.fail("content must be an object")
        content = {}

    payload = _CONTENT_BUILDERS[layout](check, content, contract)
    if len(issues) > before:
        return None
    return Slide(index=index, layout=layout, style=style, content=payload, title=title, subtitle=subtitle)


def _check_settings(raw: Any, issues: List[Violation]) -> PresentationSettings:
    if raw is None:
        return PresentationSettings()
    if not isinstance(raw, dict):
        issues.append(Violation(STRUCTURE, "settings must be an object when provided"))
        return PresentationSettings()

    defaults = PresentationSettings()
    values: Dict[str, Any] = {}
    for name in ("show_progress", "autoplay", "loop"):
        value = raw.get(name, getattr(defaults, name))
        if not isinstance(value, bool):
            issues.append(Violation(STRUCTURE, f"settings.{name} must be a boolean"))
            continue
        values[name] = value
    for name, alias in (("autoplay_interval_ms", "autoplay_interval"), ("transition_duration_ms", "transition_duration")):
        value = raw.get(name, raw.get(alias, getattr(defaults, name)))
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            issues.append(Violation(STRUCTURE, f"settings.{name} must be a positive integer (milliseconds)"))
            continue
        values[name] = value
    return PresentationSettings(**values)


def _check_presentation(data: Any, contracts: Contracts) -> Tuple[Optional[Presentation], List[Violation]]:
    issues: List[Violation] = []
    if not isinstance(data, dict):
        issues.append(Violation(STRUCTURE, "Root value must be an object"))
        return None, issues

    data = normalize_document(data)

    title = _as_text(data.get("title"))
    if title is None or not title.strip():
        issues.append(Violation(STRUCTURE, "title is required and must be a non-empty string"))

    meta: Dict[str, str] = {}
    for name in ("author", "date"):
        value = data.get(name)
        text = _as_text(value) if value is not None else ""
        if text is None:
            issues.append(Violation(STRUCTURE, f"{name} must be a string when provided"))
            text = ""
        meta[name] = text

    settings = _check_settings(data.get("settings"), issues)

    slides_raw = data.get("slides")
    if not isinstance(slides_raw, list):
        issues.append(Violation(STRUCTURE, "slides is required and must be a list"))
        return None, issues
    if not slides_raw:
        issues.append(Violation(STRUCTURE, "slides must contain at least one slide"))
        return None, issues

    slides = []
    for index, raw in enumerate(slides_raw, start=1):
        slide = _check_slide(raw, index, issues, contracts)
        if slide is not None:
            slides.append(slide)

    if issues:
        return None, issues
    return (
        Presentation(
            title=title,
            slides=tuple(slides),
            author=meta["author"],
            date=meta["date"],
            settings=settings,
        ),
        issues,
    )


def collect_violations(data: Any, contracts: Contracts = CONTRACTS) -> List[Violation]:
    """Return every violation found in ``data`` without raising."""
    _, issues = _check_presentation(data, contracts)
    return issues


def validate_presentation(
    data: Any,
    contracts: Contracts = CONTRACTS,
    *,
    source: Optional[str] = None,
) -> Presentation:
    """Validate a parsed document and return the typed presentation."""
    presentation, issues = _check_presentation(data, contracts)
    if issues or presentation is None:
        raise error_for(issues, source=source)
    return presentation
