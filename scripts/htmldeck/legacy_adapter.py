"""Compatibility adapters for older presentation document shapes."""

from __future__ import annotations

from typing import Any, Dict

_LAYOUT_ALIASES = {
    "image-single": "image-1",
    "bullets": "list",
    "bullet-list": "list",
    "numbered-list": "num-list",
    "ordered-list": "num-list",
}

_META_FIELDS = ("title", "author", "date", "settings")


def normalize_layout_tag(tag: Any) -> Any:
    """Map legacy layout names to supported layout tags; other values pass through."""
    if not isinstance(tag, str):
        return tag
    normalized = tag.strip().lower()
    return _LAYOUT_ALIASES.get(normalized, normalized)


def _text_of(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("text") or "")
    if isinstance(value, str):
        return value
    return ""


def adapt_single_slide(slide: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a legacy single-slide document (top-level ``type``) to the deck schema."""
    content = slide.get("content") if isinstance(slide.get("content"), dict) else {}
    return {
        "title": _text_of(slide.get("title")) or "Untitled Presentation",
        "author": _text_of(content.get("author")),
        "date": _text_of(content.get("date")),
        "slides": [dict(slide)],
    }


def normalize_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return the multi-slide form of ``data`` without mutating it.

    Accepted shapes:
    - the deck schema (top-level ``title`` + ``slides``);
    - deck metadata wrapped in a ``presentation`` block, either beside
      ``slides`` or containing them;
    - a legacy single slide with a top-level ``type``.
    """
    wrapper = data.get("presentation")
    if "slides" not in data and isinstance(wrapper, dict) and "slides" in wrapper:
        data = dict(wrapper)
    elif "slides" not in data and "type" in data:
        data = adapt_single_slide(data)
    else:
        data = dict(data)
        if isinstance(wrapper, dict):
            for field in _META_FIELDS:
                if data.get(field) is None and wrapper.get(field) is not None:
                    data[field] = wrapper[field]
            data.pop("presentation", None)

    slides = data.get("slides")
    if isinstance(slides, list):
        normalized = []
        for slide in slides:
            if isinstance(slide, dict):
                key = "type" if "type" in slide else "layoutType"
                if key in slide:
                    slide = dict(slide)
                    slide[key] = normalize_layout_tag(slide[key])
            normalized.append(slide)
        data["slides"] = normalized
    return data
