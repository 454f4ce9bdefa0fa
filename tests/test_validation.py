from __future__ import annotations

import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck import (  # noqa: E402
    ContentShapeError,
    LayoutType,
    PresentationValidationError,
    SlideStyle,
    SlideTypeError,
    StructuralError,
    collect_violations,
    parse_presentation_text,
    validate_presentation,
)
from htmldeck.models import CardsContent, SectionContent  # noqa: E402

SAMPLE_DECK = Path(__file__).resolve().parents[1] / "content" / "htmldeck.yaml"


def _deck(*slides):
    return {"title": "Deck", "slides": list(slides)}


def test_validate_accepts_sample_deck() -> None:
    data = parse_presentation_text(SAMPLE_DECK.read_text(encoding="utf-8"), source=SAMPLE_DECK.name)
    presentation = validate_presentation(data)
    tags = [slide["type"] for slide in data["slides"]]
    assert [slide.layout.value for slide in presentation.slides] == tags
    assert [slide.index for slide in presentation.slides] == list(range(1, len(tags) + 1))


def test_validate_rejects_missing_slides() -> None:
    with pytest.raises(StructuralError) as exc:
        validate_presentation({"title": "Deck"}, source="deck.yaml")
    assert "Presentation validation failed (deck.yaml)" in str(exc.value)
    assert "slides is required and must be a list" in str(exc.value)


def test_validate_rejects_empty_slides_and_missing_title() -> None:
    with pytest.raises(StructuralError) as exc:
        validate_presentation({"slides": []})
    issues = exc.value.issues
    assert "title is required and must be a non-empty string" in issues
    assert "slides must contain at least one slide" in issues


def test_validate_rejects_non_mapping_root() -> None:
    with pytest.raises(StructuralError):
        validate_presentation(["not", "a", "deck"])


def test_unknown_layout_lists_valid_types() -> None:
    with pytest.raises(SlideTypeError) as exc:
        validate_presentation(_deck({"type": "three-column", "content": {}}))
    message = str(exc.value)
    assert 'Slide 1: invalid layout type "three-column"' in message
    assert "timeline" in message and "card-3" in message


def test_invalid_style_is_a_slide_type_error() -> None:
    with pytest.raises(SlideTypeError) as exc:
        validate_presentation(_deck({"type": "text-left", "style": "blue", "content": {"text": "x"}}))
    assert 'invalid style "blue"' in str(exc.value)


def test_card_count_must_match_layout() -> None:
    slide = {
        "type": "card-3",
        "content": {"cards": [{"title": "A", "description": "a"}, {"title": "B", "description": "b"}]},
    }
    with pytest.raises(ContentShapeError) as exc:
        validate_presentation(_deck(slide))
    assert "exactly 3 entries" in str(exc.value)
    assert "(found 2)" in str(exc.value)


def test_card_text_is_accepted_as_description() -> None:
    slide = {
        "type": "card-2",
        "content": {"cards": [{"title": "A", "text": "first"}, {"title": "B", "description": "second"}]},
    }
    presentation = validate_presentation(_deck(slide))
    content = presentation.slides[0].content
    assert isinstance(content, CardsContent)
    assert [card.description for card in content.cards] == ["first", "second"]


def test_list_items_must_be_non_empty_strings() -> None:
    with pytest.raises(ContentShapeError) as exc:
        validate_presentation(_deck({"type": "list", "content": {"items": ["ok", ""]}}))
    assert "content.items must contain only non-empty strings" in str(exc.value)


def test_all_violations_are_reported_with_slide_numbers() -> None:
    issues = collect_violations(
        _deck(
            {"type": "text-left", "content": {}},
            {"type": "title-slide"},
            {"type": "timeline", "content": {"events": [{"title": "Launch"}]}},
        )
    )
    rendered = [str(issue) for issue in issues]
    assert any(line.startswith("Slide 1: content.text is required") for line in rendered)
    assert any(line.startswith("Slide 3: content.events[0].description is required") for line in rendered)
    assert not any(line.startswith("Slide 2") for line in rendered)


def test_most_severe_kind_selects_the_error_class() -> None:
    with pytest.raises(SlideTypeError) as exc:
        validate_presentation(_deck({"type": "nope"}, {"type": "list", "content": {"items": []}}))
    assert len(exc.value.violations) == 2
    assert isinstance(exc.value, PresentationValidationError)


def test_defaults_and_scalar_coercion() -> None:
    presentation = validate_presentation(
        _deck({"type": "section-break", "content": {"number": 1, "title": "Intro"}})
    )
    slide = presentation.slides[0]
    assert slide.layout is LayoutType.SECTION_BREAK
    assert slide.style is SlideStyle.BLACK
    assert slide.content == SectionContent(number="1", title="Intro")


def test_hidden_title_is_not_visible() -> None:
    presentation = validate_presentation(
        _deck({"type": "text-left", "title": {"visible": False, "text": "Hidden"}, "content": {"text": "x"}})
    )
    assert presentation.slides[0].visible_title == ""


def test_settings_are_checked() -> None:
    data = _deck({"type": "title-slide"})
    data["settings"] = {"autoplay": "yes", "autoplay_interval": -5}
    with pytest.raises(StructuralError) as exc:
        validate_presentation(data)
    assert "settings.autoplay must be a boolean" in exc.value.issues
    assert "settings.autoplay_interval_ms must be a positive integer (milliseconds)" in exc.value.issues


def test_legacy_layout_names_are_accepted() -> None:
    presentation = validate_presentation(_deck({"type": "bullets", "content": {"items": ["a"]}}))
    assert presentation.slides[0].layout is LayoutType.LIST


def test_yaml_syntax_error_reports_position() -> None:
    with pytest.raises(StructuralError) as exc:
        parse_presentation_text("title: Deck\nslides: [\n", source="broken.yaml")
    assert "YAML parse error at line" in str(exc.value)
    assert "(broken.yaml)" in str(exc.value)


def test_scalar_deck_title_is_accepted() -> None:
    presentation = validate_presentation({"title": 2024, "slides": [{"type": "title-slide"}]})
    assert presentation.title == "2024"
