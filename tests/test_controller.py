from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck import LayoutType, validate_presentation  # noqa: E402
from htmldeck.controller import (  # noqa: E402
    ANIMATION_PROFILES,
    CONTROLLER_JS,
    TIMINGS,
    AUTOPLAY,
    CANCEL_TIMERS,
    ENTER,
    FIRST,
    FULLSCREEN,
    LAST,
    LEAVE,
    NEXT,
    PLAY,
    PREV,
    RESET_BASELINE,
    RESET_STRIP,
    SETTLED,
    STRIP_FORWARD,
    STRIP_START,
    ReplayRecord,
    ReplayState,
    autoplay_step,
    build_controller_config,
    build_controller_script,
    card_compact_width,
    navigation_target,
    resolve_key_command,
)


def _enter_and_settle(record: ReplayRecord) -> list:
    performed = list(record.dispatch(ENTER))
    performed.extend(record.fire_pending())
    return performed


def test_every_reentry_replays_from_the_baseline() -> None:
    record = ReplayRecord()
    for _ in range(3):
        performed = _enter_and_settle(record)
        assert record.state is ReplayState.VISIBLE
        assert performed.index(RESET_BASELINE) < performed.index(PLAY)
        assert performed.count(PLAY) == 1

        record.dispatch(LEAVE)
        record.fire_pending()
        assert record.state is ReplayState.HIDDEN


def test_strip_is_reset_before_the_replay_plays() -> None:
    record = ReplayRecord()
    _enter_and_settle(record)
    record.dispatch(LEAVE)
    record.fire_pending()

    performed = _enter_and_settle(record)
    assert performed.index(RESET_STRIP) < performed.index(PLAY)


def test_leaving_cancels_a_pending_entrance() -> None:
    record = ReplayRecord()
    record.dispatch(ENTER)
    assert record.pending == [(SETTLED, 150)]

    actions = record.dispatch(LEAVE)
    assert actions[0] == CANCEL_TIMERS
    assert record.state is ReplayState.LEAVING
    assert all(event != SETTLED for event, _ in record.pending)

    assert PLAY not in record.fire_pending()
    assert record.state is ReplayState.HIDDEN


def test_entering_while_leaving_cancels_the_reset() -> None:
    record = ReplayRecord()
    _enter_and_settle(record)
    record.dispatch(LEAVE)
    record.dispatch(ENTER)

    assert record.state is ReplayState.ENTERING
    assert [event for event, _ in record.pending] == [SETTLED]
    assert PLAY in record.fire_pending()


def test_ignored_events_change_nothing() -> None:
    record = ReplayRecord()
    assert record.dispatch(LEAVE) == ()
    assert record.dispatch(SETTLED) == ()
    assert record.state is ReplayState.HIDDEN


def test_key_tables() -> None:
    assert resolve_key_command(" ") == NEXT
    assert resolve_key_command("PageUp") == PREV
    assert resolve_key_command("F11") == FULLSCREEN
    assert resolve_key_command("f", ctrl=True) == FULLSCREEN
    assert resolve_key_command("f") is None
    assert resolve_key_command("p") == AUTOPLAY
    assert resolve_key_command("ArrowRight") == NEXT
    assert resolve_key_command("ArrowRight", layout="timeline") == STRIP_FORWARD
    assert resolve_key_command("Home", layout="timeline") == STRIP_START
    assert resolve_key_command("ArrowDown", layout="timeline") == NEXT


def test_navigation_is_clamped() -> None:
    assert navigation_target(NEXT, 4, 5) == 4
    assert navigation_target(PREV, 0, 5) == 0
    assert navigation_target(FIRST, 3, 5) == 0
    assert navigation_target(LAST, 0, 5) == 4
    with pytest.raises(ValueError):
        navigation_target(FULLSCREEN, 0, 5)


def test_autoplay_stops_or_loops_at_the_end() -> None:
    assert autoplay_step(1, 3, loop=False) == 2
    assert autoplay_step(2, 3, loop=False) is None
    assert autoplay_step(2, 3, loop=True) == 0


def test_profiles_cover_every_layout() -> None:
    assert set(ANIMATION_PROFILES) == set(LayoutType)
    timeline = ANIMATION_PROFILES[LayoutType.TIMELINE]
    assert timeline.delay_for(2) == timeline.base_delay_ms + 2 * timeline.stagger_ms
    assert timeline.delay_for(2, attribute=900) == 900


def test_card_compact_width() -> None:
    assert card_compact_width(1920, 3) is None
    assert card_compact_width(600, 3) == pytest.approx(600 * 0.7 / 3 - 40)


def test_config_is_plain_json() -> None:
    presentation = validate_presentation(
        {"title": "T", "slides": [{"type": "timeline", "content": {"events": [{"title": "a", "description": "b"}]}}]}
    )
    config = build_controller_config(presentation)
    encoded = json.loads(json.dumps(config))

    assert encoded["replay"]["initial"] == "hidden"
    assert encoded["replay"]["transitions"]["leaving"] == {"reset": "hidden", "enter": "entering"}
    assert encoded["animations"]["title-slide"] is None
    assert encoded["keys"]["timelineLayout"] == "timeline"

    script = build_controller_script(presentation)
    assert '"totalSlides": 1' in script


def _nested_keys(mapping):
    for key, value in mapping.items():
        yield key
        if isinstance(value, dict):
            yield from _nested_keys(value)


def test_script_reads_every_serialized_timing() -> None:
    unread = [key for key in _nested_keys(dict(TIMINGS)) if f".{key}" not in CONTROLLER_JS]
    assert unread == []


def test_list_density_follows_the_root_font() -> None:
    presentation = validate_presentation({"title": "T", "slides": [{"type": "list", "content": {"items": ["a"]}}]})
    density = build_controller_config(presentation)["density"]

    assert density["itemHeightRem"] == 6.0
    assert "density.itemHeightRem" in CONTROLLER_JS
    assert "itemHeight: itemHeightRem * rootFontPx" in CONTROLLER_JS
