"""View-time navigation and animation controller.

Everything that decides behaviour lives here as plain data: the key tables,
the per-layout animation profiles, the per-slide replay state machine, the
density parameters and the timings. ``build_controller_script`` serializes
that data into the page, and the inline script only interprets it.

``resolve_key_command``, ``navigation_target``, ``autoplay_step`` and
``card_compact_width`` are reference copies of the script's branching, used
by the tests only; the page never calls them. Keep them in step with
``CONTROLLER_JS`` when either changes.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .density import BAND_UNITS, DEFAULT_PARAMETERS, ITEM_HEIGHT_REM, ROOT_FONT_DIVISORS, DensityParameters
from .layouts import LayoutType
from .models import Presentation

# -- keyboard ---------------------------------------------------------------

NEXT = "next"
PREV = "prev"
FIRST = "first"
LAST = "last"
FULLSCREEN = "fullscreen"
EXIT_FULLSCREEN = "exit-fullscreen"
AUTOPLAY = "autoplay"
STRIP_FORWARD = "strip-forward"
STRIP_BACK = "strip-back"
STRIP_START = "strip-start"
STRIP_END = "strip-end"

KEY_COMMANDS: Mapping[str, str] = MappingProxyType(
    {
        "ArrowDown": NEXT,
        " ": NEXT,
        "PageDown": NEXT,
        "Enter": NEXT,
        "ArrowUp": PREV,
        "PageUp": PREV,
        "ArrowRight": NEXT,
        "ArrowLeft": PREV,
        "Home": FIRST,
        "End": LAST,
        "F11": FULLSCREEN,
        "Escape": EXIT_FULLSCREEN,
        "p": AUTOPLAY,
    }
)
CTRL_KEY_COMMANDS: Mapping[str, str] = MappingProxyType({"f": FULLSCREEN})

# While a timeline slide is current these keys drive its horizontal strip.
TIMELINE_KEY_OVERRIDES: Mapping[str, str] = MappingProxyType(
    {
        "ArrowRight": STRIP_FORWARD,
        "ArrowLeft": STRIP_BACK,
        "Home": STRIP_START,
        "End": STRIP_END,
    }
)


def resolve_key_command(key: str, *, ctrl: bool = False, layout: Optional[str] = None) -> Optional[str]:
    if ctrl:
        return CTRL_KEY_COMMANDS.get(key)
    if layout == LayoutType.TIMELINE.value and key in TIMELINE_KEY_OVERRIDES:
        return TIMELINE_KEY_OVERRIDES[key]
    return KEY_COMMANDS.get(key)


def navigation_target(command: str, current: int, slide_count: int) -> int:
    """Slide index a navigation command scrolls to, clamped to the deck."""
    last = max(slide_count - 1, 0)
    if command == NEXT:
        target = current + 1
    elif command == PREV:
        target = current - 1
    elif command == FIRST:
        target = 0
    elif command == LAST:
        target = last
    else:
        raise ValueError(f"Not a navigation command: {command}")
    return min(max(target, 0), last)


def autoplay_step(current: int, slide_count: int, loop: bool) -> Optional[int]:
    """Next autoplay target, or None when autoplay stops at the end."""
    if current < slide_count - 1:
        return current + 1
    return 0 if loop else None


# -- animation profiles -----------------------------------------------------


@dataclass(frozen=True)
class AnimationProfile:
    """Entrance animation of one layout.

    A child's delay is its ``data-anim-delay`` attribute when the renderer set
    one, else ``base_delay_ms + position * stagger_ms``.
    """

    selector: str
    from_transform: str
    to_transform: str
    duration_ms: int
    easing: str = "ease"
    base_delay_ms: int = 0
    stagger_ms: int = 0
    static_selector: str = ""
    from_opacity: float = 0.0
    to_opacity: float = 1.0

    def delay_for(self, position: int, attribute: Optional[int] = None) -> int:
        if attribute is not None:
            return attribute
        return self.base_delay_ms + position * self.stagger_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "selector": self.selector,
            "fromTransform": self.from_transform,
            "toTransform": self.to_transform,
            "durationMs": self.duration_ms,
            "easing": self.easing,
            "baseDelayMs": self.base_delay_ms,
            "staggerMs": self.stagger_ms,
            "staticSelector": self.static_selector,
            "fromOpacity": self.from_opacity,
            "toOpacity": self.to_opacity,
        }


_FADE_UP = AnimationProfile(".content", "translateY(20px)", "translateY(0)", 600, base_delay_ms=100)
_TEXT_AFTER_IMAGE = AnimationProfile(
    ".text-content", "translateY(20px)", "translateY(0)", 600, base_delay_ms=300, static_selector="img"
)
_LIST_ITEMS = AnimationProfile("li", "translateY(15px)", "translateY(0)", 300, base_delay_ms=300, stagger_ms=100)
_CARD_BOUNCE = AnimationProfile(
    ".card",
    "translateY(80px) scale(0.7)",
    "translateY(0) scale(1)",
    800,
    easing="cubic-bezier(0.34, 1.56, 0.64, 1)",
    base_delay_ms=400,
    stagger_ms=300,
)

ANIMATION_PROFILES: Mapping[LayoutType, Optional[AnimationProfile]] = MappingProxyType(
    {
        LayoutType.TITLE_SLIDE: None,
        LayoutType.SECTION_BREAK: None,
        LayoutType.TEXT_LEFT: _FADE_UP,
        LayoutType.TEXT_CENTER: _FADE_UP,
        LayoutType.IMAGE_FULL: None,
        LayoutType.IMAGE_1: None,
        LayoutType.IMAGE_HORIZONTAL_2: AnimationProfile(
            "img", "translateX(-30px)", "translateX(0)", 500, base_delay_ms=200, stagger_ms=150
        ),
        LayoutType.IMAGE_2X2: AnimationProfile("img", "scale(0.8)", "scale(1)", 400, base_delay_ms=200, stagger_ms=100),
        LayoutType.IMAGE_TEXT_HORIZONTAL: _TEXT_AFTER_IMAGE,
        LayoutType.IMAGE_TEXT_VERTICAL: _TEXT_AFTER_IMAGE,
        LayoutType.LIST: _LIST_ITEMS,
        LayoutType.NUM_LIST: _LIST_ITEMS,
        LayoutType.CARD_2: _CARD_BOUNCE,
        LayoutType.CARD_3: _CARD_BOUNCE,
        LayoutType.TIMELINE: AnimationProfile(
            ".timeline-item",
            "translateX(-100px) scale(0.8)",
            "translateX(0) scale(1)",
            700,
            easing="cubic-bezier(0.68, -0.55, 0.265, 1.55)",
            base_delay_ms=300,
            stagger_ms=250,
        ),
    }
)


# -- replay state machine ---------------------------------------------------


class ReplayState(str, Enum):
    HIDDEN = "hidden"
    ENTERING = "entering"
    VISIBLE = "visible"
    LEAVING = "leaving"


ENTER = "enter"
LEAVE = "leave"
SETTLED = "settled"
RESET = "reset"


@dataclass(frozen=True)
class ReplayAction:
    op: str
    event: Optional[str] = None
    delay_ms: int = 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"op": self.op}
        if self.event is not None:
            data["event"] = self.event
            data["delayMs"] = self.delay_ms
        return data


CANCEL_TIMERS = ReplayAction("cancel-timers")
RESET_STRIP = ReplayAction("reset-strip")
RESET_BASELINE = ReplayAction("reset-baseline")
PLAY = ReplayAction("play")

ENTER_SETTLE_MS = 150
LEAVE_RESET_MS = 50

REPLAY_TRANSITIONS: Mapping[ReplayState, Mapping[str, ReplayState]] = MappingProxyType(
    {
        ReplayState.HIDDEN: {ENTER: ReplayState.ENTERING},
        ReplayState.ENTERING: {SETTLED: ReplayState.VISIBLE, LEAVE: ReplayState.LEAVING},
        ReplayState.VISIBLE: {LEAVE: ReplayState.LEAVING},
        ReplayState.LEAVING: {RESET: ReplayState.HIDDEN, ENTER: ReplayState.ENTERING},
    }
)

# Actions run on arrival in a state, in order.
REPLAY_ACTIONS: Mapping[ReplayState, Tuple[ReplayAction, ...]] = MappingProxyType(
    {
        ReplayState.HIDDEN: (),
        ReplayState.ENTERING: (
            CANCEL_TIMERS,
            RESET_STRIP,
            RESET_BASELINE,
            ReplayAction("schedule", SETTLED, ENTER_SETTLE_MS),
        ),
        ReplayState.VISIBLE: (PLAY,),
        ReplayState.LEAVING: (
            CANCEL_TIMERS,
            RESET_BASELINE,
            ReplayAction("schedule", RESET, LEAVE_RESET_MS),
        ),
    }
)


class ReplayRecord:
    """Replay state of one slide, interpreted the same way as the page script."""

    def __init__(self) -> None:
        self.state = ReplayState.HIDDEN
        self.pending: List[Tuple[str, int]] = []

    def dispatch(self, event: str) -> Tuple[ReplayAction, ...]:
        target = REPLAY_TRANSITIONS[self.state].get(event)
        if target is None:
            return ()
        self.state = target
        actions = REPLAY_ACTIONS[target]
        for action in actions:
            if action is CANCEL_TIMERS:
                self.pending.clear()
            elif action.op == "schedule" and action.event:
                self.pending.append((action.event, action.delay_ms))
        return actions

    def fire_pending(self) -> List[ReplayAction]:
        """Deliver every scheduled event, as if its timer had elapsed."""
        performed: List[ReplayAction] = []
        while self.pending:
            event, _ = self.pending.pop(0)
            performed.extend(self.dispatch(event))
        return performed


# -- timings ----------------------------------------------------------------

TIMINGS: Mapping[str, Any] = MappingProxyType(
    {
        "scrollDebounceMs": 100,
        "resizeDebounceMs": 250,
        "visibilityThreshold": 0.1,
        "timelineStepPx": 300,
        "rootFontDivisors": list(ROOT_FONT_DIVISORS),
        "safeMargins": {
            "top": {"min": 10, "max": 20, "ratio": 0.15},
            "bottom": {"min": 10, "max": 15, "ratio": 0.1},
            "horizontal": {"min": 15, "max": 25, "ratio": 0.1},
        },
        "cardCompact": {
            "maxWidthPx": 300,
            "availableRatio": 0.7,
            "gutterPx": 40,
            "thresholdPx": 250,
            "fontSizeRem": 0.9,
            "imageHeightPx": 60,
        },
    }
)


def card_compact_width(viewport_width: float, card_count: int) -> Optional[float]:
    """Per-card min width in compact mode, or None when cards fit as designed."""
    compact = TIMINGS["cardCompact"]
    width = min(compact["maxWidthPx"], viewport_width * compact["availableRatio"] / card_count - compact["gutterPx"])
    return width if width < compact["thresholdPx"] else None


def build_controller_config(
    presentation: Presentation,
    density_params: DensityParameters = DEFAULT_PARAMETERS,
) -> Dict[str, Any]:
    return {
        "totalSlides": len(presentation.slides),
        "slides": presentation.summary(),
        "settings": presentation.settings.to_dict(),
        "keys": {
            "commands": dict(KEY_COMMANDS),
            "ctrl": dict(CTRL_KEY_COMMANDS),
            "timeline": dict(TIMELINE_KEY_OVERRIDES),
            "timelineLayout": LayoutType.TIMELINE.value,
        },
        "animations": {
            layout.value: profile.to_dict() if profile else None for layout, profile in ANIMATION_PROFILES.items()
        },
        "replay": {
            "initial": ReplayState.HIDDEN.value,
            "transitions": {
                state.value: {event: target.value for event, target in table.items()}
                for state, table in REPLAY_TRANSITIONS.items()
            },
            "actions": {state.value: [a.to_dict() for a in actions] for state, actions in REPLAY_ACTIONS.items()},
        },
        "density": {
            "band": asdict(BAND_UNITS),
            "itemHeightRem": ITEM_HEIGHT_REM,
            "params": density_params.to_dict(),
            "layouts": [LayoutType.LIST.value, LayoutType.NUM_LIST.value],
        },
        "timings": dict(TIMINGS),
    }


def build_controller_script(presentation: Presentation, density_params: DensityParameters = DEFAULT_PARAMETERS) -> str:
    config = json.dumps(build_controller_config(presentation, density_params), ensure_ascii=False, indent=2)
    # A literal "</" would end the surrounding <script> element early.
    return CONTROLLER_JS.replace("__HTMLDECK_CONFIG__", config.replace("</", "<\\/"))


CONTROLLER_JS = r"""
(function () {
  'use strict';

  const CONFIG = __HTMLDECK_CONFIG__;

  function viewportUnits(band, itemHeightRem, heightPx, rootFontPx) {
    const ratio = heightPx / 100;
    return {
      withTitle: band.available_with_title * ratio,
      withoutTitle: band.available_without_title * ratio,
      itemHeight: itemHeightRem * rootFontPx,
    };
  }

  function scaleDensity(items, hasTitle, units, p) {
    const count = items.length;
    const multi = count >= p.multi_column_threshold;
    const perColumn = multi ? Math.ceil(count / 2) : count;
    const average = count ? items.reduce((sum, text) => sum + text.length, 0) / count : 0;
    const available = hasTitle ? units.withTitle : units.withoutTitle;
    const lengthMultiplier = Math.min(1 + (average - p.baseline_length) / p.length_span, p.max_length_multiplier);
    const factor = available > 0 ? (perColumn * units.itemHeight * lengthMultiplier) / available : Infinity;
    const result = { multi: multi, factor: factor, requiresScaling: factor > p.scaling_threshold };
    if (!result.requiresScaling) return result;
    const scale = Math.min(p.target_density / factor, 1);
    const lineScale = Math.max(p.line_height_floor, p.line_height_baseline + (scale - p.line_height_baseline) * p.line_height_blend);
    result.fontRem = p.font_size_rem * Math.max(p.font_floor, scale);
    result.lineHeight = p.line_height * lineScale;
    result.marginRem = p.margin_rem * Math.max(p.margin_floor, scale * p.margin_ratio);
    result.gapRem = multi ? p.gap_rem * Math.max(p.gap_floor, scale * p.gap_ratio) : 0;
    return result;
  }

  function setImportant(el, prop, value) {
    if (value === null) el.style.removeProperty(prop);
    else el.style.setProperty(prop, value, 'important');
  }

  class ScrollSnapNavigator {
    constructor(config) {
      this.config = config;
      this.currentSlide = 0;
      this.autoplayTimer = null;
      this.scrollContainer = document.querySelector('.slides-scroll-container');
      this.slideElements = Array.from(document.querySelectorAll('.slide-section'));
      this.replay = this.slideElements.map(() => ({ state: config.replay.initial, timers: [] }));

      this.setupScrollTracking();
      this.setupKeyboardNavigation();
      this.setupResponsiveHandling();
      this.setupAnimationObserver();
      this.handleResize();
      this.updateProgress();
      if (config.settings.autoplay) this.startAutoplay();
    }

    slideCount() {
      return this.slideElements.length;
    }

    clamp(index) {
      return Math.max(0, Math.min(this.slideCount() - 1, index));
    }

    // -- scroll position ------------------------------------------------

    setupScrollTracking() {
      if (!this.scrollContainer) return;
      let timeout = null;
      this.scrollContainer.addEventListener('scroll', () => {
        clearTimeout(timeout);
        timeout = setTimeout(() => this.updateCurrentSlideFromScroll(), this.config.timings.scrollDebounceMs);
      });
    }

    updateCurrentSlideFromScroll() {
      const index = this.clamp(Math.round(this.scrollContainer.scrollTop / window.innerHeight));
      if (index !== this.currentSlide) {
        this.currentSlide = index;
        this.updateProgress();
      }
    }

    scrollToSlide(index) {
      if (!this.scrollContainer) return;
      this.scrollContainer.scrollTo({ top: this.clamp(index) * window.innerHeight, behavior: 'smooth' });
    }

    updateProgress() {
      if (!this.config.settings.showProgress) return;
      const fill = document.querySelector('.progress-fill');
      if (fill) fill.style.width = ((this.currentSlide + 1) / this.slideCount()) * 100 + '%';
      const counter = document.querySelector('.current-slide');
      if (counter) counter.textContent = String(this.currentSlide + 1);
    }

    // -- keyboard -------------------------------------------------------

    resolveCommand(event) {
      const keys = this.config.keys;
      if (event.ctrlKey) return keys.ctrl[event.key] || null;
      const slide = this.slideElements[this.currentSlide];
      if (slide && slide.dataset.slideType === keys.timelineLayout && keys.timeline[event.key]) {
        return keys.timeline[event.key];
      }
      return keys.commands[event.key] || null;
    }

    setupKeyboardNavigation() {
      document.addEventListener('keydown', (event) => {
        const command = this.resolveCommand(event);
        if (!command) return;
        if (command !== 'exit-fullscreen' && command !== 'autoplay') event.preventDefault();
        this.runCommand(command);
      });
    }

    runCommand(command) {
      const step = this.config.timings.timelineStepPx;
      switch (command) {
        case 'next': this.scrollToSlide(this.currentSlide + 1); break;
        case 'prev': this.scrollToSlide(this.currentSlide - 1); break;
        case 'first': this.scrollToSlide(0); break;
        case 'last': this.scrollToSlide(this.slideCount() - 1); break;
        case 'fullscreen': this.toggleFullscreen(); break;
        case 'exit-fullscreen':
          if (document.fullscreenElement) document.exitFullscreen();
          break;
        case 'autoplay':
          if (this.config.settings.autoplay) this.toggleAutoplay();
          break;
        case 'strip-forward': this.scrollStrip((strip) => strip.scrollBy({ left: step, behavior: 'smooth' })); break;
        case 'strip-back': this.scrollStrip((strip) => strip.scrollBy({ left: -step, behavior: 'smooth' })); break;
        case 'strip-start': this.scrollStrip((strip) => strip.scrollTo({ left: 0, behavior: 'smooth' })); break;
        case 'strip-end':
          this.scrollStrip((strip) => strip.scrollTo({ left: strip.scrollWidth - strip.clientWidth, behavior: 'smooth' }));
          break;
        default: break;
      }
    }

    scrollStrip(move) {
      const slide = this.slideElements[this.currentSlide];
      const strip = slide ? slide.querySelector('.timeline-wrapper') : null;
      if (strip) move(strip);
    }

    toggleFullscreen() {
      if (!document.fullscreenElement) {
        document.documentElement.requestFullscreen();
      } else if (document.exitFullscreen) {
        document.exitFullscreen();
      }
    }

    // -- autoplay -------------------------------------------------------

    startAutoplay() {
      this.stopAutoplay();
      this.autoplayTimer = setInterval(() => this.advanceAutoplay(), this.config.settings.autoplayInterval);
    }

    stopAutoplay() {
      if (this.autoplayTimer !== null) clearInterval(this.autoplayTimer);
      this.autoplayTimer = null;
    }

    toggleAutoplay() {
      if (this.autoplayTimer === null) this.startAutoplay();
      else this.stopAutoplay();
    }

    advanceAutoplay() {
      if (this.currentSlide < this.slideCount() - 1) {
        this.scrollToSlide(this.currentSlide + 1);
      } else if (this.config.settings.loop) {
        this.scrollToSlide(0);
      } else {
        this.stopAutoplay();
      }
    }

    // -- replay machine -------------------------------------------------

    setupAnimationObserver() {
      if (!('IntersectionObserver' in window)) return;
      this.slideElements.forEach((slide) => this.resetToBaseline(slide));
      const observer = new IntersectionObserver((entries) => {
        entries.forEach((entry) => {
          const index = this.slideElements.indexOf(entry.target);
          if (index >= 0) this.dispatchReplay(index, entry.isIntersecting ? 'enter' : 'leave');
        });
      }, { root: this.scrollContainer, rootMargin: '0px', threshold: this.config.timings.visibilityThreshold });
      this.slideElements.forEach((slide) => observer.observe(slide));
    }

    dispatchReplay(index, event) {
      const record = this.replay[index];
      const next = (this.config.replay.transitions[record.state] || {})[event];
      if (!next) return;
      record.state = next;
      (this.config.replay.actions[next] || []).forEach((action) => this.runReplayAction(index, action));
    }

    runReplayAction(index, action) {
      const record = this.replay[index];
      const slide = this.slideElements[index];
      switch (action.op) {
        case 'cancel-timers':
          record.timers.forEach((timer) => clearTimeout(timer));
          record.timers = [];
          break;
        case 'reset-strip':
          this.resetHorizontalScroll(slide);
          break;
        case 'reset-baseline':
          this.resetToBaseline(slide);
          break;
        case 'schedule':
          record.timers.push(setTimeout(() => this.dispatchReplay(index, action.event), action.delayMs));
          break;
        case 'play':
          this.playEntrance(index);
          break;
        default:
          break;
      }
    }

    profileFor(slide) {
      return this.config.animations[slide.dataset.slideType] || null;
    }

    resetToBaseline(slide) {
      const profile = this.profileFor(slide);
      if (!profile) return;
      slide.querySelectorAll(profile.selector).forEach((el) => {
        el.style.transition = 'none';
        el.style.opacity = String(profile.fromOpacity);
        setImportant(el, 'transform', profile.fromTransform);
        void el.offsetHeight;
      });
      if (profile.staticSelector) {
        slide.querySelectorAll(profile.staticSelector).forEach((el) => { el.style.opacity = '1'; });
      }
    }

    playEntrance(index) {
      const slide = this.slideElements[index];
      const profile = this.profileFor(slide);
      if (!profile) return;
      const record = this.replay[index];
      const timing = profile.durationMs + 'ms ' + profile.easing;
      slide.querySelectorAll(profile.selector).forEach((el, position) => {
        const attr = el.dataset.animDelay;
        const delay = attr !== undefined ? Number(attr) : profile.baseDelayMs + position * profile.staggerMs;
        record.timers.push(setTimeout(() => {
          el.style.transition = 'opacity ' + timing + ', transform ' + timing;
          el.style.opacity = String(profile.toOpacity);
          setImportant(el, 'transform', profile.toTransform);
        }, delay));
      });
    }

    resetHorizontalScroll(slide) {
      if (this.scrollContainer) this.scrollContainer.scrollLeft = 0;
      const scope = slide || document;
      scope.querySelectorAll('.timeline-wrapper, .timeline-scroll-container').forEach((strip) => {
        strip.scrollTo({ left: 0, behavior: 'instant' });
      });
    }

    // -- viewport -------------------------------------------------------

    setupResponsiveHandling() {
      let timeout = null;
      window.addEventListener('resize', () => {
        clearTimeout(timeout);
        timeout = setTimeout(() => this.handleResize(), this.config.timings.resizeDebounceMs);
      });
    }

    handleResize() {
      const width = window.innerWidth;
      const height = window.innerHeight;
      const timings = this.config.timings;
      const root = document.documentElement;
      const rootFont = Math.min(width / timings.rootFontDivisors[0], height / timings.rootFontDivisors[1]);
      root.style.fontSize = rootFont + 'px';

      const margins = timings.safeMargins;
      const bound = (m, size) => Math.max(m.min, Math.min(m.max, size * m.ratio)) + 'px';
      root.style.setProperty('--safe-margin-top', bound(margins.top, height));
      root.style.setProperty('--safe-margin-bottom', bound(margins.bottom, height));
      root.style.setProperty('--safe-margin-horizontal', bound(margins.horizontal, width));
      root.style.setProperty('--viewport-width', width + 'px');
      root.style.setProperty('--viewport-height', height + 'px');

      this.slideElements.forEach((slide) => {
        const type = slide.dataset.slideType;
        if (this.config.density.layouts.indexOf(type) >= 0) this.applyListDensity(slide, height, rootFont);
        if (type === 'card-2' || type === 'card-3') this.adjustCardSizing(slide, width);
      });
      this.resetHorizontalScroll(null);
    }

    applyListDensity(slide, height, rootFont) {
      const density = this.config.density;
      const list = slide.querySelector('.list-content, .num-list-content');
      if (!list) return;
      const items = Array.from(list.querySelectorAll('li'));
      const result = scaleDensity(
        items.map((li) => li.textContent),
        !!slide.querySelector('.slide-title'),
        viewportUnits(density.band, density.itemHeightRem, height, rootFont),
        density.params
      );
      items.forEach((li) => {
        setImportant(li, 'font-size', result.requiresScaling ? result.fontRem.toFixed(2) + 'rem' : null);
        setImportant(li, 'line-height', result.requiresScaling ? result.lineHeight.toFixed(2) : null);
        setImportant(li, 'margin-bottom', result.requiresScaling ? result.marginRem.toFixed(2) + 'rem' : null);
      });
      setImportant(list, 'gap', result.requiresScaling && result.multi ? result.gapRem.toFixed(2) + 'rem' : null);
    }

    adjustCardSizing(slide, width) {
      const compact = this.config.timings.cardCompact;
      const cards = Array.from(slide.querySelectorAll('.card'));
      if (!cards.length) return;
      const optimal = Math.min(compact.maxWidthPx, (width * compact.availableRatio) / cards.length - compact.gutterPx);
      const isCompact = optimal < compact.thresholdPx;
      cards.forEach((card) => {
        card.style.minWidth = isCompact ? optimal + 'px' : '';
        card.style.fontSize = isCompact ? compact.fontSizeRem + 'rem' : '';
        const image = card.querySelector('img');
        if (image) image.style.height = isCompact ? compact.imageHeightPx + 'px' : '';
      });
    }
  }

  function start() {
    window.presentationNavigator = new ScrollSnapNavigator(CONFIG);
  }

  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', start);
  } else {
    start();
  }
})();
"""
