"""Stylesheet for compiled presentations.

Entrance animations are driven by the controller script, so the static rules
below only carry layout and theme; no element starts hidden without it.
"""

from __future__ import annotations

from typing import Iterable

from .layouts import CONTRACTS, LayoutType
from .render import RenderedFragment

_TITLED = ", ".join(
    f".{CONTRACTS[layout].css_class} .slide-title"
    for layout in LayoutType
    if layout not in (LayoutType.TITLE_SLIDE, LayoutType.SECTION_BREAK, LayoutType.TEXT_LEFT)
)

BASE_CSS = """\
* { margin: 0; padding: 0; box-sizing: border-box; }
html, body {
    height: 100%%;
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    overflow: hidden;
}

/* Scroll-snap container */
.presentation-container { width: 100vw; height: 100vh; overflow: hidden; }
.slides-scroll-container {
    width: 100%%;
    height: 100vh;
    overflow-y: scroll;
    overflow-x: hidden;
    scroll-snap-type: y mandatory;
    scroll-behavior: smooth;
    scrollbar-width: none;
    -ms-overflow-style: none;
}
.slides-scroll-container::-webkit-scrollbar { display: none; }
.slide-section {
    width: 100%%;
    height: 100vh;
    min-height: 100vh;
    max-height: 100vh;
    scroll-snap-align: start;
    scroll-snap-stop: always;
    position: relative;
    display: flex;
    flex-direction: column;
    overflow: hidden;
}
.slide-container {
    width: 100vw;
    height: 100vh;
    display: flex;
    flex-direction: column;
    position: relative;
}
.slide-container.black { background-color: #050505; color: #FFFFFF; }
.slide-container.white { background-color: #FFFFFF; color: #050505; }

/* Shared slide title */
%(titled)s {
    position: absolute;
    top: 3%%;
    left: 50%%;
    transform: translateX(-50%%);
    font-size: 3.5rem;
    font-weight: 600;
    line-height: 1.2;
    white-space: nowrap;
}

/* Title slide */
.title-slide .content { margin: 25%% 15%% 15%% 15%%; text-align: left; }
.title-slide .title { font-size: 4rem; font-weight: 700; margin-bottom: 1rem; line-height: 1.2; }
.title-slide .subtitle { font-size: 2rem; font-weight: 400; margin-bottom: 2rem; line-height: 1.3; }
.title-slide .author { font-size: 1.2rem; margin-bottom: 0.5rem; }
.title-slide .date { font-size: 1rem; opacity: 0.8; }

/* Section break */
.section-break .content {
    margin: 25%% 50%% 25%% 20%%;
    display: flex;
    flex-direction: column;
    align-items: flex-start;
}
.section-break .section-number { font-size: 8rem; font-weight: 900; line-height: 0.8; margin-bottom: 1rem; opacity: 0.9; }
.section-break .section-title {
    font-size: 3rem;
    font-weight: 600;
    line-height: 1.2;
    text-transform: uppercase;
    letter-spacing: 0.05em;
}

/* Text layouts */
.text-left .slide-title {
    position: absolute;
    top: 3%%;
    left: 15%%;
    font-size: 3.5rem;
    font-weight: 600;
    line-height: 1.2;
}
.text-left .content, .text-center .content {
    position: absolute;
    top: 20%%;
    bottom: 15%%;
    left: 15%%;
    right: 15%%;
    display: flex;
    align-items: center;
}
.text-left .content { right: 50%%; }
.text-center .content { justify-content: center; text-align: center; }
.text-content { font-size: 1.5rem; line-height: 1.6; }
.text-content p + p, .text-content ul, .text-content ol { margin-top: 0.8rem; }
.text-content ul, .text-content ol { padding-left: 1.5rem; }

/* Image layouts */
.image-full .slide-title {
    z-index: 10;
    background: rgba(0, 0, 0, 0.5);
    color: white;
    padding: 1.5rem 2.5rem;
}
.image-full .image-container { width: 100%%; height: 100%%; overflow: hidden; }
.image-full .full-image, .horizontal-image, .grid-image, .image-text-vertical .image-text-image {
    width: 100%%;
    height: 100%%;
    object-fit: cover;
    object-position: center;
}
.image-single .content {
    position: absolute;
    top: 20%%;
    bottom: 15%%;
    left: 15%%;
    right: 15%%;
    display: flex;
    align-items: center;
    justify-content: center;
}
.image-single .single-image, .image-text-horizontal .image-text-image {
    width: 100%%;
    height: 100%%;
    object-fit: contain;
    object-position: center;
}
.image-horizontal-2 .image-container-left, .image-horizontal-2 .image-container-right {
    position: absolute;
    top: 20%%;
    bottom: 15%%;
    overflow: hidden;
}
.image-horizontal-2 .image-container-left { left: 15%%; right: 52%%; }
.image-horizontal-2 .image-container-right { left: 52%%; right: 15%%; }
.image-2x2 .grid-container {
    position: absolute;
    top: 20%%;
    bottom: 15%%;
    left: 15%%;
    right: 15%%;
    display: grid;
    grid-template-columns: 1fr 1fr;
    grid-template-rows: 1fr 1fr;
    gap: 1rem;
}
.image-2x2 .grid-item { overflow: hidden; }

/* Image + text */
.image-text-horizontal .image-container-left {
    position: absolute; top: 20%%; bottom: 15%%; left: 15%%; right: 55%%; overflow: hidden;
}
.image-text-horizontal .text-container-right {
    position: absolute; top: 20%%; bottom: 15%%; left: 55%%; right: 15%%;
    display: flex; align-items: center; padding: 2rem;
}
.image-text-vertical .image-container-top {
    position: absolute; top: 20%%; bottom: 40%%; left: 15%%; right: 15%%; overflow: hidden;
}
.image-text-vertical .text-container-bottom {
    position: absolute; top: 65%%; bottom: 15%%; left: 15%%; right: 15%%;
    display: flex; align-items: center; justify-content: center; text-align: center; padding: 1.5rem;
}
.image-text-horizontal .text-content, .image-text-vertical .text-content { font-size: 1.4rem; }

/* Lists */
.list-layout .content, .num-list-layout .content {
    position: absolute;
    top: 20%%;
    bottom: 15%%;
    left: 15%%;
    right: 15%%;
    display: flex;
    align-items: center;
    justify-content: center;
}
.list-content, .num-list-content { list-style: none; padding: 0; width: 100%%; }
.num-list-content { counter-reset: item; }
.list-content.two-column, .num-list-content.two-column {
    display: grid;
    grid-template-columns: 1fr 1fr;
    grid-auto-flow: column;
    gap: 2rem;
}
.list-item, .num-list-item {
    position: relative;
    margin-bottom: 1.5rem;
    font-size: 1.4rem;
    line-height: 1.6;
}
.list-item { padding-left: 2rem; }
.list-item::before {
    content: "\\2022";
    position: absolute;
    left: 0;
    top: 0;
    font-size: 1.8rem;
    line-height: 1.4;
    color: currentColor;
}
.num-list-item { padding-left: 3rem; counter-increment: item; }
.num-list-item::before {
    content: counter(item) ".";
    position: absolute;
    left: 0;
    top: 0;
    font-weight: 600;
    min-width: 2rem;
}

/* Cards */
.card-2-layout .card-container, .card-3-layout .card-container {
    position: absolute;
    top: 25%%;
    bottom: 20%%;
    left: 0;
    right: 0;
    display: flex;
    align-items: center;
    justify-content: center;
    gap: 3rem;
}
.card-3-layout .card-container { gap: 2rem; }
.card {
    flex: 1;
    background: rgba(255, 255, 255, 0.1);
    backdrop-filter: blur(10px);
    border: 1px solid rgba(255, 255, 255, 0.2);
    padding: 2.5rem;
    text-align: center;
    box-shadow: 0 8px 32px rgba(0, 0, 0, 0.1);
    transition: transform 0.3s ease;
}
.card-2-layout .card { max-width: 35%%; }
.card-3-layout .card { max-width: 28%%; padding: 2rem; }
.slide-container.black .card { background: rgba(0, 0, 0, 0.3); border-color: rgba(255, 255, 255, 0.1); }
.card:hover { transform: translateY(-5px); }
.card-image { width: 80px; height: 80px; object-fit: cover; margin: 0 auto 1.5rem auto; display: block; }
.card-3-layout .card-image { width: 70px; height: 70px; }
.card-title { font-size: 1.8rem; font-weight: 600; margin-bottom: 1rem; line-height: 1.3; }
.card-3-layout .card-title { font-size: 1.6rem; }
.card-description { font-size: 1.1rem; line-height: 1.5; opacity: 0.9; }
.card-3-layout .card-description { font-size: 1rem; }

/* Timeline */
.timeline-scroll-container {
    position: absolute;
    top: 25%%;
    bottom: 20%%;
    left: 0;
    right: 0;
    overflow: hidden;
    z-index: 10;
}
.timeline-wrapper {
    position: relative;
    height: 100%%;
    overflow-x: auto;
    overflow-y: hidden;
    padding: 2rem 0;
    scroll-behavior: smooth;
    scrollbar-width: none;
    -ms-overflow-style: none;
}
.timeline-wrapper::-webkit-scrollbar { display: none; }
.timeline-line {
    position: absolute;
    top: 50%%;
    left: 0;
    right: 0;
    height: 4px;
    background: currentColor;
    opacity: 0.3;
    z-index: 1;
}
.timeline-items {
    display: flex;
    position: relative;
    height: 100%%;
    min-width: max-content;
    align-items: center;
    gap: 8rem;
    padding: 0 4rem;
    z-index: 2;
}
.timeline-item {
    position: relative;
    display: flex;
    flex-direction: column;
    align-items: center;
    min-width: 200px;
    max-width: 300px;
}
.timeline-node {
    width: 20px;
    height: 20px;
    background: currentColor;
    border-radius: 50%%;
    position: relative;
    z-index: 3;
    box-shadow: 0 0 0 4px #FFFFFF;
}
.slide-container.black .timeline-node { box-shadow: 0 0 0 4px #050505; }
.timeline-time {
    position: absolute;
    top: -3rem;
    font-size: 1.1rem;
    font-weight: 600;
    text-align: center;
    opacity: 0.8;
    min-width: 100px;
}
.timeline-content { position: absolute; top: 3rem; text-align: center; width: 100%%; }
.timeline-event-title { font-size: 1.4rem; font-weight: 600; margin-bottom: 0.5rem; line-height: 1.3; }
.timeline-description { font-size: 1rem; line-height: 1.4; opacity: 0.9; }
.timeline-navigation {
    position: absolute;
    bottom: 1rem;
    left: 50%%;
    transform: translateX(-50%%);
    text-align: center;
    z-index: 100;
}
.timeline-nav-hint { font-size: 0.9rem; opacity: 0.6; font-style: italic; }

/* Presentation UI */
.presentation-ui {
    position: fixed;
    bottom: 2rem;
    left: 50%%;
    transform: translateX(-50%%);
    display: flex;
    align-items: center;
    gap: 2rem;
    z-index: 100;
    pointer-events: none;
    mix-blend-mode: difference;
    color: rgba(255, 255, 255, 0.8);
}
.progress-bar { width: 200px; height: 4px; background: rgba(255, 255, 255, 0.3); border-radius: 2px; overflow: hidden; }
.progress-fill {
    height: 100%%;
    background: rgba(255, 255, 255, 0.8);
    transition: width 0.6s cubic-bezier(0.25, 0.46, 0.45, 0.94);
    border-radius: 2px;
}
.slide-counter { font-size: 0.9rem; font-weight: 500; min-width: 50px; text-align: center; }
.navigation-hints { display: flex; flex-direction: column; align-items: center; gap: 0.2rem; }
.nav-hint { font-size: 0.8rem; opacity: 0.75; font-style: italic; }
.nav-hint-secondary { font-size: 0.7rem; opacity: 0.5; font-style: italic; }

@media (max-width: 1024px) {
    .presentation-ui { bottom: 1rem; gap: 1.5rem; }
    .progress-bar { width: 150px; height: 3px; }
    .slide-counter { font-size: 0.8rem; }
}
@media (max-width: 768px) {
    .presentation-ui { gap: 1rem; }
    .progress-bar { width: 100px; }
    .navigation-hints { display: none; }
}
""" % {"titled": _TITLED}


def build_stylesheet(fragments: Iterable[RenderedFragment]) -> str:
    """Theme and layout rules followed by each slide's scoped density overrides."""
    parts = [BASE_CSS]
    for fragment in fragments:
        if fragment.style_overrides:
            parts.append(f"/* slide {fragment.index}: density scaling */\n{fragment.style_overrides}")
    return "\n".join(parts)
