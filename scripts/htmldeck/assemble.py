"""Join rendered slides, stylesheet and controller into one HTML document."""

from __future__ import annotations

import html
from typing import Sequence

from .models import Presentation
from .render import RenderedFragment

GENERATOR = "htmldeck"


def _indent(text: str, prefix: str) -> str:
    return "\n".join(prefix + line if line else line for line in text.splitlines())


def presentation_ui(presentation: Presentation) -> str:
    if not presentation.settings.show_progress:
        return ""
    total = len(presentation.slides)
    return f"""<div class="presentation-ui">
  <div class="progress-bar">
    <div class="progress-fill" style="width: {100 / total:.4g}%"></div>
  </div>
  <div class="slide-counter">
    <span class="current-slide">1</span>
    <span class="slide-separator">/</span>
    <span class="total-slides">{total}</span>
  </div>
  <div class="navigation-hints">
    <span class="nav-hint">&uarr; &darr; Scroll or arrow keys to navigate</span>
    <span class="nav-hint-secondary">F11 for fullscreen</span>
  </div>
</div>"""


def assemble_document(
    presentation: Presentation,
    fragments: Sequence[RenderedFragment],
    stylesheet: str,
    script: str,
) -> str:
    """Return the complete, self-contained page for ``presentation``."""
    title = html.escape(presentation.title)
    author = html.escape(presentation.author, quote=True)
    slides = "\n".join(fragment.markup for fragment in fragments)
    ui = presentation_ui(presentation)
    author_meta = f'\n  <meta name="author" content="{author}">' if author else ""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <meta name="description" content="{title}">
  <meta name="generator" content="{GENERATOR}">{author_meta}
  <style>
{_indent(stylesheet, "    ")}
  </style>
</head>
<body>
  <div id="presentation-container" class="presentation-container">
    <div class="slides-scroll-container">
{_indent(slides, "      ")}
    </div>
{_indent(ui, "    ")}
  </div>
  <script>
{script.strip()}
  </script>
</body>
</html>
"""
