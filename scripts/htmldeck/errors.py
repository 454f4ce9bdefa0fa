"""Custom exceptions for presentation input and generation errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

STRUCTURE = "structure"
SLIDE_TYPE = "slide-type"
CONTENT_SHAPE = "content-shape"

_SEVERITY = (STRUCTURE, SLIDE_TYPE, CONTENT_SHAPE)


@dataclass(frozen=True)
class Violation:
    """One problem found in a presentation document."""

    kind: str
    message: str
    slide: Optional[int] = None

    def __str__(self) -> str:
        if self.slide is None:
            return self.message
        return f"Slide {self.slide}: {self.message}"


class PresentationValidationError(ValueError):
    """Raised when a presentation document is invalid for compilation."""

    def __init__(self, violations: Iterable[Violation], source: Optional[str] = None):
        self.violations = [v for v in violations if str(v).strip()]
        if not self.violations:
            self.violations = [Violation(STRUCTURE, "Invalid presentation")]
        self.source = source
        super().__init__(self._format())

    @property
    def issues(self) -> list[str]:
        return [str(v) for v in self.violations]

    def _format(self) -> str:
        header = "Presentation validation failed"
        if self.source:
            header += f" ({self.source})"
        lines = [header + ":"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)


class StructuralError(PresentationValidationError):
    """Document is not an object, or its title/slides are missing or malformed."""


class SlideTypeError(PresentationValidationError):
    """A slide declares an unknown layout type or style."""


class ContentShapeError(PresentationValidationError):
    """A slide is missing required content or has the wrong cardinality."""


_ERROR_BY_KIND = {
    STRUCTURE: StructuralError,
    SLIDE_TYPE: SlideTypeError,
    CONTENT_SHAPE: ContentShapeError,
}


def error_for(violations: list[Violation], source: Optional[str] = None) -> PresentationValidationError:
    """Build the exception matching the most severe violation kind."""
    kinds = {v.kind for v in violations}
    for kind in _SEVERITY:
        if kind in kinds:
            return _ERROR_BY_KIND[kind](violations, source=source)
    return PresentationValidationError(violations, source=source)


class AIGenerationError(RuntimeError):
    """Raised when the language-model call cannot produce a usable presentation."""
