"""Internal helpers for the HTML presentation compiler."""

from .api import build_all, build_presentation_file, compile_presentation, parse_presentation_text
from .assemble import assemble_document
from .cli import run_cli
from .density import DensityParameters, DensityUnits, scale_density
from .errors import (
    AIGenerationError,
    ContentShapeError,
    PresentationValidationError,
    SlideTypeError,
    StructuralError,
)
from .layouts import CONTRACTS, LayoutType, SlideStyle
from .legacy_adapter import normalize_document, normalize_layout_tag
from .models import Presentation, Slide
from .render import SlideRenderer
from .validation import collect_violations, validate_presentation

__all__ = [
    "AIGenerationError",
    "CONTRACTS",
    "ContentShapeError",
    "DensityParameters",
    "DensityUnits",
    "LayoutType",
    "Presentation",
    "PresentationValidationError",
    "Slide",
    "SlideRenderer",
    "SlideStyle",
    "SlideTypeError",
    "StructuralError",
    "assemble_document",
    "build_all",
    "build_presentation_file",
    "collect_violations",
    "compile_presentation",
    "normalize_document",
    "normalize_layout_tag",
    "parse_presentation_text",
    "run_cli",
    "scale_density",
    "validate_presentation",
]
