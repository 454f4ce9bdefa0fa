"""Public API helpers for programmatic presentation builds."""

from __future__ import annotations

import shutil
import sys
import tempfile
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import yaml

from .assemble import assemble_document
from .assets import ASSETS_DIRNAME, plan_assets, report_missing
from .controller import build_controller_script
from .errors import STRUCTURE, PresentationValidationError, StructuralError, Violation
from .layouts import CONTRACTS, LayoutContract, LayoutType
from .models import Presentation
from .render import ImageResolver, SlideRenderer
from .styles import build_stylesheet
from .validation import validate_presentation

YAML_SUFFIXES = (".yaml", ".yml")
INDEX_FILENAME = "index.html"


def parse_presentation_text(text: str, source: Optional[str] = None) -> Any:
    """Parse YAML text; syntax errors become a ``StructuralError`` with the position."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        problem = getattr(e, "problem", None) or str(e)
        where = f" at line {mark.line + 1}, column {mark.column + 1}" if mark is not None else ""
        raise StructuralError([Violation(STRUCTURE, f"YAML parse error{where}: {problem}")], source=source) from e


def load_presentation_file(path: Path) -> Any:
    return parse_presentation_text(path.read_text(encoding="utf-8"), source=path.name)


def compile_presentation(
    presentation: Presentation,
    *,
    resolve_image: Optional[ImageResolver] = None,
    contracts: Mapping[LayoutType, LayoutContract] = CONTRACTS,
) -> str:
    """Render a validated presentation into one self-contained HTML document."""
    renderer = SlideRenderer(contracts, resolve_image)
    fragments = renderer.render_all(presentation.slides)
    stylesheet = build_stylesheet(fragments)
    script = build_controller_script(presentation)
    return assemble_document(presentation, fragments, stylesheet, script)


@dataclass(frozen=True)
class BuildResult:
    source: Path
    output: Path
    slide_count: int
    assets: Tuple[Path, ...] = ()


@dataclass
class BuildReport:
    built: List[BuildResult] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1


def build_presentation_file(
    path: Path,
    output_dir: Path,
    *,
    sample_image: Optional[Path] = None,
) -> BuildResult:
    """Validate, compile and write one presentation to ``<output_dir>/<stem>/``.

    The page and its assets are staged in a temporary directory next to the
    target and moved into place only once complete; a failure at any step
    leaves no partial ``<stem>/`` behind.
    """
    presentation = validate_presentation(load_presentation_file(path), source=path.name)
    plan = plan_assets(presentation, path.parent, sample_image, extra_dirs=(Path.cwd(),))
    report_missing(plan, path.name)
    document = compile_presentation(presentation, resolve_image=plan.resolve)

    target = output_dir / path.stem
    output_dir.mkdir(parents=True, exist_ok=True)
    with tempfile.TemporaryDirectory(prefix=f".{path.stem}-", dir=output_dir) as staging:
        stage = Path(staging) / path.stem
        stage.mkdir()
        staged = plan.copy_into(stage / ASSETS_DIRNAME)
        (stage / INDEX_FILENAME).write_text(document, encoding="utf-8")
        if target.exists():
            shutil.rmtree(target)
        stage.rename(target)

    copied = tuple(target / p.relative_to(stage) for p in staged)
    return BuildResult(path, target / INDEX_FILENAME, len(presentation.slides), copied)


def discover_inputs(content_dir: Path) -> List[Path]:
    if not content_dir.is_dir():
        return []
    return sorted(p for p in content_dir.iterdir() if p.is_file() and p.suffix.lower() in YAML_SUFFIXES)


def build_all(
    paths: Iterable[Path],
    output_dir: Path,
    *,
    sample_image: Optional[Path] = None,
    debug: bool = False,
) -> BuildReport:
    """Build each file independently; one failure never stops the others."""
    report = BuildReport()
    for path in paths:
        print(f"🔄 Processing {path.name}...")
        try:
            result = build_presentation_file(path, output_dir, sample_image=sample_image)
        except PresentationValidationError as e:
            report.failed.append((path, str(e)))
            print(f"❌ {e}", file=sys.stderr)
        except Exception as e:
            if debug:
                traceback.print_exc()
            message = f"Build failed ({path.name}): {e}"
            report.failed.append((path, message))
            print(f"❌ {message}", file=sys.stderr)
        else:
            report.built.append(result)
            print(f"✅ Generated {result.output} ({result.slide_count} slides)")
    return report
