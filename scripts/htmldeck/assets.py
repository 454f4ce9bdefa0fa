"""Image asset collection for compiled presentations."""

from __future__ import annotations

import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .layouts import SAMPLE_IMAGE
from .models import ImageContent, Presentation

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg"}
ASSETS_DIRNAME = "assets"

DEFAULT_SAMPLE_IMAGE = Path("sample") / "images" / "sample_image.jpg"

_PASSTHROUGH_PREFIXES = ("http://", "https://", "data:", "//")


def is_remote_reference(ref: str) -> bool:
    return ref.lower().startswith(_PASSTHROUGH_PREFIXES)


def uses_sample_image(presentation: Presentation) -> bool:
    """True when a slide leaves an image slot empty or names the sample image."""
    for slide in presentation.slides:
        if isinstance(slide.content, ImageContent) and any(ref is None for ref in slide.content.images):
            return True
    return SAMPLE_IMAGE in presentation.image_references()


@dataclass
class AssetPlan:
    """Where each image reference comes from and what the page will call it."""

    sources: Dict[str, Path] = field(default_factory=dict)
    rewrites: Dict[str, str] = field(default_factory=dict)
    missing: List[str] = field(default_factory=list)

    def resolve(self, ref: str) -> str:
        return self.rewrites.get(ref, ref)

    def copy_into(self, assets_dir: Path) -> List[Path]:
        if not self.sources:
            return []
        assets_dir.mkdir(parents=True, exist_ok=True)
        copied = []
        for rel, source in self.sources.items():
            dest = assets_dir.parent / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, dest)
            copied.append(dest)
        return copied


def _locate(ref: str, base_dirs: Sequence[Path]) -> Optional[Path]:
    path = Path(ref).expanduser()
    if path.is_absolute():
        return path if path.is_file() else None
    for base in base_dirs:
        if (base / path).is_file():
            return base / path
    return None


def _unique_name(name: str, taken: Dict[str, Path]) -> str:
    candidate = f"{ASSETS_DIRNAME}/{name}"
    stem, suffix = Path(name).stem, Path(name).suffix
    n = 2
    while candidate in taken:
        candidate = f"{ASSETS_DIRNAME}/{stem}-{n}{suffix}"
        n += 1
    return candidate


def plan_assets(
    presentation: Presentation,
    source_dir: Path,
    sample_image: Optional[Path] = None,
    extra_dirs: Sequence[Path] = (),
) -> AssetPlan:
    """Map every image reference in ``presentation`` to a file under ``assets/``.

    Relative references are resolved against ``source_dir`` (the YAML file's
    directory), then against each of ``extra_dirs``. Remote and data URLs pass
    through untouched. References that do not exist on disk are kept as written
    and listed in ``missing``.
    """
    plan = AssetPlan()

    if uses_sample_image(presentation):
        if sample_image is not None and sample_image.is_file():
            plan.sources[SAMPLE_IMAGE] = sample_image
        else:
            plan.missing.append(SAMPLE_IMAGE)

    for ref in presentation.image_references():
        if ref == SAMPLE_IMAGE or is_remote_reference(ref):
            continue
        path = _locate(ref, [source_dir, *extra_dirs])
        if path is None:
            plan.missing.append(ref)
            continue
        rel = _unique_name(path.name, plan.sources)
        plan.sources[rel] = path
        plan.rewrites[ref] = rel
    return plan


def report_missing(plan: AssetPlan, label: str) -> None:
    for ref in plan.missing:
        print(f"⚠️  {label}: image not found, keeping reference as-is: {ref}", file=sys.stderr)
