"""CLI orchestration for the presentation builder."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .api import build_all, discover_inputs
from .assets import DEFAULT_SAMPLE_IMAGE


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compile YAML slide decks into self-contained HTML presentations")
    parser.add_argument(
        "inputs",
        nargs="*",
        help="YAML files to build (default: every .yaml/.yml file in --content-dir)",
    )
    parser.add_argument("--content-dir", default="content", help="Directory scanned for YAML decks (default: content)")
    parser.add_argument(
        "--output-dir",
        default="presentations",
        help="Output root; each deck is written to <output-dir>/<name>/index.html (default: presentations)",
    )
    parser.add_argument(
        "--sample-image",
        default=None,
        help=f"Image copied as assets/sample.jpg for empty image slots (default: {DEFAULT_SAMPLE_IMAGE})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show full traceback for unexpected errors",
    )
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.inputs:
        paths = [Path(p).resolve() for p in args.inputs]
        missing = [str(p) for p in paths if not p.is_file()]
        if missing:
            raise SystemExit("Input file(s) not found:\n" + "\n".join(f"- {m}" for m in missing))
    else:
        content_dir = Path(args.content_dir).resolve()
        paths = discover_inputs(content_dir)
        if not paths:
            print(f"📁 No YAML files found in {content_dir}")
            return 0
        print(f"📄 Found {len(paths)} YAML file(s): {', '.join(p.name for p in paths)}")

    sample_image = Path(args.sample_image).resolve() if args.sample_image else DEFAULT_SAMPLE_IMAGE.resolve()
    report = build_all(paths, Path(args.output_dir).resolve(), sample_image=sample_image, debug=args.debug)

    if report.failed:
        print(f"⚠️  {len(report.failed)} of {len(paths)} presentation(s) failed", file=sys.stderr)
    else:
        print(f"🎉 Built {len(report.built)} presentation(s)")
    return report.exit_code


def main() -> int:
    return run_cli()
