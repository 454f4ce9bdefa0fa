"""Draft a YAML deck from a text document with the OpenAI Chat Completions API.

The model is asked for JSON matching ``PRESENTATION_SCHEMA`` (structured
outputs); every candidate is then checked by the same validator the builder
uses before anything is written to disk.

Project layout read by ``load_project``::

    input/<project>/
        <document>.md | <document>.txt
        assets/        images offered to the model
"""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
import yaml

from .api import build_all
from .assets import DEFAULT_SAMPLE_IMAGE, IMAGE_EXTENSIONS, is_remote_reference
from .errors import AIGenerationError, PresentationValidationError
from .layouts import CONTRACTS, LAYOUT_TAGS, STYLE_TAGS, LayoutType
from .validation import validate_presentation

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "o4-mini-2025-04-16"
DEFAULT_MAX_ATTEMPTS = 3
REQUEST_TIMEOUT = 180
RETRYABLE_STATUS = {408, 409, 429, 500, 502, 503, 504}

_TEXT_FIELD_SCHEMA = {
    "type": "object",
    "properties": {"visible": {"type": "boolean"}, "text": {"type": "string"}},
    "required": ["visible", "text"],
    "additionalProperties": False,
}

PRESENTATION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "Presentation title"},
        "author": {"type": "string", "description": "Author name"},
        "date": {"type": "string", "description": "Presentation date (YYYY-MM-DD)"},
        "slides": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": list(LAYOUT_TAGS)},
                    "style": {"type": "string", "enum": list(STYLE_TAGS)},
                    "title": _TEXT_FIELD_SCHEMA,
                    "subtitle": _TEXT_FIELD_SCHEMA,
                    "content": {"type": "object", "additionalProperties": True},
                },
                "required": ["type", "style"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["title", "slides"],
    "additionalProperties": False,
}

SYSTEM_PROMPT = """You are an expert presentation designer. Turn the document you are given into a \
slide deck described as JSON.

Layouts and themes:
- title-slide: opening slide with title, subtitle, author and date (black)
- section-break: numbered section divider (black)
- text-left: regular prose (white); text-center: quotes and key statements (white)
- image-full, image-1, image-horizontal-2, image-2x2: one, two or four images (any theme)
- image-text-horizontal / image-text-vertical: image beside / above a text block (any theme)
- list / num-list: bullet or numbered points (white)
- card-2 / card-3: exactly two or three feature cards (white)
- timeline: dated events shown on a horizontal strip (white)

Guidelines:
- Always open with a title-slide and use section-break for major topics.
- Keep language short and concrete; balance text density across slides.
- Prefer fewer, substantial slides over many thin ones.
- Use image layouts only for real images you were given.
- Mix layouts for variety and close with a conclusion or call to action.
"""


def content_requirements() -> List[str]:
    """One line per layout naming the ``content`` fields it requires."""
    lines = []
    for layout in LayoutType:
        contract = CONTRACTS[layout]
        fields = [f"content.{name}" for name in contract.required_text]
        if contract.item_field:
            fields.append(f"content.{contract.item_field} (list of strings)")
        if contract.record_field:
            shape = ", ".join(contract.record_required)
            count = f"exactly {contract.exact_count} " if contract.exact_count else ""
            fields.append(f"content.{contract.record_field} ({count}objects with {shape})")
        optional = [f"content.{name}" for name in contract.image_fields if name not in contract.required_text]
        line = f"- {layout.value}: " + (", ".join(fields) if fields else "no required content")
        if optional:
            line += f"; optional {', '.join(optional)}"
        lines.append(line)
    return lines


@dataclass(frozen=True)
class ProjectInput:
    name: str
    document_path: Path
    document: str
    assets: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class GenerationResult:
    data: Dict[str, Any]
    yaml_text: str
    attempts: int
    usage: Dict[str, Any] = field(default_factory=dict)

    @property
    def slide_count(self) -> int:
        return len(self.data.get("slides") or [])


def _normalize_env_value(value: str) -> str:
    cleaned = value.strip().strip('"').strip("'")
    return cleaned.replace("\r", "")


def _read_openai_api_key(env_file: Path) -> Optional[str]:
    if not env_file.exists():
        return None

    for raw_line in env_file.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip().removeprefix("export ").strip() == "OPENAI_API_KEY":
            normalized = _normalize_env_value(value)
            return normalized or None
    return None


def resolve_api_key(env_file: Path) -> str:
    key = os.environ.get("OPENAI_API_KEY") or _read_openai_api_key(env_file)
    if not key:
        raise SystemExit(
            "OPENAI_API_KEY is required. Export it, or add OPENAI_API_KEY=... to "
            f"{env_file} (keys: https://platform.openai.com/api-keys)."
        )
    return key


def find_document_file(project_dir: Path) -> Path:
    files = sorted(p for p in project_dir.iterdir() if p.is_file())
    for suffix in (".md", ".txt"):
        for path in files:
            if path.suffix.lower() == suffix:
                return path
    raise FileNotFoundError(f"No document file found in {project_dir}. Expected a .md or .txt file.")


def scan_assets(assets_dir: Path) -> List[Path]:
    if not assets_dir.is_dir():
        return []
    return sorted(p for p in assets_dir.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)


def load_project(name: str, input_root: Path) -> ProjectInput:
    project_dir = input_root / name
    if not project_dir.is_dir():
        raise FileNotFoundError(f"Project directory '{project_dir}' does not exist")
    document_path = find_document_file(project_dir)
    assets = [p.as_posix() for p in scan_assets(project_dir / "assets")]
    return ProjectInput(
        name=name,
        document_path=document_path,
        document=document_path.read_text(encoding="utf-8").strip(),
        assets=assets,
    )


def build_prompt(document: str, assets: List[str]) -> str:
    parts = ["Required content per layout:", *content_requirements(), ""]
    if assets:
        parts.append("Images available (use these exact paths, never invent others):")
        parts.extend(f"- {asset}" for asset in assets)
    else:
        parts.append("No images are available; avoid image layouts.")
    parts.extend(["", "Document to convert:", document])
    return "\n".join(parts)


def _completion_payload(prompt: str, model: str) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        "response_format": {
            "type": "json_schema",
            "json_schema": {"name": "presentation_yaml", "schema": PRESENTATION_SCHEMA},
        },
    }


def parse_completion(body: Dict[str, Any]) -> Dict[str, Any]:
    """Extract the JSON deck from a chat completion response body."""
    try:
        message = body["choices"][0]["message"]
    except (KeyError, IndexError, TypeError) as e:
        raise AIGenerationError(f"Unexpected completion response: {str(body)[:300]}") from e
    if message.get("refusal"):
        raise AIGenerationError(f"Model refused the request: {message['refusal']}")
    try:
        data = json.loads(message.get("content") or "")
    except json.JSONDecodeError as e:
        raise AIGenerationError(f"Model output is not valid JSON ({e})") from e
    if not isinstance(data, dict):
        raise AIGenerationError("Model output root must be a JSON object")
    return data


def request_completion(prompt: str, *, api_key: str, model: str = DEFAULT_MODEL) -> Dict[str, Any]:
    """POST one completion request. Retryable failures raise ``requests.RequestException``."""
    response = requests.post(
        OPENAI_CHAT_URL,
        headers={"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"},
        json=_completion_payload(prompt, model),
        timeout=REQUEST_TIMEOUT,
    )
    if response.status_code in RETRYABLE_STATUS:
        raise requests.HTTPError(f"API {response.status_code}: {response.text[:300]}", response=response)
    if not response.ok:
        raise AIGenerationError(f"API {response.status_code}: {response.text[:300]}")
    return response.json()


def generate_presentation(
    project: ProjectInput,
    *,
    api_key: str,
    model: str = DEFAULT_MODEL,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> GenerationResult:
    """Ask the model for a deck, retrying transport failures and invalid candidates."""
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    prompt = build_prompt(project.document, project.assets)
    last_error: Optional[Exception] = None

    for attempt in range(1, max_attempts + 1):
        print(f"🚀 Calling {model} (attempt {attempt}/{max_attempts})...")
        try:
            body = request_completion(prompt, api_key=api_key, model=model)
            data = parse_completion(body)
            validate_presentation(data, source=f"{project.name} (model output)")
        except (requests.RequestException, PresentationValidationError) as e:
            last_error = e
            print(f"⚠️  Attempt {attempt} failed: {e}", file=sys.stderr)
            if attempt < max_attempts:
                time.sleep(1.5 * attempt)
            continue
        return GenerationResult(
            data=data,
            yaml_text=dump_yaml(data),
            attempts=attempt,
            usage=body.get("usage") or {},
        )

    if isinstance(last_error, PresentationValidationError):
        raise last_error
    raise AIGenerationError(f"Generation failed after {max_attempts} attempt(s): {last_error}")


def dump_yaml(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, allow_unicode=True, sort_keys=False, width=80, indent=2)


def _image_refs(slide: Dict[str, Any]) -> List[str]:
    content = slide.get("content")
    if not isinstance(content, dict):
        return []
    refs = [v for k, v in content.items() if k.startswith("image") and isinstance(v, str)]
    for card in content.get("cards") or []:
        if isinstance(card, dict) and isinstance(card.get("image"), str):
            refs.append(card["image"])
    return refs


def image_path_warnings(data: Dict[str, Any], known_assets: Optional[List[str]] = None) -> List[str]:
    """Flag image references that are neither offered assets nor plausible image paths."""
    known = set(known_assets or [])
    warnings = []
    for index, slide in enumerate(data.get("slides") or [], start=1):
        if not isinstance(slide, dict):
            continue
        for ref in _image_refs(slide):
            if ref in known or is_remote_reference(ref):
                continue
            if Path(ref).suffix.lower() not in IMAGE_EXTENSIONS:
                warnings.append(f"Slide {index}: image path '{ref}' may need verification")
            elif known and ref not in known:
                warnings.append(f"Slide {index}: image '{ref}' is not one of the project assets")
    return warnings


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a YAML slide deck from a text document with OpenAI")
    parser.add_argument("--input", required=True, help="Project directory name under --input-root")
    parser.add_argument("--input-root", default="input", help="Directory holding project folders (default: input)")
    parser.add_argument("--output", default=None, help="Output YAML filename (default: <project>.yaml)")
    parser.add_argument("--content-dir", default="content", help="Where the YAML deck is written (default: content)")
    parser.add_argument("--model", default=DEFAULT_MODEL, help=f"OpenAI model (default: {DEFAULT_MODEL})")
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=DEFAULT_MAX_ATTEMPTS,
        help=f"Attempts for transport failures or invalid output (default: {DEFAULT_MAX_ATTEMPTS})",
    )
    parser.add_argument("--env-file", default=".env", help="Fallback file for OPENAI_API_KEY (default: .env)")
    parser.add_argument("--auto-build", action="store_true", help="Build the HTML presentation after generation")
    parser.add_argument(
        "--output-dir",
        default="presentations",
        help="Output root used by --auto-build (default: presentations)",
    )
    parser.add_argument("--debug", action="store_true", help="Show full traceback for unexpected errors")
    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        api_key = resolve_api_key(Path(args.env_file))
        project = load_project(args.input, Path(args.input_root))
        print(f"📄 Found document: {project.document_path}")
        print(f"🖼️  Found {len(project.assets)} asset(s)")

        result = generate_presentation(project, api_key=api_key, model=args.model, max_attempts=args.max_attempts)

        content_dir = Path(args.content_dir)
        content_dir.mkdir(parents=True, exist_ok=True)
        output = content_dir / (args.output or f"{project.name}.yaml")
        output.write_text(result.yaml_text, encoding="utf-8")
        print(f"💾 Generated YAML saved to: {output}")

        for warning in image_path_warnings(result.data, project.assets):
            print(f"⚠️  {warning}", file=sys.stderr)

        print(f"🎉 {result.slide_count} slides, {result.usage.get('total_tokens', '?')} tokens")
        if args.auto_build:
            report = build_all(
                [output.resolve()],
                Path(args.output_dir).resolve(),
                sample_image=DEFAULT_SAMPLE_IMAGE.resolve(),
                debug=args.debug,
            )
            return report.exit_code
        return 0
    except PresentationValidationError as e:
        raise SystemExit(str(e)) from e
    except (AIGenerationError, FileNotFoundError) as e:
        raise SystemExit(f"Generation failed: {e}") from e
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        raise SystemExit(f"Generation failed: {e}") from e


def main() -> int:
    return run_cli()
