from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
import requests
import yaml

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck import ai_generator  # noqa: E402
from htmldeck.errors import AIGenerationError, ContentShapeError  # noqa: E402

VALID_DECK = {
    "title": "Generated",
    "slides": [
        {"type": "title-slide", "style": "black", "title": {"visible": True, "text": "Generated"}},
        {"type": "list", "style": "white", "content": {"items": ["one", "two"]}},
    ],
}
INVALID_DECK = {"title": "Broken", "slides": [{"type": "card-2", "style": "white", "content": {"cards": []}}]}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = json.dumps(self._payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        return self._payload


def _completion(deck) -> FakeResponse:
    return FakeResponse(
        payload={
            "choices": [{"message": {"content": json.dumps(deck)}}],
            "usage": {"total_tokens": 42},
        }
    )


@pytest.fixture
def project(tmp_path: Path) -> ai_generator.ProjectInput:
    project_dir = tmp_path / "input" / "demo"
    (project_dir / "assets").mkdir(parents=True)
    (project_dir / "notes.txt").write_text("ignored", encoding="utf-8")
    (project_dir / "brief.md").write_text("# Brief\n\nShip it.\n", encoding="utf-8")
    (project_dir / "assets" / "hero.png").write_bytes(b"png")
    (project_dir / "assets" / "readme.txt").write_text("not an image", encoding="utf-8")
    return ai_generator.load_project("demo", tmp_path / "input")


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list:
    delays: list = []
    monkeypatch.setattr(ai_generator.time, "sleep", delays.append)
    return delays


def _queue_responses(monkeypatch: pytest.MonkeyPatch, *outcomes) -> list:
    calls: list = []
    pending = list(outcomes)

    def fake_post(url, **kwargs):
        calls.append((url, kwargs))
        outcome = pending.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    monkeypatch.setattr(ai_generator.requests, "post", fake_post)
    return calls


def test_load_project_prefers_markdown_and_lists_images(project) -> None:
    assert project.document_path.name == "brief.md"
    assert project.document.startswith("# Brief")
    assert [Path(a).name for a in project.assets] == ["hero.png"]


def test_load_project_requires_the_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="does not exist"):
        ai_generator.load_project("missing", tmp_path)


def test_prompt_lists_assets_and_requirements(project) -> None:
    prompt = ai_generator.build_prompt(project.document, project.assets)
    assert project.assets[0] in prompt
    assert "- card-3: content.cards (exactly 3 objects with title, description)" in prompt
    assert "Ship it." in prompt


def test_request_uses_structured_output(monkeypatch, project, no_sleep) -> None:
    calls = _queue_responses(monkeypatch, _completion(VALID_DECK))

    result = ai_generator.generate_presentation(project, api_key="sk-test")

    url, kwargs = calls[0]
    assert url == ai_generator.OPENAI_CHAT_URL
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["json"]["response_format"]["json_schema"]["name"] == "presentation_yaml"
    assert result.attempts == 1
    assert result.slide_count == 2
    assert result.usage["total_tokens"] == 42
    assert yaml.safe_load(result.yaml_text) == VALID_DECK
    assert no_sleep == []


def test_transport_failures_are_retried_with_backoff(monkeypatch, project, no_sleep) -> None:
    _queue_responses(
        monkeypatch,
        requests.ConnectionError("reset"),
        FakeResponse(503, {"error": "busy"}),
        _completion(VALID_DECK),
    )

    result = ai_generator.generate_presentation(project, api_key="sk-test", max_attempts=3)

    assert result.attempts == 3
    assert no_sleep == [1.5, 3.0]


def test_invalid_candidates_are_retried_then_reported(monkeypatch, project, no_sleep) -> None:
    _queue_responses(monkeypatch, _completion(INVALID_DECK), _completion(INVALID_DECK))

    with pytest.raises(ContentShapeError) as exc:
        ai_generator.generate_presentation(project, api_key="sk-test", max_attempts=2)

    assert "exactly 2 entries" in str(exc.value)
    assert no_sleep == [1.5]


def test_invalid_then_valid_candidate_succeeds(monkeypatch, project, no_sleep) -> None:
    _queue_responses(monkeypatch, _completion(INVALID_DECK), _completion(VALID_DECK))

    result = ai_generator.generate_presentation(project, api_key="sk-test")

    assert result.attempts == 2


def test_client_errors_are_not_retried(monkeypatch, project, no_sleep) -> None:
    calls = _queue_responses(monkeypatch, FakeResponse(401, {"error": "bad key"}))

    with pytest.raises(AIGenerationError, match="API 401"):
        ai_generator.generate_presentation(project, api_key="sk-bad")

    assert len(calls) == 1


def test_exhausted_transport_retries_raise(monkeypatch, project, no_sleep) -> None:
    _queue_responses(monkeypatch, requests.Timeout("slow"), requests.Timeout("slow"))

    with pytest.raises(AIGenerationError, match="after 2 attempt"):
        ai_generator.generate_presentation(project, api_key="sk-test", max_attempts=2)


def test_refusals_and_bad_json_are_generation_errors() -> None:
    with pytest.raises(AIGenerationError, match="refused"):
        ai_generator.parse_completion({"choices": [{"message": {"refusal": "no"}}]})
    with pytest.raises(AIGenerationError, match="not valid JSON"):
        ai_generator.parse_completion({"choices": [{"message": {"content": "{oops"}}]})
    with pytest.raises(AIGenerationError, match="Unexpected completion response"):
        ai_generator.parse_completion({"choices": []})


def test_api_key_from_env_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("# keys\nOTHER=1\nexport OPENAI_API_KEY='sk-from-file'\n", encoding="utf-8")

    assert ai_generator.resolve_api_key(env_file) == "sk-from-file"

    monkeypatch.setenv("OPENAI_API_KEY", "sk-from-env")
    assert ai_generator.resolve_api_key(env_file) == "sk-from-env"


def test_missing_api_key_exits_cleanly(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(SystemExit, match="OPENAI_API_KEY is required"):
        ai_generator.resolve_api_key(tmp_path / ".env")


def test_image_path_warnings_flag_unknown_assets() -> None:
    data = {
        "slides": [
            {"type": "image-1", "content": {"image": "input/demo/assets/hero.png"}},
            {"type": "image-1", "content": {"image": "input/demo/assets/made-up.png"}},
            {"type": "image-1", "content": {"image": "https://example.com/x.png"}},
            {"type": "card-2", "content": {"cards": [{"title": "a", "image": "diagram"}]}},
        ]
    }

    warnings = ai_generator.image_path_warnings(data, ["input/demo/assets/hero.png"])

    assert warnings == [
        "Slide 2: image 'input/demo/assets/made-up.png' is not one of the project assets",
        "Slide 4: image path 'diagram' may need verification",
    ]


def test_cli_writes_yaml(monkeypatch, project, no_sleep, tmp_path: Path) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    _queue_responses(monkeypatch, _completion(VALID_DECK))
    content_dir = tmp_path / "content"

    code = ai_generator.run_cli(
        ["--input", "demo", "--input-root", str(tmp_path / "input"), "--content-dir", str(content_dir)]
    )

    assert code == 0
    assert yaml.safe_load((content_dir / "demo.yaml").read_text(encoding="utf-8")) == VALID_DECK
