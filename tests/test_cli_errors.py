from __future__ import annotations

import subprocess
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "build_presentations.py"


def _run(*args: str, cwd: Path) -> subprocess.CompletedProcess:
    return subprocess.run(["python3", str(SCRIPT), *args], capture_output=True, text=True, cwd=cwd)


def test_cli_shows_clean_validation_error(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("title: Missing slides\n", encoding="utf-8")
    output = tmp_path / "out"

    result = _run(str(bad), "--output-dir", str(output), cwd=tmp_path)

    assert result.returncode == 1
    assert "Presentation validation failed (bad.yaml)" in result.stderr
    assert "slides is required and must be a list" in result.stderr
    assert "Traceback" not in result.stderr
    assert not (output / "bad").exists()


def test_one_bad_file_does_not_stop_the_batch(tmp_path: Path) -> None:
    content = tmp_path / "content"
    content.mkdir()
    (content / "a_bad.yaml").write_text(
        "title: Bad\nslides:\n  - type: card-2\n    content:\n      cards: []\n", encoding="utf-8"
    )
    (content / "b_good.yaml").write_text(
        "title: Good\nslides:\n  - type: text-center\n    content:\n      text: Hello\n", encoding="utf-8"
    )
    output = tmp_path / "presentations"

    result = _run("--content-dir", str(content), "--output-dir", str(output), cwd=tmp_path)

    assert result.returncode == 1
    assert "Slide 1: content.cards must contain exactly 2 entries" in result.stderr
    assert "Traceback" not in result.stderr
    assert (output / "b_good" / "index.html").is_file()
    assert not (output / "a_bad").exists()


def test_cli_builds_the_sample_deck(tmp_path: Path) -> None:
    output = tmp_path / "presentations"

    result = _run(str(ROOT / "content" / "htmldeck.yaml"), "--output-dir", str(output), cwd=ROOT)

    assert result.returncode == 0, result.stderr
    assert (output / "htmldeck" / "index.html").is_file()
    assert "✅ Generated" in result.stdout


def test_cli_reports_missing_input_files(tmp_path: Path) -> None:
    result = _run(str(tmp_path / "nope.yaml"), cwd=tmp_path)

    assert result.returncode == 1
    assert "Input file(s) not found" in result.stderr
    assert "Traceback" not in result.stderr


def test_cli_with_empty_content_dir_succeeds(tmp_path: Path) -> None:
    result = _run("--content-dir", str(tmp_path / "empty"), cwd=tmp_path)

    assert result.returncode == 0
    assert "No YAML files found" in result.stdout
