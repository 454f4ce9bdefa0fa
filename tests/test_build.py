from __future__ import annotations

import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck import assets, build_all, build_presentation_file  # noqa: E402

DECK = """\
title: Two images
slides:
  - type: image-horizontal-2
    content:
      image1: a.png
      image2: b.png
"""


@pytest.fixture
def deck(tmp_path: Path) -> Path:
    source = tmp_path / "src"
    source.mkdir()
    (source / "a.png").write_bytes(b"a")
    (source / "b.png").write_bytes(b"b")
    path = source / "deck.yaml"
    path.write_text(DECK, encoding="utf-8")
    return path


def test_build_writes_page_and_assets(deck: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"

    result = build_presentation_file(deck, out)

    assert result.output == out / "deck" / "index.html"
    assert sorted(p.name for p in result.assets) == ["a.png", "b.png"]
    assert all(p.is_file() for p in result.assets)
    assert [p.name for p in out.iterdir()] == ["deck"]


def test_failed_copy_leaves_nothing_behind(deck: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real_copy = assets.shutil.copy2
    calls = []

    def flaky_copy(src, dst):
        calls.append(src)
        if len(calls) == 2:
            raise OSError("disk full")
        return real_copy(src, dst)

    monkeypatch.setattr(assets.shutil, "copy2", flaky_copy)
    out = tmp_path / "out"

    report = build_all([deck], out)

    assert report.exit_code == 1
    assert "Build failed (deck.yaml): disk full" in report.failed[0][1]
    assert list(out.iterdir()) == []


def test_rebuild_replaces_the_previous_output(deck: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    stale = out / "deck" / "assets" / "old.png"
    stale.parent.mkdir(parents=True)
    stale.write_bytes(b"old")

    build_presentation_file(deck, out)

    assert not stale.exists()
    assert (out / "deck" / "index.html").is_file()
