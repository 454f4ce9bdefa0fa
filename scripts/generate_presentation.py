"""Draft a presentation YAML from a project document with OpenAI.

Reads input/<project>/ (a .md/.txt document plus an optional assets/ folder),
writes content/<project>.yaml, and optionally builds it right away.

Usage:
    python scripts/generate_presentation.py --input pregen
    python scripts/generate_presentation.py --input pregen --auto-build
"""

from __future__ import annotations

import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck.ai_generator import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
