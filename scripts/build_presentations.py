"""Build HTML presentations from the YAML decks in content/.

Usage:
    python scripts/build_presentations.py                  # every deck in content/
    python scripts/build_presentations.py content/demo.yaml
    python scripts/build_presentations.py --output-dir dist
"""

from __future__ import annotations

import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parent
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from htmldeck.cli import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
