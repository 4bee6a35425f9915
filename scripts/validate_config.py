#!/usr/bin/env python3
"""Validate the per-year YAML rule sets from a source checkout."""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running from a checkout without an editable install, like ``tests/``.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from davko.backend.config.validator import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
