#!/usr/bin/env python3
"""Tender Ranker — Application Runner.

Performs pre-flight checks and ranks the proposals in an input file.

Usage:
    python scripts/run.py data/sample_proposals.json
    python scripts/run.py data/sample_proposals.json --json
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

REQUIRED_FILES = [
    "tender_ranker/settings.yaml",
]


def preflight_checks() -> bool:
    """Run pre-flight checks before ranking.

    Checks:
      - .env file exists (optional, only warns)
      - Required config files exist

    Returns:
        True if all checks pass, False otherwise.
    """
    ok = True

    env_path = PROJECT_ROOT / ".env"
    if env_path.exists():
        print("✅ .env found", file=sys.stderr)
    else:
        print("⚠️  .env not found (optional: log dir and ${VAR} settings)", file=sys.stderr)

    for f in REQUIRED_FILES:
        path = PROJECT_ROOT / f
        if not path.exists():
            print(f"❌ {f} not found!", file=sys.stderr)
            ok = False
        else:
            print(f"✅ {f} exists", file=sys.stderr)

    return ok


def main() -> None:
    """Entry point: run checks then rank."""
    if not preflight_checks():
        print("\n❌ Pre-flight checks failed! Fix the issues above and try again.", file=sys.stderr)
        sys.exit(1)

    from tender_ranker.main import main as app_main
    sys.exit(app_main(sys.argv[1:]))


if __name__ == "__main__":
    main()
