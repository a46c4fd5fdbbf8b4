"""Probe the real cat fact API and print one classified fact.

Usage (from repo root):
    python backend/scripts/smoke_cat_fact_api.py

Usage (from backend/):
    python scripts/smoke_cat_fact_api.py
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.services.cat_fact_api import get_default_cat_fact_client


def main() -> int:
    client = get_default_cat_fact_client()
    available = client.probe_availability()
    print(f"url={client.url}")
    print(f"available={available}")
    if not available:
        return 1

    fact = client.fetch_one()
    if fact is None:
        print("No fact returned.")
        return 1
    print(json.dumps(fact.model_dump(mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
