"""Seed a couple of demo cat facts into the configured database.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy import delete

# Make `app` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.models.cat_fact import CatFact
from app.schema.fact_categories import classify_fact
from app.schemas.cat_fact import CatFactCreate
from app.store.sqlalchemy_store import SqlAlchemyFactStore

# (text, rating, favorite)
DEMO_FACTS: tuple[tuple[str, int, bool], ...] = (
    ("Cats have 32 muscles in each ear, letting them rotate their ears 180 degrees.", 5, True),
    ("A cat can sprint at up to 30 miles per hour over short distances.", 4, False),
)


def reset_facts() -> None:
    """Remove every stored fact."""

    with SessionLocal() as db:
        db.execute(delete(CatFact))
        db.commit()


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed demo cat facts.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete all stored facts before seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    Base.metadata.create_all(engine)
    if args.reset:
        reset_facts()

    store = SqlAlchemyFactStore(SessionLocal)
    created = 0
    for text, rating, favorite in DEMO_FACTS:
        if store.exists(text):
            continue
        saved = store.add(CatFactCreate(text=text, length=len(text), category=classify_fact(text)))
        store.rate(saved.id, rating)
        if favorite:
            store.toggle_favorite(saved.id)
        created += 1

    statistics = store.get_statistics()
    print("Seed complete")
    print(f"facts_created={created}")
    print(f"total_count={statistics.total_count}")
    print(f"average_rating={statistics.average_rating}")
    print()
    print("Inspect:")
    print("  GET /facts/home")
    print("  GET /facts")


if __name__ == "__main__":
    main()
