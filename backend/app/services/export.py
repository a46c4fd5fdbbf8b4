"""Plain-text fact export."""

from __future__ import annotations

import tempfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from app.schemas.cat_fact import CatFactRead

EXPORT_TITLE = "=== CAT FACTS EXPORT ==="
EXPORT_FILENAME_PREFIX = "cat_facts_export_"


def render_fact_export(facts: Sequence[CatFactRead], *, exported_at: datetime) -> str:
    """Render the export report, newest fact first."""

    ordered = sorted(facts, key=lambda fact: (fact.created_at, fact.id), reverse=True)
    lines = [
        EXPORT_TITLE,
        f"Exported at: {exported_at:%Y-%m-%d %H:%M:%S}",
        f"Fact count: {len(ordered)}",
        "",
    ]
    for fact in ordered:
        favorite = "yes" if fact.is_favorite else "no"
        lines.append(f"[{fact.created_at:%Y-%m-%d %H:%M}] {fact.text}")
        lines.append(f"   Category: {fact.category or 'none'} | Rating: {fact.rating}/5 | Favorite: {favorite}")
        lines.append("")
    return "\n".join(lines) + "\n"


def write_fact_export(
    facts: Sequence[CatFactRead],
    export_dir: str | Path | None = None,
    *,
    now: datetime | None = None,
) -> Path:
    """Write an export file and return its path."""

    exported_at = now or datetime.now(timezone.utc)
    target_dir = Path(export_dir) if export_dir else Path(tempfile.gettempdir())
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"{EXPORT_FILENAME_PREFIX}{exported_at:%Y%m%d_%H%M%S_%f}.txt"
    path.write_text(render_fact_export(facts, exported_at=exported_at), encoding="utf-8")
    return path
