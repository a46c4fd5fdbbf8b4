"""Keyword-based fact categories."""

from __future__ import annotations

DEFAULT_CATEGORY = "general"

# Evaluated in order; the first group with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("anatomy", ("muscle", "ear", "eye", "tail")),
    ("behavior", ("sleep", "hunt", "play")),
    ("lifespan", ("year", "age", "live")),
    ("breed", ("breed", "species")),
)
CATEGORY_VALUES: tuple[str, ...] = tuple(name for name, _ in CATEGORY_KEYWORDS) + (DEFAULT_CATEGORY,)


def classify_fact(text: str | None) -> str | None:
    """Return the category for fact text, or None for blank text."""

    cleaned = _clean_text(text)
    if not cleaned:
        return None
    lowered = cleaned.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def _clean_text(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.strip().split())
