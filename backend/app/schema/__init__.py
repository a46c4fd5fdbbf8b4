"""Fact categorization rules."""

from app.schema.fact_categories import CATEGORY_KEYWORDS, CATEGORY_VALUES, DEFAULT_CATEGORY, classify_fact

__all__ = [
    "CATEGORY_KEYWORDS",
    "CATEGORY_VALUES",
    "DEFAULT_CATEGORY",
    "classify_fact",
]
