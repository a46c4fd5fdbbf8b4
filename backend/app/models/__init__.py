"""ORM models package exports."""

from app.models.cat_fact import CatFact

__all__ = ["CatFact"]
