"""SQLAlchemy metadata registry import for table creation."""

from app.models import CatFact
from app.models.base import Base

__all__ = ["Base", "CatFact"]
