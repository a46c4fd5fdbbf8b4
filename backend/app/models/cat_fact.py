"""Cat fact ORM model."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, CreatedAtMixin, IdMixin

FACT_TEXT_MAX_LENGTH = 1000
CATEGORY_MAX_LENGTH = 100


class CatFact(Base, IdMixin, CreatedAtMixin):
    """Stored cat fact with user metadata."""

    __tablename__ = "cat_facts"

    text: Mapped[str] = mapped_column(String(FACT_TEXT_MAX_LENGTH), nullable=False)
    # casefold of text, compared by exists
    text_key: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    length: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String(CATEGORY_MAX_LENGTH), nullable=True)
    rating: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
