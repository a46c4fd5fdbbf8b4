"""SQLAlchemy-backed fact store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta, timezone
from threading import RLock

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.cat_fact import FACT_TEXT_MAX_LENGTH, CatFact
from app.schemas.cat_fact import CatFactCreate, CatFactRead, FactFilter, FactStatistics
from app.store.fact_store_interface import FactNotFoundError, FactStore, FactValidationError

logger = logging.getLogger(__name__)

_NEWEST_FIRST = (CatFact.created_at.desc(), CatFact.id.desc())


class SqlAlchemyFactStore(FactStore):
    """Fact store that opens one short-lived session per operation."""

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory
        # Serializes access so one pooled connection (sqlite StaticPool) can be shared across threads.
        self._lock = RLock()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock, self._session_factory() as db:
            yield db

    def get_all(self) -> list[CatFactRead]:
        stmt = select(CatFact).order_by(*_NEWEST_FIRST)
        with self._session() as db:
            return _to_read_list(db.scalars(stmt))

    def get_by_id(self, fact_id: int) -> CatFactRead | None:
        with self._session() as db:
            row = db.get(CatFact, fact_id)
            return CatFactRead.model_validate(row) if row is not None else None

    def get_recent(self, count: int = 10) -> list[CatFactRead]:
        if count <= 0:
            return []
        stmt = select(CatFact).order_by(*_NEWEST_FIRST).limit(count)
        with self._session() as db:
            return _to_read_list(db.scalars(stmt))

    def get_favorites(self) -> list[CatFactRead]:
        stmt = select(CatFact).where(CatFact.is_favorite.is_(True)).order_by(*_NEWEST_FIRST)
        with self._session() as db:
            return _to_read_list(db.scalars(stmt))

    def filter(self, criteria: FactFilter | None) -> list[CatFactRead]:
        criteria = criteria or FactFilter()
        stmt = select(CatFact)

        search_term = (criteria.search_term or "").strip()
        if search_term:
            stmt = stmt.where(CatFact.text.icontains(search_term, autoescape=True))
        category = (criteria.category or "").strip()
        if category:
            stmt = stmt.where(CatFact.category == category)
        if criteria.only_favorites:
            stmt = stmt.where(CatFact.is_favorite.is_(True))
        if criteria.min_rating is not None:
            stmt = stmt.where(CatFact.rating >= criteria.min_rating)
        if criteria.date_from is not None:
            stmt = stmt.where(CatFact.created_at >= _start_of_day(criteria.date_from))
        if criteria.date_to is not None:
            stmt = stmt.where(CatFact.created_at < _start_of_day(criteria.date_to + timedelta(days=1)))

        with self._session() as db:
            return _to_read_list(db.scalars(stmt.order_by(*_NEWEST_FIRST)))

    def add(self, fact: CatFactCreate) -> CatFactRead:
        if fact is None:
            raise FactValidationError("fact is required")
        if not fact.text or not fact.text.strip():
            raise FactValidationError("fact text cannot be empty")
        if len(fact.text) > FACT_TEXT_MAX_LENGTH:
            raise FactValidationError(f"fact text exceeds {FACT_TEXT_MAX_LENGTH} characters")

        row = CatFact(
            text=fact.text,
            text_key=fact_text_key(fact.text),
            length=fact.length,
            category=fact.category,
            rating=fact.rating,
            is_favorite=fact.is_favorite,
            created_at=datetime.now(timezone.utc),
        )
        with self._session() as db:
            db.add(row)
            db.commit()
            db.refresh(row)
            logger.debug("store.fact_added fact_id=%d", row.id)
            return CatFactRead.model_validate(row)

    def update(self, fact: CatFactRead) -> CatFactRead:
        if fact is None:
            raise FactValidationError("fact is required")
        if not 0 <= fact.rating <= 5:
            raise FactValidationError("rating must be between 0 and 5")

        with self._session() as db:
            row = db.get(CatFact, fact.id)
            if row is None:
                raise FactNotFoundError(f"Fact {fact.id} not found")
            row.is_favorite = fact.is_favorite
            row.rating = fact.rating
            db.commit()
            db.refresh(row)
            return CatFactRead.model_validate(row)

    def delete(self, fact_id: int) -> bool:
        with self._session() as db:
            row = db.get(CatFact, fact_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True

    def toggle_favorite(self, fact_id: int) -> bool:
        with self._session() as db:
            row = db.get(CatFact, fact_id)
            if row is None:
                return False
            row.is_favorite = not row.is_favorite
            db.commit()
            return True

    def rate(self, fact_id: int, rating: int) -> bool:
        if rating < 1 or rating > 5:
            return False
        with self._session() as db:
            row = db.get(CatFact, fact_id)
            if row is None:
                return False
            row.rating = rating
            db.commit()
            return True

    def get_statistics(self) -> FactStatistics:
        with self._session() as db:
            total_count = db.scalar(select(func.count(CatFact.id))) or 0
            average = db.scalar(select(func.avg(CatFact.rating)).where(CatFact.rating > 0))
        return FactStatistics(
            total_count=int(total_count),
            average_rating=round(float(average), 2) if average is not None else 0.0,
        )

    def exists(self, text: str) -> bool:
        if not text or not text.strip():
            return False
        stmt = select(CatFact.id).where(CatFact.text_key == fact_text_key(text)).limit(1)
        with self._session() as db:
            return db.scalar(stmt) is not None


def fact_text_key(text: str) -> str:
    """Return the case-folded form used for duplicate detection."""

    return text.casefold()


def _to_read_list(rows) -> list[CatFactRead]:
    return [CatFactRead.model_validate(row) for row in rows]


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)
