"""Business service composing the fact API client and the fact store."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from app.schemas.cat_fact import CatFactRead, FactFilter, HomeSummary
from app.services.cat_fact_api import CatFactClient
from app.services.export import write_fact_export
from app.store.fact_store_interface import FactStore

logger = logging.getLogger(__name__)

RECENT_FACTS_LIMIT = 10
HOME_FAVORITES_LIMIT = 5


class FactCatalogService:
    """Fetch-and-store workflow plus browse/rate/favorite/export commands.

    Every command degrades to an empty, ``False`` or ``None`` result when a
    dependency fails; the failure is logged. ``export_to_file`` is the only
    operation that re-raises.
    """

    def __init__(
        self,
        store: FactStore,
        client: CatFactClient,
        *,
        export_dir: str | Path | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._export_dir = export_dir

    def get_home_summary(self) -> HomeSummary:
        try:
            with ThreadPoolExecutor(max_workers=3) as pool:
                recent_future = pool.submit(self._store.get_recent, RECENT_FACTS_LIMIT)
                favorites_future = pool.submit(self._store.get_favorites)
                statistics_future = pool.submit(self._store.get_statistics)
                recent = recent_future.result()
                favorites = favorites_future.result()
                statistics = statistics_future.result()
        except Exception:
            logger.exception("catalog.home_summary_failed")
            return HomeSummary()

        logger.info("catalog.home_summary total_count=%d", statistics.total_count)
        return HomeSummary(
            recent_facts=recent,
            favorite_facts=favorites[:HOME_FAVORITES_LIMIT],
            total_count=statistics.total_count,
            average_rating=statistics.average_rating,
        )

    def fetch_and_save_one(self) -> CatFactRead | None:
        try:
            fact = self._client.fetch_one()
            if fact is None:
                logger.warning("catalog.fetch_empty")
                return None
            if self._store.exists(fact.text):
                logger.info("catalog.fetch_duplicate length=%d", fact.length)
                return None
            saved = self._store.add(fact)
        except Exception:
            logger.exception("catalog.fetch_and_save_failed")
            return None

        logger.info("catalog.fetch_saved fact_id=%d category=%s", saved.id, saved.category)
        return saved

    def fetch_and_save_many(self, count: int) -> list[CatFactRead]:
        saved: list[CatFactRead] = []
        try:
            fetched = self._client.fetch_many(count)
            # Serial check-then-insert so duplicates within one batch are caught.
            for fact in fetched:
                if fact is None or self._store.exists(fact.text):
                    continue
                saved.append(self._store.add(fact))
        except Exception:
            logger.exception("catalog.fetch_many_failed requested=%s", count)
            return []

        logger.info("catalog.fetch_many_saved saved=%d requested=%d", len(saved), count)
        return saved

    def toggle_favorite(self, fact_id: int) -> bool:
        try:
            return self._store.toggle_favorite(fact_id)
        except Exception:
            logger.exception("catalog.toggle_favorite_failed fact_id=%s", fact_id)
            return False

    def rate(self, fact_id: int, rating: int) -> bool:
        try:
            return self._store.rate(fact_id, rating)
        except Exception:
            logger.exception("catalog.rate_failed fact_id=%s rating=%s", fact_id, rating)
            return False

    def delete(self, fact_id: int) -> bool:
        try:
            return self._store.delete(fact_id)
        except Exception:
            logger.exception("catalog.delete_failed fact_id=%s", fact_id)
            return False

    def get_fact(self, fact_id: int) -> CatFactRead | None:
        try:
            return self._store.get_by_id(fact_id)
        except Exception:
            logger.exception("catalog.get_fact_failed fact_id=%s", fact_id)
            return None

    def filter(self, criteria: FactFilter | None = None) -> list[CatFactRead]:
        try:
            return self._store.filter(criteria or FactFilter())
        except Exception:
            logger.exception("catalog.filter_failed")
            return []

    def get_categories(self) -> list[str]:
        try:
            facts = self._store.get_all()
        except Exception:
            logger.exception("catalog.categories_failed")
            return []
        return sorted({fact.category for fact in facts if fact.category and fact.category.strip()})

    def check_api_status(self) -> bool:
        try:
            return self._client.probe_availability()
        except Exception:
            logger.exception("catalog.api_status_failed")
            return False

    def export_to_file(self, criteria: FactFilter | None = None) -> Path:
        try:
            facts = self._store.filter(criteria) if criteria is not None else self._store.get_all()
            path = write_fact_export(facts, self._export_dir)
        except Exception:
            logger.exception("catalog.export_failed")
            raise

        logger.info("catalog.export_written count=%d path=%s", len(facts), path)
        return path
