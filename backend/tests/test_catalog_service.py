"""Tests for the fact catalog business service."""

from __future__ import annotations

import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock, patch

from sqlalchemy import create_engine, update
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models.cat_fact import CatFact
from app.schemas.cat_fact import CatFactCreate, CatFactRead, FactFilter, HomeSummary
from app.services.cat_fact_api import CatFactApiClient
from app.services.catalog import FactCatalogService
from app.services.export import EXPORT_TITLE, render_fact_export
from app.store.fact_store_interface import FactStore
from app.store.sqlalchemy_store import SqlAlchemyFactStore

_LOGGER = "app.services.catalog"


class _StubClient:
    def __init__(
        self,
        *,
        one: list[CatFactCreate | None] | None = None,
        many: list[CatFactCreate] | None = None,
        available: bool = True,
    ) -> None:
        self.one = list(one or [])
        self.many = list(many or [])
        self.available = available
        self.requested_counts: list[int] = []

    def fetch_one(self) -> CatFactCreate | None:
        return self.one.pop(0) if self.one else None

    def fetch_many(self, count: int) -> list[CatFactCreate]:
        self.requested_counts.append(count)
        return list(self.many)

    def probe_availability(self) -> bool:
        return self.available


def _draft(text: str, category: str | None = "general") -> CatFactCreate:
    return CatFactCreate(text=text, length=len(text), category=category)


def _broken_store() -> MagicMock:
    store = MagicMock(spec=FactStore)
    for name in (
        "get_all",
        "get_by_id",
        "get_recent",
        "get_favorites",
        "filter",
        "add",
        "update",
        "delete",
        "toggle_favorite",
        "rate",
        "get_statistics",
        "exists",
    ):
        getattr(store, name).side_effect = RuntimeError("database unavailable")
    return store


class CatalogTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, future=True)
        self.store = SqlAlchemyFactStore(self.SessionLocal)
        export_dir = tempfile.TemporaryDirectory()
        self.addCleanup(export_dir.cleanup)
        self.export_dir = Path(export_dir.name)

    def tearDown(self) -> None:
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def _service(self, client: object, store: FactStore | None = None) -> FactCatalogService:
        return FactCatalogService(store or self.store, client, export_dir=self.export_dir)  # type: ignore[arg-type]

    def _set_created_at(self, fact_id: int, value: datetime) -> None:
        with self.SessionLocal() as db:
            db.execute(update(CatFact).where(CatFact.id == fact_id).values(created_at=value))
            db.commit()


class FetchAndSaveTests(CatalogTestCase):
    def test_fetched_fact_is_classified_and_stored_unrated(self) -> None:
        client = CatFactApiClient(url="https://facts.test/fact")
        resp = MagicMock()
        resp.status = 200
        resp.read.return_value = json.dumps({"fact": "Cats have 32 muscles in each ear.", "length": 32}).encode()
        resp.__enter__.return_value = resp
        resp.__exit__.return_value = False

        with patch("app.services.cat_fact_api.urllib_request.urlopen", return_value=resp):
            saved = self._service(client).fetch_and_save_one()

        assert saved is not None
        self.assertEqual(saved.category, "anatomy")
        self.assertEqual(saved.rating, 0)
        self.assertFalse(saved.is_favorite)
        self.assertEqual(saved.length, 32)
        self.assertEqual(self.store.get_statistics().total_count, 1)

    def test_duplicate_text_is_not_stored_again(self) -> None:
        self.store.add(_draft("Cats are great"))
        service = self._service(_StubClient(one=[_draft("CATS ARE GREAT")]))

        self.assertIsNone(service.fetch_and_save_one())
        self.assertEqual(self.store.get_statistics().total_count, 1)

    def test_duplicate_non_ascii_text_is_not_stored_again(self) -> None:
        self.store.add(_draft("Égyptian cats were revered."))
        service = self._service(
            _StubClient(one=[_draft("Égyptian cats were revered."), _draft("ÉGYPTIAN CATS WERE REVERED.")])
        )

        self.assertIsNone(service.fetch_and_save_one())
        self.assertIsNone(service.fetch_and_save_one())
        self.assertEqual(self.store.get_statistics().total_count, 1)

    def test_empty_fetch_returns_none(self) -> None:
        service = self._service(_StubClient(one=[None]))

        self.assertIsNone(service.fetch_and_save_one())
        self.assertEqual(self.store.get_all(), [])

    def test_store_failure_is_swallowed(self) -> None:
        service = self._service(_StubClient(one=[_draft("Cats purr.")]), store=_broken_store())

        with self.assertLogs(_LOGGER, level="ERROR"):
            self.assertIsNone(service.fetch_and_save_one())

    def test_batch_skips_existing_and_in_batch_duplicates(self) -> None:
        self.store.add(_draft("Cats purr."))
        client = _StubClient(
            many=[
                _draft("Cats sleep 16 hours a day."),
                _draft("cats purr."),
                _draft("The Sphynx breed is hairless."),
                _draft("CATS SLEEP 16 HOURS A DAY."),
            ]
        )

        saved = self._service(client).fetch_and_save_many(4)

        self.assertEqual(client.requested_counts, [4])
        self.assertEqual(
            [fact.text for fact in saved],
            ["Cats sleep 16 hours a day.", "The Sphynx breed is hairless."],
        )
        self.assertEqual(self.store.get_statistics().total_count, 3)

    def test_batch_may_save_nothing(self) -> None:
        self.assertEqual(self._service(_StubClient(many=[])).fetch_and_save_many(3), [])

    def test_batch_out_of_range_count_degrades_to_empty(self) -> None:
        service = self._service(CatFactApiClient(dispatch_delay_seconds=0.0))

        with self.assertLogs(_LOGGER, level="ERROR"):
            self.assertEqual(service.fetch_and_save_many(0), [])
            self.assertEqual(service.fetch_and_save_many(21), [])


class HomeSummaryTests(CatalogTestCase):
    def test_summary_combines_recent_favorites_and_statistics(self) -> None:
        saved = [self.store.add(_draft(f"Fact number {index}")) for index in range(12)]
        for index, fact in enumerate(saved):
            self._set_created_at(fact.id, datetime(2026, 1, 1, 0, index, tzinfo=timezone.utc))
        for fact in saved[:7]:
            self.store.toggle_favorite(fact.id)
        self.store.rate(saved[0].id, 5)
        self.store.rate(saved[1].id, 4)

        summary = self._service(_StubClient()).get_home_summary()

        self.assertEqual([fact.id for fact in summary.recent_facts], [fact.id for fact in reversed(saved[2:])])
        self.assertEqual([fact.id for fact in summary.favorite_facts], [fact.id for fact in reversed(saved[2:7])])
        self.assertEqual(summary.total_count, 12)
        self.assertEqual(summary.average_rating, 4.5)

    def test_failure_returns_empty_summary(self) -> None:
        service = self._service(_StubClient(), store=_broken_store())

        with self.assertLogs(_LOGGER, level="ERROR"):
            summary = service.get_home_summary()

        self.assertEqual(summary, HomeSummary())


class CommandDelegationTests(CatalogTestCase):
    def test_favorite_rate_and_delete_delegate_to_store(self) -> None:
        fact = self.store.add(_draft("Cats purr."))
        service = self._service(_StubClient())

        self.assertTrue(service.toggle_favorite(fact.id))
        self.assertTrue(service.rate(fact.id, 4))
        self.assertFalse(service.rate(fact.id, 7))
        reloaded = service.get_fact(fact.id)
        assert reloaded is not None
        self.assertEqual((reloaded.is_favorite, reloaded.rating), (True, 4))

        self.assertTrue(service.delete(fact.id))
        self.assertFalse(service.delete(fact.id))
        self.assertFalse(service.toggle_favorite(fact.id))
        self.assertIsNone(service.get_fact(fact.id))

    def test_store_failures_surface_as_false_or_empty(self) -> None:
        service = self._service(_StubClient(), store=_broken_store())

        with self.assertLogs(_LOGGER, level="ERROR"):
            self.assertFalse(service.toggle_favorite(1))
            self.assertFalse(service.rate(1, 3))
            self.assertFalse(service.delete(1))
            self.assertIsNone(service.get_fact(1))
            self.assertEqual(service.filter(FactFilter(search_term="cat")), [])
            self.assertEqual(service.get_categories(), [])

    def test_categories_are_distinct_sorted_and_non_empty(self) -> None:
        for text, category in (
            ("Fact a", "lifespan"),
            ("Fact b", "anatomy"),
            ("Fact c", "lifespan"),
            ("Fact d", None),
            ("Fact e", "behavior"),
        ):
            self.store.add(_draft(text, category=category))

        self.assertEqual(self._service(_StubClient()).get_categories(), ["anatomy", "behavior", "lifespan"])

    def test_filter_delegates_criteria(self) -> None:
        self.store.add(_draft("Cats sleep a lot.", category="behavior"))
        self.store.add(_draft("Cats purr."))
        service = self._service(_StubClient())

        self.assertEqual([f.text for f in service.filter(FactFilter(category="behavior"))], ["Cats sleep a lot."])
        self.assertEqual(len(service.filter()), 2)

    def test_api_status_reflects_probe(self) -> None:
        self.assertTrue(self._service(_StubClient(available=True)).check_api_status())
        self.assertFalse(self._service(_StubClient(available=False)).check_api_status())


class ExportTests(CatalogTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ear = self.store.add(_draft("Cats have 32 muscles in each ear.", category="anatomy"))
        self.purr = self.store.add(_draft("Cats purr.", category=None))
        self._set_created_at(self.ear.id, datetime(2026, 3, 10, 9, 15, tzinfo=timezone.utc))
        self._set_created_at(self.purr.id, datetime(2026, 3, 11, 18, 5, tzinfo=timezone.utc))
        self.store.rate(self.ear.id, 5)
        self.store.toggle_favorite(self.ear.id)

    def test_export_all_writes_report_newest_first(self) -> None:
        path = self._service(_StubClient()).export_to_file()

        self.assertEqual(path.parent, self.export_dir)
        self.assertTrue(path.name.startswith("cat_facts_export_"))
        self.assertEqual(path.suffix, ".txt")
        lines = path.read_text(encoding="utf-8").splitlines()
        self.assertEqual(lines[0], EXPORT_TITLE)
        self.assertTrue(lines[1].startswith("Exported at: "))
        self.assertEqual(lines[2], "Fact count: 2")
        self.assertEqual(lines[3], "")
        self.assertEqual(lines[4], "[2026-03-11 18:05] Cats purr.")
        self.assertEqual(lines[5], "   Category: none | Rating: 0/5 | Favorite: no")
        self.assertEqual(lines[7], "[2026-03-10 09:15] Cats have 32 muscles in each ear.")
        self.assertEqual(lines[8], "   Category: anatomy | Rating: 5/5 | Favorite: yes")

    def test_export_with_criteria_only_includes_matches(self) -> None:
        path = self._service(_StubClient()).export_to_file(FactFilter(only_favorites=True))

        content = path.read_text(encoding="utf-8")
        self.assertIn("Fact count: 1", content)
        self.assertIn("Cats have 32 muscles in each ear.", content)
        self.assertNotIn("Cats purr.", content)

    def test_export_failure_propagates(self) -> None:
        service = self._service(_StubClient(), store=_broken_store())

        with self.assertLogs(_LOGGER, level="ERROR"), self.assertRaises(RuntimeError):
            service.export_to_file()

    def test_render_is_deterministic(self) -> None:
        fact = CatFactRead(
            id=1,
            text="Cats purr.",
            length=10,
            created_at=datetime(2026, 3, 11, 18, 5, tzinfo=timezone.utc),
            is_favorite=False,
            category="general",
            rating=2,
        )
        exported_at = datetime(2026, 3, 12, 7, 30, 0, tzinfo=timezone.utc)

        rendered = render_fact_export([fact], exported_at=exported_at)

        self.assertEqual(
            rendered,
            "=== CAT FACTS EXPORT ===\n"
            "Exported at: 2026-03-12 07:30:00\n"
            "Fact count: 1\n"
            "\n"
            "[2026-03-11 18:05] Cats purr.\n"
            "   Category: general | Rating: 2/5 | Favorite: no\n"
            "\n",
        )
        self.assertEqual(rendered, render_fact_export([fact], exported_at=exported_at))


if __name__ == "__main__":
    unittest.main()
