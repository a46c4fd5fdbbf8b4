"""FastAPI dependency providers for the fact store and catalog service."""

from functools import lru_cache

from fastapi import Depends

from app.config import get_settings
from app.db.session import SessionLocal
from app.services.cat_fact_api import get_default_cat_fact_client
from app.services.catalog import FactCatalogService
from app.store.fact_store_interface import FactStore
from app.store.sqlalchemy_store import SqlAlchemyFactStore


@lru_cache
def get_fact_store() -> FactStore:
    """Return the process-wide store bound to the configured database."""

    return SqlAlchemyFactStore(SessionLocal)


def get_catalog_service(store: FactStore = Depends(get_fact_store)) -> FactCatalogService:
    """Build a catalog service for one request."""

    return FactCatalogService(
        store,
        get_default_cat_fact_client(),
        export_dir=get_settings().export_dir,
    )
