"""Fact persistence boundary."""

from app.store.fact_store_interface import FactNotFoundError, FactStore, FactValidationError
from app.store.sqlalchemy_store import SqlAlchemyFactStore

__all__ = [
    "FactNotFoundError",
    "FactStore",
    "FactValidationError",
    "SqlAlchemyFactStore",
]
