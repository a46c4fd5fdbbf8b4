"""Fact store interface for pluggable persistence implementations."""

from abc import ABC, abstractmethod

from app.schemas.cat_fact import CatFactCreate, CatFactRead, FactFilter, FactStatistics


class FactValidationError(ValueError):
    """Raised when a fact passed to the store is missing or invalid."""


class FactNotFoundError(LookupError):
    """Raised when updating a fact id that does not exist."""


class FactStore(ABC):
    """Abstract cat fact store.

    Every listing is ordered newest first. Lookups by id report a missing
    record as ``None``/``False``; only ``update`` raises for an unknown id.
    """

    @abstractmethod
    def get_all(self) -> list[CatFactRead]:
        """Return every stored fact."""

    @abstractmethod
    def get_by_id(self, fact_id: int) -> CatFactRead | None:
        """Return one fact or None."""

    @abstractmethod
    def get_recent(self, count: int = 10) -> list[CatFactRead]:
        """Return the ``count`` most recently stored facts."""

    @abstractmethod
    def get_favorites(self) -> list[CatFactRead]:
        """Return facts marked as favorite."""

    @abstractmethod
    def filter(self, criteria: FactFilter | None) -> list[CatFactRead]:
        """Return facts matching every supplied criterion."""

    @abstractmethod
    def add(self, fact: CatFactCreate) -> CatFactRead:
        """Persist a new fact with a store-assigned id and timestamp."""

    @abstractmethod
    def update(self, fact: CatFactRead) -> CatFactRead:
        """Persist the mutable fields of an existing fact."""

    @abstractmethod
    def delete(self, fact_id: int) -> bool:
        """Remove a fact; False when it does not exist."""

    @abstractmethod
    def toggle_favorite(self, fact_id: int) -> bool:
        """Flip the favorite flag; False when the fact does not exist."""

    @abstractmethod
    def rate(self, fact_id: int, rating: int) -> bool:
        """Set a 1-5 rating; False for an invalid rating or unknown id."""

    @abstractmethod
    def get_statistics(self) -> FactStatistics:
        """Return total count and the mean of non-zero ratings."""

    @abstractmethod
    def exists(self, text: str) -> bool:
        """Return whether a fact with the same text (ignoring case) is stored."""
