"""Cat fact request/response schemas."""

from datetime import date, datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from app.models.cat_fact import CATEGORY_MAX_LENGTH, FACT_TEXT_MAX_LENGTH


class CatFactCreate(BaseModel):
    """Unsaved fact as produced by the upstream fetch client."""

    text: str = Field(min_length=1, max_length=FACT_TEXT_MAX_LENGTH)
    length: int = Field(default=0, ge=0)
    category: str | None = Field(default=None, max_length=CATEGORY_MAX_LENGTH)
    rating: int = Field(default=0, ge=0, le=5)
    is_favorite: bool = False
    created_at: datetime | None = None


class CatFactRead(BaseModel):
    """Serialized stored fact."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    text: str
    length: int
    created_at: datetime
    is_favorite: bool
    category: str | None
    rating: int = Field(ge=0, le=5)

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # SQLite returns naive datetimes for timezone-aware columns.
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def time_ago(self) -> str:
        return format_time_ago(self.created_at)


class FactFilter(BaseModel):
    """Optional constraints combined with logical AND."""

    search_term: str | None = None
    category: str | None = None
    only_favorites: bool = False
    min_rating: int | None = Field(default=None, ge=1, le=5)
    date_from: date | None = None
    date_to: date | None = None


class FactStatistics(BaseModel):
    """Aggregate counters over the stored facts."""

    total_count: int = 0
    average_rating: float = 0.0


class HomeSummary(BaseModel):
    """Landing page payload."""

    recent_facts: list[CatFactRead] = Field(default_factory=list)
    favorite_facts: list[CatFactRead] = Field(default_factory=list)
    total_count: int = 0
    average_rating: float = 0.0


class FetchManyRequest(BaseModel):
    """Batch fetch payload."""

    count: int = Field(default=5, ge=1, le=10)


class RateRequest(BaseModel):
    """Rating payload."""

    rating: int = Field(ge=1, le=5)


class FetchOneResult(BaseModel):
    """Outcome of a single fetch-and-store."""

    saved: bool
    fact: CatFactRead | None = None


class FetchManyResult(BaseModel):
    """Outcome of a batch fetch-and-store."""

    requested: int
    saved_count: int
    facts: list[CatFactRead]


class FactActionResult(BaseModel):
    """Acknowledgement for favorite/rate/delete commands."""

    id: int
    success: bool


class ApiStatus(BaseModel):
    """Upstream availability probe result."""

    available: bool


def format_time_ago(moment: datetime, *, now: datetime | None = None) -> str:
    """Return a short relative-age label for display."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    seconds = (current - moment).total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)} min ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)} h ago"
    if seconds < 7 * 86400:
        return f"{int(seconds // 86400)} days ago"
    return moment.strftime("%Y-%m-%d")
