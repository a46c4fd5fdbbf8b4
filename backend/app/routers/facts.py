"""Cat fact command routes."""

from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Path, Query
from fastapi.responses import FileResponse

from app.db.dependencies import get_catalog_service
from app.schemas.cat_fact import (
    ApiStatus,
    CatFactRead,
    FactActionResult,
    FactFilter,
    FetchManyRequest,
    FetchManyResult,
    FetchOneResult,
    HomeSummary,
    RateRequest,
)
from app.schemas.common import ApiResponse
from app.services.catalog import FactCatalogService

router = APIRouter(prefix="/facts")


@router.get("/home", response_model=ApiResponse[HomeSummary])
def get_home(
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[HomeSummary]:
    """Return recent facts, top favorites, and rating statistics."""

    return ApiResponse(data=service.get_home_summary())


@router.post("/fetch", response_model=ApiResponse[FetchOneResult])
def fetch_fact(
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[FetchOneResult]:
    """Fetch one fact from the upstream API and store it if new."""

    fact = service.fetch_and_save_one()
    if fact is None:
        return ApiResponse(
            data=FetchOneResult(saved=False),
            message="No new fact was fetched. Try again.",
        )
    return ApiResponse(data=FetchOneResult(saved=True, fact=fact))


@router.post("/fetch-many", response_model=ApiResponse[FetchManyResult])
def fetch_facts(
    payload: FetchManyRequest,
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[FetchManyResult]:
    """Fetch a batch of facts and store the new ones."""

    facts = service.fetch_and_save_many(payload.count)
    return ApiResponse(
        data=FetchManyResult(requested=payload.count, saved_count=len(facts), facts=facts),
        message=f"Saved {len(facts)} new facts.",
    )


@router.get("", response_model=ApiResponse[list[CatFactRead]])
def list_facts(
    search_term: str | None = Query(default=None),
    category: str | None = Query(default=None),
    only_favorites: bool = Query(default=False),
    min_rating: int | None = Query(default=None, ge=1, le=5),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[list[CatFactRead]]:
    """Browse stored facts with optional filters."""

    criteria = FactFilter(
        search_term=search_term,
        category=category,
        only_favorites=only_favorites,
        min_rating=min_rating,
        date_from=date_from,
        date_to=date_to,
    )
    return ApiResponse(data=service.filter(criteria))


@router.get("/categories", response_model=ApiResponse[list[str]])
def list_categories(
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[list[str]]:
    """List distinct categories of stored facts."""

    return ApiResponse(data=service.get_categories())


@router.get("/api-status", response_model=ApiResponse[ApiStatus])
def get_api_status(
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[ApiStatus]:
    """Probe the upstream fact API."""

    return ApiResponse(data=ApiStatus(available=service.check_api_status()))


@router.post("/export", response_class=FileResponse)
def export_facts(
    background_tasks: BackgroundTasks,
    payload: FactFilter | None = None,
    service: FactCatalogService = Depends(get_catalog_service),
) -> FileResponse:
    """Download stored facts (optionally filtered) as a text report."""

    try:
        path = service.export_to_file(payload)
    except Exception as exc:
        raise HTTPException(status_code=500, detail="Failed to export facts") from exc
    background_tasks.add_task(path.unlink, missing_ok=True)
    return FileResponse(path, media_type="text/plain; charset=utf-8", filename=path.name)


@router.get("/{fact_id}", response_model=ApiResponse[CatFactRead])
def get_fact(
    fact_id: int = Path(..., ge=1),
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[CatFactRead]:
    """Return one stored fact."""

    fact = service.get_fact(fact_id)
    if fact is None:
        raise HTTPException(status_code=404, detail="Fact not found")
    return ApiResponse(data=fact)


@router.post("/{fact_id}/favorite", response_model=ApiResponse[FactActionResult])
def toggle_favorite(
    fact_id: int = Path(..., ge=1),
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[FactActionResult]:
    """Flip the favorite flag of a fact."""

    if not service.toggle_favorite(fact_id):
        raise HTTPException(status_code=404, detail="Fact not found")
    return ApiResponse(data=FactActionResult(id=fact_id, success=True))


@router.post("/{fact_id}/rating", response_model=ApiResponse[FactActionResult])
def rate_fact(
    payload: RateRequest,
    fact_id: int = Path(..., ge=1),
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[FactActionResult]:
    """Rate a fact from 1 to 5."""

    if not service.rate(fact_id, payload.rating):
        raise HTTPException(status_code=404, detail="Fact not found")
    return ApiResponse(data=FactActionResult(id=fact_id, success=True))


@router.delete("/{fact_id}", response_model=ApiResponse[FactActionResult])
def delete_fact(
    fact_id: int = Path(..., ge=1),
    service: FactCatalogService = Depends(get_catalog_service),
) -> ApiResponse[FactActionResult]:
    """Delete one fact."""

    if not service.delete(fact_id):
        raise HTTPException(status_code=404, detail="Fact not found")
    return ApiResponse(data=FactActionResult(id=fact_id, success=True))
