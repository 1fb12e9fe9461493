import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from bazos_scraper.core.config import DEFAULT_DISTANCE_KM, DEFAULT_RESULTS_LIMIT
from bazos_scraper.core.exceptions import InvalidSearchError, ScrapeError
from bazos_scraper.models.listing import Country, ScrapeOutput, SearchFilters, SortOrder
from bazos_scraper.services.search_service import SearchService

logger = logging.getLogger(__name__)

router = APIRouter()

_service = None


def get_search_service() -> SearchService:
    global _service
    if _service is None:
        _service = SearchService()
    return _service


class BatchRequest(BaseModel):
    items: List[Dict[str, Any]]
    continue_on_fail: bool = False


class BatchResponse(BaseModel):
    results: List[Dict[str, Any]]


@router.get("/listings", response_model=ScrapeOutput, response_model_by_alias=True)
def search_listings(
    search: str = Query("", description="Search term (Mandatory)"),
    location: str = Query("", description="Post code, empty for the whole country"),
    distance: int = Query(DEFAULT_DISTANCE_KM, ge=0, description="Radius around the post code in km"),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    order: SortOrder = Query(SortOrder.NEWEST),
    results_limit: int = Query(DEFAULT_RESULTS_LIMIT, ge=1),
    published_days: Optional[int] = Query(None, ge=0, description="Only listings added in the last N days"),
    with_full_descriptions: bool = Query(False),
    country: Country = Query(Country.SK),
    service: SearchService = Depends(get_search_service),
):
    """
    Scrapes one Bazos search.

    Pages and detail pages are fetched one after another, so large limits
    with full descriptions take a while.
    """
    try:
        filters = SearchFilters.from_params({
            "search": search, "location": location, "distance": distance,
            "min_price": min_price, "max_price": max_price, "order": order,
            "results_limit": results_limit, "published_days": published_days,
            "with_full_descriptions": with_full_descriptions, "country": country,
        })
    except InvalidSearchError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        return service.search(filters)
    except ScrapeError as e:
        logger.error("Search %r failed: %s", search, e)
        raise HTTPException(status_code=502, detail=str(e))


@router.post("/batch", response_model=BatchResponse)
def search_batch(request: BatchRequest, service: SearchService = Depends(get_search_service)):
    """Scrapes each item in order; see SearchService.run_batch."""
    try:
        results = service.run_batch(request.items, continue_on_fail=request.continue_on_fail)
    except InvalidSearchError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ScrapeError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return BatchResponse(results=results)
