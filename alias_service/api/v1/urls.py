from fastapi import APIRouter, Depends, status

from alias_service.dependencies import get_statistics_aggregator, get_url_store
from alias_service.errors import NotFound
from alias_service.schemas.url import (
    DeleteResponse,
    StatisticsResponse,
    URLCreate,
    URLResponse,
    URLStatistics,
)
from alias_service.services.statistics import StatisticsAggregator
from alias_service.services.url_store import UrlStore

router = APIRouter(prefix="/urls", tags=["urls"])

# Plain `def` handlers: FastAPI runs each one in its worker thread pool,
# so concurrent requests never share a session.


@router.post("/", response_model=URLResponse, status_code=status.HTTP_201_CREATED)
def create_short_url(
    url_data: URLCreate,
    store: UrlStore = Depends(get_url_store)
):
    """Shorten a long URL, with a custom alias or a generated one"""
    return store.create(str(url_data.long_url), url_data.alias)


@router.get("/statistics", response_model=StatisticsResponse)
def get_statistics(
    aggregator: StatisticsAggregator = Depends(get_statistics_aggregator)
):
    """Usage totals and per-client-signature counts for every URL"""
    return StatisticsResponse(statistics=aggregator.compute_statistics())


@router.get("/{url_id}", response_model=URLResponse)
def get_url_info(
    url_id: int,
    store: UrlStore = Depends(get_url_store)
):
    """Get a URL record by id, including soft-deleted ones"""
    url = store.find_by_id(url_id)
    if not url:
        raise NotFound(f"URL {url_id} not found.")
    return url


@router.get("/{url_id}/stats", response_model=URLStatistics)
def get_url_stats(
    url_id: int,
    aggregator: StatisticsAggregator = Depends(get_statistics_aggregator)
):
    """Get usage statistics for one URL"""
    return aggregator.compute_url_statistics(url_id)


@router.delete("/{url_id}", response_model=DeleteResponse)
def delete_url(
    url_id: int,
    store: UrlStore = Depends(get_url_store)
):
    """Soft delete a URL. Repeating the call is a no-op."""
    url = store.soft_delete(url_id)
    return {"url": URLResponse.model_validate(url)}
