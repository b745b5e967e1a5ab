from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException

from jobhub.api.deps import get_aggregator, require_user
from jobhub.crawlers.errors import UnknownSourceError
from jobhub.schemas.search import SearchRequest, SearchResultOut, SmartSearchRequest
from jobhub.services.aggregator import JobAggregator

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=SearchResultOut)
def search(body: SearchRequest, _: str = Depends(require_user), aggregator: JobAggregator = Depends(get_aggregator)):
    try:
        result = aggregator.search_jobs(body.query, body.location, body.options)
    except UnknownSourceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return result.to_dict()


@router.post("/smart", response_model=SearchResultOut)
def smart_search(
    body: SmartSearchRequest,
    _: str = Depends(require_user),
    aggregator: JobAggregator = Depends(get_aggregator),
):
    try:
        result = aggregator.smart_search(body.query, body.preferences)
    except UnknownSourceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return result.to_dict()
