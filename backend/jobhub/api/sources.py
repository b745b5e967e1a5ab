from __future__ import annotations
from fastapi import APIRouter, Depends

from jobhub.api.deps import get_aggregator, require_user
from jobhub.schemas.search import SourceStatusOut
from jobhub.services.aggregator import JobAggregator

router = APIRouter(prefix="/sources", tags=["sources"])


@router.get("", response_model=list[SourceStatusOut])
def list_sources(_: str = Depends(require_user), aggregator: JobAggregator = Depends(get_aggregator)):
    return aggregator.source_status()


@router.post("/cache/clean")
def clean_cache(_: str = Depends(require_user), aggregator: JobAggregator = Depends(get_aggregator)):
    return {"deleted": aggregator.storage.clean_cache()}
