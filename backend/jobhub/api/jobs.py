from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException

from jobhub.api.deps import get_aggregator, require_user
from jobhub.crawlers.errors import UnknownSourceError
from jobhub.services.aggregator import JobAggregator

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("/{job_id}")
def get_job(job_id: str, _: str = Depends(require_user), aggregator: JobAggregator = Depends(get_aggregator)):
    try:
        details = aggregator.get_job_details(job_id)
    except UnknownSourceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if not details:
        raise HTTPException(status_code=404, detail="job not found")
    if isinstance(details, dict) and details.get("error"):
        raise HTTPException(status_code=502, detail=details.get("message") or "job source error")
    return details
