from __future__ import annotations
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, HTTPException

from jobhub.api.deps import get_aggregator, get_settings, require_user, verify_login
from jobhub.core.config import Settings
from jobhub.crawlers.adapters.linkedin import store_token
from jobhub.schemas.auth import LinkedInTokenIn, LoginRequest, TokenResponse
from jobhub.services.aggregator import JobAggregator
from jobhub.utils.auth import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, cfg: Settings = Depends(get_settings)):
    if not verify_login(req.username, req.password, cfg):
        raise HTTPException(status_code=401, detail="Invalid credentials")
    token = create_access_token(req.username, cfg)
    return TokenResponse(access_token=token)


@router.get("/linkedin")
def linkedin_authorization(_: str = Depends(require_user), aggregator: JobAggregator = Depends(get_aggregator)):
    adapter = aggregator.apis.get("linkedin")
    if adapter is None:
        raise HTTPException(status_code=404, detail="linkedin source is not enabled")
    return {"auth_url": adapter.authorization_url()}


@router.put("/linkedin/token")
def put_linkedin_token(
    body: LinkedInTokenIn,
    _: str = Depends(require_user),
    aggregator: JobAggregator = Depends(get_aggregator),
):
    expires_at = datetime.now(timezone.utc) + timedelta(seconds=body.expires_in)
    store_token(aggregator.storage, body.access_token, expires_at)
    return {"success": True, "expires_at": expires_at.isoformat()}
