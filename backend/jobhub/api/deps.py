from __future__ import annotations
import secrets

from fastapi import Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordBearer

from jobhub.core.config import Settings, settings as default_settings
from jobhub.services.aggregator import JobAggregator
from jobhub.utils.auth import verify_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{default_settings.api_prefix}/auth/login")


def get_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or default_settings


def require_user(token: str = Depends(oauth2_scheme), cfg: Settings = Depends(get_settings)) -> str:
    subject = verify_access_token(token, cfg)
    if not subject:
        raise HTTPException(status_code=401, detail="Invalid token")
    return subject


def verify_login(username: str, password: str, cfg: Settings | None = None) -> bool:
    cfg = cfg or default_settings
    user_ok = secrets.compare_digest(username.encode("utf-8"), cfg.auth_username.encode("utf-8"))
    password_ok = secrets.compare_digest(password.encode("utf-8"), cfg.auth_password.encode("utf-8"))
    return user_ok and password_ok


def get_aggregator(request: Request) -> JobAggregator:
    aggregator = getattr(request.app.state, "aggregator", None)
    if aggregator is None:
        raise HTTPException(status_code=503, detail="job aggregator is not initialised")
    return aggregator
