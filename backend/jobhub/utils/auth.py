from __future__ import annotations
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from jobhub.core.config import Settings, settings as default_settings


def create_access_token(subject: str, cfg: Settings | None = None, expires_minutes: int | None = None) -> str:
    cfg = cfg or default_settings
    issued = datetime.now(timezone.utc)
    expire = issued + timedelta(minutes=expires_minutes or cfg.jwt_expire_minutes)
    payload = {"sub": subject, "iat": issued, "exp": expire, "iss": cfg.app_name}
    return jwt.encode(payload, cfg.jwt_secret, algorithm=cfg.jwt_algorithm)


def verify_access_token(token: str, cfg: Settings | None = None) -> str | None:
    cfg = cfg or default_settings
    try:
        payload = jwt.decode(token, cfg.jwt_secret, algorithms=[cfg.jwt_algorithm], issuer=cfg.app_name)
    except JWTError:
        return None
    return payload.get("sub")
