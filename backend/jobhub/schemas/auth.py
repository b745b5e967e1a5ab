from __future__ import annotations
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LinkedInTokenIn(BaseModel):
    access_token: str
    expires_in: int = Field(default=60 * 24 * 3600, gt=0, description="lifetime in seconds")
