from __future__ import annotations
from jobhub.schemas.auth import LinkedInTokenIn, LoginRequest, TokenResponse
from jobhub.schemas.job import JobOut
from jobhub.schemas.search import (
    SalaryRange,
    SearchOptions,
    SearchPreferences,
    SearchRequest,
    SearchResultOut,
    SmartSearchRequest,
    SourceErrorOut,
    SourceStatusOut,
)

__all__ = [
    "LinkedInTokenIn",
    "LoginRequest",
    "TokenResponse",
    "JobOut",
    "SalaryRange",
    "SearchOptions",
    "SearchPreferences",
    "SearchRequest",
    "SearchResultOut",
    "SmartSearchRequest",
    "SourceErrorOut",
    "SourceStatusOut",
]
