from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jobhub.schemas.job import JobOut


class SearchOptions(BaseModel):
    """Options bag shared by every adapter; each one reads the subset it understands."""

    model_config = ConfigDict(extra="allow")

    sources: list[str] | None = None
    concurrent: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)
    offset: int | None = Field(default=None, ge=0)
    page: int | None = Field(default=None, ge=1)
    country: str | None = None
    experience_level: str | None = None
    job_type: str | None = None
    days_ago: int | None = Field(default=None, ge=0)
    min_salary: float | None = None
    max_salary: float | None = None
    radius: int | None = None
    sort_by: str | None = None


class SalaryRange(BaseModel):
    min: float = 0
    max: float = 999999


class SearchPreferences(BaseModel):
    location: str = "remote"
    experience_level: str = "all"
    salary: SalaryRange = Field(default_factory=SalaryRange)
    job_type: str = "all"
    date_posted: int = 30
    skills: list[str] = Field(default_factory=list)
    exclude_companies: list[str] = Field(default_factory=list)
    preferred_companies: list[str] = Field(default_factory=list)
    sources: list[str] | None = None


class SearchRequest(BaseModel):
    query: str
    location: str = ""
    options: SearchOptions = Field(default_factory=SearchOptions)


class SmartSearchRequest(BaseModel):
    query: str
    preferences: SearchPreferences = Field(default_factory=SearchPreferences)


class SourceErrorOut(BaseModel):
    source: str
    error: str


class SearchResultOut(BaseModel):
    jobs: list[JobOut]
    total: int
    sources: list[str]
    errors: list[SourceErrorOut]
    timestamp: str
    filtered: int | None = None


class SourceStatusOut(BaseModel):
    name: str
    configured: bool
    requests: int
    window_ms: int
    remaining: int
