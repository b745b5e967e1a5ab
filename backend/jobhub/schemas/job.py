from __future__ import annotations

from pydantic import BaseModel, Field


class JobOut(BaseModel):
    id: str
    source: str
    title: str
    company: str
    location: str
    description: str
    requirements: list[str] = Field(default_factory=list)
    type: str
    salary: str
    date_posted: str
    url: str
    apply_url: str
    benefits: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    logo: str = ""
    category: str = ""
    experience_level: str = ""
    sponsored: bool | None = None
    expiration_date: str = ""
    applications: int | None = None
    raw_data: dict = Field(default_factory=dict)
    score: float | None = None

    class Config:
        from_attributes = True
