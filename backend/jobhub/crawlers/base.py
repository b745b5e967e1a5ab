from __future__ import annotations
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable

import httpx

from jobhub.core.config import Settings
from jobhub.crawlers.cache import ResponseCache, cached_request
from jobhub.crawlers.errors import SourceAPIError
from jobhub.crawlers.http_helpers import fetch_json
from jobhub.crawlers.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


@dataclass
class NormalizedJob:
    id: str
    source: str
    title: str = ""
    company: str = ""
    location: str = ""
    description: str = ""
    requirements: list[str] = field(default_factory=list)
    type: str = "Not specified"
    salary: str = "Not specified"
    date_posted: str = ""
    url: str = ""
    apply_url: str = ""
    raw_data: dict = field(default_factory=dict)
    benefits: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    logo: str = ""
    category: str = ""
    experience_level: str = ""
    sponsored: bool | None = None
    expiration_date: str = ""
    applications: int | None = None
    score: float | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class SourceAdapter:
    source_name: str
    cache_ttl_ms: int | None = None

    def __init__(
        self,
        settings: Settings,
        rate_limiter: RateLimiter,
        cache: ResponseCache,
        client: httpx.Client,
        storage: Any = None,
    ):
        self.settings = settings
        self.rate_limiter = rate_limiter
        self.cache = cache
        self.client = client
        self.storage = storage if storage is not None else cache

    def search_jobs(self, query: str, location: str, options) -> list[NormalizedJob] | dict:
        try:
            self.rate_limiter.check_limit()
            jobs = self.fetch(query, location, options)
            logger.info(f"[{self.source_name}] Collected {len(jobs)} listings")
            return jobs
        except Exception as exc:  # noqa: BLE001
            return self.handle_error(exc)

    def fetch(self, query: str, location: str, options) -> list[NormalizedJob]:
        raise NotImplementedError

    def normalize_job(self, raw: dict) -> NormalizedJob:
        raise NotImplementedError

    def normalize_all(self, records: Any) -> list[NormalizedJob]:
        if not isinstance(records, list):
            return []
        jobs: list[NormalizedJob] = []
        for raw in records:
            if not isinstance(raw, dict):
                continue
            try:
                jobs.append(self.normalize_job(raw))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning(f"[{self.source_name}] Skipping malformed record: {exc}")
        return jobs

    def cached_request(self, key: str, producer: Callable[[], Any], ttl_ms: int | None = None) -> Any:
        ttl = ttl_ms or self.cache_ttl_ms or self.settings.cache_max_age_ms
        return cached_request(self.cache, key, producer, ttl)

    def get_json(self, url: str, params: dict | None = None, headers: dict | None = None) -> Any:
        return fetch_json(
            self.client,
            url,
            self.source_name,
            params=params,
            headers=headers,
            retries=self.settings.job_source_retries,
        )

    def detail_request(self, url: str, params: dict | None = None, headers: dict | None = None) -> dict:
        try:
            self.rate_limiter.check_limit()
            return self.get_json(url, params=params, headers=headers)
        except Exception as exc:  # noqa: BLE001
            return self.handle_error(exc)

    def records_from(self, payload: Any, key: str) -> list:
        if not isinstance(payload, dict):
            raise SourceAPIError(self.source_name, message=f"{self.source_name} API returned an unexpected payload")
        records = payload.get(key)
        return records if isinstance(records, list) else []

    def handle_error(self, exc: Exception) -> dict:
        logger.error(f"[{self.source_name}] API error: {exc}")
        return {
            "error": True,
            "message": str(exc),
            "api": self.source_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def job_id(self, external_id: Any) -> str:
        return f"{self.source_name}_{external_id}"
