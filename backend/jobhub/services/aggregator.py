from __future__ import annotations
import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx
from sqlalchemy.exc import SQLAlchemyError

from jobhub.core.config import Settings
from jobhub.crawlers.base import NormalizedJob, SourceAdapter
from jobhub.crawlers.errors import StorageFailure, UnknownSourceError
from jobhub.crawlers.http_helpers import build_client
from jobhub.crawlers.rate_limiter import RateLimiter
from jobhub.crawlers.registry import ADAPTERS
from jobhub.schemas.search import SearchOptions, SearchPreferences
from jobhub.services.dedup import deduplicate_jobs
from jobhub.services.scoring import calculate_job_score, job_text

logger = logging.getLogger(__name__)

TIMEOUT_ERROR = "timeout"


@dataclass
class SearchResult:
    jobs: list[NormalizedJob]
    total: int
    sources: list[str]
    errors: list[dict] = field(default_factory=list)
    timestamp: str = ""
    filtered: int | None = None

    def to_dict(self) -> dict:
        data = {
            "jobs": [job.to_dict() for job in self.jobs],
            "total": self.total,
            "sources": self.sources,
            "errors": self.errors,
            "timestamp": self.timestamp,
        }
        if self.filtered is not None:
            data["filtered"] = self.filtered
        return data


def make_batches(sources: list[str], size: int) -> list[list[str]]:
    size = max(1, size)
    return [sources[i : i + size] for i in range(0, len(sources), size)]


class JobAggregator:
    """Fans a search out to every enabled job board and merges the answers.

    Sources are queried in batches of ``concurrent``; batches run one after
    another, the members of a batch run in parallel. A failing or slow board
    only adds an entry to ``errors``.
    """

    def __init__(
        self,
        settings: Settings,
        storage,
        client: httpx.Client | None = None,
        adapters: dict[str, type[SourceAdapter]] | None = None,
    ):
        self.settings = settings
        self.storage = storage
        self._owns_client = client is None
        self.client = client or build_client(timeout_s=settings.job_source_timeout_ms / 1000)
        self.adapter_classes = adapters if adapters is not None else dict(ADAPTERS)
        self.rate_limiters: dict[str, RateLimiter] = {}
        self.apis: dict[str, SourceAdapter] = {}

    def init(self) -> JobAggregator:
        if self.storage is None:
            raise StorageFailure("storage is required to initialise the aggregator")
        for name, adapter_cls in self.adapter_classes.items():
            limit = self.settings.rate_limit_for(name)
            limiter = RateLimiter(limit.requests, limit.window_ms, source=name)
            self.rate_limiters[name] = limiter
            self.apis[name] = adapter_cls(self.settings, limiter, self.storage, self.client, storage=self.storage)
        logger.info(f"Initialised {len(self.apis)} job sources: {', '.join(self.apis)}")
        return self

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> JobAggregator:
        if not self.apis:
            self.init()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _resolve_sources(self, options: SearchOptions) -> list[str]:
        sources = list(options.sources or self.settings.job_source_priority)
        for name in sources:
            if name not in self.apis:
                raise UnknownSourceError(name)
        return sources

    def _run_batch(
        self, batch: list[str], query: str, location: str, options: SearchOptions, errors: list[dict]
    ) -> list[NormalizedJob]:
        timeout_s = self.settings.job_source_timeout_ms / 1000
        executor = ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="jobsource")
        try:
            futures = [executor.submit(self.apis[name].search_jobs, query, location, options) for name in batch]
            wait(futures, timeout=timeout_s)
        finally:
            # Hung calls are abandoned, not awaited.
            executor.shutdown(wait=False, cancel_futures=True)

        jobs: list[NormalizedJob] = []
        for name, future in zip(batch, futures):
            if not future.done():
                logger.warning(f"[{name}] timed out after {timeout_s:.1f}s")
                errors.append({"source": name, "error": TIMEOUT_ERROR})
                continue
            try:
                result = future.result()
            except Exception as exc:  # noqa: BLE001
                logger.error(f"[{name}] failed: {exc}")
                errors.append({"source": name, "error": str(exc)})
                continue
            if isinstance(result, dict) and result.get("error"):
                errors.append({"source": name, "error": result.get("message") or "unknown error"})
                continue
            jobs.extend(result or [])
        return jobs

    def search_jobs(self, query: str, location: str = "", options: SearchOptions | None = None) -> SearchResult:
        options = options or SearchOptions()
        sources = self._resolve_sources(options)
        concurrent = options.concurrent or self.settings.job_source_concurrent

        all_jobs: list[NormalizedJob] = []
        errors: list[dict] = []
        for batch in make_batches(sources, concurrent):
            logger.info(f"Querying batch: {', '.join(batch)}")
            all_jobs.extend(self._run_batch(batch, query, location, options, errors))

        unique = deduplicate_jobs(all_jobs)
        logger.info(f"Collected {len(all_jobs)} listings, {len(unique)} after dedup, {len(errors)} source errors")
        self.save_jobs(unique)

        return SearchResult(
            jobs=unique,
            total=len(unique),
            sources=sources,
            errors=errors,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    def save_jobs(self, jobs: list[NormalizedJob]) -> int:
        if not jobs:
            return 0
        try:
            result = self.storage.bulk_upsert("jobs", jobs)
        except (StorageFailure, SQLAlchemyError) as exc:
            logger.error(f"Failed to save jobs: {exc}")
            return 0
        succeeded = result.get("succeeded", 0)
        logger.info(f"Saved {succeeded} jobs to database")
        return succeeded

    def smart_search(self, query: str, preferences: SearchPreferences | None = None) -> SearchResult:
        prefs = preferences or SearchPreferences()
        options = SearchOptions(
            sources=prefs.sources,
            experience_level=prefs.experience_level,
            job_type=prefs.job_type,
            days_ago=prefs.date_posted,
            min_salary=prefs.salary.min,
            max_salary=prefs.salary.max,
        )
        results = self.search_jobs(query, prefs.location, options)

        jobs = results.jobs
        if prefs.skills:
            skills = [s.lower() for s in prefs.skills]
            jobs = [job for job in jobs if any(skill in job_text(job) for skill in skills)]

        if prefs.exclude_companies:
            excluded = [c.lower() for c in prefs.exclude_companies]
            jobs = [job for job in jobs if not any(c in job.company.lower() for c in excluded)]

        now = datetime.now(timezone.utc)
        for job in jobs:
            job.score = calculate_job_score(job, prefs.skills, prefs.preferred_companies, query, now=now)
        # sorted() is stable, so equal scores keep dedup order.
        jobs = sorted(jobs, key=lambda job: job.score, reverse=True)

        results.filtered = results.total - len(jobs)
        results.jobs = jobs
        return results

    def get_job_details(self, job_id: str) -> dict | None:
        source, _, external_id = job_id.partition("_")
        adapter = self.apis.get(source)
        if adapter is None or not external_id:
            raise UnknownSourceError(source)

        if hasattr(adapter, "get_job_details"):
            return adapter.get_job_details(external_id)
        return self.storage.get("jobs", job_id)

    def source_status(self) -> list[dict]:
        status = []
        for name, limiter in self.rate_limiters.items():
            status.append(
                {
                    "name": name,
                    "configured": self.settings.is_source_configured(name),
                    "requests": limiter.requests,
                    "window_ms": limiter.window_ms,
                    "remaining": limiter.remaining(),
                }
            )
        return status
