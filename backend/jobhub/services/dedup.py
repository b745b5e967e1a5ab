from __future__ import annotations

from jobhub.crawlers.adapters.common import NOT_SPECIFIED
from jobhub.crawlers.base import NormalizedJob


def dedup_key(job: NormalizedJob) -> str:
    # Distinct postings sharing title, company and location collapse into one.
    return f"{job.title}_{job.company}_{job.location}".lower()


def deduplicate_jobs(jobs: list[NormalizedJob]) -> list[NormalizedJob]:
    """Keep the first posting per key, backfilling salary and requirements from later copies.

    Identity fields (title, company, location, description, url) always come
    from the first source that reported the job.
    """
    seen: dict[str, NormalizedJob] = {}
    unique: list[NormalizedJob] = []

    for job in jobs:
        key = dedup_key(job)
        existing = seen.get(key)
        if existing is None:
            seen[key] = job
            unique.append(job)
            continue

        if existing.salary == NOT_SPECIFIED and job.salary and job.salary != NOT_SPECIFIED:
            existing.salary = job.salary
        if len(job.requirements) > len(existing.requirements):
            existing.requirements = job.requirements

    return unique
