from __future__ import annotations
from datetime import datetime, timezone

from jobhub.crawlers.adapters.common import NOT_SPECIFIED
from jobhub.crawlers.base import NormalizedJob

PREFERRED_COMPANY_BONUS = 50
SKILL_POINTS = 10
QUERY_WORD_POINTS = 5
FRESH_BONUS = 10
RECENT_BONUS = 5
SALARY_BONUS = 5
MS_PER_DAY = 86_400_000


def job_text(job: NormalizedJob) -> str:
    return " ".join([job.title, job.description, " ".join(job.requirements)]).lower()


def days_since_posted(job: NormalizedJob, now: datetime | None = None) -> float | None:
    if not job.date_posted:
        return None
    try:
        posted = datetime.fromisoformat(job.date_posted.replace("Z", "+00:00"))
    except ValueError:
        return None
    if posted.tzinfo is None:
        posted = posted.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return (now - posted).total_seconds() * 1000 / MS_PER_DAY


def calculate_job_score(
    job: NormalizedJob,
    skills: list[str],
    preferred_companies: list[str],
    query: str,
    now: datetime | None = None,
) -> float:
    """Additive relevance of one job to a search, with no upper bound."""
    score = 0.0
    company = job.company.lower()
    text = job_text(job)

    if any(c and c.lower() in company for c in preferred_companies):
        score += PREFERRED_COMPANY_BONUS

    for skill in skills:
        if skill and skill.lower() in text:
            score += SKILL_POINTS

    for word in query.lower().split():
        if word in text:
            score += QUERY_WORD_POINTS

    days_ago = days_since_posted(job, now)
    if days_ago is not None:
        if days_ago < 7:
            score += FRESH_BONUS
        elif days_ago < 14:
            score += RECENT_BONUS

    if job.salary and job.salary != NOT_SPECIFIED:
        score += SALARY_BONUS

    return score
