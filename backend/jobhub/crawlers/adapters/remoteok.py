from __future__ import annotations
import re

from jobhub.crawlers.adapters.common import (
    NOT_SPECIFIED,
    extract_requirements,
    format_salary,
    iso_timestamp,
    text,
    text_list,
)
from jobhub.crawlers.base import NormalizedJob, SourceAdapter
from jobhub.crawlers.errors import SourceAPIError
from jobhub.crawlers.http_helpers import html_to_text
from jobhub.utils.hash import request_cache_key

SALARY_IN_TEXT = re.compile(r"\$[\d,]+")


class RemoteOKAdapter(SourceAdapter):
    """RemoteOK publishes one feed of every listing; the query is applied locally."""

    source_name = "remoteok"
    cache_ttl_ms = 3_600_000

    def fetch(self, query, location, options):
        url = self.settings.remoteok_base_url
        limit = options.limit or 50
        key = request_cache_key(self.source_name, url, {"query": query.lower(), "limit": limit})

        def produce():
            payload = self.get_json(url, headers={"User-Agent": self.settings.remoteok_user_agent})
            if not isinstance(payload, list):
                raise SourceAPIError(self.source_name, message="remoteok API returned an unexpected payload")
            # First element is the legal notice, not a job.
            return [item for item in payload[1:] if isinstance(item, dict) and _matches(item, query)][:limit]

        return self.normalize_all(self.cached_request(key, produce))

    def normalize_job(self, raw):
        description = text(raw.get("description"))
        return NormalizedJob(
            id=self.job_id(text(raw.get("id"))),
            source=self.source_name,
            title=text(raw.get("position")),
            company=text(raw.get("company")),
            location="Remote",
            description=description,
            requirements=extract_requirements(description),
            type="Full-time",
            salary=_salary(raw, description),
            date_posted=iso_timestamp(raw.get("date") or raw.get("epoch")),
            url=text(raw.get("url")),
            apply_url=text(raw.get("apply_url")),
            tags=text_list(raw.get("tags")),
            logo=text(raw.get("company_logo") or raw.get("logo")),
            raw_data=raw,
        )


def _matches(item: dict, query: str) -> bool:
    tags = " ".join(text_list(item.get("tags")))
    haystack = f"{text(item.get('position'))} {text(item.get('company'))} {tags}".lower()
    return query.lower() in haystack


def _salary(raw: dict, description: str) -> str:
    if raw.get("salary_min") and raw.get("salary_max"):
        return format_salary(raw.get("salary_min"), raw.get("salary_max"))
    match = SALARY_IN_TEXT.search(html_to_text(description))
    return match.group(0) if match else NOT_SPECIFIED
