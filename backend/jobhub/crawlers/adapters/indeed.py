from __future__ import annotations

from jobhub.crawlers.adapters.common import (
    NOT_SPECIFIED,
    extract_requirements,
    iso_timestamp,
    text,
)
from jobhub.crawlers.base import NormalizedJob, SourceAdapter
from jobhub.utils.hash import request_cache_key


class IndeedAdapter(SourceAdapter):
    source_name = "indeed"

    def build_params(self, query, location, options) -> dict:
        params = {
            "publisher": self.settings.indeed_publisher_id,
            "v": self.settings.indeed_version,
            "format": self.settings.indeed_format,
            "q": query,
            "l": location,
            "radius": options.radius or 25,
            "sort": options.sort_by or "date",
            "start": options.offset or 0,
            "limit": options.limit or 25,
            "fromage": options.days_ago or 30,
        }
        if options.job_type and options.job_type != "all":
            params["jt"] = options.job_type.lower().replace("-", "")
        return params

    def fetch(self, query, location, options):
        url = self.settings.indeed_base_url
        params = self.build_params(query, location, options)
        key = request_cache_key(self.source_name, url, params)

        records = self.cached_request(key, lambda: self.records_from(self.get_json(url, params=params), "results"))
        return self.normalize_all(records)

    def normalize_job(self, raw):
        city = text(raw.get("city"))
        state = text(raw.get("state"))
        location = ", ".join(part for part in (city, state) if part) or text(raw.get("formattedLocation"))
        snippet = text(raw.get("snippet"))
        return NormalizedJob(
            id=self.job_id(text(raw.get("jobkey"))),
            source=self.source_name,
            title=text(raw.get("jobtitle")),
            company=text(raw.get("company")),
            location=location,
            description=snippet,
            requirements=extract_requirements(snippet),
            type="Full-time" if raw.get("fullTime") else "Part-time",
            salary=text(raw.get("salary")) or NOT_SPECIFIED,
            date_posted=iso_timestamp(raw.get("date")),
            url=text(raw.get("url")),
            sponsored=bool(raw.get("sponsored")) if raw.get("sponsored") is not None else None,
            raw_data=raw,
        )

    def get_job_details(self, job_key: str) -> dict:
        base = self.settings.indeed_base_url.rstrip("/")
        return self.detail_request(f"{base}/viewjob", params={"jk": job_key, "publisher": self.settings.indeed_publisher_id})
