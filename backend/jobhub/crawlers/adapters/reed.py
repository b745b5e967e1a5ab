from __future__ import annotations
import base64

from jobhub.crawlers.adapters.common import (
    NOT_SPECIFIED,
    extract_requirements,
    format_salary,
    iso_timestamp,
    text,
)
from jobhub.crawlers.base import NormalizedJob, SourceAdapter
from jobhub.utils.hash import request_cache_key

_TYPE_FLAGS = {
    "Full-time": "fullTime",
    "Part-time": "partTime",
    "Contract": "contract",
    "Temporary": "temp",
}


class ReedAdapter(SourceAdapter):
    source_name = "reed"

    def _auth_headers(self) -> dict:
        token = base64.b64encode(f"{self.settings.reed_api_key}:".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {token}"}

    def build_params(self, query, location, options) -> dict:
        params = {
            "keywords": query,
            "locationName": location,
            "distanceFromLocation": options.radius or 10,
            "minimumSalary": int(options.min_salary or 0),
            "maximumSalary": int(options.max_salary or 0),
            "postedWithin": options.days_ago or 30,
            "resultsToTake": options.limit or 25,
            "resultsToSkip": options.offset or 0,
        }
        flag = _TYPE_FLAGS.get(options.job_type or "")
        if flag:
            params[flag] = "true"
        if options.experience_level in ("entry", "graduate"):
            params["graduate"] = "true"
        return params

    def fetch(self, query, location, options):
        url = f"{self.settings.reed_base_url}/search"
        params = self.build_params(query, location, options)
        key = request_cache_key(self.source_name, url, params)

        records = self.cached_request(
            key,
            lambda: self.records_from(self.get_json(url, params=params, headers=self._auth_headers()), "results"),
        )
        return self.normalize_all(records)

    def normalize_job(self, raw):
        description = text(raw.get("jobDescription"))
        applications = raw.get("applications")
        return NormalizedJob(
            id=self.job_id(text(raw.get("jobId"))),
            source=self.source_name,
            title=text(raw.get("jobTitle")),
            company=text(raw.get("employerName")),
            location=text(raw.get("locationName")),
            description=description,
            requirements=extract_requirements(description),
            type=_job_type(raw),
            salary=format_salary(raw.get("minimumSalary"), raw.get("maximumSalary")),
            date_posted=iso_timestamp(raw.get("date") or raw.get("datePosted")),
            url=text(raw.get("jobUrl")),
            expiration_date=iso_timestamp(raw.get("expirationDate")),
            applications=applications if isinstance(applications, int) else None,
            raw_data=raw,
        )

    def get_job_details(self, job_id: str) -> dict:
        return self.detail_request(f"{self.settings.reed_base_url}/jobs/{job_id}", headers=self._auth_headers())


def _job_type(raw: dict) -> str:
    if raw.get("fullTime"):
        return "Full-time"
    if raw.get("partTime"):
        return "Part-time"
    if raw.get("contract") or raw.get("contractType") == "Contract":
        return "Contract"
    if raw.get("temp") or raw.get("contractType") == "Temporary":
        return "Temporary"
    return NOT_SPECIFIED
