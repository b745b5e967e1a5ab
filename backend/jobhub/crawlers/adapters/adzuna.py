from __future__ import annotations

from jobhub.crawlers.adapters.common import (
    NOT_SPECIFIED,
    extract_requirements,
    format_salary,
    iso_timestamp,
    normalize_job_type,
    text,
)
from jobhub.crawlers.base import NormalizedJob, SourceAdapter
from jobhub.utils.hash import request_cache_key

_CONTRACT_TIME = {"full_time": "Full-time", "part_time": "Part-time"}
_CONTRACT_TYPE = {"contract": "Contract", "permanent": "Full-time"}


class AdzunaAdapter(SourceAdapter):
    source_name = "adzuna"

    def fetch(self, query, location, options):
        country = (options.country or "us").lower()
        page = options.page or 1
        url = f"{self.settings.adzuna_base_url}/{country}/search/{page}"
        params = {
            "app_id": self.settings.adzuna_app_id,
            "app_key": self.settings.adzuna_app_key,
            "results_per_page": options.limit or 20,
            "what": query,
            "sort_by": options.sort_by or "date",
        }
        if location:
            params["where"] = location
        if options.days_ago:
            params["max_days_old"] = options.days_ago
        if options.min_salary:
            params["salary_min"] = int(options.min_salary)
        if options.max_salary:
            params["salary_max"] = int(options.max_salary)
        if options.radius:
            params["distance"] = options.radius

        # Credentials stay out of the cache key.
        key_params = {k: v for k, v in params.items() if k not in ("app_id", "app_key")}
        key = request_cache_key(self.source_name, url, key_params)

        records = self.cached_request(key, lambda: self.records_from(self.get_json(url, params=params), "results"))
        return self.normalize_all(records)

    def normalize_job(self, raw):
        description = text(raw.get("description"))
        company = raw.get("company") if isinstance(raw.get("company"), dict) else {}
        location = raw.get("location") if isinstance(raw.get("location"), dict) else {}
        category = raw.get("category") if isinstance(raw.get("category"), dict) else {}
        return NormalizedJob(
            id=self.job_id(text(raw.get("id"))),
            source=self.source_name,
            title=text(raw.get("title")),
            company=text(company.get("display_name")),
            location=text(location.get("display_name")),
            description=description,
            requirements=extract_requirements(description),
            type=_job_type(raw),
            salary=format_salary(raw.get("salary_min"), raw.get("salary_max")),
            date_posted=iso_timestamp(raw.get("created")),
            url=text(raw.get("redirect_url")),
            category=text(category.get("label")),
            raw_data=raw,
        )


def _job_type(raw: dict) -> str:
    contract_time = text(raw.get("contract_time")).lower()
    if contract_time in _CONTRACT_TIME:
        return _CONTRACT_TIME[contract_time]
    contract_type = text(raw.get("contract_type")).lower()
    if contract_type in _CONTRACT_TYPE:
        return _CONTRACT_TYPE[contract_type]
    return normalize_job_type(contract_type) if contract_type else NOT_SPECIFIED
