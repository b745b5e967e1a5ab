from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlencode

from jobhub.crawlers.adapters.common import (
    NOT_SPECIFIED,
    extract_requirements,
    format_salary,
    iso_timestamp,
    normalize_job_type,
    text,
    text_list,
)
from jobhub.crawlers.base import NormalizedJob, SourceAdapter
from jobhub.crawlers.errors import AuthenticationRequired
from jobhub.utils.hash import request_cache_key

TOKEN_KEY = "linkedin_token"


def store_token(storage, access_token: str, expires_at: datetime) -> None:
    storage.put("settings", TOKEN_KEY, {"value": access_token, "expires_at": expires_at.isoformat()})


class LinkedInAdapter(SourceAdapter):
    source_name = "linkedin"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.access_token: str | None = None
        self.token_expires_at: datetime | None = None

    def authorization_url(self) -> str:
        params = {
            "response_type": "code",
            "client_id": self.settings.linkedin_client_id,
            "redirect_uri": self.settings.linkedin_redirect_uri,
            "scope": " ".join(self.settings.linkedin_scopes),
        }
        return f"https://www.linkedin.com/oauth/v2/authorization?{urlencode(params)}"

    def _token_valid(self) -> bool:
        return bool(self.access_token and self.token_expires_at and self.token_expires_at > datetime.now(timezone.utc))

    def authenticate(self) -> str:
        if self._token_valid():
            return self.access_token

        token_data = self.storage.get("settings", TOKEN_KEY) if self.storage is not None else None
        if isinstance(token_data, dict) and token_data.get("value"):
            expires_at = _parse_expiry(token_data.get("expires_at"))
            if expires_at and expires_at > datetime.now(timezone.utc):
                self.access_token = token_data["value"]
                self.token_expires_at = expires_at
                return self.access_token

        self.access_token = None
        raise AuthenticationRequired(self.source_name, self.authorization_url())

    def fetch(self, query, location, options):
        token = self.authenticate()
        params = {
            "keywords": query,
            "location": location,
            "start": options.offset or 0,
            "count": options.limit or 25,
        }
        if options.experience_level and options.experience_level != "all":
            params["experienceLevel"] = options.experience_level
        if options.job_type and options.job_type != "all":
            params["jobType"] = options.job_type

        url = f"{self.settings.linkedin_base_url}/v2/jobSearch"
        headers = {"Authorization": f"Bearer {token}", "X-Restli-Protocol-Version": "2.0.0"}
        # The bearer token stays out of the cache key.
        key = request_cache_key(self.source_name, url, params)

        records = self.cached_request(
            key, lambda: self.records_from(self.get_json(url, params=params, headers=headers), "elements")
        )
        return self.normalize_all(records)

    def normalize_job(self, raw):
        external_id = text(raw.get("id"))
        description = text(raw.get("description"))
        return NormalizedJob(
            id=self.job_id(external_id),
            source=self.source_name,
            title=text(raw.get("title")),
            company=text(raw.get("companyName")),
            location=text(raw.get("location")),
            description=description,
            requirements=extract_requirements(description),
            type=normalize_job_type(raw.get("employmentType")),
            experience_level=text(raw.get("experienceLevel")),
            salary=_salary(raw.get("salary")),
            date_posted=iso_timestamp(raw.get("listedAt")),
            url=f"https://www.linkedin.com/jobs/view/{external_id}" if external_id else "",
            apply_url=text(raw.get("applyUrl")),
            benefits=text_list(raw.get("benefits")),
            skills=text_list(raw.get("skills")),
            raw_data=raw,
        )


def _salary(value) -> str:
    if isinstance(value, dict):
        return format_salary(value.get("min"), value.get("max"))
    return text(value) or NOT_SPECIFIED


def _parse_expiry(value) -> datetime | None:
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
