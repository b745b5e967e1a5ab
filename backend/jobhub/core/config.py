from __future__ import annotations
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitConfig(BaseModel):
    requests: int
    window_ms: int


def default_rate_limits() -> dict[str, RateLimitConfig]:
    return {
        "linkedin": RateLimitConfig(requests=100, window_ms=86_400_000),
        "indeed": RateLimitConfig(requests=1000, window_ms=86_400_000),
        "adzuna": RateLimitConfig(requests=250, window_ms=3_600_000),
        "reed": RateLimitConfig(requests=3000, window_ms=3_600_000),
        "remoteok": RateLimitConfig(requests=60, window_ms=60_000),
    }


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Job Hub"
    env: str = "dev"
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./jobhub.db"

    auth_username: str = "admin"
    auth_password: str = "change-me"
    jwt_secret: str = "change-me-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24

    linkedin_client_id: str = ""
    linkedin_client_secret: str = ""
    linkedin_redirect_uri: str = "http://localhost:8000/auth/linkedin"
    linkedin_scopes: list[str] = ["r_liteprofile", "r_emailaddress", "w_member_social"]
    linkedin_base_url: str = "https://api.linkedin.com"

    indeed_publisher_id: str = ""
    indeed_api_key: str = ""
    indeed_base_url: str = "https://api.indeed.com/ads/apisearch"
    indeed_version: int = 2
    indeed_format: str = "json"

    adzuna_app_id: str = ""
    adzuna_app_key: str = ""
    adzuna_base_url: str = "https://api.adzuna.com/v1/api/jobs"
    adzuna_countries: list[str] = ["us", "gb", "au", "ca", "de", "fr", "in"]

    reed_api_key: str = ""
    reed_base_url: str = "https://www.reed.co.uk/api/1.0"

    remoteok_base_url: str = "https://remoteok.io/api"
    remoteok_user_agent: str = "JobHub/1.0"

    rate_limits: dict[str, RateLimitConfig] = default_rate_limits()

    job_source_priority: list[str] = ["linkedin", "indeed", "adzuna", "reed", "remoteok"]
    job_source_concurrent: int = 3
    job_source_timeout_ms: int = 10_000
    job_source_retries: int = 3

    cache_max_age_ms: int = 3_600_000

    def rate_limit_for(self, source: str) -> RateLimitConfig:
        # Sources without an explicit entry get 60 requests per minute.
        return self.rate_limits.get(source) or RateLimitConfig(requests=60, window_ms=60_000)

    def is_source_configured(self, source: str) -> bool:
        if source == "linkedin":
            return bool(self.linkedin_client_id)
        if source == "indeed":
            return bool(self.indeed_publisher_id)
        if source == "adzuna":
            return bool(self.adzuna_app_id and self.adzuna_app_key)
        if source == "reed":
            return bool(self.reed_api_key)
        if source == "remoteok":
            return True
        return False


def validate_settings(cfg: Settings) -> list[str]:
    errors: list[str] = []
    if cfg.env != "dev":
        keyed = ("linkedin", "indeed", "adzuna", "reed")
        if not any(cfg.is_source_configured(name) for name in keyed):
            errors.append("At least one job search API must be configured")
        if cfg.jwt_secret == "change-me-secret":
            errors.append("JWT secret must be changed outside dev")
    if cfg.job_source_concurrent < 1:
        errors.append("job_source_concurrent must be at least 1")
    if cfg.job_source_timeout_ms <= 0:
        errors.append("job_source_timeout_ms must be positive")
    return errors


settings = Settings()
