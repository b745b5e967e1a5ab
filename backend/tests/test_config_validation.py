from __future__ import annotations
from jobhub.core.config import Settings, validate_settings


def test_dev_defaults_are_valid():
    assert validate_settings(Settings(_env_file=None)) == []


def test_production_requires_a_keyed_source_and_secret():
    problems = validate_settings(Settings(_env_file=None, env="prod"))
    assert "At least one job search API must be configured" in problems
    assert "JWT secret must be changed outside dev" in problems

    ok = Settings(_env_file=None, env="prod", reed_api_key="k", jwt_secret="s3cret")
    assert validate_settings(ok) == []


def test_concurrency_and_timeout_bounds():
    problems = validate_settings(Settings(_env_file=None, job_source_concurrent=0, job_source_timeout_ms=0))
    assert len(problems) == 2


def test_rate_limit_defaults_and_fallback():
    cfg = Settings(_env_file=None)
    assert cfg.rate_limit_for("adzuna").requests == 250
    assert cfg.rate_limit_for("adzuna").window_ms == 3_600_000
    assert cfg.rate_limit_for("linkedin").window_ms == 86_400_000
    fallback = cfg.rate_limit_for("unknown")
    assert (fallback.requests, fallback.window_ms) == (60, 60_000)


def test_is_source_configured():
    cfg = Settings(_env_file=None, adzuna_app_id="id")
    assert cfg.is_source_configured("remoteok") is True
    assert cfg.is_source_configured("adzuna") is False
    assert cfg.is_source_configured("reed") is False
