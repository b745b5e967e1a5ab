from __future__ import annotations
import httpx
import pytest

from jobhub.core.config import Settings
from jobhub.crawlers.base import NormalizedJob
from jobhub.crawlers.http_helpers import build_client
from jobhub.crawlers.rate_limiter import RateLimiter
from jobhub.db.database import make_engine, make_session_factory
from jobhub.db.init_db import init_db
from jobhub.services.storage import SqlStorage


class MemoryStorage:
    """Dict-backed stand-in for SqlStorage in adapter tests."""

    def __init__(self):
        self.cache = {}
        self.settings = {}

    def get_cached(self, key):
        return self.cache.get(key)

    def set_cached(self, key, value, ttl_ms):
        self.cache[key] = value

    def get(self, collection, item_id):
        return self.settings.get(item_id)

    def put(self, collection, item_id, value):
        self.settings[item_id] = value


@pytest.fixture
def cfg():
    return Settings(
        _env_file=None,
        env="dev",
        linkedin_client_id="li-client",
        indeed_publisher_id="pub-1",
        adzuna_app_id="app-id",
        adzuna_app_key="app-key",
        reed_api_key="reed-key",
        job_source_retries=1,
        job_source_timeout_ms=2000,
    )


@pytest.fixture
def engine():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def storage(engine):
    return SqlStorage(make_session_factory(engine))


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def make_adapter(cfg, memory_storage):
    def _make(adapter_cls, handler, limiter: RateLimiter | None = None):
        client = build_client(transport=httpx.MockTransport(handler))
        limiter = limiter or RateLimiter(100, 60_000, source=adapter_cls.source_name)
        return adapter_cls(cfg, limiter, memory_storage, client, storage=memory_storage)

    return _make


def make_job(job_id: str, source: str = "remoteok", **kwargs) -> NormalizedJob:
    kwargs.setdefault("title", "Python Developer")
    kwargs.setdefault("company", "Acme")
    kwargs.setdefault("location", "Remote")
    return NormalizedJob(id=job_id, source=source, **kwargs)
