from __future__ import annotations
import threading
import time
from dataclasses import replace

import httpx
import pytest
from conftest import make_job

from jobhub.crawlers.base import SourceAdapter
from jobhub.crawlers.errors import SourceAPIError, StorageFailure, UnknownSourceError
from jobhub.crawlers.http_helpers import build_client
from jobhub.schemas.search import SalaryRange, SearchOptions, SearchPreferences
from jobhub.services.aggregator import JobAggregator, make_batches


class Tracker:
    def __init__(self):
        self.lock = threading.Lock()
        self.events: list[tuple[str, str]] = []
        self.in_flight = 0
        self.peak = 0

    def enter(self, name):
        with self.lock:
            self.events.append(("start", name))
            self.in_flight += 1
            self.peak = max(self.peak, self.in_flight)

    def exit(self, name):
        with self.lock:
            self.in_flight -= 1
            self.events.append(("end", name))


def fake_adapter(name, jobs=(), error=None, delay=0.0, tracker=None, details=None):
    class FakeAdapter(SourceAdapter):
        source_name = name

        def fetch(self, query, location, options):
            if tracker:
                tracker.enter(name)
            try:
                if delay:
                    time.sleep(delay)
                if error is not None:
                    raise error
                return [replace(job) for job in jobs]
            finally:
                if tracker:
                    tracker.exit(name)

    if details is not None:
        FakeAdapter.get_job_details = lambda self, external_id: {**details, "external_id": external_id}
    return FakeAdapter


@pytest.fixture
def offline_client():
    client = build_client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    yield client
    client.close()


@pytest.fixture
def build(cfg, storage, offline_client):
    def _build(adapters, **overrides):
        settings = cfg.model_copy(update={"job_source_priority": list(adapters), **overrides})
        return JobAggregator(settings, storage, client=offline_client, adapters=adapters).init()

    return _build


def test_make_batches():
    assert make_batches(["a", "b", "c", "d", "e"], 2) == [["a", "b"], ["c", "d"], ["e"]]
    assert make_batches(["a"], 0) == [["a"]]


def test_partial_failure_keeps_other_sources(build, storage):
    aggregator = build(
        {
            "alpha": fake_adapter("alpha", [make_job("alpha_1", source="alpha", title="A")]),
            "beta": fake_adapter("beta", error=SourceAPIError("beta", 500)),
            "gamma": fake_adapter("gamma", [make_job("gamma_1", source="gamma", title="C")]),
        }
    )

    result = aggregator.search_jobs("python", "", SearchOptions())

    assert [job.id for job in result.jobs] == ["alpha_1", "gamma_1"]
    assert result.total == 2
    assert result.sources == ["alpha", "beta", "gamma"]
    assert result.errors == [{"source": "beta", "error": "beta API error: 500"}]
    assert result.timestamp
    assert storage.get("jobs", "alpha_1")["title"] == "A"


def test_unexpected_exception_is_recorded(build):
    aggregator = build({"alpha": fake_adapter("alpha", error=RuntimeError("kaboom"))})
    result = aggregator.search_jobs("python", "", SearchOptions())
    assert result.jobs == []
    assert result.errors == [{"source": "alpha", "error": "kaboom"}]


def test_batches_run_in_order_with_bounded_concurrency(build):
    tracker = Tracker()
    names = ["s1", "s2", "s3", "s4", "s5"]
    # Later sources answer faster; output order must still follow priority.
    adapters = {
        name: fake_adapter(
            name,
            [make_job(f"{name}_1", source=name, title=name)],
            delay=0.05 * (len(names) - i),
            tracker=tracker,
        )
        for i, name in enumerate(names)
    }
    aggregator = build(adapters)

    result = aggregator.search_jobs("python", "", SearchOptions(concurrent=2))

    assert [job.source for job in result.jobs] == names
    assert tracker.peak <= 2

    order = tracker.events
    last_end_first_batch = max(order.index(("end", n)) for n in ("s1", "s2"))
    first_start_second_batch = min(order.index(("start", n)) for n in ("s3", "s4"))
    assert last_end_first_batch < first_start_second_batch


def test_slow_source_times_out(build):
    aggregator = build(
        {
            "fast": fake_adapter("fast", [make_job("fast_1", source="fast")]),
            "slow": fake_adapter("slow", [make_job("slow_1", source="slow", title="Slow")], delay=1.0),
        },
        job_source_timeout_ms=100,
    )

    result = aggregator.search_jobs("python", "", SearchOptions())

    assert [job.id for job in result.jobs] == ["fast_1"]
    assert result.errors == [{"source": "slow", "error": "timeout"}]


def test_unknown_source_raises_before_any_call(build):
    tracker = Tracker()
    aggregator = build({"alpha": fake_adapter("alpha", tracker=tracker)})

    with pytest.raises(UnknownSourceError):
        aggregator.search_jobs("python", "", SearchOptions(sources=["alpha", "monster"]))
    assert tracker.events == []


def test_duplicates_across_sources_are_merged(build):
    aggregator = build(
        {
            "alpha": fake_adapter("alpha", [make_job("alpha_1", source="alpha", title="Data Engineer")]),
            "beta": fake_adapter(
                "beta", [make_job("beta_1", source="beta", title="data engineer", salary="$90,000+")]
            ),
        }
    )

    result = aggregator.search_jobs("data", "", SearchOptions())

    assert result.total == 1
    assert result.jobs[0].id == "alpha_1"
    assert result.jobs[0].salary == "$90,000+"


def test_storage_failure_does_not_fail_search(build, storage, monkeypatch):
    def broken(*_args, **_kwargs):
        raise StorageFailure("disk full")

    monkeypatch.setattr(storage, "bulk_upsert", broken)
    aggregator = build({"alpha": fake_adapter("alpha", [make_job("alpha_1", source="alpha")])})

    result = aggregator.search_jobs("python", "", SearchOptions())
    assert result.total == 1
    assert result.errors == []


def test_smart_search_filters_scores_and_sorts(build):
    jobs = [
        make_job("alpha_1", source="alpha", title="Java Developer", company="Beta"),
        make_job("alpha_2", source="alpha", title="Python Engineer", company="BadCorp Ltd"),
        make_job("alpha_3", source="alpha", title="Senior Python Dev", company="Gamma"),
        make_job("alpha_4", source="alpha", title="Python Developer", company="Acme"),
    ]
    aggregator = build({"alpha": fake_adapter("alpha", jobs)})
    prefs = SearchPreferences(
        skills=["python"],
        exclude_companies=["badcorp"],
        preferred_companies=["acme"],
        salary=SalaryRange(min=50000, max=90000),
    )

    result = aggregator.smart_search("developer", prefs)

    assert [job.id for job in result.jobs] == ["alpha_4", "alpha_3"]
    assert result.total == 4
    assert result.filtered == 2
    assert result.jobs[0].score == 65
    assert result.jobs[1].score == 10
    assert result.to_dict()["filtered"] == 2


def test_smart_search_ties_keep_dedup_order(build):
    jobs = [make_job(f"alpha_{i}", source="alpha", title=f"Python role {i}") for i in range(4)]
    aggregator = build({"alpha": fake_adapter("alpha", jobs)})

    result = aggregator.smart_search("", SearchPreferences(skills=["python"]))

    assert [job.id for job in result.jobs] == ["alpha_0", "alpha_1", "alpha_2", "alpha_3"]
    assert result.filtered == 0


def test_job_details_from_adapter_or_storage(build):
    aggregator = build(
        {
            "alpha": fake_adapter("alpha", [make_job("alpha_1", source="alpha", title="Stored")]),
            "beta": fake_adapter("beta", details={"title": "Live"}),
        }
    )
    aggregator.search_jobs("python", "", SearchOptions(sources=["alpha"]))

    assert aggregator.get_job_details("alpha_1")["title"] == "Stored"
    assert aggregator.get_job_details("alpha_404") is None
    assert aggregator.get_job_details("beta_x_1") == {"title": "Live", "external_id": "x_1"}
    with pytest.raises(UnknownSourceError):
        aggregator.get_job_details("monster_1")


def test_source_status(build):
    aggregator = build({"alpha": fake_adapter("alpha"), "remoteok": fake_adapter("remoteok")})
    aggregator.search_jobs("python", "", SearchOptions(sources=["remoteok"]))

    status = {entry["name"]: entry for entry in aggregator.source_status()}
    assert status["remoteok"]["configured"] is True
    assert status["remoteok"]["remaining"] == 59
    assert status["alpha"]["configured"] is False
    assert status["alpha"]["requests"] == 60
