from __future__ import annotations
import pytest

from jobhub.crawlers.adapters.common import extract_requirements, format_salary, iso_timestamp, normalize_job_type
from jobhub.crawlers.http_helpers import html_to_text


@pytest.mark.parametrize(
    "low, high, expected",
    [
        (50000, 80000, "$50,000 - $80,000"),
        (50000, None, "$50,000+"),
        (None, 80000, "Up to $80,000"),
        (None, None, "Not specified"),
        (0, 0, "Not specified"),
        ("45,000", "", "$45,000+"),
    ],
)
def test_format_salary(low, high, expected):
    assert format_salary(low, high) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Full-time", "Full-time"),
        ("full_time", "Full-time"),
        ("PERMANENT", "Full-time"),
        ("part-time", "Part-time"),
        ("Freelance", "Contract"),
        ("temp", "Temporary"),
        ("Internship", "Not specified"),
        (None, "Not specified"),
    ],
)
def test_normalize_job_type(raw, expected):
    assert normalize_job_type(raw) == expected


def test_iso_timestamp_formats():
    assert iso_timestamp(1700000000000) == "2023-11-14T22:13:20+00:00"
    assert iso_timestamp(1700000000) == "2023-11-14T22:13:20+00:00"
    assert iso_timestamp("2024-01-15T10:00:00Z") == "2024-01-15T10:00:00+00:00"
    assert iso_timestamp("15/01/2024") == "2024-01-15T00:00:00+00:00"
    assert iso_timestamp("garbage") == ""
    assert iso_timestamp(None) == ""


def test_requirements_stop_at_blank_line():
    description = (
        "About us\n"
        "We build things.\n"
        "\n"
        "Requirements:\n"
        "• 3+ years Python\n"
        "• SQL\n"
        "- Docker\n"
        "\n"
        "Benefits\n"
        "• Remote"
    )
    assert extract_requirements(description) == ["3+ years Python", "SQL", "Docker"]


def test_requirements_from_html_stop_at_next_section():
    description = (
        "<p>Qualifications</p><ul><li>Go</li><li>Kubernetes</li></ul>"
        "<p>Responsibilities</p><ul><li>Ship features</li></ul>"
    )
    assert extract_requirements(description) == ["Go", "Kubernetes"]


def test_requirements_inline_after_header():
    assert extract_requirements("Requirements: Python, SQL") == ["Python, SQL"]


def test_requirements_capped_at_ten():
    description = "Must have:\n" + "\n".join(f"- skill {i}" for i in range(15))
    result = extract_requirements(description)
    assert len(result) == 10
    assert result[0] == "skill 0"


def test_no_requirements_section():
    assert extract_requirements("Great team, great pay.") == []
    assert extract_requirements("") == []


def test_html_to_text_flattens_lists():
    assert html_to_text("<ul><li>One</li><li>Two <b>bold</b></li></ul>") == "• One\n• Two bold"
    assert html_to_text("plain text") == "plain text"


def test_one_line_snippet_stops_at_next_section():
    assert extract_requirements("Requirements: Python - SQL. Benefits: dental") == ["Python", "SQL"]
    assert extract_requirements("Must have: Go; Kubernetes") == ["Go", "Kubernetes"]
