from __future__ import annotations
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

from jobhub.crawlers.http_helpers import html_to_text

NOT_SPECIFIED = "Not specified"
JOB_TYPES = ("Full-time", "Part-time", "Contract", "Temporary", NOT_SPECIFIED)

REQUIREMENT_HEADER = re.compile(
    r"requirements|qualifications|must[- ]have|required skills|we(?:'|’| a)re looking for",
    re.IGNORECASE,
)
SECTION_STOP = re.compile(r"\b(responsibilities|duties|benefits)\b", re.IGNORECASE)
BULLET = re.compile(r"^\s*(?:[•\-\*▪◦·–]|\d{1,2}[.)])\s*")
INLINE_SEPARATOR = re.compile(r"\s+-\s+|;")
MAX_HEADER_LEN = 60
MAX_REQUIREMENTS = 10

_TYPE_ALIASES = {
    "fulltime": "Full-time",
    "full": "Full-time",
    "permanent": "Full-time",
    "parttime": "Part-time",
    "part": "Part-time",
    "contract": "Contract",
    "contractor": "Contract",
    "freelance": "Contract",
    "temporary": "Temporary",
    "temp": "Temporary",
}


def text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    return str(value).strip()


def text_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [text(item) for item in value if text(item)]


def _number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.replace(",", "").strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number or None


def _money(value: float) -> str:
    if float(value).is_integer():
        return f"${int(value):,}"
    return f"${value:,.2f}"


def format_salary(min_salary: Any, max_salary: Any) -> str:
    low = _number(min_salary)
    high = _number(max_salary)
    if low is None and high is None:
        return NOT_SPECIFIED
    if low is not None and high is not None:
        return f"{_money(low)} - {_money(high)}"
    if low is not None:
        return f"{_money(low)}+"
    return f"Up to {_money(high)}"


def normalize_job_type(value: Any) -> str:
    raw = text(value)
    if raw in JOB_TYPES:
        return raw
    key = re.sub(r"[^a-z]", "", raw.lower())
    if key in _TYPE_ALIASES:
        return _TYPE_ALIASES[key]
    for alias, label in _TYPE_ALIASES.items():
        if key.startswith(alias):
            return label
    return NOT_SPECIFIED


def iso_timestamp(value: Any) -> str:
    """Best-effort conversion of a source date to an ISO-8601 UTC string.

    Accepts epoch milliseconds, epoch seconds, ISO strings, RFC 2822 dates
    and ``dd/mm/yyyy``. Returns ``""`` when the value can't be read.
    """
    if value is None or value == "" or isinstance(value, bool):
        return ""

    parsed: datetime | None = None
    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > 10_000_000_000 else value
        try:
            parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return ""
    else:
        raw = text(value)
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is None:
            try:
                parsed = datetime.strptime(raw, "%d/%m/%Y")
            except ValueError:
                parsed = None
        if parsed is None:
            try:
                parsed = parsedate_to_datetime(raw)
            except (TypeError, ValueError, IndexError):
                return ""

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat()


def _is_header(line: str, pattern: re.Pattern) -> re.Match | None:
    match = pattern.search(line)
    if not match:
        return None
    if len(line) <= MAX_HEADER_LEN or line[match.end():].lstrip().startswith(":"):
        return match
    return None


def extract_requirements(description: str) -> list[str]:
    """Pull bullet-style requirements out of a free-text job description.

    Heuristic only: find a requirements-like header, then collect the lines
    after it until a blank line, another section header or ten items.
    """
    lines = [line.strip() for line in html_to_text(description or "").splitlines()]

    start = None
    first_item = ""
    for i, line in enumerate(lines):
        match = _is_header(line, REQUIREMENT_HEADER)
        if match:
            start = i + 1
            first_item = line[match.end():].strip(" :-–\t")
            break
    if start is None:
        return []

    # A one-line snippet can carry the next section on the header line.
    stop = SECTION_STOP.search(first_item)
    if stop:
        first_item = first_item[: stop.start()]
    candidates = [part.strip(" .") for part in INLINE_SEPARATOR.split(first_item)] if first_item else []
    following = [] if stop else lines[start:]
    for line in following:
        if not line:
            if candidates:
                break
            continue
        if not BULLET.match(line) and _is_header(line, SECTION_STOP):
            break
        candidates.extend(part for part in line.split("•"))

    requirements: list[str] = []
    for item in candidates:
        cleaned = BULLET.sub("", item).strip()
        if cleaned:
            requirements.append(cleaned)
        if len(requirements) >= MAX_REQUIREMENTS:
            break
    return requirements
