from __future__ import annotations
from typing import Any

import httpx
from bs4 import BeautifulSoup
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from jobhub.crawlers.errors import SourceAPIError

DEFAULT_HEADERS = {"User-Agent": "JobHub/1.0", "Accept": "application/json"}


def build_client(timeout_s: float = 10.0, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    return httpx.Client(
        timeout=timeout_s,
        follow_redirects=True,
        headers=DEFAULT_HEADERS,
        transport=transport,
    )


def fetch_json(
    client: httpx.Client,
    url: str,
    source: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    retries: int = 3,
) -> Any:
    """GET ``url`` and decode JSON.

    Connection-level failures are retried with exponential backoff; an HTTP
    error status is not retried and surfaces as SourceAPIError.
    """
    for attempt in Retrying(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(max(1, retries)),
        wait=wait_exponential(multiplier=0.5, max=4),
        reraise=True,
    ):
        with attempt:
            resp = client.get(url, params=params, headers=headers)

    if not resp.is_success:
        raise SourceAPIError(source, resp.status_code)
    try:
        return resp.json()
    except ValueError as exc:
        raise SourceAPIError(source, resp.status_code, f"{source} API returned malformed JSON") from exc


def html_to_text(html: str) -> str:
    """Flatten an HTML description to one line per paragraph / list item."""
    if not html or "<" not in html:
        return html or ""
    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for li in soup.find_all("li"):
        li.string = "• " + li.get_text(" ", strip=True)
    for block in soup.find_all(["p", "h1", "h2", "h3", "h4", "h5", "h6"]):
        block.string = block.get_text(" ", strip=True)
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)
