"""Username handling, URL construction and the outbound page fetch."""

from __future__ import annotations

from typing import Callable, Iterable
from urllib.parse import quote

import requests

from .errors import UpstreamFetchError, ValidationError

PROFILE_BASE_URL = "https://www.tiktok.com/@"
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}
# Characters JavaScript's encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"

HttpGet = Callable[..., requests.Response]


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def normalize_username(*candidates: str | None) -> str:
    """Return the first non-empty candidate, trimmed and without a leading ``@``.

    Raises ValidationError when nothing usable remains.
    """
    raw = next((value for value in candidates if value), "")
    username = raw.strip()
    if username.startswith("@"):
        username = username[1:].strip()
    if not username:
        raise ValidationError("Missing user parameter")
    return username


def build_target_url(username: str) -> str:
    return f"{PROFILE_BASE_URL}{encode_uri_component(username)}"


def build_fetch_url(target: str, proxy_url: str = "") -> str:
    """Route ``target`` through ``proxy_url`` when one is configured."""
    if proxy_url:
        return f"{proxy_url}{encode_uri_component(target)}"
    return target


def fetch_page(url: str, *, http_get: HttpGet = requests.get) -> str:
    """GET ``url`` with browser-like headers and return the body text."""
    response = http_get(url, headers=dict(BROWSER_HEADERS), allow_redirects=True)
    # requests falls back to ISO-8859-1 for text/* without a charset; pages are UTF-8
    if "charset" not in response.headers.get("Content-Type", "").lower():
        response.encoding = "utf-8"
    if not 200 <= response.status_code < 300:
        raise UpstreamFetchError(response.status_code, response.text or "")
    return response.text


def first_query_value(query: dict[str, Iterable[str]], *names: str) -> list[str | None]:
    """Pick the first value of each named query parameter, None when absent."""
    values: list[str | None] = []
    for name in names:
        found = list(query.get(name) or [])
        values.append(found[0] if found else None)
    return values
