"""Request orchestration: username in, JSON-ready response out."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Final, Iterable, Mapping

import requests

from .config import ScraperConfig
from .errors import ExtractionError, NoItemsError, ScrapeError, UpstreamFetchError
from .extract import find_embedded_json, parse_embedded_json
from .fetcher import (
    HttpGet,
    build_fetch_url,
    build_target_url,
    fetch_page,
    first_query_value,
    normalize_username,
)
from .items import extract_items, top_level_keys
from .logging_utils import log_event
from .models import ScrapeResult

logger = logging.getLogger(__name__)

RESPONSE_HEADERS: Final[tuple[tuple[str, str], ...]] = (
    ("Content-Type", "application/json"),
    ("Access-Control-Allow-Origin", "*"),
)


@dataclass(frozen=True, slots=True)
class ScrapeResponse:
    """Status, JSON body and headers ready to be written to the client."""

    status: int
    body: dict[str, Any]
    headers: tuple[tuple[str, str], ...] = field(default=RESPONSE_HEADERS)

    def encode(self) -> bytes:
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")


class ProfileScraper:
    """Fetches a profile page and extracts the videos embedded in it."""

    def __init__(self, config: ScraperConfig, *, http_get: HttpGet = requests.get) -> None:
        self.config = config
        self._http_get = http_get

    def scrape(self, username: str) -> ScrapeResult:
        """Run the whole pipeline for an already-normalised username.

        Raises a ScrapeError subclass for every expected failure.
        """
        target = build_target_url(username)
        url = build_fetch_url(target, self.config.proxy_url)
        try:
            html = fetch_page(url, http_get=self._http_get)
        except UpstreamFetchError as exc:
            log_event(logger, logging.WARNING, "scrape.fetch_failed", user=username, upstream_status=exc.upstream_status)
            raise

        try:
            json_text = find_embedded_json(html)
        except ExtractionError:
            log_event(logger, logging.WARNING, "scrape.no_embedded_json", user=username, html_length=len(html))
            raise

        parsed = parse_embedded_json(json_text)
        items = extract_items(parsed)
        if not items:
            keys = top_level_keys(parsed)
            log_event(logger, logging.WARNING, "scrape.no_items", user=username, parsed_keys=keys[:20])
            raise NoItemsError(keys)
        return ScrapeResult(user=username, count=len(items), items=items)

    def handle(self, query: Mapping[str, Iterable[str]]) -> ScrapeResponse:
        """Answer one request given its parsed query string. Never raises."""
        started = time.perf_counter()
        try:
            username = normalize_username(*first_query_value(dict(query), "user", "u"))
            log_event(logger, logging.INFO, "scrape.request", user=username, proxied=self.config.has_proxy)
            result = self.scrape(username)
        except ScrapeError as exc:
            return ScrapeResponse(status=exc.status_code, body=exc.to_payload())
        except Exception as exc:
            logger.exception("scrape error", extra={"event": "scrape.unhandled_error"})
            return ScrapeResponse(status=500, body={"error": "Server error", "message": str(exc) or repr(exc)})

        log_event(
            logger,
            logging.INFO,
            "scrape.completed",
            user=result.user,
            count=result.count,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return ScrapeResponse(status=200, body=result.to_payload())
