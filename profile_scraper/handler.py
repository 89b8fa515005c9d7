"""Adapter exposing a ProfileScraper through ``http.server`` request handlers."""

from __future__ import annotations

import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler
from urllib.parse import parse_qs, urlparse

from .scraper import ProfileScraper, ScrapeResponse

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS"


class ScrapeRequestHandler(BaseHTTPRequestHandler):
    """Serves ``?user=<name>`` (or ``?u=``) with the scraped video list.

    Only the query string is read, so every method but OPTIONS gets the same
    JSON answer; HEAD gets its headers without the body.
    """

    scraper: ProfileScraper

    def _handle(self) -> ScrapeResponse:
        query = parse_qs(urlparse(self.path).query, keep_blank_values=True)
        return self.scraper.handle(query)

    def do_GET(self) -> None:
        self._send(self._handle())

    do_POST = do_PUT = do_PATCH = do_DELETE = do_GET

    def do_HEAD(self) -> None:
        self._send(self._handle(), include_body=False)

    def do_OPTIONS(self) -> None:
        self.send_response(HTTPStatus.NO_CONTENT)
        self.send_header("Access-Control-Allow-Origin", "*")
        self.send_header("Access-Control-Allow-Methods", ALLOWED_METHODS)
        self.send_header("Access-Control-Allow-Headers", self.headers.get("Access-Control-Request-Headers", "*"))
        self.send_header("Content-Length", "0")
        self.end_headers()

    def _send(self, response: ScrapeResponse, *, include_body: bool = True) -> None:
        payload = response.encode()
        self.send_response(response.status)
        for name, value in response.headers:
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if include_body:
            self.wfile.write(payload)

    def log_message(self, format: str, *args) -> None:
        logger.info(format, *args, extra={"event": "http.access"})


def build_handler(scraper: ProfileScraper) -> type[ScrapeRequestHandler]:
    """Return a handler class bound to ``scraper``."""
    return type("handler", (ScrapeRequestHandler,), {"scraper": scraper})
