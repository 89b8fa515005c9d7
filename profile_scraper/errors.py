"""Failure kinds raised while scraping, each mapped to an HTTP status and body."""

from __future__ import annotations

from typing import Any

FETCH_SNIPPET_LIMIT = 800
HTML_SNIPPET_LIMIT = 1200
PARSE_ERROR_LIMIT = 300
PARSED_KEYS_LIMIT = 20


class ScrapeError(RuntimeError):
    """Base class for failures that are reported to the caller as JSON."""

    status_code = 500
    error = "Server error"

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error}


class ValidationError(ScrapeError):
    """No usable username was supplied."""

    status_code = 400
    error = "Missing user parameter"


class UpstreamFetchError(ScrapeError):
    """The profile page answered with a non-2xx status."""

    error = "Fetch failed"

    def __init__(self, upstream_status: int, body: str) -> None:
        super().__init__(f"upstream returned HTTP {upstream_status}")
        self.upstream_status = upstream_status
        self.body_snippet = body[:FETCH_SNIPPET_LIMIT]

    @property
    def status_code(self) -> int:  # type: ignore[override]
        return max(500, self.upstream_status)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "status": self.upstream_status, "bodySnippet": self.body_snippet}


class ExtractionError(ScrapeError):
    """None of the known embedding patterns matched the page."""

    status_code = 422
    error = "Could not find embedded JSON on page. Possibly blocked."

    def __init__(self, html: str) -> None:
        super().__init__(self.error)
        self.snippet = html[:HTML_SNIPPET_LIMIT]

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "snippet": self.snippet}


class ParseError(ScrapeError):
    """The embedded text was not valid JSON, even after repair."""

    error = "JSON parse failed"

    def __init__(self, cause: Exception) -> None:
        self.parse_error = f"{type(cause).__name__}: {cause}"[:PARSE_ERROR_LIMIT]
        super().__init__(self.parse_error)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "parseError": self.parse_error}


class NoItemsError(ScrapeError):
    """The page parsed fine but held no recognisable video records."""

    status_code = 422
    error = "No video items found in parsed JSON"

    def __init__(self, parsed_keys: list[str]) -> None:
        super().__init__(self.error)
        self.parsed_keys = parsed_keys[:PARSED_KEYS_LIMIT]

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.error, "parsedKeys": self.parsed_keys}


__all__ = [
    "ExtractionError",
    "NoItemsError",
    "ParseError",
    "ScrapeError",
    "UpstreamFetchError",
    "ValidationError",
]
