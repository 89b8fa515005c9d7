from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Iterator
from unittest import mock

import pytest
import requests

from profile_scraper import ProfileScraper, ScraperConfig

ENV_VARS = (
    "PROXY_URL",
    "APP_PROXY_URL",
    "APP_ENVIRONMENT",
    "APP_ENV",
    "APP_LOG_LEVEL",
    "LOG_LEVEL",
)


@dataclass
class FakeResponse:
    status_code: int = 200
    text: str = ""
    headers: dict[str, str] = field(default_factory=lambda: {"Content-Type": "text/html; charset=utf-8"})
    encoding: str | None = None


@dataclass
class FakeGet:
    """Stands in for ``requests.get`` and records every call."""

    response: FakeResponse
    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        return self.response


def sigi_page(state: Any) -> str:
    return (
        "<html><head><title>profile</title></head><body>"
        f'<script id="SIGI_STATE" type="application/json">{json.dumps(state)}</script>'
        "</body></html>"
    )


def item_module(count: int, *, start: int = 0) -> dict[str, Any]:
    return {
        str(i): {"id": str(i), "desc": f"video {i}", "video": {"cover": f"https://cdn/{i}.jpg"}}
        for i in range(start, start + count)
    }


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    # load_dotenv writes straight into os.environ, so restore the whole mapping
    with mock.patch.dict(os.environ):
        for name in ENV_VARS:
            os.environ.pop(name, None)
        monkeypatch.chdir(tmp_path)
        yield


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig(environment="development", proxy_url="")


def make_scraper(config: ScraperConfig, *, status: int = 200, text: str = "") -> tuple[ProfileScraper, FakeGet]:
    fake = FakeGet(FakeResponse(status_code=status, text=text))
    return ProfileScraper(config, http_get=fake), fake


@pytest.fixture
def upstream() -> Iterator[Callable[[bytes, str], str]]:
    """Serve raw bytes on a loopback port; returns the base URL."""
    servers: list[ThreadingHTTPServer] = []

    def _serve(body: bytes, content_type: str) -> str:
        class _PageHandler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                self.send_response(200)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args: Any) -> None:
                return None

        server = ThreadingHTTPServer(("127.0.0.1", 0), _PageHandler)
        threading.Thread(target=server.serve_forever, daemon=True).start()
        servers.append(server)
        return f"http://127.0.0.1:{server.server_port}/"

    yield _serve

    for server in servers:
        server.shutdown()
        server.server_close()


@pytest.fixture
def direct_get() -> Iterator[Callable[..., requests.Response]]:
    """A real ``requests`` getter that ignores any proxy set in the environment."""
    with requests.Session() as session:
        session.trust_env = False
        yield session.get
