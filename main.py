"""Local development server for the profile scraper endpoint."""

from __future__ import annotations

import argparse
import logging
import os
import socket
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from http.server import ThreadingHTTPServer
from typing import Any, Sequence

from profile_scraper import ProfileScraper, build_handler, load_config
from profile_scraper.logging_utils import configure_logging, log_event

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ServeSession:
    """Identifies one local server run in every log line it emits."""

    trace_id: str = field(default_factory=lambda: os.getenv("APP_TRACE_ID") or uuid.uuid4().hex)
    host_name: str = field(default_factory=lambda: os.getenv("APP_INSTANCE_ID") or socket.gethostname())
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def log(self, level: int, event: str, **fields: Any) -> None:
        uptime = (datetime.now(timezone.utc) - self.started_at).total_seconds()
        log_event(
            LOGGER,
            level,
            event,
            trace_id=self.trace_id,
            host=self.host_name,
            uptime_s=round(uptime, 3),
            **fields,
        )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the profile scraper endpoint locally.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=3000)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    config = load_config()
    configure_logging(config)
    session = ServeSession()

    server = ThreadingHTTPServer((args.host, args.port), build_handler(ProfileScraper(config)))
    session.log(
        logging.INFO,
        "server.started",
        url=f"http://{args.host}:{server.server_port}/api/scrape?user=",
        environment=config.environment,
        proxied=config.has_proxy,
    )
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        session.log(logging.WARNING, "server.interrupted")
    finally:
        server.server_close()
        session.log(logging.INFO, "server.stopped")


if __name__ == "__main__":
    main()
