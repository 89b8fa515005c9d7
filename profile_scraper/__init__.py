"""Serverless scraper returning the videos embedded in a public profile page."""

from __future__ import annotations

from .config import ConfigError, ScraperConfig, load_config
from .handler import ScrapeRequestHandler, build_handler
from .models import ScrapeResult, VideoItem
from .scraper import ProfileScraper, ScrapeResponse

__all__ = [
    "ConfigError",
    "ProfileScraper",
    "ScrapeRequestHandler",
    "ScrapeResponse",
    "ScrapeResult",
    "ScraperConfig",
    "VideoItem",
    "build_handler",
    "load_config",
]
