# api/scrape.py
# Serverless endpoint: GET /api/scrape?user=<name> returns the profile's videos.
# Set PROXY_URL to route the page fetch through a prefix such as "https://my-proxy/?url=".

from profile_scraper import ProfileScraper, build_handler, load_config
from profile_scraper.logging_utils import configure_logging

config = load_config()
configure_logging(config)

handler = build_handler(ProfileScraper(config))
