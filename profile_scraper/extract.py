"""Locate and decode the JSON state blob a profile page embeds for hydration."""

from __future__ import annotations

import json
import logging
import re
from typing import Final

from .errors import ExtractionError, ParseError
from .logging_utils import log_event
from .models import JsonValue

logger = logging.getLogger(__name__)

# Tried in order; the first pattern with a non-empty capture wins.
EMBED_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r'id="SIGI_STATE">([\s\S]*?)</script>', re.IGNORECASE),
    re.compile(r'<script id="SIGI_STATE" type="application/json">([\s\S]*?)</script>', re.IGNORECASE),
    re.compile(r"window\.__INIT_PROPS__\s*=\s*([\s\S]*?);</script>", re.IGNORECASE),
    re.compile(r'window\["__UNIVERSAL_DATA_FOR_REHYDRATION__"\]\s*=\s*([\s\S]*?);', re.IGNORECASE),
    re.compile(r'<script id="__UNIVERSAL_DATA_FOR_REHYDRATION__".*?>([\s\S]*?)</script>', re.IGNORECASE),
    re.compile(r"<script>\s*?window\['SIGI_STATE'\]\s*=\s*([\s\S]*?)</script>", re.IGNORECASE),
)

# Only the two "<" escapes are undone. Other escape forms are left alone.
_REPAIRS: Final[tuple[tuple[str, str], ...]] = (
    ("\n", " "),
    ("\\x3C", "<"),
    ("\\u003C", "<"),
    ("</script>", "<\\/script>"),
)


def find_embedded_json(html: str) -> str:
    """Return the trimmed JSON text of the first matching embedding pattern."""
    for pattern in EMBED_PATTERNS:
        match = pattern.search(html)
        if match and match.group(1):
            candidate = match.group(1).strip()
            if candidate:
                return candidate
            break
    raise ExtractionError(html)


def repair_json_text(text: str) -> str:
    for old, new in _REPAIRS:
        text = text.replace(old, new)
    return text


def parse_embedded_json(text: str) -> JsonValue:
    """Decode ``text``, retrying once on a repaired copy before giving up."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        repaired = repair_json_text(text)
    try:
        parsed = json.loads(repaired)
    except (ValueError, RecursionError) as exc:
        log_event(logger, logging.WARNING, "scrape.parse_failed", error=str(exc)[:300], length=len(text))
        raise ParseError(exc) from exc
    log_event(logger, logging.DEBUG, "scrape.parse_repaired", length=len(text))
    return parsed
