"""Find video records inside parsed page data and normalise them.

Field names on the page are undocumented and vary between layouts, so every
output field is read through an ordered tuple of accessors; the first one that
returns a truthy value wins.
"""

from __future__ import annotations

from typing import Any, Callable, Final, Iterable, Mapping, Optional, Sequence

from .models import JsonValue, VideoItem

MAX_ITEMS: Final[int] = 30
MAX_SEARCH_DEPTH: Final[int] = 64
MAX_SEARCH_NODES: Final[int] = 100_000

Accessor = Callable[[Mapping[str, Any]], Any]


def is_present(value: Any) -> bool:
    """Truth test used by the page's own scripts: objects and arrays always count, even empty."""
    if isinstance(value, (Mapping, list)):
        return True
    if isinstance(value, float) and value != value:
        return False
    return bool(value)


def _has_video(raw: Mapping[str, Any]) -> bool:
    return is_present(raw.get("video"))


def _video(raw: Mapping[str, Any]) -> Mapping[str, Any]:
    if not _has_video(raw):
        return raw
    video = raw["video"]
    return video if isinstance(video, Mapping) else {}


def _nested(raw: Mapping[str, Any], *path: str) -> Any:
    node: Any = raw
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


ID_ACCESSORS: Final[tuple[Accessor, ...]] = (
    lambda raw: raw.get("awemeId"),
    lambda raw: raw.get("id"),
    lambda raw: raw.get("itemId"),
    lambda raw: raw.get("media_id"),
    lambda raw: _nested(raw, "video", "vid"),
    lambda raw: _video(raw).get("vid"),
)
DESC_ACCESSORS: Final[tuple[Accessor, ...]] = (
    lambda raw: raw.get("desc"),
    lambda raw: raw.get("description"),
    lambda raw: raw.get("title"),
)
COVER_ACCESSORS: Final[tuple[Accessor, ...]] = (
    lambda raw: _video(raw).get("originCover"),
    lambda raw: _video(raw).get("cover"),
    lambda raw: _video(raw).get("dynamicCover"),
    lambda raw: raw.get("cover"),
)
PLAY_ADDR_ACCESSORS: Final[tuple[Accessor, ...]] = (
    lambda raw: _video(raw).get("playAddr"),
    lambda raw: _nested(raw, "video", "playAddr"),
)
DOWNLOAD_ADDR_ACCESSORS: Final[tuple[Accessor, ...]] = (
    lambda raw: _video(raw).get("downloadAddr"),
    lambda raw: _nested(raw, "video", "downloadAddr"),
)


def first_value(raw: Mapping[str, Any], accessors: Iterable[Accessor]) -> Any:
    """Return the first truthy value produced by ``accessors``, else None."""
    for accessor in accessors:
        value = accessor(raw)
        if is_present(value):
            return value
    return None


def _as_id(value: Any) -> Optional[str]:
    # bool is an int subclass but never a real identifier
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    return str(value)


def _as_url(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _first_play_addr(value: Any) -> Optional[str]:
    # playAddr is sometimes a list of mirrors
    if isinstance(value, list):
        value = value[0] if value else None
    return _as_url(value)


def normalize_item(raw: Mapping[str, Any]) -> VideoItem:
    """Reshape a raw record; missing fields become None or an empty string."""
    identifier = None
    for accessor in ID_ACCESSORS:
        identifier = _as_id(accessor(raw) or None)
        if identifier:
            break
    desc = first_value(raw, DESC_ACCESSORS)
    return VideoItem(
        id=identifier,
        desc=desc if isinstance(desc, str) else "",
        cover=_as_url(first_value(raw, COVER_ACCESSORS)),
        play_addr=_first_play_addr(first_value(raw, PLAY_ADDR_ACCESSORS)),
        download_addr=_as_url(first_value(raw, DOWNLOAD_ADDR_ACCESSORS)),
    )


def looks_like_item(node: Mapping[str, Any]) -> bool:
    return is_present(node.get("awemeId")) or is_present(node.get("itemId")) or _has_video(node)


def search_items(
    root: JsonValue,
    *,
    max_depth: int = MAX_SEARCH_DEPTH,
    max_nodes: int = MAX_SEARCH_NODES,
) -> list[Mapping[str, Any]]:
    """Depth-first walk collecting mappings that look like video records.

    Matched records are not descended into. Scalars are ignored. The walk stops
    descending below ``max_depth`` and gives up after ``max_nodes`` containers.
    """
    found: list[Mapping[str, Any]] = []
    visited: set[int] = set()

    def walk(node: Any, depth: int) -> None:
        if depth > max_depth or len(visited) >= max_nodes:
            return
        if isinstance(node, list):
            children: Iterable[Any] = node
        elif isinstance(node, Mapping):
            if looks_like_item(node):
                found.append(node)
                return
            children = node.values()
        else:
            return
        if id(node) in visited:
            return
        visited.add(id(node))
        for child in children:
            walk(child, depth + 1)

    walk(root, 0)
    return found


def collect_candidates(parsed: JsonValue) -> list[Mapping[str, Any]]:
    """Gather raw video records from ``ItemModule`` or, failing that, a search."""
    if isinstance(parsed, Mapping):
        module = parsed.get("ItemModule")
        if isinstance(module, Mapping):
            values: Sequence[Any] = list(module.values())
        elif isinstance(module, list):
            values = module
        else:
            values = []
        candidates = [value for value in values if isinstance(value, Mapping)]
        if candidates:
            return candidates

    page_props = _nested(parsed, "props", "pageProps")
    if is_present(page_props):
        return search_items(page_props)
    return search_items(parsed)


def dedupe_items(items: Iterable[VideoItem], limit: int = MAX_ITEMS) -> list[VideoItem]:
    """Drop id-less items, keep the first item per id, cap at ``limit``."""
    seen: set[str] = set()
    unique: list[VideoItem] = []
    for item in items:
        if not item.id or item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
        if len(unique) >= limit:
            break
    return unique


def extract_items(parsed: JsonValue, limit: int = MAX_ITEMS) -> list[VideoItem]:
    return dedupe_items((normalize_item(raw) for raw in collect_candidates(parsed)), limit)


def top_level_keys(parsed: JsonValue) -> list[str]:
    if isinstance(parsed, Mapping):
        return [str(key) for key in parsed.keys()]
    if isinstance(parsed, list):
        return [str(index) for index in range(len(parsed))]
    return []
