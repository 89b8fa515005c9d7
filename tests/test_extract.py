from __future__ import annotations

import json

import pytest

from profile_scraper.errors import ExtractionError, ParseError
from profile_scraper.extract import find_embedded_json, parse_embedded_json, repair_json_text

STATE = {"ItemModule": {"1": {"id": "1"}}}
BLOB = json.dumps(STATE)


@pytest.mark.parametrize(
    "html",
    [
        f'<script id="SIGI_STATE" type="application/json">{BLOB}</script>',
        f'<script type="application/json" id="SIGI_STATE">  {BLOB}  </script>',
        f"<script>window.__INIT_PROPS__ = {BLOB};</script>",
        f'<script>window["__UNIVERSAL_DATA_FOR_REHYDRATION__"] = {BLOB};</script>',
        f'<script id="__UNIVERSAL_DATA_FOR_REHYDRATION__" type="application/json">{BLOB}</script>',
        f"<script>\n window['SIGI_STATE'] = {BLOB}</script>",
    ],
)
def test_every_embedding_convention_is_found(html: str) -> None:
    assert json.loads(find_embedded_json(html)) == STATE


def test_pattern_matching_is_case_insensitive() -> None:
    html = f'<SCRIPT ID="SIGI_STATE" TYPE="application/json">{BLOB}</SCRIPT>'
    assert find_embedded_json(html) == BLOB


def test_earlier_pattern_wins() -> None:
    html = (
        '<script>window["__UNIVERSAL_DATA_FOR_REHYDRATION__"] = {"second": true};</script>'
        '<script id="SIGI_STATE">{"first": true}</script>'
    )
    assert find_embedded_json(html) == '{"first": true}'


def test_missing_blob_raises_with_bounded_snippet() -> None:
    html = "<html>" + "blocked " * 500 + "</html>"

    with pytest.raises(ExtractionError) as info:
        find_embedded_json(html)

    payload = info.value.to_payload()
    assert info.value.status_code == 422
    assert payload["error"] == "Could not find embedded JSON on page. Possibly blocked."
    assert payload["snippet"] == html[:1200]


def test_empty_capture_is_not_a_match() -> None:
    with pytest.raises(ExtractionError):
        find_embedded_json('<script id="SIGI_STATE"></script>')


def test_direct_parse() -> None:
    assert parse_embedded_json(BLOB) == STATE


def test_repair_undoes_less_than_escapes() -> None:
    text = '{"desc": "a\\x3Cb\\u003Cc"}'
    assert repair_json_text(text) == '{"desc": "a<b<c"}'


def test_repair_collapses_newlines_and_escapes_script_close() -> None:
    assert repair_json_text("a\nb</script>") == "a b<\\/script>"


def test_repaired_parse_is_equivalent_to_direct_parse() -> None:
    broken = '{"ItemModule": {"1": {"id": "1", "desc": "line one\nline two \\x3Cb>"}}}'
    clean = '{"ItemModule": {"1": {"id": "1", "desc": "line one line two <b>"}}}'

    assert parse_embedded_json(broken) == parse_embedded_json(clean)


def test_unrepairable_text_raises_parse_error() -> None:
    with pytest.raises(ParseError) as info:
        parse_embedded_json("{not json" + "x" * 1000)

    payload = info.value.to_payload()
    assert info.value.status_code == 500
    assert payload["error"] == "JSON parse failed"
    assert payload["parseError"].startswith("JSONDecodeError")
    assert len(payload["parseError"]) <= 300


def test_pathologically_nested_blob_is_a_parse_error() -> None:
    with pytest.raises(ParseError) as info:
        parse_embedded_json("[" * 100_000 + "]" * 100_000)

    assert info.value.parse_error.startswith("RecursionError")
