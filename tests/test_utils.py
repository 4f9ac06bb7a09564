import time

import pytest

from errors import ExtractionError, GenerationError
from utils import TTLCache, extract_json_object, parse_json_reply


def test_extracts_object_surrounded_by_prose():
    text = 'Here is your plan:\n```json\n{"destination": "Rome", "days": [{"title": "Day 1"}]}\n```\nEnjoy!'
    assert extract_json_object(text) == {"destination": "Rome", "days": [{"title": "Day 1"}]}


def test_braces_inside_strings_do_not_end_the_object():
    text = 'ok {"summary": "use {curly} braces and a \\" quote", "n": 1} trailing }'
    assert extract_json_object(text) == {"summary": 'use {curly} braces and a " quote', "n": 1}


def test_skips_balanced_prose_that_is_not_json():
    text = 'Note {this is not json} then {"a": {"b": 2}}'
    assert extract_json_object(text) == {"a": {"b": 2}}


@pytest.mark.parametrize("text", ["", "   ", "no braces at all", '{"unterminated": 1', "{not json}"])
def test_extraction_failures_raise_typed_error(text):
    with pytest.raises(ExtractionError) as exc:
        extract_json_object(text, provider="Anthropic")
    assert exc.value.provider == "Anthropic"
    assert isinstance(exc.value, GenerationError)


def test_strict_parse_rejects_prose_and_arrays():
    assert parse_json_reply('{"a": 1}') == {"a": 1}
    with pytest.raises(ExtractionError):
        parse_json_reply('Sure! {"a": 1}')
    with pytest.raises(ExtractionError):
        parse_json_reply("[1, 2]")


def test_ttl_cache_expires(monkeypatch):
    cache = TTLCache(ttl_seconds=10)
    cache.set("k", {"v": 1})
    assert cache.get("k") == {"v": 1}
    assert cache.get("missing") is None

    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 11)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_ttl_cache_set_sweeps_stale_entries(monkeypatch):
    cache = TTLCache(ttl_seconds=1)
    for i in range(100):
        cache.set(f"k{i}", i)
    assert len(cache) == 100

    now = time.time()
    monkeypatch.setattr(time, "time", lambda: now + 10)
    cache.set("new", 1)
    assert len(cache) == 1
    assert cache.get("new") == 1
