# utils.py
# Helpers: JSON extraction from free-text model replies, simple in-memory TTL cache

from __future__ import annotations
from dataclasses import dataclass
from typing import Any
import json
import time

from errors import ExtractionError


def _balanced_end(text: str, start: int) -> int:
    """
    Index just past the '}' closing the '{' at `start`, or -1.
    Braces inside JSON strings are ignored.
    """
    depth = 0
    in_str = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_str:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_str = False
            continue
        if ch == '"':
            in_str = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return -1


def extract_json_object(text: str, provider: str = "unknown") -> dict:
    """
    Parse the first balanced {...} object out of a reply that may carry prose
    or markdown fences around it. Candidates that are balanced but not valid
    JSON are skipped; raises ExtractionError when nothing parses.
    """
    if not text or not text.strip():
        raise ExtractionError(provider, "empty response")

    pos = text.find("{")
    while pos != -1:
        end = _balanced_end(text, pos)
        if end == -1:
            break
        try:
            obj = json.loads(text[pos:end])
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict):
            return obj
        pos = text.find("{", pos + 1)

    raise ExtractionError(provider, "could not extract a JSON object from the response")


def parse_json_reply(text: str, provider: str = "unknown") -> dict:
    """Strict parse for native JSON output modes."""
    if not text or not text.strip():
        raise ExtractionError(provider, "empty response")
    try:
        obj = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionError(provider, f"invalid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise ExtractionError(provider, "JSON reply is not an object")
    return obj


@dataclass
class CacheEntry:
    expires: float
    data: Any


class TTLCache:
    """Simple in-memory TTL cache (per-process)."""

    def __init__(self, ttl_seconds: int = 600):
        self.ttl = ttl_seconds
        self._store: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if not entry:
            return None
        if entry.expires < time.time():
            self._store.pop(key, None)
            return None
        return entry.data

    def set(self, key: str, value: Any) -> None:
        now = time.time()
        # drop anything already stale so never-read keys do not pile up
        self._store = {k: e for k, e in self._store.items() if e.expires >= now}
        self._store[key] = CacheEntry(expires=now + self.ttl, data=value)

    def __len__(self) -> int:
        return len(self._store)
