# tests/conftest.py
# shared fakes: scripted adapters, pinned randomness, sample replies

import asyncio
import json

import pytest

from errors import GenerationError
from models import TravelPreference
from providers.base import ProviderAdapter
from providers.registry import ModelRegistry


def sample_payload(destination="Kyoto", days=2, **overrides):
    data = {
        "destination": destination,
        "summary": f"A week in {destination}.",
        "highlights": ["Temples", "Tea ceremony", "Nishiki Market"],
        "days": [
            {
                "title": f"Day {i}",
                "activities": [
                    {"title": "Fushimi Inari", "description": "Walk the torii gates", "time": "Morning", "type": "Culture", "location": "Fushimi"},
                    {"title": "Dinner", "description": "Kaiseki", "time": "Evening", "type": "Food"},
                ],
            }
            for i in range(1, days + 1)
        ],
        "tips": ["Buy an ICOCA card"],
        "focus": "Cultural Immersion",
        "rating": 4.5,
    }
    data.update(overrides)
    return data


class FakeAdapter(ProviderAdapter):
    """Adapter that skips HTTP and either fails or returns a canned itinerary."""

    def __init__(self, provider_id, label=None, fail=None, overloaded=False, delay=0.0):
        super().__init__(api_key="test-key")
        self.provider_id = provider_id
        self.label = label or provider_id
        self.fail = fail
        self.overloaded = overloaded
        self.delay = delay
        self.calls = 0

    async def generate(self, pref):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise GenerationError(self.provider_id, self.fail, overloaded=self.overloaded)
        return self.normalize(sample_payload(pref.destination))


class FixedRandom:
    """RandomSource replaying a fixed list of indexes."""

    def __init__(self, *indexes):
        self.indexes = list(indexes)
        self.bounds = []

    def next_index(self, bound):
        self.bounds.append(bound)
        return self.indexes.pop(0)


def make_registry(fail=(), overloaded=(), labels=None):
    labels = labels or {"OpenAI": "GPT-4o", "Anthropic": "Claude 3.7 Sonnet", "Gemini": "Gemini", "Grok": "Grok"}
    return ModelRegistry([
        FakeAdapter(pid, labels[pid], fail="boom" if pid in fail else None, overloaded=pid in overloaded)
        for pid in ("OpenAI", "Anthropic", "Gemini", "Grok")
    ])


def chat_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def anthropic_reply(text):
    return {"content": [{"type": "text", "text": text}], "stop_reason": "end_turn"}


def gemini_reply(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


@pytest.fixture
def pref():
    return TravelPreference(destination="Kyoto", dates="May 1-7", budget="moderate", travelers="2", interests=["culture", "food"])


@pytest.fixture
def payload_json():
    return json.dumps(sample_payload())
