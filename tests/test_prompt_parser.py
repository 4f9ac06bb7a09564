import asyncio
import json

import httpx

from conftest import chat_reply
from prompt_parser import DEFAULTS, extract_preference, preference_from_dict
from providers.openai import OpenAIAdapter


def adapter_replying(status, body, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body)
    return OpenAIAdapter("sk-test", transport=httpx.MockTransport(handler))


def test_extracts_preference_in_json_mode():
    seen = []
    reply = {"destination": "Lisbon", "dates": "next June", "budget": "Luxury", "travelers": "2 people",
             "interests": ["food", "nightlife"], "notes": "anniversary"}
    pref = asyncio.run(extract_preference("Romantic Lisbon trip", adapter_replying(200, chat_reply(json.dumps(reply)), seen)))

    body = json.loads(seen[0].content)
    assert body["response_format"] == {"type": "json_object"}
    assert body["messages"][0]["role"] == "system"
    assert pref.destination == "Lisbon"
    assert pref.budget == "luxury"
    assert pref.interests == ["food", "nightlife"]
    assert pref.notes == "anniversary"


def test_normalizes_sloppy_fields():
    pref = preference_from_dict({"destination": "", "budget": "cheap-ish", "interests": "culture, nature"})
    assert pref.destination == DEFAULTS["destination"]
    assert pref.dates == DEFAULTS["dates"]
    assert pref.budget == "moderate"
    assert pref.travelers == "1 person"
    assert pref.interests == ["culture", "nature"]


def test_failure_degrades_to_defaults():
    pref = asyncio.run(extract_preference("somewhere warm", adapter_replying(500, {"error": "down"})))
    assert pref.destination == "unspecified"
    assert pref.interests == ["culture", "food"]
    assert pref.notes == "Original prompt: somewhere warm"
