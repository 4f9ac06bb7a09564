# prompt_parser.py
# Free-text chat request -> TravelPreference via one provider call. Never raises.

import json
import logging
import textwrap

from pydantic import ValidationError

from errors import GenerationError
from models import INTEREST_OPTIONS, TravelPreference
from providers.base import ProviderAdapter
from utils import extract_json_object

log = logging.getLogger("itinerary-arena")

PARSER_BUDGETS = ["budget", "moderate", "luxury"]
DEFAULTS = {
    "destination": "unspecified",
    "dates": "flexible",
    "budget": "moderate",
    "travelers": "1 person",
    "interests": ["culture", "food"],
}

SYSTEM_PROMPT = textwrap.dedent(
    """\
    You are an AI travel assistant tasked with extracting structured travel details from a user's natural language query.
    Extract the following information from the user's travel request:

    1. Destination (required, default to "unspecified" if unclear)
    2. Travel dates (required, use "flexible" if not specified)
    3. Budget level (required, one of: {budgets}, default to "moderate" if unclear)
    4. Number of travelers (required, default to "1 person" if not specified)
    5. Interests (at least one required, choose from: {interests}, default to "culture, food")
    6. Additional notes (optional)

    Return ONLY a JSON object with these keys: destination, dates, budget, travelers, interests (array), notes.
    Do not include any explanation or additional text - just the JSON.
    """
).format(
    budgets=", ".join(json.dumps(b) for b in PARSER_BUDGETS),
    interests=", ".join(INTEREST_OPTIONS),
)


def _text(v, default: str) -> str:
    s = str(v).strip() if v is not None else ""
    return s if len(s) >= 2 else default


def defaults_for(prompt: str) -> TravelPreference:
    return TravelPreference(**DEFAULTS, notes=f"Original prompt: {prompt}")


def preference_from_dict(data: dict) -> TravelPreference:
    interests = data.get("interests")
    if isinstance(interests, str):
        interests = [i for i in (p.strip() for p in interests.split(",")) if i]
    if not isinstance(interests, list) or not [i for i in interests if str(i).strip()]:
        interests = DEFAULTS["interests"]

    budget = str(data.get("budget") or "").strip().lower()
    travelers = str(data.get("travelers") or "").strip()
    notes = data.get("notes")

    return TravelPreference(
        destination=_text(data.get("destination"), DEFAULTS["destination"]),
        dates=_text(data.get("dates"), DEFAULTS["dates"]),
        budget=budget if budget in PARSER_BUDGETS else DEFAULTS["budget"],
        travelers=travelers or DEFAULTS["travelers"],
        interests=[str(i) for i in interests],
        notes=str(notes).strip() if notes else "",
    )


async def extract_preference(prompt: str, adapter: ProviderAdapter) -> TravelPreference:
    """Ask `adapter` to structure the prompt; fall back to defaults on any failure."""
    try:
        text = await adapter.complete(prompt, system=SYSTEM_PROMPT, json_mode=True)
        return preference_from_dict(extract_json_object(text, adapter.provider_id))
    except (GenerationError, ValidationError) as e:
        log.warning("prompt extraction via %s failed: %s", adapter.provider_id, e)
        return defaults_for(prompt)
