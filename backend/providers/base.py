# providers/base.py
# Shared adapter plumbing: prompt building, one HTTP call per generation, reply normalization.
# Concrete adapters only describe their request/response envelope.

from __future__ import annotations
import json
import logging
import textwrap
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from errors import ExtractionError, GenerationError
from models import Activity, Day, ItineraryResult, Provenance, TravelPreference
from utils import extract_json_object, parse_json_reply

log = logging.getLogger("itinerary-arena")

HEADERS = {
    "User-Agent": "ItineraryArena/0.1",
    "Accept": "application/json",
    "Content-Type": "application/json",
}

# prompt-level character of an adapter; the two sides of a comparison must read differently
CULTURAL = "cultural"
POPULAR = "popular"

EMPHASIS = {
    CULTURAL: (
        "Cultural Immersion",
        "Your itinerary should focus on cultural immersion and local experiences. "
        "Find hidden gems and authentic experiences that tourists might miss.",
    ),
    POPULAR: (
        "Popular Attractions",
        "Your itinerary should focus on popular landmarks, signature experiences and efficient "
        "time management. Include the most iconic and popular attractions that would appeal to tourists.",
    ),
}

_PROMPT = textwrap.dedent(
    """\
    Generate a detailed travel itinerary for {destination}.

    Travel details:
    - Dates: {dates}
    - Budget level: {budget}
    - Number of travelers: {travelers}
    - Interests: {interests}
    - Additional notes: {notes}

    {emphasis}

    {format}
    """
)

_FIELDS = textwrap.dedent(
    """\
    Respond with a JSON object that includes:
    - destination: name of the destination
    - summary: a brief overview of the trip
    - highlights: an array of 3-5 trip highlights
    - days: an array of daily itineraries, where each day has:
      - title: a catchy title for the day's theme
      - activities: an array of activities, each with:
        - title: name of the activity
        - description: detailed description
        - time: approximate time (Morning, Afternoon, Evening)
        - type: type of activity (Food, Culture, Adventure, etc.)
        - location: specific location or venue
    - tips: an array of 2-3 practical travel tips
    - focus: "{focus}"
    - rating: {rating} (on a scale of 1-5)"""
)

_SCHEMA = textwrap.dedent(
    """\
    Structure the response as a valid JSON object with the following format:
    {{
      "destination": "{destination}",
      "summary": "A brief one-paragraph summary of the trip",
      "highlights": ["Key highlight 1", "Key highlight 2", "Key highlight 3"],
      "days": [
        {{
          "title": "Day 1",
          "activities": [
            {{
              "title": "Activity title",
              "description": "Detailed description",
              "time": "Morning/Afternoon/Evening",
              "type": "Activity type (e.g., Sightseeing, Dining, etc.)",
              "location": "Location name"
            }}
          ]
        }}
      ],
      "tips": ["Useful tip 1", "Useful tip 2"],
      "focus": "{focus}",
      "rating": {rating}
    }}

    Aim for 3-4 activities per day, spread across morning, afternoon, and evening.
    Provide only the JSON object with no additional text."""
)


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    s = str(v).strip()
    return s or None


def _str_list(v: Any) -> List[str]:
    if isinstance(v, str):
        v = [v]
    if not isinstance(v, list):
        return []
    return [str(x).strip() for x in v if x is not None and str(x).strip()]


class ProviderAdapter:
    """
    One instance per AI provider. `generate` turns a TravelPreference into a
    canonical ItineraryResult or raises GenerationError.

    Subclasses set the class attributes and implement `build_request` and
    `reply_text`.
    """

    provider_id = ""
    label = ""  # human readable model name stamped on results
    emphasis = CULTURAL
    native_json = False  # provider has a structured JSON output mode
    default_rating = 5.0
    default_model = ""
    base_url = ""
    system_prompt: Optional[str] = None

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        base_url: str | None = None,
        label: str | None = None,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model or self.default_model
        self.base_url = (base_url or self.base_url).rstrip("/")
        if label:
            self.label = label
        self.timeout = timeout
        # tests pass httpx.MockTransport here
        self.transport = transport

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.provider_id} model={self.model}>"

    @property
    def focus(self) -> str:
        return EMPHASIS[self.emphasis][0]

    def build_prompt(self, pref: TravelPreference) -> str:
        fmt = _FIELDS if self.native_json else _SCHEMA
        return _PROMPT.format(
            destination=pref.destination,
            dates=pref.dates,
            budget=pref.budget,
            travelers=pref.travelers,
            interests=", ".join(pref.interests),
            # explicit placeholder so the model never sees an empty field
            notes=pref.notes.strip() if pref.notes and pref.notes.strip() else "None",
            emphasis=EMPHASIS[self.emphasis][1],
            format=fmt.format(
                destination=json.dumps(pref.destination)[1:-1],
                focus=self.focus,
                rating=self.default_rating,
            ),
        )

    # ---- provider envelope ----
    def build_request(self, prompt: str, system: str | None, json_mode: bool) -> tuple[str, dict, dict]:
        """Return (url, extra headers, JSON body)."""
        raise NotImplementedError

    def reply_text(self, payload: dict) -> str:
        raise NotImplementedError

    def _status_error(self, r: httpx.Response) -> GenerationError:
        body = r.text[:400]
        overloaded = r.status_code in (429, 529) or "overloaded_error" in body
        return GenerationError(self.provider_id, f"HTTP {r.status_code}: {body}", status=r.status_code, overloaded=overloaded)

    async def complete(self, prompt: str, system: str | None = None, json_mode: bool | None = None) -> str:
        """One generation call; returns the reply text."""
        if not self.api_key:
            raise GenerationError(self.provider_id, "API key not configured")
        if json_mode is None:
            json_mode = self.native_json

        url, headers, body = self.build_request(prompt, system, json_mode)
        log.info("%s: requesting %s", self.provider_id, self.model)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers={**HEADERS, **headers}, transport=self.transport) as client:
                r = await client.post(url, json=body)
        except httpx.HTTPError as e:
            raise GenerationError(self.provider_id, f"transport error: {e!r}") from e

        if r.status_code != 200:
            err = self._status_error(r)
            log.warning("%s status: %s body: %s", self.provider_id, r.status_code, r.text[:400])
            raise err
        try:
            text = self.reply_text(r.json())
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise GenerationError(self.provider_id, f"unexpected reply shape: {e!r}") from e
        if not isinstance(text, str):
            raise ExtractionError(self.provider_id, f"reply text is {type(text).__name__}, not str")
        if not text.strip():
            raise ExtractionError(self.provider_id, "empty response")
        return text

    async def generate(self, pref: TravelPreference) -> ItineraryResult:
        text = await self.complete(self.build_prompt(pref), system=self.system_prompt)
        if self.native_json:
            data = parse_json_reply(text, self.provider_id)
        else:
            data = extract_json_object(text, self.provider_id)
        return self.normalize(data)

    # ---- reply normalization ----
    def _rating(self, v: Any) -> float:
        try:
            r = float(v)
        except (TypeError, ValueError):
            return self.default_rating
        return r if 1 <= r <= 5 else self.default_rating

    def normalize(self, data: dict) -> ItineraryResult:
        destination = _opt_str(data.get("destination"))
        summary = _opt_str(data.get("summary"))
        raw_days = data.get("days")

        missing = [k for k, v in (("destination", destination), ("summary", summary)) if not v]
        if not isinstance(raw_days, list) or not raw_days:
            missing.append("days")
        if missing:
            raise GenerationError(self.provider_id, f"reply missing required fields: {', '.join(missing)}")

        days: List[Day] = []
        for i, d in enumerate(raw_days, start=1):
            if not isinstance(d, dict):
                continue
            acts = d.get("activities")
            activities = [
                Activity(
                    title=_opt_str(a.get("title")) or "Activity",
                    description=_opt_str(a.get("description")) or "",
                    time=_opt_str(a.get("time")),
                    type=_opt_str(a.get("type")),
                    location=_opt_str(a.get("location")),
                    # providers never produce placeholders
                    isPlaceholder=False,
                )
                for a in (acts if isinstance(acts, list) else [])
                if isinstance(a, dict)
            ]
            days.append(Day(title=_opt_str(d.get("title")) or f"Day {i}", activities=activities))
        if not days:
            raise GenerationError(self.provider_id, "reply has no usable days")

        try:
            return ItineraryResult(
                destination=destination,
                summary=summary,
                highlights=_str_list(data.get("highlights")),
                days=days,
                tips=_str_list(data.get("tips")),
                model=self.label,
                focus=_opt_str(data.get("focus")) or "",
                rating=self._rating(data.get("rating")),
                provenance=Provenance(requested_provider=self.provider_id, actual_provider=self.provider_id),
            )
        except ValidationError as e:
            raise GenerationError(self.provider_id, f"reply failed validation: {e}") from e
