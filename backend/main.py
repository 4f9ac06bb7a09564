# main.py
# FastAPI app: blind two-model itinerary comparisons and guess scoring

import os
import threading
import uuid
import logging
from datetime import datetime, timezone
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from errors import AllProvidersFailedError
from models import (
    ComparisonRecord, ComparisonResponse, GuessRequest, GuessResult,
    ModelStats, PromptRequest, TravelPreference,
)
from orchestrator import FallbackOrchestrator, generate_comparison
from prompt_parser import extract_preference
from providers.registry import build_registry
from scoring import ScoreTally, record_guess
from selector import RandomPairSelector
from utils import TTLCache

load_dotenv()

app = FastAPI(title="Itinerary Arena API", version="0.1.0")
# CORS origins
FRONTEND_LOCAL = "http://localhost:3000"
FRONTEND_PROD = os.getenv("FRONTEND_PROD", "")

origins = [FRONTEND_LOCAL]
if FRONTEND_PROD:
    origins.append(FRONTEND_PROD)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# logging
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("itinerary-arena")

# config / env
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", "")
GROK_API_KEY = os.getenv("GROK_API_KEY") or os.getenv("XAI_API_KEY", "")
GROK_BASE_URL = os.getenv("GROK_BASE_URL", "https://api.x.ai/v1")

MODELS = {
    "OpenAI": os.getenv("OPENAI_MODEL", "gpt-4o"),
    "Anthropic": os.getenv("ANTHROPIC_MODEL", "claude-3-7-sonnet-20250219"),
    "Gemini": os.getenv("GEMINI_MODEL", "gemini-2.5-pro"),
    "Grok": os.getenv("GROK_MODEL", "grok-2-latest"),
}

# provider timeout (seconds)
PROVIDER_TIMEOUT_S = int(os.getenv("PROVIDER_TIMEOUT_S", "60"))
COMPARISON_TTL_S = int(os.getenv("COMPARISON_TTL_S", "86400"))

registry = build_registry(
    OPENAI_API_KEY, ANTHROPIC_API_KEY, GEMINI_API_KEY, GROK_API_KEY,
    models=MODELS, grok_base_url=GROK_BASE_URL, timeout=PROVIDER_TIMEOUT_S,
)
selector = RandomPairSelector(registry)
orchestrator = FallbackOrchestrator(registry, timeout_s=PROVIDER_TIMEOUT_S)
for pid in registry.list_providers():
    if not registry.resolve(pid).api_key:
        log.warning("%s has no API key; it will always fall back", pid)

# per process comparison store (stands in for the persistence layer)
comparisons = TTLCache(ttl_seconds=COMPARISON_TTL_S)
tally = ScoreTally()
# sync routes run in a threadpool; guess check-and-write must be atomic
_guess_lock = threading.Lock()

# global JSON error handling
# - HTTPException -> { "error": <detail> }
# - any other exception -> { "error": "Server error" }
@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    log.warning("HTTP %s: %s", exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # log stack once. do not leak details to client
    log.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "Server error"})

def _get_record(comparison_id: str) -> ComparisonRecord:
    record = comparisons.get(comparison_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Comparison not found")
    return record

@app.post("/comparisons", response_model=ComparisonResponse)
async def create_comparison(pref: TravelPreference):
    """
    Generate two itineraries from two randomly drawn models (with fallback)
    and return them blind; model labels stay server side until a guess.
    """
    try:
        result = await generate_comparison(pref, orchestrator, selector)
    except AllProvidersFailedError as e:
        log.error("comparison failed: %s", e)
        raise HTTPException(status_code=503, detail="Could not generate itineraries, please retry")

    if result.degraded:
        log.warning("degraded comparison for %s: %s / %s", pref.destination, result.first.model, result.second.model)

    record = ComparisonRecord(
        id=uuid.uuid4().hex,
        preference=pref,
        first=result.first,
        second=result.second,
        createdAt=datetime.now(timezone.utc).isoformat(),
    )
    comparisons.set(record.id, record)
    return ComparisonResponse(id=record.id, first=result.first.blind(), second=result.second.blind())

@app.get("/comparisons/{comparison_id}")
def get_comparison(comparison_id: str):
    record = _get_record(comparison_id)
    if record.chosen is None:
        # not revealed yet
        return {
            "id": record.id,
            "preference": record.preference.model_dump(),
            "first": record.first.blind(),
            "second": record.second.blind(),
            "chosen": None,
        }
    return record.model_dump()

@app.post("/comparisons/{comparison_id}/guess", response_model=GuessResult)
def guess_comparison(comparison_id: str, req: GuessRequest):
    with _guess_lock:
        record = _get_record(comparison_id)
        if record.chosen is not None:
            raise HTTPException(status_code=409, detail="Guess already recorded")

        outcome = record_guess(record, req.guess)
        comparisons.set(record.id, record.model_copy(update={"chosen": outcome.chosen_side}))
        tally.add(outcome)
    log.info("guess %s on %s: correct=%s (%s)", req.guess, record.id, outcome.correct, outcome.actual_model_label)
    return outcome

@app.post("/parse-prompt", response_model=TravelPreference)
async def parse_prompt(req: PromptRequest):
    return await extract_preference(req.prompt, registry.resolve("OpenAI"))

@app.get("/stats", response_model=list[ModelStats])
def stats():
    return tally.stats()

@app.get("/health")
def health():
    return {"ok": True, "providers": registry.list_providers()}
