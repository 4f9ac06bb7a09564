# orchestrator.py
# Fallback chains per provider and the concurrent two-sided comparison run.

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from errors import AllProvidersFailedError, GenerationError
from models import COPY_MARKER, ComparisonResult, ItineraryResult, Provenance, TravelPreference
from providers.registry import ModelRegistry
from selector import RandomPairSelector

log = logging.getLogger("itinerary-arena")


@dataclass
class GenerationAttempt:
    requested: str
    provider: str
    success: bool
    error: Optional[str] = None
    overloaded: bool = False


async def run_with_timeout(coro, seconds: float, label: str):
    """Await one provider call; a timeout becomes an ordinary GenerationError."""
    try:
        return await asyncio.wait_for(coro, timeout=seconds)
    except asyncio.TimeoutError as e:
        raise GenerationError(label, f"timed out after {seconds}s") from e


class FallbackOrchestrator:
    """
    ATTEMPT_PRIMARY -> DONE | ATTEMPT_FALLBACK_i -> ... -> DONE | FAILED

    Each call owns its own failed set; nothing is shared between calls, and a
    provider is never tried twice within one call.
    """

    def __init__(self, registry: ModelRegistry, timeout_s: float = 60.0):
        self.registry = registry
        self.timeout_s = timeout_s

    async def _attempt(self, provider_id: str, pref: TravelPreference, attempts: list[GenerationAttempt], requested: str) -> ItineraryResult:
        adapter = self.registry.resolve(provider_id)
        try:
            result = await run_with_timeout(adapter.generate(pref), self.timeout_s, provider_id)
        except GenerationError as e:
            attempts.append(GenerationAttempt(requested, provider_id, False, e.cause, e.overloaded))
            raise
        attempts.append(GenerationAttempt(requested, provider_id, True))
        return result

    def fallback_order(self, provider_id: str, exclude_id: str | None = None, failed: set[str] | None = None, reverse: bool = False) -> list[str]:
        order = self.registry.list_providers()
        if reverse:
            order.reverse()
        skip = {provider_id, exclude_id} | (failed or set())
        return [p for p in order if p not in skip]

    async def generate_with_fallback(
        self,
        provider_id: str,
        pref: TravelPreference,
        exclude_id: str | None = None,
        reverse: bool = False,
    ) -> ItineraryResult:
        # unknown primary is a configuration error, not a generation failure
        self.registry.resolve(provider_id)

        attempts: list[GenerationAttempt] = []
        failed: set[str] = set()
        log.info("generating with %s", provider_id)
        try:
            return await self._attempt(provider_id, pref, attempts, provider_id)
        except GenerationError as e:
            primary = e
            # overloaded providers land here too and are never retried in this run
            failed.add(provider_id)
            log.warning("primary %s failed%s: %s", provider_id, " (overloaded)" if e.overloaded else "", e.cause)

        for candidate in self.fallback_order(provider_id, exclude_id, failed, reverse):
            log.info("attempting fallback %s for %s", candidate, provider_id)
            try:
                result = await self._attempt(candidate, pref, attempts, provider_id)
            except GenerationError as e:
                failed.add(candidate)
                log.warning("fallback %s failed: %s", candidate, e.cause)
                continue
            return result.model_copy(update={
                "model": f"{candidate} (fallback from {provider_id})",
                "provenance": Provenance(requested_provider=provider_id, actual_provider=candidate, substituted=True),
            })

        log.error("all providers failed for %s (%d attempts)", provider_id, len(attempts))
        raise AllProvidersFailedError(provider_id, primary.cause, attempts)


def _actual(result: ItineraryResult) -> str:
    return result.provenance.actual_provider if result.provenance else result.model


def duplicate_result(result: ItineraryResult, requested: str) -> ItineraryResult:
    """Stand-in for a side that produced nothing; labelled so callers can tell."""
    actual = _actual(result)
    return result.model_copy(deep=True, update={
        "model": f"{result.model} ({COPY_MARKER})",
        "provenance": Provenance(requested_provider=requested, actual_provider=actual, substituted=True, duplicated=True),
    })


async def generate_comparison(
    pref: TravelPreference,
    orchestrator: FallbackOrchestrator,
    selector: RandomPairSelector,
) -> ComparisonResult:
    """
    Draw two providers and run both chains concurrently. Each side excludes the
    other's target from its own chain; the second side walks the fallback order
    reversed so two failing sides do not both settle on the same wildcard.
    """
    first_id, second_id = selector.select_pair()
    log.info("comparison pair: %s vs %s", first_id, second_id)

    results = await asyncio.gather(
        orchestrator.generate_with_fallback(first_id, pref, exclude_id=second_id),
        orchestrator.generate_with_fallback(second_id, pref, exclude_id=first_id, reverse=True),
        return_exceptions=True,
    )
    # only exhaustion is salvageable; anything else is a bug and propagates
    for r in results:
        if isinstance(r, BaseException) and not isinstance(r, AllProvidersFailedError):
            raise r

    first, second = results
    if isinstance(first, AllProvidersFailedError) and isinstance(second, AllProvidersFailedError):
        raise first

    degraded = False
    if isinstance(first, AllProvidersFailedError):
        log.warning("side 1 (%s) exhausted, duplicating side 2", first_id)
        first, degraded = duplicate_result(second, first_id), True
    elif isinstance(second, AllProvidersFailedError):
        log.warning("side 2 (%s) exhausted, duplicating side 1", second_id)
        second, degraded = duplicate_result(first, second_id), True
    elif _actual(first) == _actual(second):
        # both chains settled on the same wildcard: one distinct result
        log.warning("both sides fell back to %s, duplicating side 1", _actual(first))
        second, degraded = duplicate_result(first, second_id), True

    return ComparisonResult(first=first, second=second, requested=(first_id, second_id), degraded=degraded)
