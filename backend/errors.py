# errors.py
# error taxonomy for generation, lookup and fallback exhaustion

from __future__ import annotations


class GenerationError(Exception):
    """A single provider call failed. Recoverable through the fallback chain."""

    def __init__(self, provider: str, cause: str, status: int | None = None, overloaded: bool = False):
        self.provider = provider
        self.cause = cause
        self.status = status
        # rate limit / overload class (429, 529, overloaded_error)
        self.overloaded = overloaded
        super().__init__(f"{provider}: {cause}")


class ExtractionError(GenerationError):
    """Reply had no balanced JSON object, or the object was not valid JSON."""


class UnknownProviderError(LookupError):
    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unknown provider: {provider}")


class AllProvidersFailedError(Exception):
    """Every provider in a chain failed. Carries the primary failure detail."""

    def __init__(self, requested: str, cause: str, attempts: list | None = None):
        self.requested = requested
        self.cause = cause
        self.attempts = attempts or []
        super().__init__(f"Failed to generate itinerary with {requested} and all fallbacks: {cause}")
