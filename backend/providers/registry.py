# providers/registry.py
# Fixed provider list and id -> adapter lookup, built once at startup.

from __future__ import annotations
from typing import Iterable

import httpx

from errors import UnknownProviderError
from providers.anthropic import AnthropicAdapter
from providers.base import ProviderAdapter
from providers.gemini import GeminiAdapter
from providers.grok import GrokAdapter
from providers.openai import OpenAIAdapter


class ModelRegistry:
    """Ordered, read-only mapping of provider id to adapter."""

    def __init__(self, adapters: Iterable[ProviderAdapter]):
        self._adapters: dict[str, ProviderAdapter] = {}
        for a in adapters:
            if a.provider_id in self._adapters:
                raise ValueError(f"duplicate provider id: {a.provider_id}")
            self._adapters[a.provider_id] = a

    def list_providers(self) -> list[str]:
        # fresh list each call, callers may mutate it
        return list(self._adapters)

    def resolve(self, provider_id: str) -> ProviderAdapter:
        try:
            return self._adapters[provider_id]
        except KeyError:
            raise UnknownProviderError(provider_id) from None

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)


def build_registry(
    openai_key: str = "",
    anthropic_key: str = "",
    gemini_key: str = "",
    grok_key: str = "",
    models: dict[str, str] | None = None,
    grok_base_url: str | None = None,
    timeout: float = 60.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ModelRegistry:
    """Registry with the four adapters in priority order (also the fallback order)."""
    models = models or {}
    return ModelRegistry([
        OpenAIAdapter(openai_key, model=models.get("OpenAI"), timeout=timeout, transport=transport),
        AnthropicAdapter(anthropic_key, model=models.get("Anthropic"), timeout=timeout, transport=transport),
        GeminiAdapter(gemini_key, model=models.get("Gemini"), timeout=timeout, transport=transport),
        GrokAdapter(grok_key, model=models.get("Grok"), base_url=grok_base_url, timeout=timeout, transport=transport),
    ])
