import random

import pytest

from conftest import FakeAdapter, FixedRandom, make_registry
from errors import UnknownProviderError
from providers.openai import OpenAIAdapter
from providers.registry import ModelRegistry, build_registry
from selector import RandomPairSelector, SystemRandomSource


def test_registry_lists_providers_in_priority_order():
    registry = build_registry("a", "b", "c", "d")
    assert registry.list_providers() == ["OpenAI", "Anthropic", "Gemini", "Grok"]
    assert isinstance(registry.resolve("OpenAI"), OpenAIAdapter)
    assert "Grok" in registry and len(registry) == 4


def test_registry_list_is_a_copy():
    registry = build_registry()
    registry.list_providers().clear()
    assert len(registry.list_providers()) == 4


def test_registry_passes_model_overrides():
    registry = build_registry(models={"Anthropic": "claude-sonnet-4"}, grok_base_url="https://grok.test/v1/")
    assert registry.resolve("Anthropic").model == "claude-sonnet-4"
    assert registry.resolve("Grok").base_url == "https://grok.test/v1"


def test_unknown_provider():
    with pytest.raises(UnknownProviderError):
        build_registry().resolve("Mistral")


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        ModelRegistry([FakeAdapter("OpenAI"), FakeAdapter("OpenAI")])


def test_pair_is_drawn_without_replacement():
    rng = FixedRandom(0, 0)
    selector = RandomPairSelector(make_registry(), rng)
    assert selector.select_pair() == ("OpenAI", "Anthropic")
    assert rng.bounds == [4, 3]


def test_pair_uses_injected_indexes():
    selector = RandomPairSelector(make_registry(), FixedRandom(3, 1))
    assert selector.select_pair() == ("Grok", "Anthropic")


def test_random_pairs_are_distinct_registry_members():
    registry = make_registry()
    selector = RandomPairSelector(registry, SystemRandomSource(random.Random(7)))
    seen = set()
    for _ in range(200):
        a, b = selector.select_pair()
        assert a != b
        assert a in registry and b in registry
        seen.add((a, b))
    # all 12 ordered pairs show up eventually
    assert len(seen) == 12


def test_out_of_range_index_is_rejected():
    selector = RandomPairSelector(make_registry(), FixedRandom(4, 0))
    with pytest.raises(ValueError):
        selector.select_pair()


def test_needs_two_providers():
    with pytest.raises(ValueError):
        RandomPairSelector(ModelRegistry([FakeAdapter("OpenAI")]))
