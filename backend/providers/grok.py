# providers/grok.py
# xAI Grok speaks the OpenAI chat completions dialect, so only the identity changes.

from providers.base import POPULAR
from providers.openai import OpenAIAdapter


class GrokAdapter(OpenAIAdapter):
    provider_id = "Grok"
    label = "Grok"
    emphasis = POPULAR
    default_rating = 5.0
    default_model = "grok-2-latest"
    base_url = "https://api.x.ai/v1"
    system_prompt = (
        "You are a travel planning expert that provides detailed, personalized travel itineraries. "
        "You always respond with valid JSON."
    )
