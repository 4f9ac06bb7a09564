# providers/anthropic.py
# Anthropic messages API. No JSON mode: schema goes in the prompt and the object is
# scanned out of the reply text. Popular-attractions flavoured.

from providers.base import POPULAR, ProviderAdapter

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicAdapter(ProviderAdapter):
    provider_id = "Anthropic"
    label = "Claude 3.7 Sonnet"
    emphasis = POPULAR
    native_json = False
    default_rating = 5.0
    default_model = "claude-3-7-sonnet-20250219"
    base_url = "https://api.anthropic.com/v1"
    system_prompt = (
        "You are a luxury travel planning assistant that specializes in creating efficient, "
        "popular attraction-focused itineraries. You always respond with valid JSON."
    )
    max_tokens = 4000

    def build_request(self, prompt, system, json_mode):
        body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            body["system"] = system
        headers = {"x-api-key": self.api_key, "anthropic-version": ANTHROPIC_VERSION}
        return f"{self.base_url}/messages", headers, body

    def reply_text(self, payload):
        blocks = payload.get("content") or []
        return "".join(b.get("text", "") for b in blocks if b.get("type") == "text")
