# providers/openai.py
# OpenAI chat completions with native JSON mode. Cultural-immersion flavoured.

from providers.base import CULTURAL, ProviderAdapter


class OpenAIAdapter(ProviderAdapter):
    provider_id = "OpenAI"
    label = "GPT-4o"
    emphasis = CULTURAL
    native_json = True
    default_rating = 4.5
    default_model = "gpt-4o"
    base_url = "https://api.openai.com/v1"

    def build_request(self, prompt, system, json_mode):
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        body = {"model": self.model, "messages": messages}
        if json_mode:
            body["response_format"] = {"type": "json_object"}
        return f"{self.base_url}/chat/completions", {"Authorization": f"Bearer {self.api_key}"}, body

    def reply_text(self, payload):
        return payload["choices"][0]["message"]["content"] or ""
