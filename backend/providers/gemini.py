# providers/gemini.py
# Google Gemini generateContent (REST) with responseMimeType=application/json.

from providers.base import CULTURAL, ProviderAdapter


class GeminiAdapter(ProviderAdapter):
    provider_id = "Gemini"
    label = "Gemini"
    emphasis = CULTURAL
    native_json = True
    default_rating = 5.0
    default_model = "gemini-2.5-pro"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def build_request(self, prompt, system, json_mode):
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if json_mode:
            body["generationConfig"] = {"responseMimeType": "application/json"}
        url = f"{self.base_url}/models/{self.model}:generateContent"
        return url, {"x-goog-api-key": self.api_key}, body

    def reply_text(self, payload):
        parts = payload["candidates"][0]["content"]["parts"]
        return "".join(p.get("text", "") for p in parts)
