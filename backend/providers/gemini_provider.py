from typing import Any, List

from .base import GenerationOptions, Message, NormalizedResult, ProviderAdapter, ProviderId

GEMINI_BASE = "https://generativelanguage.googleapis.com/v1beta"

DEFAULT_TOP_P = 0.95
DEFAULT_TOP_K = 40


class GeminiAdapter(ProviderAdapter):
    provider_id = ProviderId.GEMINI
    display_name = "Gemini"
    default_model = "gemini-1.5-flash"
    # Google API keys carry no stable prefix, only the length is checked
    key_prefix = ""
    env_keys = ("GEMINI_API_KEY",)

    def build_endpoint(self, api_key: str, options: GenerationOptions) -> str:
        return f"{GEMINI_BASE}/models/{self.model_for(options)}:generateContent?key={api_key}"

    def build_headers(self, api_key: str) -> dict[str, str]:
        return {"Content-Type": "application/json"}

    def format_request(self, messages: List[Message], options: GenerationOptions) -> dict:
        contents = [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
            if m.role != "system"
        ]
        return {
            "contents": contents,
            "generationConfig": {
                "temperature": self.temperature_for(options),
                "topP": DEFAULT_TOP_P if options.top_p is None else options.top_p,
                "topK": DEFAULT_TOP_K,
                "maxOutputTokens": self.max_tokens_for(options),
            },
            "systemInstruction": {"parts": [{"text": self.system_prompt_for(messages, options)}]},
        }

    def parse_response(self, data: Any) -> NormalizedResult:
        if not isinstance(data, dict):
            raise self.malformed("Gemini response is not a JSON object")
        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            suffix = f" (blocked: {reason})" if reason else ""
            raise self.malformed(f"Gemini response has no candidates{suffix}")
        candidate = candidates[0] if isinstance(candidates[0], dict) else {}
        body = candidate.get("content")
        parts = body.get("parts") if isinstance(body, dict) else None
        if not isinstance(parts, list) or not parts:
            reason = candidate.get("finishReason")
            suffix = f" (finishReason: {reason})" if reason else ""
            raise self.malformed(f"Gemini candidate has no content parts{suffix}")
        content = "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))
        if not content:
            raise self.malformed("Gemini candidate has no text parts")
        return NormalizedResult(
            provider=self.provider_id.value,
            content=content,
            usage=data.get("usageMetadata"),
            model=data.get("modelVersion"),
        )
