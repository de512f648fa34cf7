"""
Shared adapter for providers that speak the OpenAI chat-completions schema (Groq, xAI).
Subclasses only set the endpoint, default model and key rule.
"""
from typing import Any, List

from .base import GenerationOptions, Message, NormalizedResult, ProviderAdapter


class OpenAICompatibleAdapter(ProviderAdapter):
    api_url: str

    def build_endpoint(self, api_key: str, options: GenerationOptions) -> str:
        return self.api_url

    def build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    def format_request(self, messages: List[Message], options: GenerationOptions) -> dict:
        # conversation system messages stay inline, after the base system prompt
        openai_messages = [{"role": "system", "content": self.system_prompt_for([], options)}]
        for m in messages:
            openai_messages.append({"role": m.role, "content": m.content})
        body = {
            "model": self.model_for(options),
            "messages": openai_messages,
            "max_tokens": self.max_tokens_for(options),
            "temperature": self.temperature_for(options),
            "stream": False,
        }
        if options.top_p is not None:
            body["top_p"] = options.top_p
        return body

    def parse_response(self, data: Any) -> NormalizedResult:
        if not isinstance(data, dict):
            raise self.malformed(f"{self.display_name} response is not a JSON object")
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            raise self.malformed(f"{self.display_name} response has no choices")
        choice = choices[0] if isinstance(choices[0], dict) else {}
        message = choice.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str) or not content:
            raise self.malformed(f"{self.display_name} response has no message content")
        return NormalizedResult(
            provider=self.provider_id.value,
            content=content,
            usage=data.get("usage"),
            model=data.get("model"),
        )
