from typing import Any, List

from .base import GenerationOptions, Message, NormalizedResult, ProviderAdapter, ProviderId

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class ClaudeAdapter(ProviderAdapter):
    provider_id = ProviderId.CLAUDE
    display_name = "Claude"
    default_model = "claude-3-5-sonnet-20241022"
    key_prefix = "sk-ant-"
    env_keys = ("ANTHROPIC_API_KEY", "CLAUDE_API_KEY")

    def build_endpoint(self, api_key: str, options: GenerationOptions) -> str:
        return ANTHROPIC_MESSAGES_URL

    def build_headers(self, api_key: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    def format_request(self, messages: List[Message], options: GenerationOptions) -> dict:
        # system messages go to the top-level "system" field, the messages list takes user/assistant only
        body = {
            "model": self.model_for(options),
            "max_tokens": self.max_tokens_for(options),
            "temperature": self.temperature_for(options),
            "system": self.system_prompt_for(messages, options),
            "messages": [{"role": m.role, "content": m.content} for m in messages if m.role != "system"],
        }
        if options.top_p is not None:
            body["top_p"] = options.top_p
        return body

    def parse_response(self, data: Any) -> NormalizedResult:
        if not isinstance(data, dict):
            raise self.malformed("Claude response is not a JSON object")
        blocks = data.get("content")
        if not isinstance(blocks, list) or not blocks:
            raise self.malformed("Claude response has no content blocks")
        texts = [b.get("text") for b in blocks if isinstance(b, dict) and b.get("type", "text") == "text"]
        texts = [t for t in texts if isinstance(t, str)]
        content = "".join(texts)
        if not content:
            raise self.malformed("Claude response has no text content")
        return NormalizedResult(
            provider=self.provider_id.value,
            content=content,
            usage=data.get("usage"),
            model=data.get("model"),
        )
