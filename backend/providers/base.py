from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List

from gateway.config import get_settings
from gateway.errors import UpstreamMalformedResponse

ROLES = ("user", "assistant", "system")

DEFAULT_SYSTEM_PROMPT = (
    "You are a professional web developer AI assistant specializing in creating modern, "
    "responsive websites. You provide complete HTML, CSS, and JavaScript code with best "
    "practices, accessibility features, and modern design patterns."
)

DEFAULT_TEMPERATURE = 0.7


class ProviderId(str, Enum):
    CLAUDE = "claude"
    GEMINI = "gemini"
    GROQ = "groq"
    XAI = "xai"
    ZAI = "zai"


@dataclass
class Message:
    role: str  # "user" | "assistant" | "system"
    content: str

    @classmethod
    def from_dict(cls, data: dict) -> "Message":
        if not isinstance(data, dict):
            raise ValueError("each message must be an object with role and content")
        role = data.get("role", "user")
        content = data.get("content", "")
        if role not in ROLES:
            raise ValueError(f"unknown message role: {role!r}")
        if not isinstance(content, str):
            raise ValueError("message content must be a string")
        return cls(role=role, content=content)


def _percent(data: dict, key: str) -> float | None:
    """Read a 0-100 slider value and scale it to 0.0-1.0."""
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number between 0 and 100")
    if not 0 <= value <= 100:
        raise ValueError(f"{key} must be between 0 and 100")
    return value / 100


def _unit(data: dict, *keys: str) -> float | None:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{key} must be a number between 0.0 and 1.0")
        if not 0 <= value <= 1:
            raise ValueError(f"{key} must be between 0.0 and 1.0")
        return float(value)
    return None


def _text(data: dict, *keys: str) -> str | None:
    """First non-empty string among keys; empty strings count as absent."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ValueError(f"{key} must be a string")
        if value:
            return value
    return None


@dataclass(frozen=True)
class GenerationOptions:
    temperature: float | None = None
    max_tokens: int | None = None
    top_p: float | None = None
    model: str | None = None
    system_prompt: str | None = None
    streaming: bool = False

    @classmethod
    def from_dict(cls, data: dict | None) -> "GenerationOptions":
        """Accepts both the UI slider names (creativity/length/focus) and the API names."""
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError("options must be an object")

        temperature = _percent(data, "creativity")
        if temperature is None:
            temperature = _unit(data, "temperature")
        top_p = _percent(data, "focus")
        if top_p is None:
            top_p = _unit(data, "topP", "top_p")

        max_tokens = None
        for key in ("length", "maxTokens", "max_tokens"):
            if data.get(key) is not None:
                max_tokens = data[key]
                if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens <= 0:
                    raise ValueError(f"{key} must be a positive integer")
                break

        model = _text(data, "model")
        system_prompt = _text(data, "systemPrompt", "system_prompt")
        streaming = data.get("streaming", False)
        if streaming is None:
            streaming = False
        if not isinstance(streaming, bool):
            raise ValueError("streaming must be true or false")

        return cls(
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=top_p,
            model=model,
            system_prompt=system_prompt,
            streaming=streaming,
        )

    def with_overrides(self, **changes) -> "GenerationOptions":
        return replace(self, **changes)


@dataclass
class NormalizedResult:
    provider: str
    content: str
    usage: Any = None
    model: str | None = None


class ProviderAdapter(ABC):
    """Translation layer between the gateway's normalized request and one provider's HTTP API.

    Subclasses must define all four of build_endpoint, build_headers, format_request and
    parse_response; a partial adapter fails to instantiate when the registry is built.
    """

    provider_id: ProviderId
    display_name: str
    default_model: str
    key_prefix: str = ""
    min_key_length: int = 21
    env_keys: tuple[str, ...] = ()

    def validate_key(self, api_key: str) -> bool:
        """Shape check only; the provider is the one that decides if the key is live."""
        return (
            isinstance(api_key, str)
            and api_key.startswith(self.key_prefix)
            and len(api_key) >= self.min_key_length
        )

    def model_for(self, options: GenerationOptions) -> str:
        return options.model or self.default_model

    def max_tokens_for(self, options: GenerationOptions) -> int:
        return options.max_tokens or get_settings().default_max_tokens

    def temperature_for(self, options: GenerationOptions) -> float:
        return DEFAULT_TEMPERATURE if options.temperature is None else options.temperature

    def system_prompt_for(self, messages: List[Message], options: GenerationOptions) -> str:
        """Base system prompt plus any system-role messages from the conversation."""
        parts = [options.system_prompt or DEFAULT_SYSTEM_PROMPT]
        parts.extend(m.content for m in messages if m.role == "system" and m.content)
        return "\n\n".join(parts)

    def extract_error_message(self, data: Any) -> str | None:
        """Pull the diagnostic text out of an error body; all current providers nest it under error.message."""
        if not isinstance(data, dict):
            return None
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        if data.get("message"):
            return str(data["message"])
        return None

    def malformed(self, message: str) -> UpstreamMalformedResponse:
        return UpstreamMalformedResponse(self.provider_id.value, message)

    @abstractmethod
    def build_endpoint(self, api_key: str, options: GenerationOptions) -> str:
        pass

    @abstractmethod
    def build_headers(self, api_key: str) -> dict[str, str]:
        pass

    @abstractmethod
    def format_request(self, messages: List[Message], options: GenerationOptions) -> dict:
        pass

    @abstractmethod
    def parse_response(self, data: Any) -> NormalizedResult:
        pass
