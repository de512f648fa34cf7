from .base import (
    DEFAULT_SYSTEM_PROMPT,
    GenerationOptions,
    Message,
    NormalizedResult,
    ProviderAdapter,
    ProviderId,
)
from .claude_provider import ClaudeAdapter
from .gemini_provider import GeminiAdapter
from .grok_provider import GrokAdapter
from .groq_provider import GroqAdapter
from .registry import REGISTRY, ProviderRegistry

__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "GenerationOptions",
    "Message",
    "NormalizedResult",
    "ProviderAdapter",
    "ProviderId",
    "ClaudeAdapter",
    "GeminiAdapter",
    "GrokAdapter",
    "GroqAdapter",
    "REGISTRY",
    "ProviderRegistry",
]
