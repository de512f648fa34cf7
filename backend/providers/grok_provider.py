from .base import ProviderId
from .openai_compat import OpenAICompatibleAdapter

XAI_BASE = "https://api.x.ai/v1"


class GrokAdapter(OpenAICompatibleAdapter):
    provider_id = ProviderId.XAI
    display_name = "xAI"
    default_model = "grok-3"
    api_url = f"{XAI_BASE}/chat/completions"
    key_prefix = "xai-"
    env_keys = ("XAI_API_KEY",)
