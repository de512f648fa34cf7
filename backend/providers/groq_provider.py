from .base import ProviderId
from .openai_compat import OpenAICompatibleAdapter

GROQ_BASE = "https://api.groq.com/openai/v1"


class GroqAdapter(OpenAICompatibleAdapter):
    provider_id = ProviderId.GROQ
    display_name = "Groq"
    default_model = "llama-3.3-70b-versatile"
    api_url = f"{GROQ_BASE}/chat/completions"
    key_prefix = "gsk_"
    env_keys = ("GROQ_API_KEY",)
