"""
Gateway entry points used by every transport binding (FastAPI server, Lambda, Cloud Function).
"""
from typing import List

from gateway.client import GatewayClient, get_client, resolve_api_key
from gateway.health import ProviderStatus, probe
from providers import GenerationOptions, Message, NormalizedResult

WEBSITE_SYSTEM_PROMPT = """You are an expert web developer. Create a complete, production-ready website based on the user's requirements.

Requirements:
- Generate complete HTML, CSS, and JavaScript code
- Use modern web standards and best practices
- Include responsive design for all devices
- Add smooth animations and interactions
- Ensure accessibility compliance
- Include SEO optimization
- Use semantic HTML structure
- Implement modern CSS with Flexbox/Grid
- Add interactive JavaScript functionality
- Include proper error handling
- Use professional color schemes and typography
- Add loading states and smooth transitions

Format your response as a complete HTML document with embedded CSS and JavaScript.
Make it visually appealing and fully functional."""


async def chat(
    provider: str,
    messages: List[Message],
    api_key: str | None = None,
    options: GenerationOptions | None = None,
    client: GatewayClient | None = None,
) -> NormalizedResult:
    """Send a conversation to one provider. A missing api_key falls back to the provider's env variable."""
    client = client or get_client()
    adapter = client.lookup(provider)
    key = resolve_api_key(adapter, api_key)
    return await client.call(adapter.provider_id.value, messages, key, options)


async def generate_website(
    provider: str,
    prompt: str,
    api_key: str | None = None,
    options: GenerationOptions | None = None,
    client: GatewayClient | None = None,
) -> NormalizedResult:
    if not prompt or not prompt.strip():
        raise ValueError("prompt is required")
    options = (options or GenerationOptions()).with_overrides(system_prompt=WEBSITE_SYSTEM_PROMPT)
    messages = [Message(role="user", content=f"Create a website: {prompt}")]
    return await chat(provider, messages, api_key, options, client=client)


async def test_connection(
    provider: str,
    api_key: str | None = None,
    client: GatewayClient | None = None,
) -> ProviderStatus:
    return await probe(provider, api_key, client=client)
