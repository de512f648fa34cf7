"""
Process-wide provider table. Built once at import, frozen, then only read.
Adding a provider means adding one adapter class to _build_default_registry().
"""
from types import MappingProxyType

from gateway.errors import UnsupportedProvider

from .base import ProviderAdapter, ProviderId


class ProviderRegistry:
    def __init__(self):
        self._adapters: dict[ProviderId, ProviderAdapter] = {}
        self._frozen = False

    def register(self, provider_id: ProviderId, adapter: ProviderAdapter) -> None:
        if self._frozen:
            raise RuntimeError("provider registry is frozen; register adapters at startup")
        if not isinstance(adapter, ProviderAdapter):
            raise TypeError(f"{adapter!r} is not a ProviderAdapter")
        if provider_id in self._adapters:
            raise ValueError(f"provider {provider_id.value!r} is already registered")
        self._adapters[provider_id] = adapter

    def freeze(self) -> "ProviderRegistry":
        self._frozen = True
        self._adapters = MappingProxyType(dict(self._adapters))
        return self

    def lookup(self, provider: str | ProviderId) -> ProviderAdapter:
        """Resolve a provider identifier; unknown or unregistered ids raise UnsupportedProvider."""
        name = provider.value if isinstance(provider, ProviderId) else str(provider)
        try:
            provider_id = ProviderId(name)
        except ValueError:
            raise UnsupportedProvider(name, f"Unsupported AI provider: {name}") from None
        adapter = self._adapters.get(provider_id)
        if adapter is None:
            raise UnsupportedProvider(name, f"No adapter is available for provider: {name}")
        return adapter

    def ids(self) -> list[str]:
        return [p.value for p in self._adapters]

    def adapters(self) -> list[ProviderAdapter]:
        return list(self._adapters.values())


def _build_default_registry() -> ProviderRegistry:
    from .claude_provider import ClaudeAdapter
    from .gemini_provider import GeminiAdapter
    from .grok_provider import GrokAdapter
    from .groq_provider import GroqAdapter

    registry = ProviderRegistry()
    # Z.ai stays unregistered until its wire contract is confirmed
    for adapter in (GroqAdapter(), GeminiAdapter(), ClaudeAdapter(), GrokAdapter()):
        registry.register(adapter.provider_id, adapter)
    return registry.freeze()


REGISTRY = _build_default_registry()
