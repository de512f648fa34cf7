"""
Provider health probes: one tiny canonical request, reduced to online/offline.
Probes never raise; every failure is logged and reported as offline.
"""
import asyncio
import logging
from enum import Enum

from gateway.client import GatewayClient, get_client, resolve_api_key
from gateway.errors import GatewayError
from providers import GenerationOptions, Message

logger = logging.getLogger(__name__)

PROBE_MESSAGES = [Message(role="user", content="Hello")]
PROBE_OPTIONS = GenerationOptions(max_tokens=10)


class ProviderStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


async def probe(provider: str, api_key: str | None = None, client: GatewayClient | None = None) -> ProviderStatus:
    client = client or get_client()
    try:
        adapter = client.lookup(provider)
        key = resolve_api_key(adapter, api_key)
        if not key:
            return ProviderStatus.OFFLINE
        await client.call(adapter.provider_id.value, PROBE_MESSAGES, key, PROBE_OPTIONS)
        return ProviderStatus.ONLINE
    except GatewayError as e:
        logger.info(
            "health check %s offline: %s (%s)",
            provider,
            e.message,
            e.kind.value,
            extra={"provider": provider, "error_kind": e.kind.value},
        )
        return ProviderStatus.OFFLINE
    except Exception:
        logger.exception("health check %s failed unexpectedly", provider, extra={"provider": provider})
        return ProviderStatus.OFFLINE


async def probe_all(client: GatewayClient | None = None) -> list[dict]:
    """Probe every registered provider concurrently, using environment keys."""
    client = client or get_client()
    adapters = client.registry.adapters()
    statuses = await asyncio.gather(*[probe(a.provider_id.value, client=client) for a in adapters])
    return [
        {"id": a.provider_id.value, "name": a.display_name, "status": s.value}
        for a, s in zip(adapters, statuses)
    ]
