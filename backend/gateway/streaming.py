"""
Typing-effect stream over an already-complete response.

This is a client-side affordance, not a network stream: the provider call has
finished before the first chunk is emitted. One async generator produces fixed-size
slices with a fixed pause between them, then a single end marker.
"""
import asyncio
import json
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable

from gateway.config import get_settings

SSE_DONE = "data: [DONE]\n\n"


@dataclass(frozen=True)
class StreamEvent:
    content: str = ""
    done: bool = False

    def to_sse(self) -> str:
        if self.done:
            return SSE_DONE
        return f"data: {json.dumps({'content': self.content})}\n\n"


def split_chunks(content: str, chunk_size: int) -> list[str]:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    return [content[i : i + chunk_size] for i in range(0, len(content), chunk_size)]


async def emulate_stream(
    content: str,
    chunk_size: int | None = None,
    chars_per_second: float | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[StreamEvent]:
    """Yield ceil(len/chunk_size) chunk events paced at chars_per_second, then one done event.

    chars_per_second <= 0 disables pacing. Closing the generator (aclose, or breaking out
    of `async for`) stops emission at the current pause; nothing is raised to the consumer.
    """
    settings = get_settings()
    chunk_size = chunk_size or settings.stream_chunk_size
    if chars_per_second is None:
        chars_per_second = settings.stream_chars_per_sec
    interval = chunk_size / chars_per_second if chars_per_second > 0 else 0.0

    for index, chunk in enumerate(split_chunks(content, chunk_size)):
        if index and interval:
            await sleep(interval)
        yield StreamEvent(content=chunk)
    yield StreamEvent(done=True)


async def sse_frames(content: str, **kwargs) -> AsyncIterator[str]:
    async for event in emulate_stream(content, **kwargs):
        yield event.to_sse()


async def collect_sse(content: str) -> str:
    """Whole SSE body at once, for runtimes that cannot hold a response open."""
    return "".join([frame async for frame in sse_frames(content, chars_per_second=0)])
