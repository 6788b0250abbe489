"""
Test helpers for flowchat-runtime.

httpx byte streams that control how a response body arrives (in fixed
chunks, forever, or stalling until cancelled) and small builders for
adapters backed by httpx.MockTransport.
"""

import asyncio

import httpx

from flowchat_runtime.client import ChatRuntimeAdapter
from flowchat_runtime.types import AdapterConfig


WEBHOOK_URL = "https://n8n.example.com/webhook/abc123/chat"


class ChunkedStream(httpx.AsyncByteStream):
    """Response body delivered as the given chunks, then closed."""

    def __init__(self, *chunks):
        self.chunks = [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            await asyncio.sleep(0)
            yield chunk

    async def aclose(self):
        self.closed = True


class EndlessStream(httpx.AsyncByteStream):
    """Response body that keeps sending one text event per chunk."""

    def __init__(self, line=b'data: {"text":"x"}\n'):
        self.line = line
        self.closed = False

    async def __aiter__(self):
        while True:
            await asyncio.sleep(0)
            yield self.line

    async def aclose(self):
        self.closed = True


class StallingStream(httpx.AsyncByteStream):
    """Response body that sends its chunks and then never sends another."""

    def __init__(self, *chunks):
        self.chunks = [c.encode("utf-8") if isinstance(c, str) else c for c in chunks]
        self.closed = False
        self._never = asyncio.Event()

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        await self._never.wait()
        yield b""

    async def aclose(self):
        self.closed = True


def sse_response(stream, status_code=200):
    """An SSE response backed by ``stream``."""
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream; charset=utf-8"},
        stream=stream,
    )


def make_adapter(handler, config=None, **kwargs):
    """Build an adapter whose requests are answered by ``handler``."""
    if config is None:
        config = AdapterConfig(webhook_url=WEBHOOK_URL, session_id="session-1")
    return ChatRuntimeAdapter(config, transport=httpx.MockTransport(handler), **kwargs)


async def collect(adapter, history):
    """Drain a run into a list of snapshot texts."""
    return [result.text async for result in adapter.run(history)]


