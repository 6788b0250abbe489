"""
Location: python/flowchat_runtime/stream.py

Summary:
    Server-Sent Events parsing for workflow chat responses. Each
    ``data: `` line is treated as a standalone event carrying either a
    JSON object (``text``, ``tool_calls`` or ``error``), the ``[DONE]``
    sentinel, or plain text from backends that do not emit JSON.

Usage:
    Used by client.py to turn a streaming httpx response into
    StreamEvent objects for the accumulator.

Example:
    async with http.stream("POST", url, json=body) as response:
        async for event in parse_sse_stream(response.aiter_bytes(), token):
            print(event.kind, event.text)

Note:
    Multi-line SSE events (several ``data:`` lines joined by a blank
    line) are not assembled; every data line is decoded on its own.
"""

import json
import logging
from typing import Any, AsyncIterator, Iterator, NamedTuple, Optional, Union

from .cancellation import CancellationToken
from .errors import ProtocolError
from .line_buffer import LineBuffer
from .transport import compact_json
from .types import StreamEvent

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class DecodedJson(NamedTuple):
    """A token that parsed as JSON."""
    value: Any


class RawText(NamedTuple):
    """A token that did not parse as JSON, kept verbatim."""
    text: str


def try_decode_json(token: str) -> Union[DecodedJson, RawText]:
    """
    Decode a data token as JSON, falling back to the raw text.

    Args:
        token: The data-line payload with the ``data: `` prefix removed

    Returns:
        DecodedJson with the parsed value, or RawText with the token
    """
    try:
        return DecodedJson(json.loads(token))
    except ValueError:
        return RawText(token)


def parse_sse_line(line: str) -> Optional[str]:
    """
    Classify one SSE line and return its data token, if it has one.

    Blank lines, comments (``:``) and any field other than ``data: ``
    yield None.
    """
    line = line.rstrip("\r")
    if not line.strip() or line.startswith(":"):
        return None
    if line.startswith(DATA_PREFIX):
        return line[len(DATA_PREFIX):]
    return None


def decode_sse_token(token: str) -> Iterator[StreamEvent]:
    """
    Turn one data token into zero or more stream events.

    Args:
        token: Raw data token from parse_sse_line()

    Yields:
        StreamEvent.done() for the sentinel; a text event and/or a
        tool-call event for JSON objects; a text event for non-JSON tokens

    Raises:
        ProtocolError: If the payload carries an ``error`` field
    """
    if token == DONE_SENTINEL:
        yield StreamEvent.done()
        return

    decoded = try_decode_json(token)

    if isinstance(decoded, RawText):
        if decoded.text.strip():
            yield StreamEvent.text_chunk(decoded.text)
        return

    payload = decoded.value
    if not isinstance(payload, dict):
        logger.debug("Ignoring non-object JSON data token: %r", token)
        return

    error = payload.get("error")
    if error:
        raise ProtocolError(error if isinstance(error, str) else compact_json(error))

    text = payload.get("text")
    if text:
        yield StreamEvent.text_chunk(text if isinstance(text, str) else compact_json(text))

    calls = payload.get("tool_calls")
    if calls:
        yield StreamEvent.tools(calls if isinstance(calls, list) else [calls])


def iter_line_events(line: str) -> Iterator[StreamEvent]:
    """Events carried by a single SSE line."""
    token = parse_sse_line(line)
    if token is not None:
        yield from decode_sse_token(token)


async def parse_sse_stream(
    chunks: AsyncIterator[bytes],
    token: Optional[CancellationToken] = None,
) -> AsyncIterator[StreamEvent]:
    """
    Parse an SSE byte stream into stream events.

    Stops at the ``[DONE]`` sentinel without reading further, even when
    more bytes follow it in the same chunk. A final line left in the
    buffer when the connection closes is processed like any other line.

    Args:
        chunks: Async iterator of raw body chunks
        token: Optional cancellation token, checked before every chunk
               read and every line

    Yields:
        Text and tool-call StreamEvents, in wire order

    Raises:
        ProtocolError: On an ``error`` payload
        RunCancelled: When the token is cancelled
    """
    token = token or CancellationToken()
    buffer = LineBuffer()

    while True:
        chunk = await token.guard(_next_chunk(chunks))
        if chunk is None:
            break
        for line in buffer.feed(chunk):
            token.raise_if_cancelled()
            for event in iter_line_events(line):
                if event.kind == "done":
                    logger.debug("SSE stream reached %s sentinel", DONE_SENTINEL)
                    return
                yield event

    remainder = buffer.flush()
    if remainder is not None:
        token.raise_if_cancelled()
        for event in iter_line_events(remainder):
            if event.kind == "done":
                return
            yield event


async def _next_chunk(chunks: AsyncIterator[bytes]) -> Optional[bytes]:
    """Next chunk from ``chunks``, or None once exhausted."""
    try:
        return await chunks.__anext__()
    except StopAsyncIteration:
        return None
