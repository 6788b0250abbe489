"""
Location: python/flowchat_runtime/client.py

Summary:
    ChatRuntimeAdapter, the runtime that connects a chat UI to a workflow
    webhook. Sends the conversation in one POST and turns whatever comes
    back (an SSE stream, a single JSON document or plain text) into a
    sequence of growing RunResult snapshots.

Usage:
    The hosting chat UI creates one adapter per chat instance, iterates
    run() for each user turn, and calls cancel() when the user stops
    generation or starts a new turn.

Example:
    from flowchat_runtime import create_adapter

    adapter = create_adapter(
        {"webhookUrl": "https://n8n.example.com/webhook/chat", "sessionId": "s-1"},
        on_error=lambda err: show_banner(err.user_message),
    )

    async with adapter:
        async for result in adapter.run(history):
            render(result.text)
"""

import json
import logging
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable, Optional, Sequence, Union

import httpx

from .accumulator import TextAccumulator
from .cancellation import CancellationToken, RunCancelled
from .errors import ProtocolError, RuntimeAdapterError, TransportError, describe_error
from .stream import parse_sse_stream
from .transport import (
    ResponseShape,
    build_request_body,
    build_request_headers,
    build_run_request,
    classify_content_type,
    extract_json_text,
)
from .types import AdapterConfig, ConversationMessage, RunResult

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[BaseException], Any]


class ChatRuntimeAdapter:
    """
    Streaming runtime adapter for workflow chat webhooks.

    Each call to run() owns its own cancellation token and accumulator,
    so concurrent runs never share state. cancel() targets the most
    recently started run.

    Attributes:
        config: Adapter configuration (URL, session, context, relay)
        on_error: Callback invoked once per failed run, before the error
                  is raised to the caller; never called for cancellation
        timeout: Request timeout in seconds
        default_headers: Headers added to every request
    """

    def __init__(
        self,
        config: Union[AdapterConfig, dict],
        *,
        on_error: Optional[ErrorCallback] = None,
        timeout: float = 120.0,
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            config: AdapterConfig, or a camelCase dict as emitted by the host page
            on_error: Optional failure callback
            timeout: Request timeout in seconds (default 120)
            headers: Optional default headers for all requests
            transport: Optional httpx transport (tests, custom networking)
        """
        if not isinstance(config, AdapterConfig):
            config = AdapterConfig.model_validate(config)
        self.config = config
        self.on_error = on_error
        self.timeout = timeout
        self.default_headers = headers or {}

        self._active_token: Optional[CancellationToken] = None

        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the HTTP client and release connections."""
        await self._http.aclose()

    async def __aenter__(self) -> "ChatRuntimeAdapter":
        return self

    async def __aexit__(self, *args) -> None:
        self.cancel()
        await self.close()

    async def run(self, history: Sequence[ConversationMessage]) -> AsyncIterator[RunResult]:
        """
        Send the conversation and yield reply snapshots as they arrive.

        Streaming responses yield one snapshot per text or tool-call event;
        JSON and plain-text responses yield exactly one. Each snapshot holds
        the full reply so far.

        Args:
            history: Full conversation, oldest first

        Yields:
            RunResult snapshots, in wire order

        Raises:
            ConfigurationError: No target URL configured
            TransportError: The request could not be completed
            ProtocolError: HTTP status >= 400, or an error in the stream
        """
        token = CancellationToken()
        self._active_token = token
        accumulator = TextAccumulator()

        try:
            request = build_run_request(self.config, history)
            body = build_request_body(
                request,
                chat_input_key=self.config.chat_input_key,
                session_key=self.config.session_key,
            )
            http_request = self._http.build_request(
                "POST",
                request.webhook_url,
                json=body,
                headers=build_request_headers(self.config, self.default_headers),
            )

            logger.debug(
                "Posting %d message(s) to %s (session %s)",
                len(request.messages), request.webhook_url, request.session_id,
            )
            response = await token.guard(self._http.send(http_request, stream=True))
            try:
                async with aclosing(self._dispatch(response, accumulator, token)) as results:
                    async for result in results:
                        yield result
            finally:
                await response.aclose()

        except RunCancelled:
            logger.debug("Run cancelled for session %s", self.config.session_id)
            return
        except RuntimeAdapterError as exc:
            self._report(exc)
            raise
        except httpx.TimeoutException as exc:
            error = TransportError(f"Request timed out: {exc}", timeout=True)
            self._report(error)
            raise error from exc
        except httpx.HTTPError as exc:
            error = TransportError(str(exc) or exc.__class__.__name__)
            self._report(error)
            raise error from exc
        except Exception as exc:
            self._report(exc)
            raise
        finally:
            if self._active_token is token:
                self._active_token = None

    def cancel(self) -> None:
        """
        Cancel the active run, if any.

        Aborts any in-flight request or body read; the run's iterator then
        ends without further results and without reporting an error.
        """
        if self._active_token is not None:
            self._active_token.cancel("cancelled by caller")
            self._active_token = None

    def update_session_id(self, session_id: str) -> None:
        """Use a new session id for subsequent runs."""
        self.config = self.config.model_copy(update={"session_id": session_id})

    def update_context(self, context: dict[str, Any]) -> None:
        """Merge ``context`` into the context sent with subsequent runs."""
        merged = {**self.config.context, **context}
        self.config = self.config.model_copy(update={"context": merged})

    async def _dispatch(
        self,
        response: httpx.Response,
        accumulator: TextAccumulator,
        token: CancellationToken,
    ) -> AsyncIterator[RunResult]:
        """
        Decode a response according to its status and content type.

        Raises:
            ProtocolError: HTTP status >= 400, or an undecodable JSON body
        """
        if response.status_code >= 400:
            await token.guard(response.aread())
            text = response.text
            raise ProtocolError(
                f"HTTP {response.status_code}: {text}",
                status_code=response.status_code,
                body=text,
            )

        shape = classify_content_type(response.headers.get("content-type"))
        logger.debug("Response %d decoded as %s", response.status_code, shape.value)

        if shape is ResponseShape.STREAMING:
            async with aclosing(parse_sse_stream(response.aiter_bytes(), token)) as events:
                async for event in events:
                    result = accumulator.apply(event)
                    if result is not None:
                        yield result
                    token.raise_if_cancelled()
            return

        await token.guard(response.aread())

        if shape is ResponseShape.SINGLE_JSON:
            try:
                document = json.loads(response.content)
            except ValueError as exc:
                raise ProtocolError(
                    f"Invalid JSON response: {exc}",
                    status_code=response.status_code,
                    body=response.text,
                ) from exc
            yield RunResult.of(extract_json_text(document))
            return

        yield RunResult.of(response.text)

    def _report(self, error: BaseException) -> None:
        """Attach the user-facing message and invoke on_error."""
        if isinstance(error, RuntimeAdapterError):
            error.user_message = describe_error(error, self.config.error_messages)
        if self.on_error is not None:
            self.on_error(error)


def create_adapter(config: Union[AdapterConfig, dict], **kwargs: Any) -> ChatRuntimeAdapter:
    """
    Create a ChatRuntimeAdapter.

    Args:
        config: AdapterConfig or camelCase dict
        **kwargs: Passed through to ChatRuntimeAdapter

    Returns:
        A new adapter
    """
    return ChatRuntimeAdapter(config, **kwargs)


__all__ = ["ChatRuntimeAdapter", "create_adapter"]
