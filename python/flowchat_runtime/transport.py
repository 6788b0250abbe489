"""
Location: python/flowchat_runtime/transport.py

Summary:
    Wire format helpers for the workflow webhook. Builds the outbound
    request (target URL, headers, JSON body) and classifies the response
    into one of the three shapes the adapter knows how to decode.

Usage:
    Used by client.py before sending a run and after the response
    headers arrive.

Example:
    from flowchat_runtime.transport import classify_content_type, ResponseShape

    shape = classify_content_type(response.headers.get("content-type", ""))
    if shape is ResponseShape.STREAMING:
        ...
"""

import enum
import json
from typing import Any, Optional, Sequence

from .errors import ConfigurationError
from .types import AdapterConfig, ConversationMessage, RunRequest


# Priority order for locating the reply in a whole-JSON response
JSON_TEXT_FIELDS = ("output", "text", "message", "response", "content")

SSE_CONTENT_TYPE = "text/event-stream"
JSON_CONTENT_TYPE = "application/json"

SEND_MESSAGE_ACTION = "sendMessage"


class ResponseShape(enum.Enum):
    """How a successful response body is decoded."""

    STREAMING = "streaming"
    SINGLE_JSON = "single_json"
    PLAIN_TEXT = "plain_text"


def classify_content_type(content_type: Optional[str]) -> ResponseShape:
    """
    Select the decoding strategy for a response.

    Args:
        content_type: Value of the Content-Type header (may be empty)

    Returns:
        STREAMING for text/event-stream, SINGLE_JSON for application/json,
        PLAIN_TEXT for anything else
    """
    content_type = (content_type or "").lower()
    if SSE_CONTENT_TYPE in content_type:
        return ResponseShape.STREAMING
    if JSON_CONTENT_TYPE in content_type:
        return ResponseShape.SINGLE_JSON
    return ResponseShape.PLAIN_TEXT


def extract_json_text(document: Any) -> str:
    """
    Pull the reply text out of a whole-JSON response.

    The first truthy field among JSON_TEXT_FIELDS wins; a string document
    is used as is; anything else is serialized whole.
    """
    if isinstance(document, str):
        return document

    if isinstance(document, dict):
        for key in JSON_TEXT_FIELDS:
            value = document.get(key)
            if value:
                return value if isinstance(value, str) else compact_json(value)

    return compact_json(document)


def compact_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def resolve_target_url(config: AdapterConfig) -> str:
    """
    Pick the URL a run is posted to.

    With a relay configured, streaming runs go to the relay's
    ``/stream-proxy`` sibling of ``/proxy``; otherwise to the relay URL
    itself. Without a relay, the webhook URL is used directly.

    Raises:
        ConfigurationError: If the resulting URL is empty
    """
    if config.uses_proxy:
        proxy_url = config.proxy_url or ""
        if config.streaming:
            base = proxy_url[: -len("/proxy")] if proxy_url.endswith("/proxy") else proxy_url
            url = f"{base}/stream-proxy"
        else:
            url = proxy_url
    else:
        url = config.webhook_url

    if not url or not url.strip():
        raise ConfigurationError(
            "Webhook URL is not configured. Please configure the webhook URL "
            "in the chat instance settings."
        )
    return url


def build_request_headers(config: AdapterConfig, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
    """
    Headers for a run request.

    SSE is requested unless the run goes through the relay with
    streaming turned off.
    """
    wants_sse = config.streaming or not config.uses_proxy
    headers = dict(extra or {})
    headers["Content-Type"] = JSON_CONTENT_TYPE
    headers["Accept"] = SSE_CONTENT_TYPE if wants_sse else JSON_CONTENT_TYPE
    return headers


def build_run_request(config: AdapterConfig, history: Sequence[ConversationMessage]) -> RunRequest:
    """Freeze the configuration and history into a RunRequest."""
    return RunRequest(
        webhook_url=resolve_target_url(config),
        session_id=config.session_id,
        context=dict(config.context),
        messages=list(history),
        instance_id=config.instance_id if config.uses_proxy else None,
    )


def build_request_body(
    request: RunRequest,
    *,
    chat_input_key: str = "chatInput",
    session_key: str = "sessionId",
) -> dict[str, Any]:
    """
    Serialize a RunRequest into the webhook JSON body.

    Only text survives into ``messages``. The last user message's text is
    also sent under ``chat_input_key``, and its attachments, if any, are
    listed by URL under ``attachments``.
    """
    last_user = next((m for m in reversed(request.messages) if m.role == "user"), None)

    body: dict[str, Any] = {
        "action": SEND_MESSAGE_ACTION,
        session_key: request.session_id,
        "messages": [{"role": m.role, "content": m.text} for m in request.messages],
        chat_input_key: last_user.text if last_user else "",
        "context": request.context,
    }

    if last_user and last_user.attachments:
        body["attachments"] = [
            part.model_dump(by_alias=True) for part in last_user.attachments
        ]

    if request.instance_id:
        body["instance_id"] = request.instance_id

    return body
