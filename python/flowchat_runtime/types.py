"""
Location: python/flowchat_runtime/types.py

Summary:
    Pydantic models for flowchat-runtime. Defines the conversation data
    handed in by the hosting chat UI, the per-run outbound request, the
    transient stream events decoded from the wire, the result snapshots
    yielded back to the UI, and the adapter configuration.

Usage:
    These models are imported by client.py, transport.py, stream.py and
    accumulator.py. Wire-facing models accept camelCase keys via aliases
    so the JSON emitted by the hosting page validates directly.

Example:
    from flowchat_runtime.types import ConversationMessage, TextPart

    message = ConversationMessage(
        role="user",
        content=[TextPart(text="Where is my order?")],
    )
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field


class TextPart(BaseModel):
    """
    A plain text fragment of a message.

    Attributes:
        type: Always "text"
        text: The text content
    """
    type: Literal["text"] = "text"
    text: str


class AttachmentPart(BaseModel):
    """
    An uploaded image or file referenced by URL.

    Only the receiving UI interprets these; the adapter never inlines
    them into the messages array.

    Attributes:
        type: "image" or "file"
        url: Where the uploaded file can be fetched
        filename: Original file name
        mime_type: MIME type of the upload
    """
    type: Literal["image", "file"]
    url: str
    filename: str = "attachment"
    mime_type: str = Field("application/octet-stream", alias="mimeType")

    model_config = {"populate_by_name": True}


ContentPart = Annotated[Union[TextPart, AttachmentPart], Field(discriminator="type")]


class ConversationMessage(BaseModel):
    """
    One turn of the conversation as held by the hosting UI.

    Attributes:
        role: "user" or "assistant"
        content: Ordered content parts
    """
    role: Literal["user", "assistant"]
    content: list[ContentPart] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(part.text for part in self.content if isinstance(part, TextPart))

    @property
    def attachments(self) -> list[AttachmentPart]:
        """All image/file parts, in order."""
        return [part for part in self.content if isinstance(part, AttachmentPart)]


class RunRequest(BaseModel):
    """
    The outbound unit of work for a single run.

    Built once per invocation from the adapter configuration and the
    history passed to run(); never mutated afterwards.

    Attributes:
        webhook_url: Resolved target URL (webhook or relay)
        session_id: Chat session identifier
        context: Free-form site/user/page data
        messages: Conversation history
        instance_id: Relay instance id, only set when a relay is used
    """
    webhook_url: str = Field(alias="webhookUrl")
    session_id: str = Field(alias="sessionId")
    context: dict[str, Any] = Field(default_factory=dict)
    messages: list[ConversationMessage] = Field(default_factory=list)
    instance_id: Optional[str] = Field(None, alias="instanceId")

    model_config = {"populate_by_name": True, "frozen": True}


class StreamEvent(BaseModel):
    """
    A decoded unit from an SSE stream.

    Created per data line and consumed immediately by the accumulator.

    Attributes:
        kind: "text" for an incremental chunk, "tool_calls" for tool-call
              metadata, "done" for the end-of-stream sentinel
        text: The chunk text (kind == "text")
        tool_calls: Raw tool-call objects (kind == "tool_calls")
    """
    kind: Literal["text", "tool_calls", "done"]
    text: Optional[str] = None
    tool_calls: Optional[list[Any]] = None

    @classmethod
    def text_chunk(cls, text: str) -> "StreamEvent":
        return cls(kind="text", text=text)

    @classmethod
    def tools(cls, tool_calls: list[Any]) -> "StreamEvent":
        return cls(kind="tool_calls", tool_calls=tool_calls)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(kind="done")


class RunResult(BaseModel):
    """
    A snapshot of the full assistant reply accumulated so far.

    Attributes:
        content: Single text part holding the full accumulated text
        tool_calls: Tool calls seen on the event that produced this
                    snapshot, if any (informational only)
    """
    content: list[TextPart]
    tool_calls: Optional[list[Any]] = None

    @classmethod
    def of(cls, text: str, tool_calls: Optional[list[Any]] = None) -> "RunResult":
        return cls(content=[TextPart(text=text)], tool_calls=tool_calls)

    @property
    def text(self) -> str:
        return self.content[0].text if self.content else ""


class ErrorMessages(BaseModel):
    """
    Host-supplied wording for failures shown to the end user.

    Any field left unset falls back to the built-in default.

    Attributes:
        connection: Shown when the endpoint cannot be reached
        timeout: Shown when the request times out
        rate_limit: Shown on HTTP 429
        generic: Shown for every other failure
    """
    connection: Optional[str] = None
    timeout: Optional[str] = None
    rate_limit: Optional[str] = Field(None, alias="rateLimit")
    generic: Optional[str] = None

    model_config = {"populate_by_name": True}


class AdapterConfig(BaseModel):
    """
    Configuration supplied by the hosting UI at adapter construction.

    Attributes:
        webhook_url: Remote workflow endpoint
        session_id: Chat session identifier
        context: Free-form site/user/page data sent with every run
        proxy_url: Optional CORS-bypass relay URL (ending in /proxy)
        instance_id: Chat instance id, required for the relay
        streaming: Request SSE through the relay (default True)
        chat_input_key: Body key for the last user message text
        session_key: Body key for the session id
        error_messages: Optional custom failure wording
    """
    webhook_url: str = Field("", alias="webhookUrl")
    session_id: str = Field(alias="sessionId")
    context: dict[str, Any] = Field(default_factory=dict)
    proxy_url: Optional[str] = Field(None, alias="proxyUrl")
    instance_id: Optional[str] = Field(None, alias="instanceId")
    streaming: bool = True
    chat_input_key: str = Field("chatInput", alias="chatInputKey")
    session_key: str = Field("sessionId", alias="sessionKey")
    error_messages: ErrorMessages = Field(default_factory=ErrorMessages, alias="errorMessages")

    model_config = {"populate_by_name": True}

    @property
    def uses_proxy(self) -> bool:
        """True when both a relay URL and an instance id are configured."""
        return bool(self.proxy_url and self.instance_id)
