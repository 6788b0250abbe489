"""
Tests for flowchat_runtime.types module.

Tests the pydantic models for conversation content, run requests,
stream events, result snapshots and adapter configuration. Verifies
alias handling and the discriminated content-part union.
"""

import pytest
from pydantic import ValidationError

from flowchat_runtime.types import (
    AdapterConfig,
    AttachmentPart,
    ConversationMessage,
    ErrorMessages,
    RunRequest,
    RunResult,
    StreamEvent,
    TextPart,
)


class TestConversationMessage:
    """Tests for ConversationMessage model."""

    def test_parses_mixed_content(self):
        """Test that content parts are discriminated by type."""
        message = ConversationMessage.model_validate({
            "role": "user",
            "content": [
                {"type": "text", "text": "See "},
                {"type": "file", "url": "https://x/doc.pdf", "mimeType": "application/pdf"},
                {"type": "text", "text": "attached"},
            ],
        })
        assert isinstance(message.content[0], TextPart)
        assert isinstance(message.content[1], AttachmentPart)
        assert message.text == "See attached"
        assert message.attachments[0].mime_type == "application/pdf"

    def test_attachment_defaults(self):
        """Test default filename and MIME type."""
        part = AttachmentPart(type="image", url="https://x/a.png")
        assert part.filename == "attachment"
        assert part.mime_type == "application/octet-stream"

    def test_rejects_unknown_role(self):
        """Test that only user and assistant roles are accepted."""
        with pytest.raises(ValidationError):
            ConversationMessage(role="system", content=[])

    def test_rejects_unknown_part_type(self):
        """Test that unknown content part types are rejected."""
        with pytest.raises(ValidationError):
            ConversationMessage.model_validate({
                "role": "user",
                "content": [{"type": "audio", "url": "https://x/a.mp3"}],
            })

    def test_is_immutable(self):
        """Test that a sent message cannot be modified."""
        message = ConversationMessage(role="user", content=[TextPart(text="Hi")])
        with pytest.raises(ValidationError):
            message.role = "assistant"


class TestRunRequest:
    """Tests for RunRequest model."""

    def test_camel_case_alias(self):
        """Test that camelCase JSON works via alias."""
        request = RunRequest.model_validate({
            "webhookUrl": "https://x/webhook",
            "sessionId": "s-1",
        })
        assert request.webhook_url == "https://x/webhook"
        assert request.session_id == "s-1"
        assert request.messages == []
        assert request.instance_id is None

    def test_is_immutable(self):
        """Test that a built request cannot be modified."""
        request = RunRequest(webhook_url="https://x", session_id="s")
        with pytest.raises(ValidationError):
            request.session_id = "other"


class TestStreamEvent:
    """Tests for StreamEvent constructors."""

    def test_constructors(self):
        """Test the three event kinds."""
        assert StreamEvent.text_chunk("hi").kind == "text"
        assert StreamEvent.tools([{"id": "c"}]).tool_calls == [{"id": "c"}]
        assert StreamEvent.done().kind == "done"


class TestRunResult:
    """Tests for RunResult model."""

    def test_of(self):
        """Test building a snapshot from text."""
        result = RunResult.of("Hello")
        assert result.content == [TextPart(text="Hello")]
        assert result.text == "Hello"
        assert result.tool_calls is None

    def test_serialization(self):
        """Test the wire shape of a snapshot."""
        result = RunResult.of("Hello")
        assert result.model_dump(exclude_none=True) == {
            "content": [{"type": "text", "text": "Hello"}],
        }


class TestAdapterConfig:
    """Tests for AdapterConfig model."""

    def test_defaults(self):
        """Test default values."""
        config = AdapterConfig(webhook_url="https://x/webhook", session_id="s")
        assert config.context == {}
        assert config.streaming is True
        assert config.chat_input_key == "chatInput"
        assert config.session_key == "sessionId"
        assert config.error_messages == ErrorMessages()
        assert config.uses_proxy is False

    def test_from_host_json(self):
        """Test validating the camelCase object emitted by the host page."""
        config = AdapterConfig.model_validate({
            "webhookUrl": "https://x/webhook",
            "sessionId": "s",
            "context": {"siteName": "Shop"},
            "proxyUrl": "https://x/wp-json/flowchat/v1/proxy",
            "instanceId": "inst_1",
            "streaming": False,
            "chatInputKey": "message",
            "sessionKey": "chatId",
            "errorMessages": {"rateLimit": "Slow down", "generic": "Oops"},
        })
        assert config.uses_proxy is True
        assert config.streaming is False
        assert config.chat_input_key == "message"
        assert config.error_messages.rate_limit == "Slow down"
        assert config.error_messages.timeout is None

    def test_session_id_required(self):
        """Test that a session id must be supplied."""
        with pytest.raises(ValidationError):
            AdapterConfig(webhook_url="https://x/webhook")
