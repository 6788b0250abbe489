"""
Shared pytest fixtures for flowchat-runtime tests.

Provides sample conversations, adapter configurations and a mock
error callback. Stream and adapter builders live in helpers.py.
"""

from unittest.mock import MagicMock

import pytest

from flowchat_runtime.types import (
    AdapterConfig,
    AttachmentPart,
    ConversationMessage,
    TextPart,
)

from helpers import WEBHOOK_URL


@pytest.fixture
def history():
    """A short conversation ending with a user turn that has an attachment."""
    return [
        ConversationMessage(role="user", content=[TextPart(text="Hi")]),
        ConversationMessage(role="assistant", content=[TextPart(text="Hello! How can I help?")]),
        ConversationMessage(
            role="user",
            content=[
                TextPart(text="What is in "),
                TextPart(text="this picture?"),
                AttachmentPart(
                    type="image",
                    url="https://example.com/uploads/cat.png",
                    filename="cat.png",
                    mime_type="image/png",
                ),
            ],
        ),
    ]


@pytest.fixture
def config():
    """Direct-webhook configuration."""
    return AdapterConfig(
        webhook_url=WEBHOOK_URL,
        session_id="session-1",
        context={"page": "/pricing", "user": {"loggedIn": False}},
    )


@pytest.fixture
def proxy_config():
    """Configuration routed through the WordPress relay."""
    return AdapterConfig.model_validate({
        "webhookUrl": WEBHOOK_URL,
        "sessionId": "session-2",
        "proxyUrl": "https://shop.example.com/wp-json/flowchat/v1/proxy",
        "instanceId": "inst_42",
    })


@pytest.fixture
def on_error():
    """Mock error callback."""
    return MagicMock()
