"""
Location: python/flowchat_runtime/__init__.py

Summary:
    Main package initialization for flowchat-runtime. Exports the runtime
    adapter, the conversation/result models and the error types.

Usage:
    from flowchat_runtime import ChatRuntimeAdapter, ConversationMessage, TextPart

    # Or import specific modules
    from flowchat_runtime.stream import parse_sse_stream
    from flowchat_runtime.line_buffer import LineBuffer

Version: 0.1.0
"""

import logging

from .client import ChatRuntimeAdapter, create_adapter
from .types import (
    AdapterConfig,
    AttachmentPart,
    ConversationMessage,
    ErrorMessages,
    RunRequest,
    RunResult,
    StreamEvent,
    TextPart,
)
from .errors import (
    ConfigurationError,
    ProtocolError,
    RuntimeAdapterError,
    TransportError,
    describe_error,
)
from .cancellation import CancellationToken, RunCancelled
from .accumulator import TextAccumulator
from .line_buffer import LineBuffer
from .transport import ResponseShape, classify_content_type

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Adapter
    "ChatRuntimeAdapter",
    "create_adapter",
    # Types
    "AdapterConfig",
    "AttachmentPart",
    "ConversationMessage",
    "ErrorMessages",
    "RunRequest",
    "RunResult",
    "StreamEvent",
    "TextPart",
    # Exceptions
    "RuntimeAdapterError",
    "ConfigurationError",
    "TransportError",
    "ProtocolError",
    "describe_error",
    # Streaming building blocks
    "CancellationToken",
    "RunCancelled",
    "TextAccumulator",
    "LineBuffer",
    "ResponseShape",
    "classify_content_type",
]
