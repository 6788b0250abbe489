"""
Location: python/flowchat_runtime/errors.py

Summary:
    Exception types raised by the runtime adapter, and the mapping from
    an exception to the wording the hosting UI shows the end user.

Usage:
    client.py raises these and hands them to the on_error callback.
    Hosts read ``error.user_message`` for display and ``str(error)`` for
    the raw diagnostic text (HTTP status and body, stream error text).
"""

from typing import Optional

from .types import ErrorMessages


DEFAULT_MESSAGES = {
    "connection": "Unable to connect. Please check your connection and try again.",
    "timeout": "Request timed out. Please try again.",
    "rate_limit": "Rate limit exceeded. Please wait a moment before trying again.",
    "generic": "An error occurred. Please try again.",
}


class RuntimeAdapterError(Exception):
    """Base class for failures of a run."""

    user_message: Optional[str] = None


class ConfigurationError(RuntimeAdapterError):
    """Raised when the adapter has no usable target URL."""
    pass


class TransportError(RuntimeAdapterError):
    """
    The HTTP exchange could not be completed (DNS, connect, TLS, timeout,
    or the connection dropping mid-body).
    """

    def __init__(self, message: str, *, timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class ProtocolError(RuntimeAdapterError):
    """
    The endpoint answered but the answer is a failure: HTTP status >= 400,
    an explicit ``error`` field in the stream, or an undecodable JSON body.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def describe_error(error: BaseException, messages: Optional[ErrorMessages] = None) -> str:
    """
    Pick the end-user wording for a failed run.

    Args:
        error: The exception that ended the run
        messages: Optional host overrides

    Returns:
        Rate-limit, timeout or connection wording when the error is of that
        kind; otherwise the generic override, or the raw message
    """
    messages = messages or ErrorMessages()

    if isinstance(error, ProtocolError) and error.status_code == 429:
        return messages.rate_limit or DEFAULT_MESSAGES["rate_limit"]

    if isinstance(error, TransportError):
        if error.timeout:
            return messages.timeout or DEFAULT_MESSAGES["timeout"]
        return messages.connection or DEFAULT_MESSAGES["connection"]

    return messages.generic or str(error) or DEFAULT_MESSAGES["generic"]
