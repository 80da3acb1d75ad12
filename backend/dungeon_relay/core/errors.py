"""Errors raised by the chat proxy."""


class ChatProxyError(Exception):
    """Base class for failures surfaced to the caller as HTTP 500."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ChatProxyError):
    """The selected provider's credential is not configured."""


class UpstreamError(ChatProxyError):
    """The AI provider failed or answered with an unexpected body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
