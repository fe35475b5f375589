from __future__ import annotations


class NotificationError(Exception):
    """Base class for every error raised while notifying search engines."""


class ValidationError(NotificationError, ValueError):
    """Raised before any network call when a request is malformed."""


class TransportError(NotificationError):
    def __init__(self, message: str, endpoint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint


class RemoteRejectionError(NotificationError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Remote rejected request with HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class AuthenticationError(NotificationError):
    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body
