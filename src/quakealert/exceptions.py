"""Exceptions raised by the QuakeAlert network clients."""

from typing import Optional


class QuakeAlertError(Exception):
    """Base exception for QuakeAlert errors."""


class FeedError(QuakeAlertError):
    """The event feed was unreachable or returned an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BroadcastError(QuakeAlertError):
    """A push broadcast was not acknowledged by the broadcast endpoint."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class SmsGatewayError(QuakeAlertError):
    """The SMS gateway rejected a request or could not be reached."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"SMS gateway {operation} failed: {message}")
        self.operation = operation
