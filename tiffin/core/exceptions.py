"""Custom exceptions for the Tiffin client core.

Every exception carries a ``category`` the UI can switch on to pick a message
("try again" for timeouts, "server unreachable" for connection failures).
"""
from __future__ import annotations


class TiffinException(Exception):
    """Base exception for all Tiffin client errors."""

    category = "error"

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ConfigurationException(TiffinException):
    """Configuration errors."""

    category = "configuration"


# ============== VALIDATION (raised before any network call) ==============


class ValidationException(TiffinException):
    """Checkout precondition failed."""

    category = "domain_error"


class EmptyOrderException(ValidationException):
    """Nothing to order."""

    def __init__(self, message: str = "Please add items to your cart first") -> None:
        super().__init__(message)


class UnauthenticatedException(ValidationException):
    """No logged-in customer."""

    def __init__(self, message: str = "Please log in to place an order") -> None:
        super().__init__(message)


class MissingAddressException(ValidationException):
    """Delivery address is required but blank."""

    def __init__(self, message: str = "Please enter delivery address") -> None:
        super().__init__(message)


# ============== TRANSPORT ==============


class TransportException(TiffinException):
    """Request did not produce a usable HTTP response."""

    category = "transport"


class ApiTimeoutException(TransportException):
    """Request exceeded its time budget."""

    category = "timeout"

    def __init__(self, message: str = "Request timeout - Server not responding") -> None:
        super().__init__(message)


class NetworkUnreachableException(TransportException):
    """Connection to the server could not be established."""

    category = "network_unreachable"

    def __init__(
        self,
        message: str = "Cannot connect to server. Please check your internet connection.",
    ) -> None:
        super().__init__(message)


class HttpStatusException(TransportException):
    """Server answered with a non-2xx status."""

    category = "http_error"

    def __init__(self, status: int) -> None:
        super().__init__(f"HTTP error! status: {status}")
        self.status = status


# ============== SERVER-REPORTED ==============


class ServerRejectedException(TiffinException):
    """Envelope came back with ``success: false``; message is shown verbatim."""

    category = "server_error"


class InvalidResponseException(TiffinException):
    """Response body is not the JSON envelope the client expects."""

    category = "server_error"
