"""
Error Handling Module
---------------------
Closed error taxonomy for the DeepL client.
Every failure is raised to the caller on first occurrence; nothing is retried.
"""

from enum import Enum, auto
from typing import Dict, Optional
import logging


class ErrorKind(Enum):
    """The four kinds of failure a client call can end with."""
    AUTHORIZATION = auto()    # 401/403, API key refused
    SERVER = auto()           # Any other non-success status
    DESERIALIZATION = auto()  # Success status, unexpected body
    TRANSPORT = auto()        # Request never completed


class DeepLError(Exception):
    """Base class of all client errors. Match on ``kind`` or the subclass."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.kind.name}: {self.message})"


class AuthorizationError(DeepLError):
    """The DeepL server refused the API key."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self):
        super().__init__("Authorization failed, is your API key correct?")


class ServerError(DeepLError):
    """
    The server could not process the request.

    ``message`` holds the vendor's error message when the body carried one,
    otherwise the HTTP status line.
    """

    kind = ErrorKind.SERVER

    def __str__(self) -> str:
        return f"An error occurred while communicating with the DeepL server: '{self.message}'."


class DeserializationError(DeepLError):
    """A success response did not have the expected JSON shape."""

    kind = ErrorKind.DESERIALIZATION

    def __init__(self, detail: Optional[str] = None):
        super().__init__("An error occurred while deserializing the response data.")
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class TransportError(DeepLError):
    """The request failed at the network layer (DNS, connect, timeout, TLS)."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, original: Exception):
        super().__init__(f"Network error: {original}")
        self.original = original


# Log level per kind
LOG_LEVELS: Dict[ErrorKind, int] = {
    ErrorKind.AUTHORIZATION: logging.WARNING,
    ErrorKind.SERVER: logging.ERROR,
    ErrorKind.DESERIALIZATION: logging.ERROR,
    ErrorKind.TRANSPORT: logging.ERROR,
}


def log_level_for(error: DeepLError) -> int:
    """Get the logging level an error should be reported with."""
    return LOG_LEVELS.get(error.kind, logging.ERROR)


def user_message(error: DeepLError) -> str:
    """Generate a short user-facing message for an error."""
    messages = {
        ErrorKind.AUTHORIZATION: "Authorization failed. Check your DeepL API key and tier.",
        ErrorKind.SERVER: f"DeepL rejected the request: {error.message}",
        ErrorKind.DESERIALIZATION: "DeepL sent a response that could not be read.",
        ErrorKind.TRANSPORT: "Could not reach DeepL. Please check your internet connection.",
    }

    return messages.get(error.kind, "An error occurred.")
