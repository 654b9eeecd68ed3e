"""Network error kinds raised by the TMDB client.

The repository lets these through unchanged; the bot layer turns them into
user-facing text with `describe_error` and `recovery_hint`.
"""

from __future__ import annotations


class NetworkError(Exception):
    """Base class for every failure the fetch client can surface."""

    def describe(self) -> str:
        return str(self) or self.__class__.__name__


class InvalidURL(NetworkError):
    def describe(self) -> str:
        return "Invalid URL"


class InvalidResponse(NetworkError):
    def describe(self) -> str:
        detail = str(self)
        return f"Invalid response: {detail}" if detail else "Invalid response"


class HttpStatusError(NetworkError):
    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HttpStatusError):
            return NotImplemented
        return self.status_code == other.status_code

    def __hash__(self) -> int:
        return hash(("http", self.status_code))

    def describe(self) -> str:
        return f"HTTP error: {self.status_code}"


class DecodingFailure(NetworkError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def describe(self) -> str:
        return f"Decoding error: {self.message}"


def describe_error(exc: BaseException) -> str:
    if isinstance(exc, NetworkError):
        return exc.describe()
    return str(exc) or exc.__class__.__name__


def recovery_hint(exc: BaseException) -> str:
    """Short advice shown under an error message."""
    if isinstance(exc, HttpStatusError):
        if exc.status_code == 401:
            return "Check the API configuration."
        return "Try again later."
    if isinstance(exc, NetworkError):
        return "Try again later or refresh."
    return "Try again."


__all__ = [
    "NetworkError",
    "InvalidURL",
    "InvalidResponse",
    "HttpStatusError",
    "DecodingFailure",
    "describe_error",
    "recovery_hint",
]
