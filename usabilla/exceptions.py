"""
Exceptions raised by the Usabilla API client.
"""

from typing import Optional


class UsabillaError(Exception):
    """Base exception for Usabilla client errors."""

    pass


class SigningError(UsabillaError):
    """Raised when a hashing or HMAC primitive fails while signing a request."""

    pass


class UsabillaConnectionError(UsabillaError):
    """Raised when the API host cannot be reached or the request times out."""

    def __init__(self, message: str = "Usabilla API is not reachable"):
        super().__init__(message)


class UsabillaRequestError(UsabillaError):
    """
    Raised when the API answers with anything other than HTTP 200.

    The raw response body is kept as the error payload; the client cannot
    tell a rejected signature apart from any other server-side failure.
    """

    def __init__(self, status_code: int, body: str, url: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Request failed with HTTP {status_code}: {body}")
