"""Exceptions raised by the REST client."""

from __future__ import annotations

import httpx

# Connection level failures (DNS, refused, reset, TLS, timeouts) are raised
# by httpx as-is; the alias lets callers catch them without importing httpx.
TransportError = httpx.TransportError


class MoodleRestError(Exception):
    """Base class for errors produced by the client itself."""

    pass


class InvalidArgumentError(MoodleRestError, ValueError):
    """Raised before any I/O when a required argument is missing or invalid."""

    pass


class HttpError(MoodleRestError):
    """The server answered with a status code of 400 or above.

    The message is the response body, or ``"<status> - <reason>"`` when the
    body is empty.
    """

    def __init__(self, status_code: int, reason: str, body: str) -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(body or f"{status_code} - {reason}")


class ParseError(MoodleRestError):
    """The response body could not be decoded as JSON."""

    def __init__(self, message: str, body: str) -> None:
        self.body = body
        super().__init__(message)
