"""Errors raised at the remote object store boundary."""

from __future__ import annotations


class MapwizeAPIError(RuntimeError):
    """Base class for failures talking to the Mapwize API."""


class TransportError(MapwizeAPIError):
    """Raised when the API could not be reached (network, DNS, TLS, timeout)."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class RemoteError(MapwizeAPIError):
    """Raised when the API answers with a non-success status code."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        body: object = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.url = url


class NotFoundError(RemoteError):
    """Raised when an update or delete references an unknown identifier."""


class UnexpectedPayloadError(MapwizeAPIError):
    """Raised when a response body does not have the expected shape."""
