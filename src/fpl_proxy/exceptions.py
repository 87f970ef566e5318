"""Domain errors raised by the proxy layers.

Handlers translate these into HTTP responses:

- InvalidRequestError -> 400
- UpstreamFailureError -> 502
- StorageFailureError -> never surfaced, the service degrades to pass-through
"""


class ProxyError(Exception):
    """Base class for all proxy errors."""


class InvalidRequestError(ProxyError):
    """The identifier is missing or not on the allow-list."""


class UpstreamFailureError(ProxyError):
    """The upstream fetch failed: network error, non-200 status or empty body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StorageFailureError(ProxyError):
    """The cache could not be written."""
