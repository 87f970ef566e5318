"""Upstream fetcher protocol."""

from typing import Protocol, runtime_checkable

from fpl_proxy.entities import UpstreamRequestEntity, UpstreamResponseEntity


@runtime_checkable
class UpstreamFetcher(Protocol):
    """Protocol for performing the outbound GET against an allowed target."""

    async def fetch(self, request: UpstreamRequestEntity) -> UpstreamResponseEntity:
        """Fetch the request's target.

        Args:
            request: An allowed upstream request

        Returns:
            The upstream response (always status 200 with a non-empty body)

        Raises:
            UpstreamFailureError: On network error, timeout, non-200 or empty body
        """
        ...

    async def close(self) -> None:
        """Release any pooled connections."""
        ...
