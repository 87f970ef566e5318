"""Cache storage protocol.

Defines the interface for any backend that maps a resolved upstream URL
to a stored response.

Implementations:
- Flat directory of files (default)
- In-memory dict (tests)
"""

from typing import Protocol, runtime_checkable

from fpl_proxy.entities import CacheEntryEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    def key_for(self, target: str) -> str:
        """Derive the cache key for a resolved upstream URL.

        Args:
            target: The exact upstream URL

        Returns:
            A deterministic, collision-resistant digest of the target
        """
        ...

    def lookup(self, key: str) -> CacheEntryEntity | None:
        """Return the stored entry for a key, fresh or not.

        Args:
            key: The cache key

        Returns:
            The entry if present, None otherwise
        """
        ...

    def store(self, key: str, payload: bytes, content_type: str) -> CacheEntryEntity:
        """Overwrite the entry for a key with a new payload.

        Args:
            key: The cache key
            payload: Raw response bytes
            content_type: MIME type captured at fetch time

        Returns:
            The entry as stored, stamped with the current time

        Raises:
            StorageFailureError: If the backend cannot be written
        """
        ...

    def count_all(self) -> int:
        """Count total entries in the cache."""
        ...

    def health_check(self) -> bool:
        """Check if the backend is usable."""
        ...

    def get_stats(self) -> dict:
        """Get backend statistics (implementation-specific)."""
        ...
