"""Cache entry domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached upstream response.

    Attributes:
        key: SHA-256 digest of the exact upstream URL
        payload: Raw response bytes as received from upstream
        content_type: MIME type captured at fetch time
        stored_at: Unix timestamp of the last successful upstream fetch
    """

    key: str
    payload: bytes
    content_type: str
    stored_at: float

    def age(self, now: float) -> float:
        """Seconds elapsed since the entry was stored."""
        return now - self.stored_at

    def is_fresh(self, now: float, ttl: int) -> bool:
        """Check whether the entry may still be served directly.

        Args:
            now: Current Unix timestamp
            ttl: Freshness window in seconds

        Returns:
            True if the entry is younger than the freshness window
        """
        return self.age(now) < ttl
