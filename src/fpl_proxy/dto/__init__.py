"""Data Transfer Objects for API contracts.

These Pydantic models define the JSON parts of the external API contract.
Proxied bodies are raw bytes and bypass them entirely.
"""

from .responses import CacheStatsResponse, ErrorResponse, HealthCheckResponse

__all__ = [
    "ErrorResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
