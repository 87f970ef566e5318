"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """JSON error body for API endpoint passthrough failures."""

    error: str = Field(..., description="Short human-readable error message")


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    backend: str = Field(..., description="Cache backend: 'file' or 'memory'")
    total_entries: int = Field(..., description="Total number of cached entries", ge=0)
    total_size_bytes: int = Field(..., description="Total size of cached payloads", ge=0)
    cache_dir: str | None = Field(None, description="Cache directory (file backend only)")
    image_ttl: int = Field(..., description="Freshness window for images in seconds", ge=1)
    api_ttl: int = Field(..., description="Freshness window for API responses in seconds", ge=1)
    allowed_endpoints: list[str] = Field(
        default_factory=list,
        description="Recognized endpoint-name prefixes",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache directory is writable")
