import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ALLOWED_ENDPOINTS = (
    "bootstrap-static",
    "fixtures",
    "event",
    "entry",
    "dream-team",
)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Cache
    cache_dir: str = os.getenv("CACHE_DIR", "./img-cache")
    cache_ttl: int = int(os.getenv("CACHE_TTL", "86400"))  # 24 hours
    # Falls back to cache_ttl when unset
    api_cache_ttl: int | None = (
        int(os.environ["API_CACHE_TTL"]) if os.getenv("API_CACHE_TTL") else None
    )

    # Upstream
    api_base_url: str = os.getenv("FPL_API_BASE_URL", "https://fantasy.premierleague.com/api/")
    image_host: str = os.getenv("IMAGE_HOST", "resources.premierleague.com")
    allowed_endpoints: tuple[str, ...] = field(
        default_factory=lambda: _split_csv(os.getenv("ALLOWED_ENDPOINTS", ""))
        or DEFAULT_ALLOWED_ENDPOINTS
    )
    strict_endpoint_matching: bool = (
        os.getenv("STRICT_ENDPOINT_MATCHING", "false").lower() == "true"
    )
    api_timeout: float = float(os.getenv("API_TIMEOUT", "30"))
    image_timeout: float = float(os.getenv("IMAGE_TIMEOUT", "15"))
    upstream_referer: str = os.getenv("UPSTREAM_REFERER", "https://fantasy.premierleague.com/")
    upstream_user_agent: str = os.getenv("UPSTREAM_USER_AGENT", DEFAULT_USER_AGENT)

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def effective_api_cache_ttl(self) -> int:
        """Freshness window applied to API endpoint responses."""
        return self.api_cache_ttl if self.api_cache_ttl is not None else self.cache_ttl

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if self.api_cache_ttl is not None and self.api_cache_ttl <= 0:
            raise ValueError("API_CACHE_TTL must be a positive number of seconds")

        if self.api_timeout <= 0 or self.image_timeout <= 0:
            raise ValueError("API_TIMEOUT and IMAGE_TIMEOUT must be positive")

        if not self.image_host:
            raise ValueError("IMAGE_HOST must not be empty")

        if not self.allowed_endpoints:
            raise ValueError("ALLOWED_ENDPOINTS must list at least one endpoint prefix")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
