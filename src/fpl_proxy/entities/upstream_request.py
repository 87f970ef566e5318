"""Upstream request and response entities."""

from dataclasses import dataclass
from enum import Enum


class RequestKind(str, Enum):
    """Kind of passthrough; selects allow-list rule, header profile and timeout."""

    API = "api"
    IMAGE = "image"


@dataclass(frozen=True)
class UpstreamRequestEntity:
    """A client request resolved against the allow-list.

    Attributes:
        kind: API endpoint or image passthrough
        identifier: The raw client-supplied endpoint name or URL
        target: Fully resolved upstream URL (empty when rejected)
        allowed: Whether the allow-list check passed
    """

    kind: RequestKind
    identifier: str
    target: str
    allowed: bool


@dataclass(frozen=True)
class UpstreamResponseEntity:
    """A successful upstream fetch."""

    status_code: int
    content: bytes
    content_type: str | None
