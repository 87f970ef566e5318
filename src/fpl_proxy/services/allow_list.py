"""Allow-list gate.

Decides, before any network or cache access, whether a client-supplied
identifier may be resolved to an upstream URL.

Rules:
- Images: the URL must contain the configured host substring. Any path or
  query on that host passes.
- API endpoints: the name must start with one of the configured prefixes.
  Any suffix (IDs, trailing path segments, query strings) passes, so
  ``event/5/live/`` is accepted under ``event``.

With ``strict_endpoint_matching`` enabled, a prefix must be followed by
``/``, ``?`` or the end of the name, which stops ``events-x`` from passing
as ``event``.
"""

from fpl_proxy.config import settings
from fpl_proxy.entities import RequestKind, UpstreamRequestEntity

_STRICT_BOUNDARIES = ("/", "?")


class AllowListGate:
    """Resolves identifiers to upstream requests, enforcing the allow-list."""

    def __init__(
        self,
        image_host: str | None = None,
        allowed_endpoints: tuple[str, ...] | list[str] | None = None,
        api_base_url: str | None = None,
        strict_endpoint_matching: bool | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            image_host: Required host substring for image URLs. Defaults to settings.
            allowed_endpoints: Recognized endpoint-name prefixes. Defaults to settings.
            api_base_url: Base URL endpoint names are appended to. Defaults to settings.
            strict_endpoint_matching: Require a path boundary after the prefix.
                Defaults to settings.
        """
        self._image_host = image_host or settings.image_host
        self._allowed_endpoints = tuple(
            settings.allowed_endpoints if allowed_endpoints is None else allowed_endpoints
        )
        base_url = api_base_url or settings.api_base_url
        self._api_base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._strict = (
            settings.strict_endpoint_matching
            if strict_endpoint_matching is None
            else strict_endpoint_matching
        )

    @classmethod
    def create(
        cls,
        image_host: str | None = None,
        allowed_endpoints: tuple[str, ...] | list[str] | None = None,
        api_base_url: str | None = None,
        strict_endpoint_matching: bool | None = None,
    ) -> "AllowListGate":
        """Factory method to create AllowListGate with defaults from settings.

        An explicitly empty ``allowed_endpoints`` rejects every endpoint name.
        """
        return cls(
            image_host=image_host,
            allowed_endpoints=allowed_endpoints,
            api_base_url=api_base_url,
            strict_endpoint_matching=strict_endpoint_matching,
        )

    @property
    def allowed_endpoints(self) -> tuple[str, ...]:
        return self._allowed_endpoints

    def check_image(self, url: str | None) -> UpstreamRequestEntity:
        """Check an image URL against the host substring."""
        url = url or ""
        allowed = bool(url) and self._image_host in url
        return UpstreamRequestEntity(
            kind=RequestKind.IMAGE,
            identifier=url,
            target=url if allowed else "",
            allowed=allowed,
        )

    def check_endpoint(self, name: str | None) -> UpstreamRequestEntity:
        """Check an endpoint name against the recognized prefixes."""
        name = name or ""
        allowed = bool(name) and any(self._matches(name, prefix) for prefix in self._allowed_endpoints)
        return UpstreamRequestEntity(
            kind=RequestKind.API,
            identifier=name,
            target=self._api_base_url + name if allowed else "",
            allowed=allowed,
        )

    def check(self, kind: RequestKind, identifier: str | None) -> UpstreamRequestEntity:
        if kind is RequestKind.IMAGE:
            return self.check_image(identifier)
        return self.check_endpoint(identifier)

    def _matches(self, name: str, prefix: str) -> bool:
        if not name.startswith(prefix):
            return False
        if not self._strict:
            return True
        rest = name[len(prefix):]
        return rest == "" or rest.startswith(_STRICT_BOUNDARIES)
