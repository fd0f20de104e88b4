"""Request routing between the browser-facing gateway and the ERP backend."""

import json
import logging
from dataclasses import dataclass

import httpx

from erp_contacts.adapters.upstream_client import UpstreamClient
from erp_contacts.config import normalize_origin, normalize_prefix

_logger = logging.getLogger(__name__)

# Headers that describe a single hop and must not be relayed.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)

CORS_HEADER_PREFIX = "access-control-"


@dataclass(frozen=True)
class ForwardRequest:
    """An inbound request with the gateway prefix already removed."""

    method: str
    path: str
    query: str = ""
    body: bytes = b""
    cookie: str | None = None


@dataclass
class GatewayService:
    """Classify inbound requests and forward them to the ERP backend."""

    upstream_client: UpstreamClient
    backend_origin: str
    backend_api_prefix: str = "/api"
    backend_auth_path: str = "/web/session/authenticate"

    def __post_init__(self) -> None:
        self.backend_origin = normalize_origin(self.backend_origin)
        self.backend_api_prefix = normalize_prefix(self.backend_api_prefix)

    def is_auth_route(self, path: str) -> bool:
        """Return True when the path is the backend's native login route."""
        return path == self.backend_auth_path

    def resolve_target(self, path: str, query: str = "") -> str:
        """Return the upstream URL for a path relative to the gateway prefix."""
        if not path.startswith("/"):
            path = f"/{path}"
        if self.is_auth_route(path):
            target = f"{self.backend_origin}{path}"
        else:
            target = f"{self.backend_origin}{self.backend_api_prefix}{path}"
        if query:
            target = f"{target}?{query}"
        return target

    async def forward(self, request: ForwardRequest) -> httpx.Response:
        """Send the request upstream and return the unread response."""
        target = self.resolve_target(request.path, request.query)
        if self.is_auth_route(request.path):
            _logger.info("Proxying auth %s to %s", request.method, target)
        else:
            _logger.info("Proxying API %s to %s", request.method, target)
        headers = {"Content-Type": "application/json"}
        if request.cookie is not None:
            headers["Cookie"] = request.cookie
        return await self.upstream_client.send(
            request.method,
            target,
            headers=headers,
            content=reserialize_json(request.body),
        )


def reserialize_json(body: bytes) -> bytes | None:
    """Re-encode a JSON body compactly, passing malformed bodies through as-is."""
    if not body:
        return None
    try:
        parsed = json.loads(body)
    except ValueError:
        return body
    return json.dumps(parsed, separators=(",", ":"), ensure_ascii=False).encode()


def relayed_headers(response: httpx.Response) -> list[tuple[str, str]]:
    """Return upstream response headers that may be relayed to the caller.

    CORS headers are owned by the gateway's middleware, never the backend.
    """
    return [
        (name, value)
        for name, value in response.headers.multi_items()
        if name.lower() not in HOP_BY_HOP_HEADERS
        and not name.lower().startswith(CORS_HEADER_PREFIX)
    ]
