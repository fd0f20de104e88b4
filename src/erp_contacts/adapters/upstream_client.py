"""HTTP client used by the gateway to reach the ERP backend."""

from dataclasses import dataclass
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Protocol

import httpx


class UpstreamClient(Protocol):
    """Interface for sending a request to the ERP backend."""

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: bytes | None,
    ) -> httpx.Response:
        """Send a request and return the response with its body still unread."""

    async def close(self) -> None:
        """Release pooled connections."""


def refusing_cookie_jar() -> CookieJar:
    """Return a cookie jar whose policy accepts no domain at all."""
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


@dataclass
class HttpxUpstreamClient(UpstreamClient):
    """Upstream client implemented with httpx.

    The client is shared by every browser connection, so it must never keep
    a session cookie: each request carries its caller's Cookie header only.
    """

    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpxUpstreamClient":
        """Create an upstream client with a managed, cookieless httpx session."""
        options: dict[str, object] = {"cookies": refusing_cookie_jar()}
        if timeout_seconds is not None:
            options["timeout"] = timeout_seconds
        if transport is not None:
            options["transport"] = transport
        return cls(http_client=httpx.AsyncClient(**options))

    async def send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        content: bytes | None,
    ) -> httpx.Response:
        """Send a request upstream without buffering the response body."""
        # Built directly so the shared client's cookie jar is never merged in.
        request = httpx.Request(method, url, headers=headers, content=content)
        return await self.http_client.send(request, stream=True)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
