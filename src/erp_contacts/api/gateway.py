"""Catch-all gateway route relaying requests to the ERP backend."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

import httpx
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response, StreamingResponse
from starlette.background import BackgroundTask

from erp_contacts.config import normalize_prefix
from erp_contacts.services.gateway import ForwardRequest, relayed_headers

if TYPE_CHECKING:
    from erp_contacts.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gateway"])

PROXIED_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


@router.api_route("/{path:path}", methods=PROXIED_METHODS)
async def proxy(path: str, request: Request) -> Response:
    """Forward the request upstream and stream the answer back unchanged."""
    container: AppContainer = request.app.state.container
    forward_request = ForwardRequest(
        method=request.method,
        path=_remaining_path(request, container.settings.gateway_prefix, path),
        query=request.url.query,
        body=await request.body(),
        cookie=request.headers.get("cookie"),
    )
    try:
        upstream = await container.gateway_service.forward(forward_request)
    except httpx.TransportError as exc:
        logger.warning("Upstream unreachable for %s /%s: %s", request.method, path, exc)
        return JSONResponse(
            {"error": "Upstream unreachable"},
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    response = StreamingResponse(
        _relay_body(upstream),
        status_code=upstream.status_code,
        background=BackgroundTask(upstream.aclose),
    )
    for name, value in relayed_headers(upstream):
        response.headers.append(name, value)
    return response


def _remaining_path(request: Request, gateway_prefix: str, path: str) -> str:
    """Return the still percent-encoded path after the gateway prefix."""
    raw_path = request.scope.get("raw_path")
    if not raw_path:
        return f"/{path}"
    remaining = raw_path.decode("latin-1").split("?", 1)[0]
    prefix = normalize_prefix(gateway_prefix)
    if prefix and remaining.startswith(prefix):
        remaining = remaining[len(prefix) :]
    return remaining or "/"


async def _relay_body(upstream: httpx.Response) -> AsyncIterator[bytes]:
    # Responses built in memory (mock transports) arrive already read.
    if upstream.is_stream_consumed:
        yield upstream.content
        return
    async for chunk in upstream.aiter_raw():
        yield chunk
