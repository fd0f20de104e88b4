"""Record client for the gateway's data and login surface."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from erp_contacts.domain.errors import (
    AuthenticationError,
    ConnectivityError,
    RemoteError,
    ShapeError,
)
from erp_contacts.domain.records import (
    DraftForm,
    Record,
    Session,
    record_from_payload,
)

_logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Operation failed."
LOGIN_FAILURE = "Login or password is incorrect."


class RecordClient(Protocol):
    """Interface for authenticating and managing records through the gateway."""

    async def authenticate(self, login: str, password: str) -> Session:
        """Log in and return the authenticated session."""

    async def list_records(
        self, params: dict[str, str] | None = None
    ) -> list[Record]:
        """Return all records visible to the session."""

    async def create_record(self, draft: DraftForm) -> Record:
        """Create a record and return the server's copy."""

    async def update_record(self, record_id: int, draft: DraftForm) -> Record:
        """Update a record and return the server's copy."""

    async def delete_record(self, record_id: int) -> None:
        """Delete a record."""


@dataclass
class HttpxRecordClient(RecordClient):
    """Record client implemented with httpx.

    The session cookie set by the login response lives in the httpx cookie
    jar and is sent with every later call, the way a browser would.
    """

    base_url: str
    resource: str
    database: str
    http_client: httpx.AsyncClient
    auth_path: str = "/web/session/authenticate"

    @classmethod
    def create(
        cls,
        base_url: str,
        resource: str,
        database: str,
        auth_path: str = "/web/session/authenticate",
    ) -> "HttpxRecordClient":
        """Create a record client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            resource=resource.strip("/"),
            database=database,
            http_client=httpx.AsyncClient(),
            auth_path=auth_path,
        )

    async def authenticate(self, login: str, password: str) -> Session:
        """Call the ERP JSON-RPC login through the gateway."""
        payload = {
            "jsonrpc": "2.0",
            "method": "call",
            "params": {"db": self.database, "login": login, "password": password},
        }
        response = await self._request("POST", self.auth_path, json=payload)
        body = _json_or_none(response)
        result = body.get("result") if isinstance(body, dict) else None
        uid = result.get("uid") if isinstance(result, dict) else None
        valid_uid = isinstance(uid, int) and not isinstance(uid, bool)
        if not response.is_success or not valid_uid:
            message = _error_message(body) or LOGIN_FAILURE
            raise AuthenticationError(message, status_code=response.status_code)
        username = str(result.get("username") or login)
        return Session(
            subject_id=uid,
            username=username,
            display_name=str(result.get("name") or username),
        )

    async def list_records(
        self, params: dict[str, str] | None = None
    ) -> list[Record]:
        """Fetch the full record list."""
        response = await self._request("GET", f"/{self.resource}", params=params)
        rows = _data_payload(response)
        if not isinstance(rows, list):
            raise ShapeError("Expected a 'data' array in the list response.")
        return [_parse_record(row) for row in rows]

    async def create_record(self, draft: DraftForm) -> Record:
        """Create a record from a draft."""
        response = await self._request(
            "POST", f"/{self.resource}", json=draft.to_payload()
        )
        return _parse_record(_data_payload(response))

    async def update_record(self, record_id: int, draft: DraftForm) -> Record:
        """Replace the editable fields of a record."""
        response = await self._request(
            "PUT",
            f"/{self.resource}/{record_id}",
            json=draft.to_payload(include_cleared=True),
        )
        return _parse_record(_data_payload(response))

    async def delete_record(self, record_id: int) -> None:
        """Delete a record by id."""
        response = await self._request("DELETE", f"/{self.resource}/{record_id}")
        body = _json_or_none(response)
        failed = isinstance(body, dict) and body.get("error") and "data" not in body
        if not response.is_success or failed:
            raise RemoteError(
                _error_message(body) or GENERIC_FAILURE,
                status_code=response.status_code,
            )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, object] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            return await self.http_client.request(
                method, url, json=json, params=params
            )
        except httpx.TransportError as exc:
            _logger.warning("Gateway unreachable for %s %s: %s", method, url, exc)
            raise ConnectivityError("Cannot reach server.") from exc


def _json_or_none(response: httpx.Response) -> object | None:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _data_payload(response: httpx.Response) -> object:
    """Return the `data` member of a successful envelope."""
    body = _json_or_none(response)
    if not response.is_success:
        raise RemoteError(
            _error_message(body) or GENERIC_FAILURE,
            status_code=response.status_code,
        )
    if not isinstance(body, dict):
        raise ShapeError("Response body is not a JSON object.")
    if "data" not in body:
        if body.get("error"):
            raise RemoteError(
                _error_message(body) or GENERIC_FAILURE,
                status_code=response.status_code,
            )
        raise ShapeError("Response has no 'data' member.")
    return body["data"]


def _parse_record(row: object) -> Record:
    if not isinstance(row, dict):
        raise ShapeError("Expected a record object.")
    try:
        return record_from_payload(row)
    except ValueError as exc:
        raise ShapeError(str(exc)) from exc


def _error_message(body: object) -> str | None:
    """Extract a human-readable message from an error envelope."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, str) and error.strip():
        return error
    if isinstance(error, dict):
        data = error.get("data")
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        if error.get("message"):
            return str(error["message"])
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message
    return None
