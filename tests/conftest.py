"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

import httpx
import pytest

from erp_contacts.adapters.record_client import RecordClient
from erp_contacts.adapters.upstream_client import HttpxUpstreamClient
from erp_contacts.config import Settings
from erp_contacts.containers import AppContainer
from erp_contacts.domain.errors import (
    AuthenticationError,
    RecordClientError,
    RemoteError,
)
from erp_contacts.domain.records import DraftForm, Record, Session
from erp_contacts.services.dashboard import DashboardController
from erp_contacts.services.dialogs import DialogStateMachine
from erp_contacts.services.gateway import GatewayService

UpstreamHandler = Callable[[httpx.Request], httpx.Response]


@dataclass
class FakeRecordClient(RecordClient):
    """In-memory record client with failure injection for tests."""

    records: list[Record] = field(default_factory=list)
    users: dict[str, tuple[str, Session]] = field(default_factory=dict)
    next_id: int = 100
    failures: dict[str, RecordClientError] = field(default_factory=dict)
    gate: asyncio.Event | None = None
    calls: list[str] = field(default_factory=list)

    async def authenticate(self, login: str, password: str) -> Session:
        await self._enter("authenticate")
        expected = self.users.get(login)
        if expected is None or expected[0] != password:
            raise AuthenticationError("Access Denied", status_code=200)
        return expected[1]

    async def list_records(
        self, params: dict[str, str] | None = None
    ) -> list[Record]:
        await self._enter("list")
        return list(self.records)

    async def create_record(self, draft: DraftForm) -> Record:
        await self._enter("create")
        payload = draft.to_payload()
        payload.pop("name")
        created = Record(id=self.next_id, name=draft.name, **payload)
        self.next_id += 1
        self.records.append(created)
        return created

    async def update_record(self, record_id: int, draft: DraftForm) -> Record:
        await self._enter("update")
        payload = draft.to_payload()
        payload.pop("name")
        updated = Record(id=record_id, name=draft.name, **payload)
        for index, record in enumerate(self.records):
            if record.id == record_id:
                self.records[index] = updated
                return updated
        raise RemoteError("Record not found", status_code=404)

    async def delete_record(self, record_id: int) -> None:
        await self._enter("delete")
        before = len(self.records)
        self.records = [record for record in self.records if record.id != record_id]
        if len(self.records) == before:
            raise RemoteError("Record not found", status_code=404)

    async def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.gate is not None:
            await self.gate.wait()
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure


def make_gateway_container(
    settings: Settings, handler: UpstreamHandler
) -> AppContainer:
    """Build a gateway container whose upstream is a mock transport."""
    upstream_client = HttpxUpstreamClient.create(
        transport=httpx.MockTransport(handler)
    )
    gateway_service = GatewayService(
        upstream_client=upstream_client,
        backend_origin=settings.backend_origin,
        backend_api_prefix=settings.backend_api_prefix,
        backend_auth_path=settings.backend_auth_path,
    )

    async def close_resources() -> None:
        await upstream_client.close()

    return AppContainer(
        settings=settings,
        gateway_service=gateway_service,
        close_resources=close_resources,
    )


SAMPLE_RECORDS = [
    Record(id=1, name="Azure Interior", email="azure@example.com", phone="+1 555 0101"),
    Record(id=7, name="Deco Addict", email="deco@example.com", phone=None),
    Record(id=42, name="Gemini Furniture", email=None, phone="+1 555 0142"),
]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        backend_origin="http://erp.test:8069",
        backend_api_prefix="/api",
        gateway_prefix="/api",
        frontend_origin="http://localhost:5173",
        gateway_url="http://gateway.test/api",
    )


@pytest.fixture
def upstream_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def container(
    settings: Settings, upstream_requests: list[httpx.Request]
) -> AppContainer:
    def handler(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        return httpx.Response(200, json={"data": []})

    return make_gateway_container(settings, handler)


@pytest.fixture
def record_client() -> FakeRecordClient:
    return FakeRecordClient(
        records=list(SAMPLE_RECORDS),
        users={
            "a@x.com": (
                "pw",
                Session(subject_id=7, username="a@x.com", display_name="A"),
            )
        },
    )


@pytest.fixture
def controller(record_client: FakeRecordClient) -> DashboardController:
    return DashboardController(client=record_client)


@pytest.fixture
def logged_in_controller(controller: DashboardController) -> DashboardController:
    assert asyncio.run(controller.login("a@x.com", "pw"))
    return controller


@pytest.fixture
def dialogs(logged_in_controller: DashboardController) -> DialogStateMachine:
    return DialogStateMachine(controller=logged_in_controller)
