"""Dependency container wiring for the gateway and the dashboard client."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from erp_contacts.adapters.record_client import HttpxRecordClient, RecordClient
from erp_contacts.adapters.upstream_client import HttpxUpstreamClient
from erp_contacts.config import Settings
from erp_contacts.services.dashboard import DashboardController
from erp_contacts.services.dialogs import DialogStateMachine
from erp_contacts.services.gateway import GatewayService


@dataclass
class AppContainer:
    """Holds the gateway's dependencies."""

    settings: Settings
    gateway_service: GatewayService
    close_resources: Callable[[], Awaitable[None]]


@dataclass
class DashboardContainer:
    """Holds one dashboard client instance and its state machines."""

    settings: Settings
    record_client: RecordClient
    controller: DashboardController
    dialogs: DialogStateMachine
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default gateway container."""
    resolved_settings = settings or Settings()
    upstream_client = HttpxUpstreamClient.create(
        resolved_settings.upstream_timeout_seconds
    )
    gateway_service = GatewayService(
        upstream_client=upstream_client,
        backend_origin=resolved_settings.backend_origin,
        backend_api_prefix=resolved_settings.backend_api_prefix,
        backend_auth_path=resolved_settings.backend_auth_path,
    )

    async def close_resources() -> None:
        await upstream_client.close()

    return AppContainer(
        settings=resolved_settings,
        gateway_service=gateway_service,
        close_resources=close_resources,
    )


def build_dashboard(settings: Settings | None = None) -> DashboardContainer:
    """Create an independent dashboard client talking to the gateway."""
    resolved_settings = settings or Settings()
    record_client = HttpxRecordClient.create(
        base_url=resolved_settings.gateway_url,
        resource=resolved_settings.record_resource,
        database=resolved_settings.erp_database,
        auth_path=resolved_settings.backend_auth_path,
    )
    controller = DashboardController(client=record_client)
    dialogs = DialogStateMachine(controller=controller)

    async def close_resources() -> None:
        await record_client.close()

    return DashboardContainer(
        settings=resolved_settings,
        record_client=record_client,
        controller=controller,
        dialogs=dialogs,
        close_resources=close_resources,
    )
