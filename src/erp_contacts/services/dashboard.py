"""Session and record-list state for the contacts dashboard."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from erp_contacts.adapters.record_client import RecordClient
from erp_contacts.domain.errors import ConnectivityError, RecordClientError
from erp_contacts.domain.records import DraftForm, Record, Session

_logger = logging.getLogger(__name__)

CONNECTIVITY_MESSAGE = "Cannot reach server. Make sure the gateway is running."
LIST_FAILURE_MESSAGE = "Failed to load records."

SEARCH_FIELDS = ("name", "email", "phone")


class AuthState(Enum):
    """Authentication lifecycle of the dashboard."""

    LOGGED_OUT = "LOGGED_OUT"
    AUTHENTICATING = "AUTHENTICATING"
    LOGGED_IN = "LOGGED_IN"


def describe_error(exc: RecordClientError) -> str:
    """Return the user-facing text for a record client failure."""
    if isinstance(exc, ConnectivityError):
        return CONNECTIVITY_MESSAGE
    return exc.message


@dataclass
class DashboardController:
    """Owns the active session and the in-memory record list.

    The list is only replaced by the success paths below, so a failed call
    always leaves it exactly as it was. Login errors and the page banner are
    separate channels; dialog errors are kept by the dialog state machine.
    """

    client: RecordClient
    list_params: dict[str, str] | None = None
    state: AuthState = AuthState.LOGGED_OUT
    session: Session | None = None
    records: tuple[Record, ...] = ()
    login_error: str | None = None
    banner_error: str | None = None
    loading: bool = False
    _generation: int = field(default=0, repr=False)
    _logout_listeners: list[Callable[[], None]] = field(
        default_factory=list, repr=False
    )

    @property
    def is_logged_in(self) -> bool:
        return self.state is AuthState.LOGGED_IN

    async def login(self, login: str, password: str) -> bool:
        """Authenticate and load the record list on success."""
        if self.state is not AuthState.LOGGED_OUT:
            return False
        self.state = AuthState.AUTHENTICATING
        self.loading = True
        self.login_error = None
        generation = self._generation
        try:
            session = await self.client.authenticate(login, password)
        except RecordClientError as exc:
            if generation == self._generation:
                _logger.warning("Login failed for %s: %s", login, exc.message)
                self.state = AuthState.LOGGED_OUT
                self.login_error = describe_error(exc)
                self.loading = False
            return False
        if generation != self._generation:
            return False
        self._generation += 1
        self.session = session
        self.state = AuthState.LOGGED_IN
        self.banner_error = None
        try:
            await self.refresh()
        finally:
            self.loading = False
        return True

    def logout(self) -> None:
        """Drop the session and everything loaded under it."""
        self._generation += 1
        self.state = AuthState.LOGGED_OUT
        self.session = None
        self.records = ()
        self.login_error = None
        self.banner_error = None
        self.loading = False
        for listener in self._logout_listeners:
            listener()

    def on_logout(self, listener: Callable[[], None]) -> None:
        """Register a callback run after every logout."""
        self._logout_listeners.append(listener)

    async def refresh(self) -> bool:
        """Reload the record list, reporting failures on the page banner."""
        self._require_session()
        generation = self._generation
        try:
            records = await self.client.list_records(self.list_params)
        except RecordClientError as exc:
            if generation == self._generation:
                _logger.warning("Record refresh failed: %s", exc.message)
                self.banner_error = (
                    CONNECTIVITY_MESSAGE
                    if isinstance(exc, ConnectivityError)
                    else LIST_FAILURE_MESSAGE
                )
            return False
        if generation != self._generation:
            return False
        self.records = tuple(records)
        self.banner_error = None
        return True

    async def create_record(self, draft: DraftForm) -> Record:
        """Create a record and append the server's copy to the list."""
        self._require_session()
        generation = self._generation
        created = await self.client.create_record(draft)
        if generation == self._generation:
            # A refresh that finished first may already list the new record.
            kept = tuple(record for record in self.records if record.id != created.id)
            self.records = (*kept, created)
        return created

    async def update_record(self, record_id: int, draft: DraftForm) -> Record:
        """Update a record and replace its list entry in place."""
        self._require_session()
        generation = self._generation
        updated = await self.client.update_record(record_id, draft)
        if generation == self._generation:
            self.records = tuple(
                updated if record.id == record_id else record
                for record in self.records
            )
        return updated

    async def delete_record(self, record_id: int) -> None:
        """Delete a record and drop it from the list."""
        self._require_session()
        generation = self._generation
        await self.client.delete_record(record_id)
        if generation == self._generation:
            self.records = tuple(
                record for record in self.records if record.id != record_id
            )

    def search(self, query: str) -> list[Record]:
        """Return records whose id, name, email or phone contains the query."""
        needle = query.strip().lower()
        if not needle:
            return list(self.records)
        return [record for record in self.records if _matches(record, needle)]

    def find(self, record_id: int) -> Record | None:
        """Return the listed record with the given id, if any."""
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def _require_session(self) -> None:
        if self.state is not AuthState.LOGGED_IN or self.session is None:
            raise RuntimeError("Dashboard operation requires a logged-in session")


def _matches(record: Record, needle: str) -> bool:
    if needle in str(record.id):
        return True
    for name in SEARCH_FIELDS:
        value = getattr(record, name)
        if value and needle in value.lower():
            return True
    return False
