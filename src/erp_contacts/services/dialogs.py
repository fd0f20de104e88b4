"""Modal dialog state machine for the contacts dashboard."""

import logging
from dataclasses import dataclass, field

from erp_contacts.domain.dialogs import (
    CLOSED,
    Closed,
    Creating,
    Deleting,
    DialogState,
    Editing,
    Viewing,
)
from erp_contacts.domain.errors import RecordClientError
from erp_contacts.domain.records import DraftForm, Record
from erp_contacts.services.dashboard import DashboardController, describe_error

_logger = logging.getLogger(__name__)


@dataclass
class DialogStateMachine:
    """Tracks the single open dialog and submits its confirmation.

    Every transition bumps a generation counter; a confirmation that
    completes after its dialog was closed or replaced only affects the
    record list, never the dialog now on screen.
    """

    controller: DashboardController
    state: DialogState = CLOSED
    pending: bool = False
    error: str | None = None
    _generation: int = field(default=0, repr=False)

    def __post_init__(self) -> None:
        self.controller.on_logout(self.close_all)

    @property
    def is_open(self) -> bool:
        return not isinstance(self.state, Closed)

    def open_create(self) -> None:
        self._enter(Creating(draft=DraftForm()))

    def open_view(self, record: Record) -> None:
        self._enter(Viewing(record=record))

    def open_edit(self, record: Record) -> None:
        self._enter(Editing(record=record, draft=DraftForm.from_record(record)))

    def open_delete(self, record: Record) -> None:
        self._enter(Deleting(record=record))

    def close_all(self) -> None:
        """Close whatever is open, discarding the draft and any error."""
        self._enter(CLOSED)

    def stage(self, **changes: str | None) -> DraftForm:
        """Apply form edits to the open create or edit draft."""
        state = self.state
        if isinstance(state, Creating):
            draft = state.draft.with_changes(**changes)
            self.state = Creating(draft=draft)
            return draft
        if isinstance(state, Editing):
            draft = state.draft.with_changes(**changes)
            self.state = Editing(record=state.record, draft=draft)
            return draft
        raise RuntimeError("No open dialog has a draft to edit")

    async def confirm(self) -> bool:
        """Submit the open dialog; return True once it has closed on success."""
        state = self.state
        if self.pending or not isinstance(state, Creating | Editing | Deleting):
            return False
        generation = self._generation
        self.pending = True
        self.error = None
        try:
            if isinstance(state, Creating):
                await self.controller.create_record(state.draft)
            elif isinstance(state, Editing):
                await self.controller.update_record(state.record.id, state.draft)
            else:
                await self.controller.delete_record(state.record.id)
        except RecordClientError as exc:
            _logger.warning("%s failed: %s", type(state).__name__, exc.message)
            if generation == self._generation:
                self.error = describe_error(exc)
            return False
        finally:
            if generation == self._generation:
                self.pending = False
        if generation != self._generation:
            return False
        self.close_all()
        return True

    def _enter(self, state: DialogState) -> None:
        self._generation += 1
        self.state = state
        self.pending = False
        self.error = None
