"""Dialog states for the record dashboard."""

from dataclasses import dataclass

from erp_contacts.domain.records import DraftForm, Record


@dataclass(frozen=True)
class Closed:
    """No dialog is open."""


@dataclass(frozen=True)
class Creating:
    """The create dialog is open with a draft."""

    draft: DraftForm


@dataclass(frozen=True)
class Viewing:
    """The detail dialog is showing a record."""

    record: Record


@dataclass(frozen=True)
class Editing:
    """The edit dialog is open for a record with a draft."""

    record: Record
    draft: DraftForm


@dataclass(frozen=True)
class Deleting:
    """The delete confirmation is open for a record."""

    record: Record


DialogState = Closed | Creating | Viewing | Editing | Deleting

CLOSED = Closed()
