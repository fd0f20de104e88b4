"""Domain models for ERP contact records."""

from dataclasses import dataclass, fields, replace

OPTIONAL_FIELDS = (
    "email",
    "phone",
    "mobile",
    "street",
    "street2",
    "city",
    "zip",
    "country",
    "website",
    "function",
    "company",
)


@dataclass(frozen=True)
class Session:
    """Authenticated identity returned by the ERP login call."""

    subject_id: int
    username: str
    display_name: str


@dataclass(frozen=True)
class Record:
    """A contact as exposed by the ERP CRUD endpoints."""

    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    mobile: str | None = None
    street: str | None = None
    street2: str | None = None
    city: str | None = None
    zip: str | None = None
    country: str | None = None
    website: str | None = None
    function: str | None = None
    company: str | None = None


@dataclass(frozen=True)
class DraftForm:
    """Unsaved form data for creating or editing a record."""

    name: str = ""
    email: str | None = None
    phone: str | None = None
    mobile: str | None = None
    street: str | None = None
    street2: str | None = None
    city: str | None = None
    zip: str | None = None
    country: str | None = None
    website: str | None = None
    function: str | None = None
    company: str | None = None

    @classmethod
    def from_record(cls, record: Record) -> "DraftForm":
        """Copy the editable fields of a record into a new draft."""
        values = {name: getattr(record, name) for name in OPTIONAL_FIELDS}
        return cls(name=record.name, **values)

    def with_changes(self, **changes: str | None) -> "DraftForm":
        """Return a copy of the draft with the given fields replaced."""
        known = {field.name for field in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown draft fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_payload(self, include_cleared: bool = False) -> dict[str, object]:
        """Serialize the draft for the ERP create/update endpoints.

        Empty fields are left out unless `include_cleared` is set, in which
        case they are sent as `false` so an update clears them on the ERP.
        """
        payload: dict[str, object] = {"name": self.name}
        for name in OPTIONAL_FIELDS:
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
            elif include_cleared:
                payload[name] = False
        return payload


def record_from_payload(row: dict[str, object]) -> Record:
    """Build a record from an ERP row, mapping `false` placeholders to None."""
    record_id = row.get("id")
    if not isinstance(record_id, int) or isinstance(record_id, bool):
        raise ValueError(f"Record id must be an integer, got {record_id!r}")
    name = row.get("name")
    if name is None or name is False:
        raise ValueError(f"Record {record_id} has no name")
    values = {field: _optional_text(row.get(field)) for field in OPTIONAL_FIELDS}
    return Record(id=record_id, name=str(name), **values)


def _optional_text(value: object) -> str | None:
    # The ERP sends `false` for empty char fields.
    if value is None or value is False:
        return None
    if isinstance(value, list | tuple) and len(value) == 2:  # noqa: PLR2004
        # many2one fields arrive as [id, display_name]
        return str(value[1])
    return str(value)
