"""Appointment model definitions."""

from datetime import date, datetime

from pydantic import Field, field_validator

from booking.models.availability import RecordModel, new_id

CONFIRMED_STATUS = 'confirmed'
DEFAULT_SERVICE = 'unspecified'
REQUIRED_CLIENT_FIELDS = ('first_name', 'last_name', 'email', 'phone', 'date', 'slot_id')


class ClientDetails(RecordModel):
    """Booking payload as submitted by a client.

    Every field is optional here; the booking engine reports missing
    required fields itself.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    service: str | None = None
    notes: str | None = None
    date: str | None = None
    slot_id: str | None = None

    @field_validator('*', mode='before')
    @classmethod
    def strip_strings(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_CLIENT_FIELDS if not getattr(self, name)]


class Appointment(RecordModel):
    """Represents a confirmed booking of one slot."""

    id: str = Field(default_factory=new_id)
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str = ''
    service: str = DEFAULT_SERVICE
    date: date
    slot_id: str
    # Schedule copied from the slot at booking time.
    time: str
    duration: int
    notes: str = ''
    status: str = CONFIRMED_STATUS
    created_at: datetime = Field(default_factory=datetime.now)
