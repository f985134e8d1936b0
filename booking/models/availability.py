"""Availability model definitions."""

import re
import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from booking.core import config

TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')


def new_id() -> str:
    return str(uuid.uuid4())


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` time-of-day into minutes since midnight."""
    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f'Invalid time of day: {value!r}')

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f'Invalid time of day: {value!r}')

    return hours * 60 + minutes


def minutes_to_time(minutes: int) -> str:
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


class RecordModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True, mode='json')


class SlotSpec(RecordModel):
    """Minimal slot description supplied by an admin."""

    time: str
    duration: int | None = None

    @field_validator('time')
    @classmethod
    def validate_time(cls, value: str) -> str:
        return minutes_to_time(time_to_minutes(value))

    @property
    def resolved_duration(self) -> int:
        return self.duration or config.DEFAULT_SLOT_DURATION


class Slot(RecordModel):
    """Represents a bookable slot within an availability day."""

    id: str = Field(default_factory=new_id)
    time: str
    duration: int = config.DEFAULT_SLOT_DURATION
    is_booked: bool = False

    @field_validator('time')
    @classmethod
    def validate_time(cls, value: str) -> str:
        return minutes_to_time(time_to_minutes(value))

    @property
    def minutes(self) -> int:
        return time_to_minutes(self.time)

    @classmethod
    def from_spec(cls, spec: SlotSpec) -> 'Slot':
        return cls(time=spec.time, duration=spec.resolved_duration, is_booked=False)


class AvailabilityDay(RecordModel):
    """Represents the slots offered for one calendar date."""

    id: str = Field(default_factory=new_id)
    date: date
    slots: list[Slot] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime | None = None

    def find_slot(self, slot_id: str) -> Slot | None:
        return next((slot for slot in self.slots if slot.id == slot_id), None)

    def touch(self, now: datetime | None = None) -> None:
        self.updated_at = now or datetime.now()
