from pydantic import ValidationError as PydanticValidationError

from booking.core.errors import StoreIOError
from booking.models.appointment import Appointment
from booking.models.availability import AvailabilityDay
from booking.store import APPOINTMENTS, AVAILABILITIES


def load_days(records: list[dict]) -> list[AvailabilityDay]:
    try:
        return [AvailabilityDay.model_validate(record) for record in records]
    except PydanticValidationError as exc:
        raise StoreIOError(AVAILABILITIES, f'invalid record ({exc.error_count()} errors)') from exc


def dump_days(days: list[AvailabilityDay]) -> list[dict]:
    return [day.to_record() for day in days]


def load_appointments(records: list[dict]) -> list[Appointment]:
    try:
        return [Appointment.model_validate(record) for record in records]
    except PydanticValidationError as exc:
        raise StoreIOError(APPOINTMENTS, f'invalid record ({exc.error_count()} errors)') from exc


def dump_appointments(appointments: list[Appointment]) -> list[dict]:
    return [appointment.to_record() for appointment in appointments]
