"""Slot booking.

The slot flip is written to the availabilities collection before the
appointment is appended, so a failure between the two writes leaves a booked
slot without an appointment rather than a slot that can be booked twice.
"""

import logging
from datetime import date, datetime

from pydantic.alias_generators import to_camel

from booking.core.errors import DateNotFound, SlotAlreadyBooked, SlotNotFound, StoreIOError, ValidationError
from booking.models.appointment import DEFAULT_SERVICE, Appointment, ClientDetails
from booking.services.notify import Defer, Sender, dispatch
from booking.services.records import dump_appointments, dump_days, load_appointments, load_days
from booking.store import APPOINTMENTS, AVAILABILITIES, CollectionStore

logger = logging.getLogger(__name__)


def _parse_booking_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError('Invalid date, expected YYYY-MM-DD.') from None


def book(
    store: CollectionStore,
    details: ClientDetails,
    notify: Sender | None = None,
    defer: Defer | None = None,
    now: datetime | None = None,
) -> Appointment:
    missing = details.missing_fields()
    if missing:
        raise ValidationError(f'Missing required fields: {", ".join(to_camel(name) for name in missing)}.')

    day_date = _parse_booking_date(details.date)
    now = now or datetime.now()

    with store.transaction(AVAILABILITIES):
        days = load_days(store.read_all(AVAILABILITIES))
        day = next((item for item in days if item.date == day_date), None)
        if day is None:
            logger.info('Booking rejected: date %s not in availabilities', day_date)
            raise DateNotFound()

        slot = day.find_slot(details.slot_id)
        if slot is None:
            raise SlotNotFound()
        if slot.is_booked:
            raise SlotAlreadyBooked()

        appointment = Appointment(
            first_name=details.first_name,
            last_name=details.last_name,
            email=details.email,
            phone=details.phone,
            address=details.address or '',
            service=details.service or DEFAULT_SERVICE,
            date=day.date,
            slot_id=slot.id,
            time=slot.time,
            duration=slot.duration,
            notes=details.notes or '',
            created_at=now,
        )

        slot.is_booked = True
        day.touch(now)
        store.write_all(AVAILABILITIES, dump_days(days))

        with store.transaction(APPOINTMENTS):
            try:
                appointments = load_appointments(store.read_all(APPOINTMENTS))
                appointments.append(appointment)
                store.write_all(APPOINTMENTS, dump_appointments(appointments))
            except StoreIOError:
                logger.error(
                    'Slot %s on %s is booked but its appointment was not saved; reconcile manually',
                    slot.id,
                    day.date,
                )
                raise

    logger.info('Appointment %s booked on %s at %s', appointment.id, appointment.date, appointment.time)
    dispatch(store, notify, appointment, defer)
    return appointment
