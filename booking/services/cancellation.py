import logging
from datetime import datetime

from booking.core.errors import AppointmentNotFound
from booking.models.appointment import Appointment
from booking.services.notify import Defer, Sender, dispatch
from booking.services.records import dump_appointments, dump_days, load_appointments, load_days
from booking.store import APPOINTMENTS, AVAILABILITIES, CollectionStore

logger = logging.getLogger(__name__)


def list_appointments(store: CollectionStore) -> list[Appointment]:
    return load_appointments(store.read_all(APPOINTMENTS))


def cancel(
    store: CollectionStore,
    appointment_id: str,
    notify: Sender | None = None,
    defer: Defer | None = None,
) -> Appointment:
    """Free the appointment's slot and delete the appointment record."""
    with store.transaction(AVAILABILITIES), store.transaction(APPOINTMENTS):
        appointments = load_appointments(store.read_all(APPOINTMENTS))
        appointment = next((item for item in appointments if item.id == appointment_id), None)
        if appointment is None:
            raise AppointmentNotFound()

        days = load_days(store.read_all(AVAILABILITIES))
        day = next((item for item in days if item.date == appointment.date), None)
        slot = day.find_slot(appointment.slot_id) if day is not None else None
        if slot is not None:
            slot.is_booked = False
            day.touch(datetime.now())
            store.write_all(AVAILABILITIES, dump_days(days))
        else:
            # Already swept or edited away; nothing to free.
            logger.info('Slot %s on %s no longer exists', appointment.slot_id, appointment.date)

        remaining = [item for item in appointments if item.id != appointment_id]
        store.write_all(APPOINTMENTS, dump_appointments(remaining))

    logger.info('Appointment %s cancelled', appointment_id)
    dispatch(store, notify, appointment, defer)
    return appointment
