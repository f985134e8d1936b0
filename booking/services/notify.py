import logging
from typing import Callable

from booking.core.errors import StoreIOError
from booking.models.appointment import Appointment
from booking.models.settings import BusinessSettings
from booking.services.admin import get_settings
from booking.store import CollectionStore

logger = logging.getLogger(__name__)

Sender = Callable[[Appointment, BusinessSettings], bool]
Defer = Callable[..., None]


def dispatch(
    store: CollectionStore,
    send: Sender | None,
    appointment: Appointment,
    defer: Defer | None = None,
) -> None:
    """Hand ``appointment`` to ``send`` once the booking writes are durable.

    With ``defer`` (e.g. ``BackgroundTasks.add_task``) the send runs detached
    from the caller; without it the send runs inline. Either way a failure
    here never propagates.
    """
    if send is None:
        return

    try:
        settings = get_settings(store)
    except StoreIOError as exc:
        logger.error('Skipping notification for %s: settings unreadable (%s)', appointment.id, exc)
        return

    if defer is not None:
        defer(send, appointment, settings)
        return

    try:
        send(appointment, settings)
    except Exception:
        logger.exception('Notification for appointment %s failed', appointment.id)
