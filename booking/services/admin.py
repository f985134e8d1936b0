import hmac
import logging
from datetime import date

from pydantic import ValidationError as PydanticValidationError

from booking.models.settings import AdminToken, BusinessSettings
from booking.services.records import load_appointments, load_days
from booking.store import ADMIN_TOKEN, APPOINTMENTS, AVAILABILITIES, SETTINGS, CollectionStore

logger = logging.getLogger(__name__)


def get_admin_token(store: CollectionStore) -> AdminToken:
    record = store.read_all(ADMIN_TOKEN)
    try:
        return AdminToken.model_validate(record)
    except PydanticValidationError:
        logger.warning('Stored admin token is malformed; using a fresh one')
        return AdminToken()


def is_valid_admin_token(store: CollectionStore, presented: str | None) -> bool:
    if not presented:
        return False
    expected = get_admin_token(store).token
    return hmac.compare_digest(presented.encode('utf-8'), expected.encode('utf-8'))


def refresh_admin_token(store: CollectionStore) -> AdminToken:
    admin_token = AdminToken()
    with store.transaction(ADMIN_TOKEN):
        store.write_all(ADMIN_TOKEN, admin_token.to_record())
    logger.info('Admin token regenerated')
    return admin_token


def get_settings(store: CollectionStore) -> BusinessSettings:
    record = store.read_all(SETTINGS)
    try:
        return BusinessSettings.model_validate(record)
    except PydanticValidationError:
        logger.warning('Stored settings are malformed; notifications disabled until they are replaced')
        return BusinessSettings()


def replace_settings(store: CollectionStore, settings: BusinessSettings) -> BusinessSettings:
    with store.transaction(SETTINGS):
        store.write_all(SETTINGS, settings.to_record())
    return settings


def get_stats(store: CollectionStore, today: date | None = None) -> dict:
    today = today or date.today()
    appointments = load_appointments(store.read_all(APPOINTMENTS))
    days = load_days(store.read_all(AVAILABILITIES))

    total_slots = sum(len(day.slots) for day in days)
    booked_slots = sum(1 for day in days for slot in day.slots if slot.is_booked)

    return {
        'totalAppointments': len(appointments),
        'todayAppointments': sum(1 for item in appointments if item.date == today),
        'upcomingAppointments': sum(1 for item in appointments if item.date >= today),
        'totalSlots': total_slots,
        'bookedSlots': booked_slots,
        'availableSlots': total_slots - booked_slots,
    }
