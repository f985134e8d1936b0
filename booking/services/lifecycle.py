"""Expiry rules and cleanup sweeps for availability slots.

An unbooked slot expires once its date is in the past, or when it is on
today's date and starts within ``EXPIRY_CUTOFF_MINUTES`` of now (a slot whose
time already passed today has a negative distance and expires as well).
Booked slots never expire here. Days left without slots are dropped.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from booking.core import config
from booking.core.errors import StoreIOError
from booking.models.availability import AvailabilityDay, Slot
from booking.services.records import dump_days, load_days
from booking.store import AVAILABILITIES, CollectionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    days: list[AvailabilityDay] = field(default_factory=list)
    deleted_slots: int = 0
    modified_days: int = 0
    deleted_days: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.deleted_slots or self.deleted_days)


def minutes_until_slot(slot: Slot, now: datetime) -> int:
    return slot.minutes - (now.hour * 60 + now.minute)


def is_slot_expired(
    slot: Slot,
    day_date: date,
    now: datetime,
    cutoff_minutes: int = config.EXPIRY_CUTOFF_MINUTES,
) -> bool:
    if slot.is_booked:
        return False

    today = now.date()
    if day_date < today:
        return True
    if day_date == today:
        return minutes_until_slot(slot, now) <= cutoff_minutes
    return False


def sweep(
    days: list[AvailabilityDay],
    now: datetime,
    cutoff_minutes: int = config.EXPIRY_CUTOFF_MINUTES,
) -> SweepResult:
    """Return the days with expired slots and empty days removed; inputs are not mutated."""
    kept_days: list[AvailabilityDay] = []
    deleted_slots = 0
    modified_days = 0

    for day in days:
        remaining = []
        for slot in day.slots:
            if is_slot_expired(slot, day.date, now, cutoff_minutes):
                logger.info('Removing expired slot %s %s (not booked)', day.date, slot.time)
                deleted_slots += 1
            else:
                remaining.append(slot)

        if len(remaining) != len(day.slots):
            modified_days += 1

        if remaining:
            kept_days.append(day.model_copy(update={'slots': remaining}))

    return SweepResult(
        days=kept_days,
        deleted_slots=deleted_slots,
        modified_days=modified_days,
        deleted_days=len(days) - len(kept_days),
    )


def purge_past_days(days: list[AvailabilityDay], today: date) -> list[AvailabilityDay]:
    return [day for day in days if day.date >= today]


def run_sweep(store: CollectionStore, now: datetime | None = None) -> SweepResult | None:
    """Sweep the stored availabilities; return ``None`` when the cycle was aborted."""
    now = now or datetime.now()
    logger.info('Starting expired slot sweep')

    try:
        with store.transaction(AVAILABILITIES):
            days = load_days(store.read_all(AVAILABILITIES, strict=True))
            result = sweep(days, now)
            if result.changed:
                store.write_all(AVAILABILITIES, dump_days(result.days))
    except StoreIOError as exc:
        logger.error('Expired slot sweep aborted for %s: %s', exc.collection, exc.reason)
        return None

    logger.info(
        'Expired slot sweep done: %d slots deleted, %d days modified, %d empty days deleted',
        result.deleted_slots,
        result.modified_days,
        result.deleted_days,
    )
    return result


def run_daily_purge(store: CollectionStore, today: date | None = None) -> int | None:
    """Drop whole days dated before today; return how many were removed, ``None`` on failure."""
    today = today or date.today()

    try:
        with store.transaction(AVAILABILITIES):
            days = load_days(store.read_all(AVAILABILITIES, strict=True))
            kept = purge_past_days(days, today)
            removed = len(days) - len(kept)
            if removed:
                store.write_all(AVAILABILITIES, dump_days(kept))
    except StoreIOError as exc:
        logger.error('Past day purge aborted for %s: %s', exc.collection, exc.reason)
        return None

    logger.info('Past day purge done: %d old dates removed', removed)
    return removed
