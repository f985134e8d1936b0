import logging
from datetime import date, datetime

from booking.core.errors import AvailabilityNotFound, ValidationError
from booking.models.availability import AvailabilityDay, Slot, SlotSpec
from booking.services.records import dump_days, load_days
from booking.store import AVAILABILITIES, CollectionStore

logger = logging.getLogger(__name__)


def _require_slots(specs: list[SlotSpec]) -> None:
    if not specs:
        raise ValidationError('At least one slot is required.')


def merge_slots(
    day: AvailabilityDay,
    incoming: list[SlotSpec],
    now: datetime | None = None,
) -> AvailabilityDay:
    """Replace the day's slots with ``incoming``, matching existing slots by time.

    A matched slot keeps its id and booking flag and takes the incoming
    duration. Unmatched specs become fresh unbooked slots. Existing slots whose
    time is not listed are dropped, booked or not.
    """
    times = [spec.time for spec in incoming]
    duplicates = sorted({value for value in times if times.count(value) > 1})
    if duplicates:
        raise ValidationError(f'Duplicate slot times: {", ".join(duplicates)}.')

    # Appends may leave several slots on one time; a booked one wins.
    existing: dict[str, Slot] = {}
    for slot in day.slots:
        current = existing.get(slot.time)
        if current is None or not current.is_booked:
            existing[slot.time] = slot

    merged: list[Slot] = []
    for spec in incoming:
        current = existing.get(spec.time)
        if current is None:
            merged.append(Slot.from_spec(spec))
            continue
        merged.append(
            Slot(
                id=current.id,
                time=spec.time,
                duration=spec.resolved_duration,
                is_booked=current.is_booked,
            )
        )

    return day.model_copy(update={'slots': merged, 'updated_at': now or datetime.now()})


def create_or_append(
    days: list[AvailabilityDay],
    day_date: date,
    specs: list[SlotSpec],
    now: datetime | None = None,
) -> tuple[list[AvailabilityDay], AvailabilityDay]:
    """Create the day with fresh slots, or append fresh slots to the existing day."""
    now = now or datetime.now()
    fresh_slots = [Slot.from_spec(spec) for spec in specs]

    updated: list[AvailabilityDay] = []
    target: AvailabilityDay | None = None
    for day in days:
        if day.date == day_date and target is None:
            day = day.model_copy(update={'slots': [*day.slots, *fresh_slots], 'updated_at': now})
            target = day
        updated.append(day)

    if target is None:
        target = AvailabilityDay(date=day_date, slots=fresh_slots, created_at=now)
        updated.append(target)

    return updated, target


def list_days(
    store: CollectionStore,
    start: date | None = None,
    end: date | None = None,
) -> list[AvailabilityDay]:
    days = load_days(store.read_all(AVAILABILITIES))
    if start is not None and end is not None:
        days = [day for day in days if start <= day.date <= end]
    return days


def create_availability(store: CollectionStore, day_date: date, specs: list[SlotSpec]) -> AvailabilityDay:
    _require_slots(specs)

    with store.transaction(AVAILABILITIES):
        days = load_days(store.read_all(AVAILABILITIES))
        days, day = create_or_append(days, day_date, specs)
        store.write_all(AVAILABILITIES, dump_days(days))

    logger.info('Added %d slots to %s', len(specs), day_date)
    return day


def replace_day_slots(store: CollectionStore, day_id: str, specs: list[SlotSpec]) -> AvailabilityDay:
    _require_slots(specs)

    with store.transaction(AVAILABILITIES):
        days = load_days(store.read_all(AVAILABILITIES))
        index = next((i for i, day in enumerate(days) if day.id == day_id), None)
        if index is None:
            raise AvailabilityNotFound()

        days[index] = merge_slots(days[index], specs)
        store.write_all(AVAILABILITIES, dump_days(days))

    logger.info('Replaced slots of %s (%d slots)', days[index].date, len(specs))
    return days[index]


def delete_day(store: CollectionStore, day_id: str) -> bool:
    with store.transaction(AVAILABILITIES):
        days = load_days(store.read_all(AVAILABILITIES))
        kept = [day for day in days if day.id != day_id]
        store.write_all(AVAILABILITIES, dump_days(kept))

    removed = len(kept) != len(days)
    if removed:
        logger.info('Deleted availability day %s', day_id)
    return removed
