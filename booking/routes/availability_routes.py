from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from booking.auth.dependencies import get_store, require_admin_token
from booking.models.availability import AvailabilityDay, SlotSpec
from booking.services import availability
from booking.store import CollectionStore

router = APIRouter(tags=['availability'])


class CreateAvailabilityRequest(BaseModel):
    date: date
    slots: list[SlotSpec]


class ReplaceSlotsRequest(BaseModel):
    slots: list[SlotSpec]


@router.get('', response_model=list[AvailabilityDay])
def list_availabilities(
    start: date | None = Query(default=None),
    end: date | None = Query(default=None),
    store: CollectionStore = Depends(get_store),
):
    if start and end and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='start must not be after end.',
        )

    return availability.list_days(store, start, end)


@router.post(
    '',
    response_model=AvailabilityDay,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_token)],
)
def create_availability(data: CreateAvailabilityRequest, store: CollectionStore = Depends(get_store)):
    return availability.create_availability(store, data.date, data.slots)


@router.put(
    '/{day_id}/slots',
    response_model=AvailabilityDay,
    dependencies=[Depends(require_admin_token)],
)
def replace_slots(day_id: str, data: ReplaceSlotsRequest, store: CollectionStore = Depends(get_store)):
    return availability.replace_day_slots(store, day_id, data.slots)


@router.delete('/{day_id}', dependencies=[Depends(require_admin_token)])
def delete_availability(day_id: str, store: CollectionStore = Depends(get_store)):
    availability.delete_day(store, day_id)
    return {'success': True}
