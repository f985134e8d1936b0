from fastapi import APIRouter, BackgroundTasks, Depends, status

from booking.auth.dependencies import get_dispatcher, get_store, require_admin_token
from booking.models.appointment import Appointment, ClientDetails
from booking.notifications.dispatcher import NotificationDispatcher
from booking.services import booking, cancellation
from booking.store import CollectionStore

router = APIRouter(tags=['appointments'])


@router.get('', response_model=list[Appointment], dependencies=[Depends(require_admin_token)])
def list_appointments(store: CollectionStore = Depends(get_store)):
    return cancellation.list_appointments(store)


@router.post('', response_model=Appointment, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: ClientDetails,
    background_tasks: BackgroundTasks,
    store: CollectionStore = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    return booking.book(
        store,
        data,
        notify=dispatcher.send_confirmation,
        defer=background_tasks.add_task,
    )


@router.delete('/{appointment_id}')
def cancel_appointment(
    appointment_id: str,
    background_tasks: BackgroundTasks,
    store: CollectionStore = Depends(get_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    cancellation.cancel(
        store,
        appointment_id,
        notify=dispatcher.send_cancellation,
        defer=background_tasks.add_task,
    )
    return {'success': True, 'message': 'Appointment cancelled.'}
