from fastapi import Depends, Header, HTTPException, Request

from booking.core.errors import StoreIOError
from booking.notifications.dispatcher import NotificationDispatcher
from booking.services.admin import is_valid_admin_token
from booking.store import CollectionStore


def get_store(request: Request) -> CollectionStore:
    store = getattr(request.app.state, 'store', None)
    if store is None:
        raise StoreIOError('store', 'store was not initialized at startup')
    return store


def get_dispatcher(request: Request) -> NotificationDispatcher:
    return request.app.state.dispatcher


def require_admin_token(
    x_admin_token: str | None = Header(default=None),
    store: CollectionStore = Depends(get_store),
) -> None:
    if not is_valid_admin_token(store, x_admin_token):
        raise HTTPException(status_code=401, detail="Invalid token")
