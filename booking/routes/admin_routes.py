from fastapi import APIRouter, Depends

from booking.auth.dependencies import get_store, require_admin_token
from booking.models.settings import BusinessSettings
from booking.services import admin
from booking.store import CollectionStore

router = APIRouter(tags=['admin'])


@router.post('/refresh-token', dependencies=[Depends(require_admin_token)])
def refresh_admin_token(store: CollectionStore = Depends(get_store)):
    return {'token': admin.refresh_admin_token(store).token}


@router.get('/stats', dependencies=[Depends(require_admin_token)])
def read_stats(store: CollectionStore = Depends(get_store)):
    return admin.get_stats(store)


@router.get('/settings', response_model=BusinessSettings, dependencies=[Depends(require_admin_token)])
def read_settings(store: CollectionStore = Depends(get_store)):
    return admin.get_settings(store)


@router.put('/settings', dependencies=[Depends(require_admin_token)])
def replace_settings(data: BusinessSettings, store: CollectionStore = Depends(get_store)):
    admin.replace_settings(store, data)
    return {'success': True}
