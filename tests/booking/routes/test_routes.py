from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from booking.auth.dependencies import get_dispatcher, get_store
from booking.core import config
from booking.main import app
from booking.services.admin import get_admin_token
from booking.store import APPOINTMENTS, AVAILABILITIES, init_store


@pytest.fixture
def dispatcher():
    fake = MagicMock()
    fake.send_confirmation.return_value = True
    fake.send_cancellation.return_value = True
    return fake


@pytest.fixture
def client(seeded_store, dispatcher):
    init_store(seeded_store)
    app.dependency_overrides[get_store] = lambda: seeded_store
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(seeded_store):
    init_store(seeded_store)
    return {'X-Admin-Token': get_admin_token(seeded_store).token}


def _booking_payload(**overrides) -> dict:
    payload = {
        'firstName': 'Jane',
        'lastName': 'Doe',
        'email': 'jane@example.com',
        'phone': '0612345678',
        'date': '2025-06-10',
        'slotId': 'slot-1000',
    }
    payload.update(overrides)
    return payload


def test_health(client) -> None:
    response = client.get('/api/health')

    assert response.status_code == 200
    assert response.json()['status'] == 'OK'


def test_list_availabilities_uses_camel_case(client) -> None:
    response = client.get('/api/availabilities')

    assert response.status_code == 200
    day = response.json()[0]
    assert day['date'] == '2025-06-10'
    assert day['slots'][0] == {'id': 'slot-0900', 'time': '09:00', 'duration': 60, 'isBooked': False}


def test_list_availabilities_rejects_inverted_window(client) -> None:
    response = client.get('/api/availabilities', params={'start': '2025-06-11', 'end': '2025-06-10'})

    assert response.status_code == 400


def test_admin_routes_require_token(client) -> None:
    assert client.post('/api/availabilities', json={'date': '2025-06-12', 'slots': [{'time': '09:00'}]}).status_code == 401
    assert client.get('/api/appointments', headers={'X-Admin-Token': 'wrong'}).status_code == 401
    assert client.get('/api/admin/stats').status_code == 401


def test_create_and_replace_availability(client, admin_headers, seeded_store) -> None:
    created = client.post(
        '/api/availabilities',
        json={'date': '2025-06-12', 'slots': [{'time': '09:00'}, {'time': '10:00', 'duration': 30}]},
        headers=admin_headers,
    )
    assert created.status_code == 201
    day_id = created.json()['id']

    replaced = client.put(
        f'/api/availabilities/{day_id}/slots',
        json={'slots': [{'time': '10:00'}, {'time': '11:00'}]},
        headers=admin_headers,
    )

    assert replaced.status_code == 200
    assert [slot['time'] for slot in replaced.json()['slots']] == ['10:00', '11:00']
    assert replaced.json()['slots'][0]['id'] == created.json()['slots'][1]['id']
    assert replaced.json()['slots'][0]['duration'] == 60


def test_replace_unknown_day_returns_404(client, admin_headers) -> None:
    response = client.put('/api/availabilities/missing/slots', json={'slots': [{'time': '09:00'}]}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {'detail': 'Availability day not found.'}


def test_delete_availability(client, admin_headers, seeded_store) -> None:
    response = client.delete('/api/availabilities/day-1', headers=admin_headers)

    assert response.status_code == 200
    assert seeded_store.read_all(AVAILABILITIES) == []


def test_book_then_cancel_over_http(client, dispatcher, seeded_store) -> None:
    booked = client.post('/api/appointments', json=_booking_payload())

    assert booked.status_code == 201
    body = booked.json()
    assert body['time'] == '10:00'
    assert body['status'] == 'confirmed'
    dispatcher.send_confirmation.assert_called_once()

    second = client.post('/api/appointments', json=_booking_payload(firstName='John'))
    assert second.status_code == 400
    assert second.json() == {'detail': 'Slot already booked.'}

    cancelled = client.delete(f"/api/appointments/{body['id']}")

    assert cancelled.status_code == 200
    dispatcher.send_cancellation.assert_called_once()
    assert seeded_store.read_all(APPOINTMENTS) == []
    slots = seeded_store.read_all(AVAILABILITIES)[0]['slots']
    assert all(slot['isBooked'] is False for slot in slots)


def test_book_with_missing_fields_returns_400(client) -> None:
    response = client.post('/api/appointments', json=_booking_payload(phone=''))

    assert response.status_code == 400
    assert 'phone' in response.json()['detail']


def test_cancel_unknown_appointment_returns_404(client) -> None:
    response = client.delete('/api/appointments/missing')

    assert response.status_code == 404
    assert response.json() == {'detail': 'Appointment not found.'}


def test_store_failure_returns_generic_500(client, seeded_store) -> None:
    with open(seeded_store.path_for(AVAILABILITIES), 'w', encoding='utf-8') as f:
        f.write('[{"id": "broken"}]')

    response = client.get('/api/availabilities')

    assert response.status_code == 500
    assert response.json() == {'detail': 'Storage error.'}


def test_admin_settings_and_token_refresh(client, admin_headers) -> None:
    updated = client.put(
        '/api/admin/settings',
        json={'businessName': 'Renamed', 'emailNotifications': False, 'smsNotifications': True},
        headers=admin_headers,
    )
    assert updated.status_code == 200

    settings = client.get('/api/admin/settings', headers=admin_headers).json()
    assert settings['businessName'] == 'Renamed'
    assert settings['emailNotifications'] is False

    refreshed = client.post('/api/admin/refresh-token', headers=admin_headers)
    assert refreshed.status_code == 200
    assert client.get('/api/admin/stats', headers=admin_headers).status_code == 401
    assert client.get('/api/admin/stats', headers={'X-Admin-Token': refreshed.json()['token']}).status_code == 200


def test_startup_survives_unusable_database_url(monkeypatch) -> None:
    monkeypatch.setattr(config, 'DATABASE_URL', 'not a database url')
    monkeypatch.setattr(config, 'SWEEP_ENABLED', False)

    with TestClient(app) as client:
        assert app.state.store is None
        assert client.get('/api/health').status_code == 200

        response = client.get('/api/availabilities')

    assert response.status_code == 500
    assert response.json() == {'detail': 'Storage error.'}
