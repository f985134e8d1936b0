from datetime import date

import pytest

from booking.models.availability import AvailabilityDay, Slot
from booking.store import AVAILABILITIES, SETTINGS, FileStore


@pytest.fixture
def store(tmp_path) -> FileStore:
    return FileStore(str(tmp_path / 'data'))


@pytest.fixture
def seeded_store(store: FileStore) -> FileStore:
    day = AvailabilityDay(
        id='day-1',
        date=date(2025, 6, 10),
        slots=[
            Slot(id='slot-0900', time='09:00'),
            Slot(id='slot-1000', time='10:00'),
        ],
    )
    store.write_all(AVAILABILITIES, [day.to_record()])
    store.write_all(SETTINGS, {
        'businessName': 'Test Plumbing',
        'businessPhone': '01 02 03 04 05',
        'businessEmail': 'shop@example.com',
        'businessAddress': '1 Main Street',
        'emailNotifications': True,
        'smsNotifications': True,
    })
    return store
