import os

import pytest

from booking.core.errors import StoreIOError
from booking.store import (
    ADMIN_TOKEN,
    APPOINTMENTS,
    AVAILABILITIES,
    COLLECTIONS,
    SETTINGS,
    FileStore,
    SqlStore,
    init_store,
)


@pytest.fixture(params=['file', 'sql'])
def any_store(request, tmp_path):
    if request.param == 'file':
        return FileStore(str(tmp_path / 'data'))
    return SqlStore('sqlite:///:memory:')


def test_missing_collections_read_as_defaults(any_store) -> None:
    assert any_store.read_all(AVAILABILITIES) == []
    assert any_store.read_all(APPOINTMENTS) == []
    assert any_store.read_all(SETTINGS) == {}
    token = any_store.read_all(ADMIN_TOKEN)
    assert token['token']
    assert 'createdAt' in token


def test_write_then_read(any_store) -> None:
    records = [{'id': 'a', 'date': '2025-06-10', 'slots': []}]

    any_store.write_all(AVAILABILITIES, records)

    assert any_store.read_all(AVAILABILITIES) == records


def test_unknown_collection_is_rejected(any_store) -> None:
    with pytest.raises(ValueError):
        any_store.read_all('users')


def test_init_store_seeds_defaults_once(any_store) -> None:
    token = init_store(any_store)

    for collection in COLLECTIONS:
        assert any_store.has_valid_document(collection)
    assert any_store.read_all(SETTINGS)['smsNotifications'] is True
    assert init_store(any_store)['token'] == token['token']


@pytest.mark.parametrize('content', ['', '   ', '{broken', '{"not": "a list"}'])
def test_corrupt_file_falls_back_to_default(tmp_path, content: str) -> None:
    store = FileStore(str(tmp_path))
    with open(store.path_for(APPOINTMENTS), 'w', encoding='utf-8') as f:
        f.write(content)

    assert store.read_all(APPOINTMENTS) == []


def test_strict_read_raises_on_corrupt_file(tmp_path) -> None:
    store = FileStore(str(tmp_path))
    with open(store.path_for(AVAILABILITIES), 'w', encoding='utf-8') as f:
        f.write('[{"id": ')

    with pytest.raises(StoreIOError) as exception_info:
        store.read_all(AVAILABILITIES, strict=True)

    assert exception_info.value.collection == AVAILABILITIES


def test_init_store_repairs_corrupt_file(tmp_path) -> None:
    store = FileStore(str(tmp_path))
    with open(store.path_for(SETTINGS), 'w', encoding='utf-8') as f:
        f.write('not json')

    init_store(store)

    assert store.read_all(SETTINGS, strict=True)['emailNotifications'] is True


def test_file_write_failure_keeps_previous_content(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = FileStore(str(tmp_path))
    store.write_all(APPOINTMENTS, [{'id': 'kept'}])

    def failing_replace(src, dst):
        raise OSError('disk full')

    monkeypatch.setattr('booking.store.os.replace', failing_replace)

    with pytest.raises(StoreIOError):
        store.write_all(APPOINTMENTS, [{'id': 'lost'}])

    assert store.read_all(APPOINTMENTS) == [{'id': 'kept'}]
    assert [name for name in os.listdir(tmp_path) if name.endswith('.tmp')] == []
