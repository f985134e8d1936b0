"""Key-value JSON store backing the four logical collections.

Every collection holds a single JSON document: a list of records for
``availabilities`` and ``appointments``, an object for ``admin-token`` and
``settings``. Reads fall back to a default document when the backing storage
is missing, empty or unparsable; ``strict`` reads raise ``StoreIOError`` on
unparsable content instead, so a caller about to rewrite the collection never
replaces data it could not read.

Read-modify-write cycles must run inside ``transaction(collection)``, which
holds the collection's lock.
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterator

from sqlalchemy.exc import SQLAlchemyError

from booking.core import config
from booking.core.errors import StoreIOError
from booking.database import Base, build_engine, build_session_factory
from booking.models.collection import StoredCollection
from booking.models.settings import AdminToken

logger = logging.getLogger(__name__)

AVAILABILITIES = 'availabilities'
APPOINTMENTS = 'appointments'
ADMIN_TOKEN = 'admin-token'
SETTINGS = 'settings'

COLLECTIONS = (AVAILABILITIES, APPOINTMENTS, ADMIN_TOKEN, SETTINGS)
_LIST_COLLECTIONS = {AVAILABILITIES, APPOINTMENTS}


class CorruptDocumentError(StoreIOError):
    """Stored content exists but is not a valid document for its collection."""


def default_for(collection: str) -> Any:
    if collection in _LIST_COLLECTIONS:
        return []
    if collection == ADMIN_TOKEN:
        return AdminToken().to_record()
    return {}


def seed_for(collection: str) -> Any:
    if collection == SETTINGS:
        return dict(config.DEFAULT_BUSINESS_SETTINGS)
    return default_for(collection)


class CollectionStore:
    """Shared read/write logic; subclasses provide raw document access."""

    def __init__(self) -> None:
        self._locks = {name: threading.RLock() for name in COLLECTIONS}

    def _lock_for(self, collection: str) -> threading.RLock:
        try:
            return self._locks[collection]
        except KeyError:
            raise ValueError(f'Unknown collection: {collection}') from None

    @contextmanager
    def transaction(self, collection: str) -> Iterator[None]:
        with self._lock_for(collection):
            yield

    def _read_raw(self, collection: str) -> str | None:
        raise NotImplementedError

    def _write_raw(self, collection: str, payload: str) -> None:
        raise NotImplementedError

    def _read_document(self, collection: str) -> Any:
        """Return the parsed document, ``None`` when absent or empty."""
        try:
            raw = self._read_raw(collection)
        except (OSError, SQLAlchemyError) as exc:
            raise StoreIOError(collection, f'read failed ({type(exc).__name__})') from exc

        if raw is None or not raw.strip():
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptDocumentError(collection, 'invalid JSON') from exc

        expected = list if collection in _LIST_COLLECTIONS else dict
        if not isinstance(data, expected):
            raise CorruptDocumentError(collection, f'expected a JSON {expected.__name__}')

        return data

    def read_all(self, collection: str, strict: bool = False) -> Any:
        with self._lock_for(collection):
            try:
                data = self._read_document(collection)
            except CorruptDocumentError as exc:
                if strict:
                    raise
                logger.warning('Falling back to default content for %s: %s', collection, exc.reason)
                return default_for(collection)

        return default_for(collection) if data is None else data

    def write_all(self, collection: str, data: Any) -> None:
        payload = json.dumps(data, ensure_ascii=False, indent=2)
        with self._lock_for(collection):
            try:
                self._write_raw(collection, payload)
            except (OSError, SQLAlchemyError) as exc:
                raise StoreIOError(collection, f'write failed ({type(exc).__name__})') from exc

    def has_valid_document(self, collection: str) -> bool:
        try:
            return self._read_document(collection) is not None
        except CorruptDocumentError:
            return False


class FileStore(CollectionStore):
    """One JSON file per collection, replaced atomically on write."""

    def __init__(self, data_dir: str) -> None:
        super().__init__()
        self.data_dir = data_dir

    def path_for(self, collection: str) -> str:
        return os.path.join(self.data_dir, f'{collection}.json')

    def _read_raw(self, collection: str) -> str | None:
        path = self.path_for(collection)
        if not os.path.exists(path):
            return None

        with open(path, 'r', encoding='utf-8') as f:
            return f.read()

    def _write_raw(self, collection: str, payload: str) -> None:
        os.makedirs(self.data_dir, exist_ok=True)

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', delete=False, encoding='utf-8', dir=self.data_dir, suffix='.tmp'
            ) as tf:
                tmp_name = tf.name
                tf.write(payload)
            os.replace(tmp_name, self.path_for(collection))
        except OSError:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


class SqlStore(CollectionStore):
    """Collections stored as rows of the ``store_collections`` table."""

    def __init__(self, database_url: str) -> None:
        super().__init__()
        self.engine = build_engine(database_url)
        self.session_factory = build_session_factory(self.engine)
        Base.metadata.create_all(bind=self.engine, tables=[StoredCollection.__table__])

    def _read_raw(self, collection: str) -> str | None:
        db = self.session_factory()
        try:
            row = db.get(StoredCollection, collection)
            return row.payload if row is not None else None
        finally:
            db.close()

    def _write_raw(self, collection: str, payload: str) -> None:
        db = self.session_factory()
        try:
            db.merge(StoredCollection(name=collection, payload=payload, updated_at=datetime.now()))
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
        finally:
            db.close()


def build_store() -> CollectionStore:
    if config.DATABASE_URL:
        return SqlStore(config.DATABASE_URL)
    return FileStore(config.DATA_DIR)


def init_store(store: CollectionStore) -> dict:
    """Seed every missing, empty or corrupt collection; return the admin token record."""
    for collection in COLLECTIONS:
        with store.transaction(collection):
            if store.has_valid_document(collection):
                continue
            store.write_all(collection, seed_for(collection))
            logger.info('Initialized collection %s', collection)

    admin_token = store.read_all(ADMIN_TOKEN)
    logger.info('Admin URL: %s/%s', config.ADMIN_BASE_URL.rstrip('/'), admin_token['token'])
    return admin_token
