"""Local persistent key/value store.

The store is the offline source of truth on a single install. Every value is
JSON-serialized; callers read a whole blob per entity type, mutate it and
write it back, so concurrent mutations must be sequenced by the caller.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy import Engine, select
from sqlalchemy.orm import Session, sessionmaker

from frontdesk.db.base import Base
from frontdesk.db.session import create_session_factory
from frontdesk.models.local_store import LocalStoreEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageKeys:
    """Namespaced keys used by the entity services."""

    namespace: str = "atlantic_hotel"

    def _key(self, suffix: str) -> str:
        return f"{self.namespace}_{suffix}"

    @property
    def receipts(self) -> str:
        return self._key("receipts")

    @property
    def receipt_counter(self) -> str:
        return self._key("receipt_counter")

    @property
    def receipts_sync_queue(self) -> str:
        return self._key("sync_queue")

    @property
    def rooms(self) -> str:
        return self._key("rooms")

    @property
    def rooms_sync_queue(self) -> str:
        return self._key("rooms_sync_queue")

    @property
    def bills(self) -> str:
        return self._key("bills")

    @property
    def bills_sync_queue(self) -> str:
        return self._key("bills_sync_queue")

    @property
    def menu_items(self) -> str:
        return self._key("menu_items")

    @property
    def menu_last_sync(self) -> str:
        return self._key("menu_last_sync")

    @property
    def bank_accounts(self) -> str:
        return self._key("bank_accounts")

    @property
    def auth_session(self) -> str:
        return self._key("session")

    @property
    def auth_users(self) -> str:
        return self._key("users")


class LocalStore(ABC):
    """Durable key/value store with JSON values."""

    @abstractmethod
    def get_raw(self, key: str) -> Optional[str]:
        """Return the stored JSON text for *key*, or None."""

    @abstractmethod
    def set_raw(self, key: str, value: str) -> None:
        """Store JSON text under *key*."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove *key* if present."""

    @abstractmethod
    def keys(self) -> List[str]:
        """Return every stored key."""

    def get(self, key: str, default: Any = None) -> Any:
        raw = self.get_raw(key)
        if raw is None:
            return default
        # Malformed JSON propagates as json.JSONDecodeError
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.set_raw(key, json.dumps(value))


class MemoryLocalStore(LocalStore):
    """Process-local store, used for tests and ephemeral installs."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get_raw(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_raw(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())


class SqlLocalStore(LocalStore):
    """Local store persisted in a single SQL table (SQLite by default).

    Reads and writes are synchronous and run on the calling thread, so an
    async caller blocks the event loop for the duration of each statement.
    Each call is a single-row primary-key lookup or write on a local SQLite
    file.
    """

    def __init__(self, engine: Engine, session_factory: Optional[sessionmaker[Session]] = None):
        self.engine = engine
        self.session_factory = session_factory or create_session_factory(engine)
        Base.metadata.create_all(bind=engine, tables=[LocalStoreEntry.__table__])

    def get_raw(self, key: str) -> Optional[str]:
        with self.session_factory() as db:
            entry = db.get(LocalStoreEntry, key)
            return entry.value if entry else None

    def set_raw(self, key: str, value: str) -> None:
        with self.session_factory() as db:
            entry = db.get(LocalStoreEntry, key)
            if entry is None:
                db.add(LocalStoreEntry(key=key, value=value))
            else:
                entry.value = value
            db.commit()

    def delete(self, key: str) -> None:
        with self.session_factory() as db:
            entry = db.get(LocalStoreEntry, key)
            if entry is not None:
                db.delete(entry)
                db.commit()
                logger.debug(f"Deleted local key {key}")

    def keys(self) -> List[str]:
        with self.session_factory() as db:
            return list(db.scalars(select(LocalStoreEntry.key).order_by(LocalStoreEntry.key)))
