# storage.py
"""
Key-Value Store
===============

This module provides the key-value store used to persist app credentials,
temporary OAuth request tokens and authorized user credentials.

The store exposes a small contract:
- has(key) -> bool
- get(key) -> Optional[dict]
- set(key, value) -> None
- set_if_absent(key, value) -> bool
- remove(key) -> None
- list_keys(prefix) -> List[str]

Every operation is atomic for a single key. No multi-key transactions are
offered; callers that need "create only if missing" semantics use
set_if_absent instead of a has/set pair.

Two backends are available:
- InMemoryKeyValueStore: process-local dictionary, used for development and tests
- DatabaseKeyValueStore: SQLAlchemy-backed store over the kv_items table
"""

import json
import logging
import threading
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import get_settings
from database import get_db
from errors import UpstreamError
from models import KeyValueItem

logger = logging.getLogger(__name__)


class KeyValueStore:
    """
    Base class for key-value store backends.

    Values are JSON-compatible dictionaries. Subclasses must implement every
    operation of the contract.
    """

    def has(self, key: str) -> bool:
        raise NotImplementedError("Subclasses must implement has")

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError("Subclasses must implement get")

    def set(self, key: str, value: Dict[str, Any]) -> None:
        raise NotImplementedError("Subclasses must implement set")

    def set_if_absent(self, key: str, value: Dict[str, Any]) -> bool:
        """
        Store the value only if the key does not exist yet.

        Returns:
            bool: True if the value was written, False if the key already existed
        """
        raise NotImplementedError("Subclasses must implement set_if_absent")

    def remove(self, key: str) -> None:
        raise NotImplementedError("Subclasses must implement remove")

    def list_keys(self, prefix: str) -> List[str]:
        raise NotImplementedError("Subclasses must implement list_keys")


class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store guarded by a lock."""

    def __init__(self):
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def has(self, key: str) -> bool:
        with self._lock:
            return key in self._items

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            raw = self._items.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        raw = json.dumps(value)
        with self._lock:
            self._items[key] = raw

    def set_if_absent(self, key: str, value: Dict[str, Any]) -> bool:
        raw = json.dumps(value)
        with self._lock:
            if key in self._items:
                return False
            self._items[key] = raw
            return True

    def remove(self, key: str) -> None:
        with self._lock:
            self._items.pop(key, None)

    def list_keys(self, prefix: str) -> List[str]:
        with self._lock:
            return sorted(key for key in self._items if key.startswith(prefix))

    def clear(self) -> None:
        with self._lock:
            self._items.clear()


class DatabaseKeyValueStore(KeyValueStore):
    """
    Store backed by the kv_items table.

    Each write is committed immediately so that every operation is atomic on
    its own. set_if_absent relies on the primary key constraint when another
    session inserts the same key concurrently.

    Args:
        db (Session): The SQLAlchemy session to use
    """

    def __init__(self, db: Session):
        self.db = db

    def has(self, key: str) -> bool:
        try:
            return self.db.get(KeyValueItem, key) is not None
        except SQLAlchemyError as e:
            logger.error(f"Error checking key {key}: {str(e)}")
            raise UpstreamError("Credential store is unavailable")

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            item = self.db.get(KeyValueItem, key)
        except SQLAlchemyError as e:
            logger.error(f"Error reading key {key}: {str(e)}")
            raise UpstreamError("Credential store is unavailable")

        if item is None:
            return None
        return json.loads(item.value)

    def set(self, key: str, value: Dict[str, Any]) -> None:
        try:
            item = self.db.get(KeyValueItem, key)
            if item is None:
                self.db.add(KeyValueItem(key=key, value=json.dumps(value)))
            else:
                item.value = json.dumps(value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error writing key {key}: {str(e)}")
            raise UpstreamError("Credential store is unavailable")

    def set_if_absent(self, key: str, value: Dict[str, Any]) -> bool:
        try:
            if self.db.get(KeyValueItem, key) is not None:
                return False
            self.db.add(KeyValueItem(key=key, value=json.dumps(value)))
            self.db.commit()
            return True
        except IntegrityError:
            # Inserted by another session since the lookup
            self.db.rollback()
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error writing key {key}: {str(e)}")
            raise UpstreamError("Credential store is unavailable")

    def remove(self, key: str) -> None:
        try:
            self.db.query(KeyValueItem).filter(KeyValueItem.key == key).delete()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error removing key {key}: {str(e)}")
            raise UpstreamError("Credential store is unavailable")

    def list_keys(self, prefix: str) -> List[str]:
        try:
            rows = (
                self.db.query(KeyValueItem.key)
                .filter(KeyValueItem.key.startswith(prefix, autoescape=True))
                .order_by(KeyValueItem.key)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Error listing keys with prefix {prefix}: {str(e)}")
            raise UpstreamError("Credential store is unavailable")

        # LIKE is case-insensitive on some databases
        return [row[0] for row in rows if row[0].startswith(prefix)]


@lru_cache()
def get_memory_store() -> InMemoryKeyValueStore:
    """Process-wide in-memory store, created on first use."""
    return InMemoryKeyValueStore()


def get_store(db: Session = Depends(get_db)) -> KeyValueStore:
    """
    FastAPI dependency returning the configured key-value store.

    Args:
        db (Session): The database session for the current request

    Returns:
        KeyValueStore: The store selected by the STORE_BACKEND setting
    """
    backend = get_settings().STORE_BACKEND
    if backend == "memory":
        return get_memory_store()
    if backend == "database":
        return DatabaseKeyValueStore(db)
    raise ValueError(f"Unknown store backend: {backend}")
