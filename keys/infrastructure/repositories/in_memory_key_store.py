"""
In-memory implementation of the KeyStore port.

Process-local and non-durable: every key is lost when the process
exits. Mutations of one key are serialised by a per-key lock that is
acquired with a timeout; different keys never wait on each other.
"""
import logging
import threading
from typing import Dict, List, Optional

from core.domain.exceptions import DuplicateKeyError, KeyNotFoundError, StoreTimeoutError
from keys.domain.key_record import KeyRecord
from keys.ports.key_store import KeyMutator, KeyStore

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


class InMemoryKeyStore(KeyStore):
    """
    Dictionary-backed KeyStore.

    ``_registry_lock`` guards the dictionaries themselves and is only
    held for dictionary reads and writes; per-key locks guard the
    read-modify-write of a single record.
    """

    def __init__(self, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        """
        Initialize the store.

        Args:
            lock_timeout: Seconds to wait for a key's lock before failing
        """
        self.lock_timeout = lock_timeout
        self._records: Dict[str, KeyRecord] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: str) -> Optional[threading.Lock]:
        with self._registry_lock:
            return self._locks.get(key)

    def _acquire(self, key: str) -> threading.Lock:
        # Blocks the calling thread. Callers never await while holding the lock.
        lock = self._lock_for(key)
        if lock is None:
            raise KeyNotFoundError()
        if not lock.acquire(timeout=self.lock_timeout):
            logger.warning("Timed out locking key %s...", key[:8])
            raise StoreTimeoutError()
        return lock

    async def create(self, record: KeyRecord) -> KeyRecord:
        """Insert a new key record."""
        with self._registry_lock:
            if record.key in self._records:
                raise DuplicateKeyError()
            self._records[record.key] = record
            self._locks[record.key] = threading.Lock()
        return record

    async def get(self, key: str) -> Optional[KeyRecord]:
        """Find a key record by key string."""
        with self._registry_lock:
            return self._records.get(key)

    async def update(self, key: str, mutator: KeyMutator) -> KeyRecord:
        """
        Atomically read, transform and write one key record.

        Args:
            key: Key string
            mutator: Function returning the record to store

        Returns:
            The stored record
        """
        lock = self._acquire(key)
        try:
            with self._registry_lock:
                current = self._records.get(key)
            # Deleted while we waited for the lock.
            if current is None:
                raise KeyNotFoundError()

            updated = mutator(current)
            if updated.key != key:
                raise ValueError("A key record's key cannot change")

            with self._registry_lock:
                self._records[key] = updated
            return updated
        finally:
            lock.release()

    async def delete(self, key: str) -> None:
        """Permanently remove a key record."""
        lock = self._acquire(key)
        try:
            with self._registry_lock:
                if self._records.pop(key, None) is None:
                    raise KeyNotFoundError()
                self._locks.pop(key, None)
        finally:
            lock.release()

    async def list_all(self) -> List[KeyRecord]:
        """List every key record, newest first."""
        with self._registry_lock:
            records = list(self._records.values())
        return sorted(records, key=lambda record: record.created_at, reverse=True)

    async def count(self) -> int:
        """Count stored key records."""
        with self._registry_lock:
            return len(self._records)
