"""
KeyStore port (interface).

This defines the contract for key record persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from keys.domain.key_record import KeyRecord

KeyMutator = Callable[[KeyRecord], KeyRecord]


class KeyStore(ABC):
    """
    Abstract store for KeyRecord entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    Every mutation of an existing record goes through ``update``.
    """

    @abstractmethod
    async def create(self, record: KeyRecord) -> KeyRecord:
        """
        Insert a new key record.

        Args:
            record: KeyRecord entity to insert

        Returns:
            Stored key record

        Raises:
            DuplicateKeyError: If the key string already exists
        """
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[KeyRecord]:
        """
        Find a key record by key string.

        Args:
            key: Key string

        Returns:
            KeyRecord entity or None if not found
        """
        pass

    @abstractmethod
    async def update(self, key: str, mutator: KeyMutator) -> KeyRecord:
        """
        Atomically read, transform and write one key record.

        Concurrent updates of the same key are serialised. If ``mutator``
        raises, nothing is written and the exception propagates.

        Args:
            key: Key string
            mutator: Function receiving the current record and returning
                the record to store

        Returns:
            The stored record

        Raises:
            KeyNotFoundError: If the key does not exist
            StoreTimeoutError: If the record could not be locked in time
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """
        Permanently remove a key record.

        Args:
            key: Key string

        Raises:
            KeyNotFoundError: If the key does not exist
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[KeyRecord]:
        """
        List every key record, newest first.

        Returns:
            List of KeyRecord entities ordered by created_at descending
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """
        Count stored key records.

        Returns:
            Number of key records
        """
        pass
