"""
Django implementation of the KeyStore port.

This adapter converts between domain entities and Django ORM models.
Updates lock the target row with SELECT ... FOR UPDATE inside a
transaction, which serialises concurrent verifications of one key.
SQLite ignores FOR UPDATE; there the connection must open transactions
with BEGIN IMMEDIATE (see the DATABASES settings) to get the same effect.
"""
import logging
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db import DatabaseError, IntegrityError, OperationalError, connection, transaction

from core.domain.exceptions import (
    DuplicateKeyError,
    KeyNotFoundError,
    StoreTimeoutError,
    StoreUnavailableError,
)
from core.domain.value_objects import KeyPolicy
from keys.domain.key_record import KeyRecord
from keys.infrastructure.models import KeyRecord as KeyRecordModel
from keys.ports.key_store import KeyMutator, KeyStore

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


class DjangoKeyStore(KeyStore):
    """
    Django ORM implementation of KeyStore.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Implements the store interface with per-row locking
    """

    def __init__(self, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        """
        Initialize the store.

        Args:
            lock_timeout: Seconds to wait for a row lock (PostgreSQL only)
        """
        self.lock_timeout = lock_timeout

    def _to_domain(self, model: KeyRecordModel) -> KeyRecord:
        """
        Convert Django model to domain entity.

        Args:
            model: Django KeyRecord model

        Returns:
            KeyRecord domain entity
        """
        return KeyRecord(
            key=model.key,
            name=model.name,
            active=model.is_active,
            policy=KeyPolicy(model.policy),
            uses=model.uses,
            created_at=model.created_at,
            last_used_at=model.last_used_at,
            activated_at=model.activated_at,
            expires_at=model.expires_at,
            device_id=model.device_id,
            device_name=model.device_name,
        )

    def _apply(self, record: KeyRecord, model: KeyRecordModel) -> KeyRecordModel:
        """
        Copy domain entity state onto a Django model.

        Args:
            record: KeyRecord domain entity
            model: Django model to update

        Returns:
            The updated (unsaved) model
        """
        model.key = record.key
        model.name = record.name
        model.is_active = record.active
        model.policy = record.policy.value
        model.uses = record.uses
        model.created_at = record.created_at
        model.last_used_at = record.last_used_at
        model.activated_at = record.activated_at
        model.expires_at = record.expires_at
        model.device_id = record.device_id
        model.device_name = record.device_name
        return model

    def _set_lock_timeout(self) -> None:
        if connection.vendor != "postgresql":
            return
        with connection.cursor() as cursor:
            cursor.execute("SET LOCAL lock_timeout = %s", [f"{int(self.lock_timeout * 1000)}ms"])

    @sync_to_async
    def create(self, record: KeyRecord) -> KeyRecord:
        """
        Insert a new key record.

        Args:
            record: KeyRecord entity to insert

        Returns:
            Stored key record
        """
        model = self._apply(record, KeyRecordModel())
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError:
            raise DuplicateKeyError() from None
        except OperationalError as e:
            logger.error("Key store unavailable during create: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        return self._to_domain(model)

    @sync_to_async
    def get(self, key: str) -> Optional[KeyRecord]:
        """
        Find a key record by key string.

        Args:
            key: Key string

        Returns:
            KeyRecord entity or None if not found
        """
        try:
            # pylint: disable=no-member
            return self._to_domain(KeyRecordModel.objects.get(key=key))
        except KeyRecordModel.DoesNotExist:  # pylint: disable=no-member
            return None
        except OperationalError as e:
            logger.error("Key store unavailable during get: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def update(self, key: str, mutator: KeyMutator) -> KeyRecord:
        """
        Atomically read, transform and write one key record.

        Args:
            key: Key string
            mutator: Function returning the record to store

        Returns:
            The stored record
        """
        try:
            with transaction.atomic():
                self._set_lock_timeout()
                # pylint: disable=no-member
                model = KeyRecordModel.objects.select_for_update().get(key=key)
                updated = mutator(self._to_domain(model))
                if updated.key != model.key:
                    raise ValueError("A key record's key cannot change")
                self._apply(updated, model)
                model.save()
                return self._to_domain(model)
        except KeyRecordModel.DoesNotExist:  # pylint: disable=no-member
            raise KeyNotFoundError() from None
        except OperationalError as e:
            if "lock" in str(e).lower():
                logger.warning("Timed out locking key %s...", key[:8])
                raise StoreTimeoutError() from e
            logger.error("Key store unavailable during update: %s", e, exc_info=True)
            raise StoreUnavailableError() from e

    @sync_to_async
    def delete(self, key: str) -> None:
        """
        Permanently remove a key record.

        Args:
            key: Key string
        """
        try:
            # pylint: disable=no-member
            deleted, _ = KeyRecordModel.objects.filter(key=key).delete()
        except DatabaseError as e:
            logger.error("Key store unavailable during delete: %s", e, exc_info=True)
            raise StoreUnavailableError() from e
        if not deleted:
            raise KeyNotFoundError()

    @sync_to_async
    def list_all(self) -> List[KeyRecord]:
        """
        List every key record, newest first.

        Returns:
            List of KeyRecord entities
        """
        # pylint: disable=no-member
        models = KeyRecordModel.objects.order_by("-created_at", "-id")
        return [self._to_domain(model) for model in models]

    @sync_to_async
    def count(self) -> int:
        """
        Count stored key records.

        Returns:
            Number of key records
        """
        return KeyRecordModel.objects.count()  # pylint: disable=no-member
