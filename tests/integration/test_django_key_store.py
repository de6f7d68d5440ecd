"""
Integration tests for the Django KeyStore.

Store calls are driven through async_to_sync so the ORM runs on the
test's own database connection.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest
from asgiref.sync import async_to_sync
from django.db import connections

from core.domain.exceptions import (
    DeviceMismatchError,
    DuplicateKeyError,
    InvalidKeyError,
    KeyExpiredError,
    KeyNotFoundError,
    KeyRevokedError,
)
from core.domain.value_objects import KeyPolicy, PolicyMode
from keys.domain.key_record import KeyRecord
from keys.domain.services import KeyLifecycleEngine
from keys.infrastructure.models import KeyRecord as KeyRecordModel


@pytest.mark.django_db
@pytest.mark.integration
class TestDjangoKeyStore:
    """Integration tests for DjangoKeyStore."""

    def test_create_and_get(self, django_store, sample_record):
        """Test saving and finding a record."""
        async_to_sync(django_store.create)(sample_record)

        found = async_to_sync(django_store.get)(sample_record.key)

        assert found == sample_record
        assert KeyRecordModel.objects.filter(key=sample_record.key).exists()

    def test_get_not_found(self, django_store):
        """Test finding a missing record."""
        assert async_to_sync(django_store.get)("sk-missing") is None

    def test_duplicate_key(self, django_store, sample_record):
        """Test the unique constraint maps to DuplicateKeyError."""
        async_to_sync(django_store.create)(sample_record)

        with pytest.raises(DuplicateKeyError):
            async_to_sync(django_store.create)(sample_record)

    def test_update_round_trip(self, django_store, sample_record, clock):
        """Test activation state survives persistence."""
        async_to_sync(django_store.create)(sample_record)

        updated = async_to_sync(django_store.update)(
            sample_record.key,
            lambda r: r.activate("device-a", "Laptop", clock()).mark_used(clock()),
        )
        found = async_to_sync(django_store.get)(sample_record.key)

        assert found == updated
        assert found.device_id == "device-a"
        assert found.expires_at == clock() + timedelta(days=7)
        assert found.uses == 1

    def test_update_not_found(self, django_store):
        """Test updating a missing record."""
        with pytest.raises(KeyNotFoundError):
            async_to_sync(django_store.update)("sk-missing", lambda r: r)

    def test_failed_mutator_rolls_back(self, django_store, sample_record):
        """Test a rejecting mutator leaves the row unchanged."""
        async_to_sync(django_store.create)(sample_record)

        def reject(record):
            raise KeyRevokedError()

        with pytest.raises(KeyRevokedError):
            async_to_sync(django_store.update)(sample_record.key, reject)
        assert async_to_sync(django_store.get)(sample_record.key) == sample_record

    def test_delete(self, django_store, sample_record):
        """Test deleting a record, twice."""
        async_to_sync(django_store.create)(sample_record)

        async_to_sync(django_store.delete)(sample_record.key)

        assert async_to_sync(django_store.count)() == 0
        with pytest.raises(KeyNotFoundError):
            async_to_sync(django_store.delete)(sample_record.key)

    def test_list_all_newest_first(self, django_store, clock):
        """Test listing follows created_at, not insertion order."""
        names = ["middle", "oldest", "newest"]
        offsets = [1, 0, 2]
        for name, offset in zip(names, offsets):
            async_to_sync(django_store.create)(
                KeyRecord.create(
                    name=name,
                    policy=KeyPolicy.UNSET,
                    created_at=clock() + timedelta(minutes=offset),
                )
            )

        records = async_to_sync(django_store.list_all)()

        assert [r.name for r in records] == ["newest", "middle", "oldest"]


@pytest.mark.django_db
@pytest.mark.integration
class TestEngineOnDjangoStore:
    """The lifecycle engine behaves the same on the Django store."""

    def test_fixed_date_lifecycle(self, django_store, clock):
        """Test verify, expiry and delete through the database."""
        engine = KeyLifecycleEngine(store=django_store, mode=PolicyMode.FIXED_DATE, clock=clock)
        record = async_to_sync(engine.create)("Alice", expires_in_days=1)

        result = async_to_sync(engine.verify)(record.key)
        assert result.uses == 1

        clock.advance(days=2)
        with pytest.raises(KeyExpiredError):
            async_to_sync(engine.verify)(record.key)

        async_to_sync(engine.delete)(record.key)
        with pytest.raises(InvalidKeyError):
            async_to_sync(engine.verify)(record.key)

    def test_duration_binding(self, django_store, clock):
        """Test activation is stored and enforced through the database."""
        engine = KeyLifecycleEngine(store=django_store, mode=PolicyMode.DURATION, clock=clock)
        record = async_to_sync(engine.create)("Alice", duration="month")

        first = async_to_sync(engine.verify)(record.key, "device-a", "Laptop")

        model = KeyRecordModel.objects.get(key=record.key)
        assert first.activated is True
        assert model.device_id == "device-a"
        assert model.expires_at == clock() + timedelta(days=30)
        assert model.uses == 1


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
class TestConcurrentVerificationOnDjangoStore:
    """First verifications racing on separate database connections."""

    THREADS = 8

    def _race(self, attempt):
        barrier = threading.Barrier(self.THREADS)

        def run(i):
            barrier.wait()
            try:
                return attempt(i)
            except DeviceMismatchError as e:
                return e
            finally:
                connections.close_all()

        with ThreadPoolExecutor(max_workers=self.THREADS) as pool:
            return list(pool.map(run, range(self.THREADS)))

    def test_distinct_devices(self, django_store, clock):
        """Test exactly one device binds and every other attempt is a mismatch."""
        engine = KeyLifecycleEngine(store=django_store, mode=PolicyMode.DURATION, clock=clock)
        record = async_to_sync(engine.create)("Alice", duration="week")

        results = self._race(lambda i: async_to_sync(engine.verify)(record.key, f"device-{i}"))

        mismatches = [r for r in results if isinstance(r, DeviceMismatchError)]
        successes = [r for r in results if not isinstance(r, DeviceMismatchError)]
        model = KeyRecordModel.objects.get(key=record.key)
        assert len(successes) == 1
        assert len(mismatches) == self.THREADS - 1
        assert successes[0].activated is True
        assert model.uses == 1
        assert model.device_id == f"device-{results.index(successes[0])}"

    def test_same_device(self, django_store, clock):
        """Test every attempt from the bound device succeeds and is counted."""
        engine = KeyLifecycleEngine(store=django_store, mode=PolicyMode.DURATION, clock=clock)
        record = async_to_sync(engine.create)("Alice", duration="week")

        results = self._race(lambda _: async_to_sync(engine.verify)(record.key, "device-a"))

        model = KeyRecordModel.objects.get(key=record.key)
        assert not any(isinstance(r, DeviceMismatchError) for r in results)
        assert sum(1 for r in results if r.activated) == 1
        assert model.uses == self.THREADS
        assert model.device_id == "device-a"
